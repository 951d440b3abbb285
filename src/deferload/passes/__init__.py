"""
Deferred import passes: classification, call-site rewrite, import pruning.
"""

from .base import BasePass, ModuleCtxt, PassManager
from .import_classifier import ImportClassificationPass, classify_imports
from .call_site_rewriter import CallSiteRewritePass, CallSiteRewriter, RewriteResult, rewrite_call_sites
from .import_pruner import ImportPruningPass, prune_imports
from .deferred_imports import DeferredImportTransformer, create_transformer

__all__ = [
    'BasePass', 'ModuleCtxt', 'PassManager',
    'ImportClassificationPass', 'classify_imports',
    'CallSiteRewritePass', 'CallSiteRewriter', 'RewriteResult', 'rewrite_call_sites',
    'ImportPruningPass', 'prune_imports',
    'DeferredImportTransformer', 'create_transformer',
]
