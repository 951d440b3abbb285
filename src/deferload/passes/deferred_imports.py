"""
Deferred Import Transformer

Entry point of the pass: classify -> rewrite -> prune, per module.

    transformer = create_transformer(resolver)
    new_module = transformer.transform_module(module)

The resolver handle is required up front; without it the factory fails
before any module is looked at.
"""

import logging
from typing import List, Optional, Type

from ..shared.errors import ConfigurationError
from ..shared.nodes import Module
from ..shared.types import TypeResolver
from .base import BasePass, ModuleCtxt, PassManager
from .call_site_rewriter import CallSiteRewritePass
from .import_classifier import ImportClassificationPass
from .import_pruner import ImportPruningPass

logger = logging.getLogger(__name__)

DEFAULT_PASSES: List[Type[BasePass]] = [
    ImportClassificationPass,
    CallSiteRewritePass,
    ImportPruningPass,
]


class DeferredImportTransformer:
    """Runs the deferred import passes over one module at a time."""

    def __init__(self, type_resolver: Optional[TypeResolver]):
        if type_resolver is None:
            raise ConfigurationError("No type resolver was passed to the transformer factory")
        self.type_resolver = type_resolver
        self.pass_manager = PassManager()
        for pass_class in DEFAULT_PASSES:
            self.pass_manager.register_pass(pass_class)

    def transform_module(self, module: Module) -> Module:
        ctx = self.create_context(module)
        return self.pass_manager.run_all(module, ctx)

    def create_context(self, module: Module) -> ModuleCtxt:
        return ModuleCtxt(self.type_resolver, file=module.file)

    __call__ = transform_module


def create_transformer(type_resolver: Optional[TypeResolver]) -> DeferredImportTransformer:
    """Transformer factory; raises ConfigurationError when type_resolver is None."""
    if type_resolver is None:
        raise ConfigurationError("No type resolver was passed to the transformer factory")
    return DeferredImportTransformer(type_resolver)
