"""
Import Pruner

Regenerates import statements after the call-site rewrite: bindings that
were only ever called (and so are fully served by deferred loads) are dropped,
statements left without bindings are removed, and everything else keeps its
original order and aliases.
"""

import logging
from dataclasses import replace
from typing import Dict, Iterable, Optional, Set

from ..shared.nodes import ImportDeclaration, Module
from ..shared.types import CandidateBinding
from .base import BasePass, ModuleCtxt
from .call_site_rewriter import CallSiteRewritePass, RewriteResult
from .import_classifier import ImportClassificationPass

logger = logging.getLogger(__name__)


def droppable_bindings(decl: ImportDeclaration, candidates: Dict[str, CandidateBinding],
                       still_needed: Dict[str, bool]) -> Set[str]:
    """Local names of decl that are candidates from decl's path and not still needed."""
    names = set()
    for local in decl.local_names():
        if local == decl.namespace:
            continue
        candidate = candidates.get(local)
        if candidate is None or candidate.module_path != decl.module_path:
            continue
        if not still_needed.get(local, False):
            names.add(local)
    return names


def prune_declaration(decl: ImportDeclaration, droppable: Set[str]) -> Optional[ImportDeclaration]:
    """decl without the droppable bindings; None when nothing is left."""
    if not droppable:
        return decl
    default = decl.default if decl.default not in droppable else None
    specifiers = [s for s in decl.specifiers if s.local not in droppable]
    if default is None and decl.namespace is None and not specifiers:
        return None
    return replace(decl, default=default, specifiers=specifiers)


def prune_imports(module: Module, candidates: Iterable[CandidateBinding],
                  still_needed: Dict[str, bool]) -> Module:
    by_name = {c.local_name: c for c in candidates}
    body = []
    changed = False
    for stmt in module.body:
        if not isinstance(stmt, ImportDeclaration):
            body.append(stmt)
            continue
        droppable = droppable_bindings(stmt, by_name, still_needed)
        pruned = prune_declaration(stmt, droppable)
        if pruned is not stmt:
            changed = True
            if pruned is None:
                logger.debug(f"Removing import of {stmt.module_path} from {module.file}")
            else:
                logger.debug(f"Dropping {sorted(droppable)} from import of {stmt.module_path} in {module.file}")
        if pruned is not None:
            body.append(pruned)
    return replace(module, body=body) if changed else module


class ImportPruningPass(BasePass):
    """Final pass; skipped entirely when every candidate is still needed."""
    requires = [ImportClassificationPass, CallSiteRewritePass]

    def run(self, module: Module, ctx: ModuleCtxt) -> Module:
        result: RewriteResult = ctx.get_analysis(CallSiteRewritePass)
        if result.all_still_needed():
            return module
        candidates = ctx.get_analysis(ImportClassificationPass)
        return prune_imports(module, candidates, result.still_needed)
