"""
Import Classifier

Finds the imported bindings whose call signature returns a deferred result.
Only the type resolver decides what "deferred" means; this module just
enumerates binding sites and keeps the ones it reports as deferred.
"""

import logging
from typing import Dict, Iterator, List, Optional, Set

from ..shared.errors import ConfigurationError
from ..shared.nodes import ImportDeclaration, Module
from ..shared.types import CandidateBinding, ImportBindingSite, TypeResolver
from ..utils.config import DEFAULT_EXPORT
from .base import BasePass, ModuleCtxt

logger = logging.getLogger(__name__)


def iter_binding_sites(decl: ImportDeclaration, importing_file: str = "") -> Iterator[ImportBindingSite]:
    """
    Default binding first, then named bindings in declaration order.
    Namespace bindings have no single export name and yield nothing.
    """
    path = decl.module_path
    if decl.default is not None:
        yield ImportBindingSite(local_name=decl.default, export_name=DEFAULT_EXPORT,
                                module_path=path, importing_file=importing_file,
                                location=decl.location)
    for spec in decl.specifiers:
        yield ImportBindingSite(local_name=spec.local, export_name=spec.export_name,
                                module_path=path, importing_file=importing_file,
                                location=spec.location or decl.location)


def classify_imports(module: Module, resolver: Optional[TypeResolver]) -> List[CandidateBinding]:
    """
    Candidate bindings of a module's top-level imports.

    Raises ConfigurationError when resolver is None. Bindings the resolver
    knows nothing about, or reports as non-deferred, are dropped.
    """
    if resolver is None:
        raise ConfigurationError("No type resolver was passed to the import classifier")

    candidates: Dict[str, CandidateBinding] = {}
    seen: Set[str] = set()
    for stmt in module.body:
        if not isinstance(stmt, ImportDeclaration):
            continue
        if stmt.namespace is not None:
            seen.add(stmt.namespace)
        for site in iter_binding_sites(stmt, module.file):
            if site.local_name in seen:
                logger.debug(f"Duplicate import binding '{site.local_name}' in {module.file}; ignored")
                continue
            seen.add(site.local_name)
            signature = resolver.resolve_call_signature(site)
            if signature is None or not signature.returns_deferred:
                continue
            candidates[site.local_name] = CandidateBinding.from_site(site)
            logger.debug(f"Candidate {site.local_name} -> {site.module_path}:{site.export_name}")
    return list(candidates.values())


class ImportClassificationPass(BasePass):
    """Stores the module's candidate bindings in the context."""
    requires = []

    def run(self, module: Module, ctx: ModuleCtxt) -> Module:
        ctx.set_analysis(ImportClassificationPass, classify_imports(module, ctx.resolver))
        return module
