"""
Base Pass System

TypeScript Pattern: ts.TransformerFactory / ts.transform
Passes run once per module in dependency order and share one ModuleCtxt.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type

from ..shared.errors import ConfigurationError
from ..shared.nodes import Module
from ..shared.types import TypeResolver

logger = logging.getLogger(__name__)


class ModuleCtxt:
    """
    Per-module pass context.

    Holds the type resolver handle and the analysis results passes hand to
    each other (candidate set, still-needed map). A fresh ModuleCtxt is built
    for every module; nothing in it outlives that module's processing.
    """

    def __init__(self, resolver: Optional[TypeResolver], file: str = ""):
        if resolver is None:
            raise ConfigurationError("No type resolver was passed to the module context")
        self.resolver: TypeResolver = resolver
        self.file = file
        self._analysis_results: Dict[Type['BasePass'], Any] = {}

    def get_analysis(self, pass_class: Type['BasePass']) -> Any:
        """Get analysis results from a pass"""
        if pass_class not in self._analysis_results:
            raise RuntimeError(f"Analysis {pass_class.__name__} not available")
        return self._analysis_results[pass_class]

    def has_analysis(self, pass_class: Type['BasePass']) -> bool:
        return pass_class in self._analysis_results

    def set_analysis(self, pass_class: Type['BasePass'], results: Any) -> None:
        """Store analysis results"""
        self._analysis_results[pass_class] = results


class BasePass(ABC):
    """
    Base class for module passes.

    - Explicit dependencies via `requires`
    - Results stored in ModuleCtxt, not on the pass
    - Modules are not mutated: run() returns the (possibly new) Module
    """
    requires: List[Type['BasePass']] = []

    @abstractmethod
    def run(self, module: Module, ctx: ModuleCtxt) -> Module:
        raise NotImplementedError


class PassManager:
    """
    Pass manager with dependency resolution.

    Passes are registered as classes and instantiated per run; run order is a
    topological sort of `requires`.
    """

    def __init__(self):
        self.passes: List[Type[BasePass]] = []
        self._dependency_graph: Dict[Type[BasePass], set] = {}

    def register_pass(self, pass_class: Type[BasePass]) -> None:
        """Register a pass"""
        self.passes.append(pass_class)
        self._dependency_graph[pass_class] = set(pass_class.requires)

    def run_all(self, module: Module, ctx: ModuleCtxt) -> Module:
        """Run all passes in dependency order."""
        for pass_class in self._topological_sort():
            logger.debug(f"Running {pass_class.__name__} on {ctx.file or module.file}")
            module = pass_class().run(module, ctx)
        return module

    def _topological_sort(self) -> List[Type[BasePass]]:
        """Topological sort of passes by dependencies"""
        missing = {dep for deps in self._dependency_graph.values() for dep in deps} - set(self.passes)
        if missing:
            names = ", ".join(sorted(p.__name__ for p in missing))
            raise RuntimeError(f"Pass dependencies not registered: {names}")

        in_degree = {p: len(self._dependency_graph[p]) for p in self.passes}
        queue = [p for p, degree in in_degree.items() if degree == 0]
        result = []

        while queue:
            pass_class = queue.pop(0)
            result.append(pass_class)

            for other_pass in self.passes:
                if pass_class in self._dependency_graph[other_pass]:
                    in_degree[other_pass] -= 1
                    if in_degree[other_pass] == 0:
                        queue.append(other_pass)

        if len(result) != len(self.passes):
            raise RuntimeError("Circular dependency detected in passes")

        return result
