"""
Compiler Driver

TypeScript Pattern: ts.createProgram + program.emit (with a custom
before-transformer)

Phases:
1. Parsing (source -> Module) for every file of the compilation
2. Module graph + type resolver over all parsed modules
3. Deferred import passes, per module
4. Printing (Module -> JavaScript)
"""

import logging
from typing import Dict, List, Optional

from ..analysis.module_system import ModuleGraph
from ..analysis.type_resolver import ProgramTypeResolver
from ..backends.printer import ModulePrinter
from ..frontend.parser import Parser
from ..passes.deferred_imports import create_transformer
from ..shared.errors import DeferloadSourceError, ErrorReporter
from ..shared.nodes import Module
from ..shared.types import TypeResolver
from ..utils.config import OUTPUT_EXTENSION

logger = logging.getLogger(__name__)

_TYPESCRIPT_EXTENSIONS = (".tsx", ".ts")


def output_name(key: str) -> str:
    """`file1.ts` -> `file1.js`; other extensions are kept."""
    for ext in _TYPESCRIPT_EXTENSIONS:
        if key.endswith(ext):
            return key[: -len(ext)] + OUTPUT_EXTENSION
    return key


class CompilationResult:
    """Compilation result"""
    def __init__(
        self,
        outputs: Optional[Dict[str, str]] = None,
        modules: Optional[Dict[str, Module]] = None,
        reporter: Optional[ErrorReporter] = None,
        success: bool = False
    ):
        self.outputs = outputs if outputs is not None else {}
        self.modules = modules if modules is not None else {}
        self.reporter = reporter
        self.success = success

    def has_errors(self) -> bool:
        """True if compilation reported errors."""
        if self.reporter:
            return self.reporter.has_errors()
        return not self.success

    def get_errors(self) -> List[str]:
        if self.reporter and self.reporter.has_errors():
            return [self.reporter.format_all_errors(color=False)]
        return []


class CompilerDriver:
    """
    Compiles a set of modules keyed by their path relative to the
    compilation root.

    Without an explicit resolver, bindings are resolved against the modules
    of the same compilation (ProgramTypeResolver).
    """

    def __init__(self, resolver: Optional[TypeResolver] = None):
        self.parser = Parser()
        self.printer = ModulePrinter()
        self.resolver = resolver

    def parse_all(self, sources: Dict[str, str], reporter: ErrorReporter) -> ModuleGraph:
        graph = ModuleGraph()
        for key, source in sources.items():
            try:
                module = self.parser.parse(source, key)
            except DeferloadSourceError as e:
                err = e.to_error()
                reporter.report_error(err.message, err.location, code=err.code,
                                      help=err.help, note=err.note)
                continue
            graph.add(key, module, source)
        return graph

    def compile(self, sources: Dict[str, str]) -> CompilationResult:
        reporter = ErrorReporter(dict(sources))
        graph = self.parse_all(sources, reporter)
        if reporter.has_errors():
            return CompilationResult(modules=dict(graph.modules), reporter=reporter, success=False)

        resolver = self.resolver if self.resolver is not None else ProgramTypeResolver(graph)
        transformer = create_transformer(resolver)

        outputs: Dict[str, str] = {}
        modules: Dict[str, Module] = {}
        for key in graph:
            module = transformer.transform_module(graph.get(key))
            modules[key] = module
            outputs[output_name(key)] = self.printer.print_module(module)
            logger.debug(f"Compiled {key} -> {output_name(key)}")
        return CompilationResult(outputs=outputs, modules=modules, reporter=reporter, success=True)
