"""
deferload - rewrites calls of statically imported async functions into
deferred module loads (`import(path).then(m => m.f(...))`) and prunes the
imports that are no longer needed.
"""

from .compiler.driver import CompilationResult, CompilerDriver
from .passes.deferred_imports import DeferredImportTransformer, create_transformer

__version__ = "0.1.0"

__all__ = [
    'CompilationResult',
    'CompilerDriver',
    'DeferredImportTransformer',
    'create_transformer',
]
