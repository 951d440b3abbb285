"""Module system: specifier resolution and the module graph."""

from .path_resolver import PathResolver
from .module_info import ModuleGraph

__all__ = [
    'PathResolver',
    'ModuleGraph',
]
