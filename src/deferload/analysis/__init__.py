"""Analysis: module graph and type resolution."""

from .module_system import ModuleGraph, PathResolver
from .type_resolver import MappingTypeResolver, ProgramTypeResolver

__all__ = ['ModuleGraph', 'PathResolver', 'MappingTypeResolver', 'ProgramTypeResolver']
