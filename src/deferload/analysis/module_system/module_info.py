"""
Module System Types

Pure data: the parsed modules of one compilation and how specifiers between
them resolve.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from ...shared.nodes import Module
from .path_resolver import PathResolver


@dataclass
class ModuleGraph:
    """
    Every parsed module of one compilation, keyed by module key.

    source_files holds the original text per key for diagnostics.
    """
    modules: Dict[str, Module] = field(default_factory=dict)
    source_files: Dict[str, str] = field(default_factory=dict)
    path_resolver: PathResolver = field(default_factory=PathResolver)

    def add(self, key: str, module: Module, source: Optional[str] = None) -> None:
        self.modules[key] = module
        self.path_resolver.add_module(key)
        if source is not None:
            self.source_files[key] = source

    def get(self, key: str) -> Optional[Module]:
        return self.modules.get(key)

    def resolve(self, importing_file: str, specifier: str) -> Optional[str]:
        return self.path_resolver.resolve(importing_file, specifier)

    def __contains__(self, key: object) -> bool:
        return key in self.modules

    def __iter__(self) -> Iterator[str]:
        return iter(self.modules)

    def __len__(self) -> int:
        return len(self.modules)

    def __str__(self) -> str:
        return f"ModuleGraph({len(self.modules)} modules)"
