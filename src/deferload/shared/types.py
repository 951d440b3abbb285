"""
Binding and signature types shared by the classifier, rewriter and pruner.

TypeScript Pattern: ts.TypeChecker.getTypeAtLocation + getCallSignatures
The type service is an oracle behind TypeResolver; the pass never decides on
its own what counts as a deferred result.
"""

from dataclasses import dataclass
from typing import Optional

from typing_extensions import Protocol

from .source_location import SourceLocation
from ..utils.config import DEFAULT_EXPORT


@dataclass(frozen=True)
class ImportBindingSite:
    """
    Declaration position of one imported binding, handed to the resolver.

    `export_name` is the name read off the imported module: the alias target
    for `{ x as y }`, DEFAULT_EXPORT for a default binding.
    """
    local_name: str
    export_name: str
    module_path: str
    importing_file: str = ""
    location: Optional[SourceLocation] = None

    @property
    def is_default(self) -> bool:
        return self.export_name == DEFAULT_EXPORT


@dataclass(frozen=True)
class CallSignatureInfo:
    """What the resolver knows about a binding's (first) call signature."""
    returns_deferred: bool
    return_type: Optional[str] = None


@dataclass(frozen=True)
class CandidateBinding:
    """An imported local name known to resolve to a deferred-result function."""
    local_name: str
    export_name: str
    module_path: str

    @classmethod
    def from_site(cls, site: ImportBindingSite) -> 'CandidateBinding':
        return cls(local_name=site.local_name, export_name=site.export_name,
                   module_path=site.module_path)


class TypeResolver(Protocol):
    """Type-resolution service consumed by the import classifier."""

    def resolve_call_signature(self, site: ImportBindingSite) -> Optional[CallSignatureInfo]:
        ...
