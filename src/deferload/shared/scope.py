"""
Scope frames for the call-site rewrite.

A frame is opened for each function and block. It records which candidate
names the frame itself redeclares (own_shadows), the shadow set in force
inside it (its own plus every ancestor's), and a local accumulator of
candidate names referenced outside a rewritable call position.

Merge rule on exit: subtract own_shadows from the accumulator, then merge
the remainder into the parent's accumulator.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Generator, Iterable, List, Set


class ScopeKind(Enum):
    MODULE = "module"
    FUNCTION = "function"
    BLOCK = "block"


@dataclass
class ScopeFrame:
    kind: ScopeKind
    own_shadows: FrozenSet[str] = frozenset()
    shadowed: FrozenSet[str] = frozenset()
    still_needed: Set[str] = field(default_factory=set)

    def is_shadowed(self, name: str) -> bool:
        return name in self.shadowed

    def record(self, name: str) -> None:
        self.still_needed.add(name)

    def escaping(self) -> Set[str]:
        """Names that survive this frame's own shadowing."""
        return self.still_needed - self.own_shadows


class ScopeStack:
    """Explicit stack of frames; the module frame is always at the bottom."""

    def __init__(self) -> None:
        self._frames: List[ScopeFrame] = [ScopeFrame(ScopeKind.MODULE)]

    @property
    def current(self) -> ScopeFrame:
        return self._frames[-1]

    @property
    def root(self) -> ScopeFrame:
        return self._frames[0]

    def depth(self) -> int:
        return len(self._frames)

    @contextmanager
    def frame(self, kind: ScopeKind, shadows: Iterable[str] = ()) -> Generator[ScopeFrame, None, None]:
        parent = self.current
        own = frozenset(shadows)
        child = ScopeFrame(kind=kind, own_shadows=own, shadowed=parent.shadowed | own)
        self._frames.append(child)
        try:
            yield child
        finally:
            self._frames.pop()
            parent.still_needed |= child.escaping()

    def is_shadowed(self, name: str) -> bool:
        return self.current.is_shadowed(name)

    def record(self, name: str) -> None:
        self.current.record(name)

