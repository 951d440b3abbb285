"""
Source Location (Span)

TypeScript Pattern: ts.TextRange / ts.getLineAndCharacterOfPosition
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLocation:
    """
    Source location of a node or diagnostic.

    Line/column are 1-based as reported by lark; start/end are character
    offsets into the module source. Frozen so locations can be shared between
    an original node and the nodes a pass derives from it.
    """
    file: str
    line: int
    column: int
    start: int = 0
    end: int = 0
    end_line: int = 0
    end_column: int = 0

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"
