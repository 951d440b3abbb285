"""
Error Reporting

TypeScript Pattern: ts.Diagnostic / ts.formatDiagnosticsWithColorAndContext
Rendering follows the rustc layout used across the compiler tooling:

    error[E0001]: Parse error: unexpected token ')'
     --> file2.ts:3:17
      |
    3 | const y = await );
      |                 ^
"""

import os
import sys
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .source_location import SourceLocation
from ..utils.config import E_CONFIGURATION, E_IMPLEMENTATION, E_PARSE


# ---------------------------------------------------------------------------
# ANSI color helpers (disabled when NO_COLOR is set)
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    explicit = os.environ.get("DEFERLOAD_COLOR", "").lower()
    if explicit in ("0", "false", "no", "never"):
        return False
    return sys.stderr.isatty()

_BOLD = "\033[1m"
_RED = "\033[31m"
_BLUE = "\033[34m"
_CYAN = "\033[36m"
_RESET = "\033[0m"

def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color or not codes:
        return text
    return f"{''.join(codes)}{text}{_RESET}"


@dataclass
class Error:
    """A single diagnostic collected during a compilation."""
    message: str
    location: Optional[SourceLocation]
    code: Optional[str] = None
    help: Optional[str] = None
    note: Optional[str] = None
    label: Optional[str] = None


def _span_length(code_line: str, col_start: int) -> int:
    """Guess token length when no end column is known."""
    length = 0
    for ch in code_line[col_start:]:
        if ch in " \t;,()[]{}":
            break
        length += 1
    return max(1, length)


def _format_diagnostic(error: Error, source_files: Dict[str, str], color: bool = False) -> str:
    code_str = f"[{error.code}]" if error.code else ""
    out: List[str] = [
        _style(f"error{code_str}", _BOLD, _RED, color=color)
        + _style(f": {error.message}", _BOLD, color=color)
    ]

    loc = error.location
    if loc is None:
        out.append(_style(" --> ", _BOLD, _BLUE, color=color) + "<unknown location>")
        gutter = 1
    else:
        source = source_files.get(loc.file)
        lines = source.split("\n") if source is not None else []
        gutter = max(len(str(loc.line)), 1)
        out.append(_style(" " * gutter + "--> ", _BOLD, _BLUE, color=color) + str(loc))
        if 0 < loc.line <= len(lines):
            code_line = lines[loc.line - 1]
            col = max(loc.column, 1) - 1
            if loc.end_line == loc.line and loc.end_column > loc.column:
                span = loc.end_column - loc.column
            else:
                span = _span_length(code_line, col)
            label = f" {error.label}" if error.label else ""
            bar = _style(" " * (gutter + 1) + "|", _BOLD, _BLUE, color=color)
            out.append(bar)
            out.append(_style(f"{loc.line} | ", _BOLD, _BLUE, color=color) + code_line)
            out.append(bar + " " + _style(" " * col + "^" * span + label, _BOLD, _RED, color=color))

    pad = " " * (gutter + 1)
    if error.help:
        out.append(_style(f"{pad}= ", _BOLD, _CYAN, color=color) + "help: " + error.help)
    if error.note:
        out.append(_style(f"{pad}= ", _BOLD, _CYAN, color=color) + "note: " + error.note)
    return "\n".join(out)


class ErrorReporter:
    """Collects diagnostics for one compilation and formats them."""

    def __init__(self, source_files: Dict[str, str]):
        self.source_files = source_files
        self.errors: List[Error] = []

    def report_error(
        self,
        message: str,
        location: Optional[SourceLocation],
        code: Optional[str] = None,
        help: Optional[str] = None,
        note: Optional[str] = None,
        label: Optional[str] = None,
    ) -> None:
        self.errors.append(Error(message=message, location=location, code=code,
                                 help=help, note=note, label=label))

    def format_error(self, error: Error, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        return _format_diagnostic(error, self.source_files, color=use_color)

    def format_all_errors(self, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        parts = [self.format_error(e, color=use_color) for e in self.errors]
        count = len(self.errors)
        summary = f"aborting due to {count} previous error{'s' if count != 1 else ''}"
        parts.append(_style("error", _BOLD, _RED, color=use_color)
                     + _style(f": {summary}", _BOLD, color=use_color))
        return "\n\n".join(parts)

    def has_errors(self) -> bool:
        return len(self.errors) > 0


# ============================================================================
# Exception Classes
# ============================================================================

class DeferloadError(Exception):
    """Base exception for all deferload errors"""
    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self):
        if self.location:
            return f"{self.message}\n --> {self.location}"
        return self.message


class DeferloadSourceError(DeferloadError):
    """
    Error in a module being compiled, rendered with a source snippet.
    """
    def __init__(self,
                 message: str,
                 location: Optional[SourceLocation] = None,
                 error_code: str = E_PARSE,
                 source_code: Optional[str] = None,
                 help: Optional[str] = None,
                 note: Optional[str] = None):
        super().__init__(message, location)
        self.error_code = error_code
        self.source_code = source_code
        self.help_text = help
        self.note_text = note

    def to_error(self) -> Error:
        return Error(message=self.message, location=self.location, code=self.error_code,
                     help=self.help_text, note=self.note_text)

    def __str__(self):
        source_files: Dict[str, str] = {}
        if self.source_code is not None and self.location:
            source_files[self.location.file] = self.source_code
        return _format_diagnostic(self.to_error(), source_files, color=False)


class ConfigurationError(DeferloadError):
    """
    The pass was constructed without a type-resolution context.

    Fatal for the whole pipeline: raised before any module is processed.
    """
    error_code = E_CONFIGURATION

    def __str__(self):
        return f"[{self.error_code}] {self.message}"


class DeferloadImplementationError(Exception):
    """
    Error in the Python implementation (not in the module being compiled).
    """
    def __init__(self, message: str, error_code: str = E_IMPLEMENTATION):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self):
        return f"[{self.error_code}] {self.message}"
