"""
Literal Parser - string and number token decoding

String tokens are decoded with ECMAScript escape rules (module code is
always strict, so legacy octal escapes are rejected).
"""

import re
from typing import Any, Callable, Optional

from lark.lexer import Token

from ...shared import StringLiteral, NumberLiteral, SourceLocation
from ...shared.errors import DeferloadSourceError

_ESCAPE = re.compile(
    r"\\(u\{[0-9A-Fa-f]+\}|u[0-9A-Fa-f]{4}|x[0-9A-Fa-f]{2}|\r\n|[\s\S])"
)

_SINGLE_CHAR_ESCAPES = {
    "b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t", "v": "\v", "0": "\0",
}

# an escaped line terminator is a line continuation and contributes nothing
_LINE_CONTINUATIONS = frozenset({"\n", "\r", "\r\n", "\u2028", "\u2029"})


def _unescape(match: "re.Match[str]") -> str:
    seq = match.group(1)
    if seq.startswith("u{"):
        code = int(seq[2:-1], 16)
        if code > 0x10FFFF:
            raise ValueError(f"code point out of range in \\{seq}")
        return chr(code)
    if seq[0] in "ux" and len(seq) > 1:
        return chr(int(seq[1:], 16))
    if seq.isdigit() and (seq != "0" or match.string[match.end():match.end() + 1].isdigit()):
        raise ValueError(f"octal escape \\{seq} is not allowed in module code")
    if seq in _SINGLE_CHAR_ESCAPES:
        return _SINGLE_CHAR_ESCAPES[seq]
    if seq in _LINE_CONTINUATIONS:
        return ""
    if seq in ("u", "x"):
        raise ValueError(f"malformed \\{seq} escape")
    return seq


def decode_string(raw: str) -> str:
    """
    Value of a quoted ES string token.

    UTF-16 surrogate pairs written as two \\uXXXX escapes are joined into one
    code point; lone surrogates are kept as they are.
    """
    if len(raw) < 2 or raw[0] not in "\"'" or raw[-1] != raw[0]:
        raise ValueError("unterminated string")
    value = _ESCAPE.sub(_unescape, raw[1:-1])
    return value.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")


class LiteralParser:
    """Turns STRING / NUMBER tokens into literal nodes."""

    def __init__(self, location_extractor: Callable[[Any], SourceLocation]) -> None:
        self.extract_location = location_extractor

    def parse_string(self, meta: Any, token: Token) -> StringLiteral:
        location = self.extract_location(meta)
        return StringLiteral(value=self.decode(str(token), location), raw=str(token), location=location)

    def parse_number(self, meta: Any, token: Token) -> NumberLiteral:
        return NumberLiteral(raw=str(token), location=self.extract_location(meta))

    @staticmethod
    def decode(raw: str, location: Optional[SourceLocation] = None) -> str:
        """Decode a quoted string token (single or double quotes)."""
        try:
            return decode_string(raw)
        except ValueError as e:
            raise DeferloadSourceError(f"Invalid string literal {raw}: {e}", location) from e
