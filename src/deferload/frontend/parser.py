"""
Parser

TypeScript Pattern: ts.createSourceFile
"""

import logging
from pathlib import Path
from typing import Optional

from lark import Lark
from lark.exceptions import UnexpectedInput, VisitError

from ..shared.errors import DeferloadError, DeferloadSourceError
from ..shared.nodes import Module
from ..shared.source_location import SourceLocation
from ..utils.config import E_PARSE
from .postlex import ModulePostLex
from .transformers.base import ModuleTransformer

logger = logging.getLogger(__name__)


class ParseError(DeferloadSourceError):
    """Syntax error in a module, positioned at the offending token."""

    def __init__(self, message: str, location: Optional[SourceLocation] = None,
                 source_code: Optional[str] = None) -> None:
        super().__init__(message, location, error_code=E_PARSE, source_code=source_code)


class Parser:
    """
    Parses one module's source text into a Module AST.

    The LALR tables are built once per Parser; reuse the instance across
    modules.
    """

    def __init__(self) -> None:
        grammar_path = Path(__file__).parent / "grammar.lark"
        self.parser = Lark.open(
            str(grammar_path),
            start='module',
            parser='lalr',
            lexer='basic',
            postlex=ModulePostLex(),
            propagate_positions=True,
            maybe_placeholders=False,
        )
        self.transformer = ModuleTransformer()

    def parse(self, source: str, source_file: str = "module.ts") -> Module:
        """Parse source code to a Module; raises ParseError on bad syntax."""
        self.transformer.current_file = source_file
        try:
            tree = self.parser.parse(source)
        except UnexpectedInput as e:
            line = max(getattr(e, 'line', 0) or 0, 0)
            column = max(getattr(e, 'column', 0) or 0, 0)
            location = SourceLocation(file=source_file, line=line, column=column,
                                      start=getattr(e, 'pos_in_stream', 0) or 0)
            token = getattr(e, 'token', None)
            if token is not None and str(token) != "":
                message = f"unexpected token `{token}`"
            elif getattr(e, 'char', None):
                message = f"unexpected character `{e.char}`"
            else:
                message = "unexpected end of input"
            logger.debug("Parse failure in %s: %s", source_file, e)
            raise ParseError(message, location, source_code=source) from e

        try:
            return self.transformer.transform(tree)
        except VisitError as e:
            if isinstance(e.orig_exc, DeferloadError):
                raise e.orig_exc from e
            raise
