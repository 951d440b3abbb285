"""
Token post-processing for the module grammar.

JavaScript reuses `{`, `function` and `(` for constructs an LALR(1) parser
cannot tell apart with one token of lookahead (block vs object literal,
declaration vs expression, arrow parameters vs parenthesized expression).
ModulePostLex looks at the surrounding tokens and retypes them to the
BLOCK_OPEN, FUNCTION_DECL and ARROW_LPAR terminals declared in grammar.lark.

Requires the basic (context-free) lexer: the whole token stream is buffered
so that arrow parameter lists can be matched up to their `=>`.
"""

import logging
from typing import Iterator, List, Optional

from lark.lark import PostLex
from lark.lexer import Token

logger = logging.getLogger(__name__)

# Tokens after which `{` opens a block rather than an object literal.
# `)`/`=>`/`else` precede statement bodies; NAME, `>`, `]` and `void` end a
# return type annotation.
_BLOCK_PRECEDERS = frozenset({";", "{", "}", ")", "=>", "else", "void", ">", "]"})

# Tokens after which a statement (and so a function declaration) may start
_STATEMENT_PRECEDERS = frozenset({";", "{", "}", "export"})

# Tokens that end an arrow return-type annotation search without finding `=>`
_ANNOTATION_STOPS = frozenset({";", ",", ")", "}", "{", "=", "?"})


def _is(tok: Optional[Token], value: str) -> bool:
    return tok is not None and tok.type != "STRING" and tok.value == value


class ModulePostLex(PostLex):
    always_accept = ()

    def process(self, stream: Iterator[Token]) -> Iterator[Token]:
        tokens: List[Token] = list(stream)
        out: List[Token] = []
        for i, tok in enumerate(tokens):
            prev = out[-1] if out else None
            if _is(tok, "{") and self._opens_block(prev):
                tok = Token.new_borrow_pos("BLOCK_OPEN", tok.value, tok)
            elif _is(tok, "function") and self._starts_declaration(out):
                tok = Token.new_borrow_pos("FUNCTION_DECL", tok.value, tok)
            elif _is(tok, "(") and self._opens_arrow_params(tokens, i, prev):
                tok = Token.new_borrow_pos("ARROW_LPAR", tok.value, tok)
            out.append(tok)
        return iter(out)

    @staticmethod
    def _opens_block(prev: Optional[Token]) -> bool:
        if prev is None:
            return True
        if prev.type == "NAME":
            return True
        return prev.type != "STRING" and prev.value in _BLOCK_PRECEDERS

    @staticmethod
    def _starts_declaration(out: List[Token]) -> bool:
        prev = out[-1] if out else None
        if prev is not None and prev.type == "ASYNC":
            prev = out[-2] if len(out) > 1 else None
        if prev is None:
            return True
        return prev.type != "STRING" and prev.value in _STATEMENT_PRECEDERS

    @staticmethod
    def _opens_arrow_params(tokens: List[Token], index: int, prev: Optional[Token]) -> bool:
        # a `(` after a name, `)`, `]` or `function` is a call or a parameter list
        if prev is not None and (prev.type in ("NAME", "FUNCTION_DECL")
                                 or _is(prev, ")") or _is(prev, "]") or _is(prev, "function")):
            return False
        depth = 0
        close = None
        for j in range(index, len(tokens)):
            if _is(tokens[j], "("):
                depth += 1
            elif _is(tokens[j], ")"):
                depth -= 1
                if depth == 0:
                    close = j
                    break
        if close is None or close + 1 >= len(tokens):
            return False
        after = tokens[close + 1]
        if _is(after, "=>"):
            return True
        if not _is(after, ":"):
            return False
        # `(...): ReturnType =>`
        depth = 0
        for tok in tokens[close + 2:]:
            if tok.type == "STRING":
                continue
            if tok.value in ("(", "<", "["):
                depth += 1
            elif tok.value in (")", ">", "]") and depth > 0:
                depth -= 1
            elif depth == 0 and tok.value == "=>":
                return True
            elif depth == 0 and tok.value in _ANNOTATION_STOPS:
                return False
        return False
