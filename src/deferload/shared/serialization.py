"""
AST Serialization to S-Expressions
==================================

Converts a Module AST to a canonical S-expression for `--dump-ast` and for
structural assertions in tests. Node kinds and field keywords are emitted as
sexpdata.Symbol (unquoted); names and string values stay quoted.

    (module
      (import-declaration :source (string-literal :value "./file1") ...)
      ...)
"""

from typing import Any, List

import sexpdata

from .nodes import ASTNode, iter_child_fields


def _pretty_dumps(sexpr: Any, indent: int = 0, indent_str: str = "  ", max_line: int = 100) -> str:
    """
    Pretty-print structured sexpr. Keeps short forms on one line; breaks only when needed.
    """
    if isinstance(sexpr, list):
        if not sexpr:
            return "()"
        parts = [_pretty_dumps(e, indent + 1, indent_str, max_line) for e in sexpr]
        one_line = "(" + " ".join(parts) + ")"
        if len(one_line) <= max_line and "\n" not in one_line:
            return one_line
        prefix = indent_str * indent
        next_prefix = indent_str * (indent + 1)
        rest = "\n".join(next_prefix + p for p in parts[1:])
        inner = parts[0] + ("\n" + rest if rest else "")
        return f"({inner}\n{prefix})"
    return sexpdata.dumps(sexpr)


class ASTSerializer:
    """
    AST to structured S-expression serializer.

    Every node becomes `(kind :field value ...)`; None fields and empty lists
    are omitted so the output stays readable.
    """

    def __init__(self, include_location: bool = False):
        self.include_location = include_location

    @staticmethod
    def _sym(s: str) -> sexpdata.Symbol:
        return sexpdata.Symbol(s)

    def serialize_to_sexpr(self, node: Any) -> Any:
        if node is None:
            return self._sym("nil")
        if isinstance(node, bool):
            return self._sym("true" if node else "false")
        if isinstance(node, list):
            return [self.serialize_to_sexpr(item) for item in node]
        if not isinstance(node, ASTNode):
            return node

        result: List[Any] = [self._sym(node.visit_name.replace("_", "-"))]
        for name, value in iter_child_fields(node):
            if value is None or value is False or (isinstance(value, list) and not value):
                continue
            if name == "raw" and node.visit_name == "string_literal":
                continue
            result.extend([self._sym(":" + name.replace("_", "-")), self.serialize_to_sexpr(value)])
        if self.include_location and getattr(node, "location", None) is not None:
            loc = node.location
            result.extend([self._sym(":loc"), [loc.file, loc.line, loc.column]])
        return result

    def serialize(self, node: ASTNode, pretty: bool = True) -> str:
        sexpr = self.serialize_to_sexpr(node)
        if pretty:
            return _pretty_dumps(sexpr)
        return sexpdata.dumps(sexpr)


def serialize_ast(node: ASTNode, include_location: bool = False, pretty: bool = True) -> str:
    """Serialize an AST node to an S-expression string."""
    return ASTSerializer(include_location=include_location).serialize(node, pretty=pretty)
