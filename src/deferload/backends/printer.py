"""
Module Printer

TypeScript Pattern: ts.createPrinter().printFile
Emits JavaScript: type annotations are erased, statements are laid out one
per line with four-space indentation, and parentheses are inserted only where
operator precedence requires them.
"""

import json
import logging
from typing import List, Optional

from ..shared.ast_visitor import ASTVisitor
from ..shared.nodes import (
    ArrayLiteral, ArrayPattern, ArrowFunction, Assignment, ASTNode, Binary, Block,
    BindingIdentifier, Call, Conditional, ExportDefaultDeclaration, Expression,
    FunctionExpression, Index, Member, Module, ObjectLiteral, ObjectPattern, Parameter,
    PatternProperty, RestElement, SpreadElement,
)
from ..utils.config import INDENT

logger = logging.getLogger(__name__)

# Binding strength, loosest first
PREC_ASSIGN = 1
PREC_CONDITIONAL = 2
PREC_UNARY = 9
PREC_POSTFIX = 10
PREC_PRIMARY = 11

_BINARY_PRECEDENCE = {
    "||": 3, "??": 3,
    "&&": 4,
    "===": 5, "!==": 5, "==": 5, "!=": 5,
    "<": 6, ">": 6, "<=": 6, ">=": 6,
    "+": 7, "-": 7,
    "*": 8, "/": 8, "%": 8,
}


def precedence(node: Expression) -> int:
    if isinstance(node, (Assignment, ArrowFunction, SpreadElement)):
        return PREC_ASSIGN
    if isinstance(node, Conditional):
        return PREC_CONDITIONAL
    if isinstance(node, Binary):
        return _BINARY_PRECEDENCE[node.operator]
    if node.visit_name in ("unary", "await"):
        return PREC_UNARY
    if isinstance(node, (Call, Member, Index)):
        return PREC_POSTFIX
    return PREC_PRIMARY


def _leftmost(node: Expression) -> Expression:
    """The expression that supplies the first token of node's printed form."""
    while True:
        if isinstance(node, Call):
            node = node.callee
        elif isinstance(node, (Member, Index)):
            node = node.object
        elif isinstance(node, Binary):
            node = node.left
        elif isinstance(node, Conditional):
            node = node.test
        elif isinstance(node, Assignment):
            node = node.target
        else:
            return node


class ModulePrinter(ASTVisitor[str]):
    """
    Prints a Module back to source text.

    Statement visitors return text whose first line is unindented and whose
    following lines carry their full indentation; the enclosing block adds
    the indentation of the first line.
    """

    def __init__(self, indent: str = INDENT) -> None:
        self.indent = indent
        self.depth = 0

    def print_module(self, module: Module) -> str:
        self.depth = 0
        lines = [self.visit(stmt) for stmt in module.body]
        if not lines:
            return ""
        return "\n".join(lines) + "\n"

    def print_node(self, node: ASTNode) -> str:
        return self.visit(node)

    def generic_visit(self, node: ASTNode) -> str:
        raise TypeError(f"ModulePrinter cannot print {type(node).__name__}")

    def _pad(self) -> str:
        return self.indent * self.depth

    def expr(self, node: Expression, min_precedence: int = PREC_ASSIGN) -> str:
        text = self.visit(node)
        if precedence(node) < min_precedence:
            return f"({text})"
        return text

    # =========================================================================
    # STATEMENTS
    # =========================================================================

    def visit_block(self, node: Block) -> str:
        if not node.body:
            return "{ }"
        self.depth += 1
        inner_pad = self._pad()
        inner = [inner_pad + self.visit(stmt) for stmt in node.body]
        self.depth -= 1
        return "{\n" + "\n".join(inner) + "\n" + self._pad() + "}"

    def visit_import_declaration(self, node) -> str:
        source = self.visit(node.source)
        if not node.has_bindings():
            return f"import {source};"
        parts: List[str] = []
        if node.default is not None:
            parts.append(node.default)
        if node.namespace is not None:
            parts.append(f"* as {node.namespace}")
        if node.specifiers:
            specs = ", ".join(
                s.local if s.imported is None else f"{s.imported} as {s.local}"
                for s in node.specifiers
            )
            parts.append("{ " + specs + " }")
        return f"import {', '.join(parts)} from {source};"

    def _export_clause(self, specifiers) -> str:
        if not specifiers:
            return "{}"
        specs = ", ".join(
            s.local if s.exported is None else f"{s.local} as {s.exported}"
            for s in specifiers
        )
        return "{ " + specs + " }"

    def visit_export_named_declaration(self, node) -> str:
        clause = self._export_clause(node.specifiers)
        if node.source is not None:
            return f"export {clause} from {self.visit(node.source)};"
        return f"export {clause};"

    def visit_export_all_declaration(self, node) -> str:
        return f"export * from {self.visit(node.source)};"

    def visit_export_declaration(self, node) -> str:
        return "export " + self.visit(node.declaration)

    def visit_export_default_declaration(self, node: ExportDefaultDeclaration) -> str:
        if isinstance(node.expression, FunctionExpression):
            return "export default " + self.visit(node.expression)
        return f"export default {self.expr(node.expression)};"

    def visit_function_declaration(self, node) -> str:
        prefix = "async " if node.is_async else ""
        return f"{prefix}function {node.name}({self._params(node.params)}) {self.visit(node.body)}"

    def visit_variable_statement(self, node) -> str:
        return f"{node.kind} {', '.join(self.visit(d) for d in node.declarations)};"

    def visit_variable_declarator(self, node) -> str:
        target = self.visit(node.target)
        if node.init is None:
            return target
        return f"{target} = {self.expr(node.init)}"

    def visit_expression_statement(self, node) -> str:
        text = self.expr(node.expression)
        if isinstance(_leftmost(node.expression), (ObjectLiteral, FunctionExpression)) \
                and not text.startswith("("):
            text = f"({text})"
        return text + ";"

    def visit_return_statement(self, node) -> str:
        if node.argument is None:
            return "return;"
        return f"return {self.expr(node.argument)};"

    def visit_throw_statement(self, node) -> str:
        return f"throw {self.expr(node.argument)};"

    def visit_if_statement(self, node) -> str:
        text = f"if ({self.expr(node.test)}) {self.visit(node.consequent)}"
        if node.alternate is not None:
            text += "\n" + self._pad() + "else " + self.visit(node.alternate)
        return text

    def visit_while_statement(self, node) -> str:
        return f"while ({self.expr(node.test)}) {self.visit(node.body)}"

    # =========================================================================
    # PATTERNS AND PARAMETERS
    # =========================================================================

    def _params(self, params: List[Parameter]) -> str:
        return ", ".join(self.visit(p) for p in params)

    def visit_parameter(self, node: Parameter) -> str:
        text = ("..." if node.rest else "") + self.visit(node.target)
        if node.default is not None:
            text += f" = {self.expr(node.default)}"
        return text

    def visit_binding_identifier(self, node: BindingIdentifier) -> str:
        return node.name

    def visit_object_pattern(self, node: ObjectPattern) -> str:
        if not node.properties:
            return "{}"
        return "{ " + ", ".join(self.visit(p) for p in node.properties) + " }"

    def visit_pattern_property(self, node: PatternProperty) -> str:
        if node.shorthand:
            text = node.key
        else:
            text = f"{node.key}: {self.visit(node.value)}"
        if node.default is not None:
            text += f" = {self.expr(node.default)}"
        return text

    def visit_rest_element(self, node: RestElement) -> str:
        return "..." + self.visit(node.argument)

    def visit_array_pattern(self, node: ArrayPattern) -> str:
        return "[" + ", ".join(self.visit(e) for e in node.elements) + "]"

    # =========================================================================
    # EXPRESSIONS
    # =========================================================================

    def visit_identifier(self, node) -> str:
        return node.name

    def visit_string_literal(self, node) -> str:
        if node.raw is not None:
            return node.raw
        return json.dumps(node.value)

    def visit_number_literal(self, node) -> str:
        return node.raw

    def visit_boolean_literal(self, node) -> str:
        return "true" if node.value else "false"

    def visit_null_literal(self, node) -> str:
        return "null"

    def visit_spread_element(self, node) -> str:
        return "..." + self.expr(node.argument)

    def visit_array_literal(self, node: ArrayLiteral) -> str:
        return "[" + ", ".join(self.expr(e) for e in node.elements) + "]"

    def visit_object_literal(self, node: ObjectLiteral) -> str:
        if not node.properties:
            return "{}"
        return "{ " + ", ".join(self.visit(p) for p in node.properties) + " }"

    def visit_property(self, node) -> str:
        if node.shorthand:
            return node.key
        return f"{node.key}: {self.expr(node.value)}"

    def visit_function_expression(self, node: FunctionExpression) -> str:
        prefix = "async " if node.is_async else ""
        head = f"function {node.name}" if node.name else "function "
        return f"{prefix}{head}({self._params(node.params)}) {self.visit(node.body)}"

    def visit_arrow_function(self, node: ArrowFunction) -> str:
        prefix = "async " if node.is_async else ""
        if len(node.params) == 1 and self._is_plain(node.params[0]):
            params = self.visit(node.params[0])
        else:
            params = f"({self._params(node.params)})"
        if isinstance(node.body, Block):
            body = self.visit(node.body)
        elif isinstance(node.body, ObjectLiteral):
            body = f"({self.visit(node.body)})"
        else:
            body = self.expr(node.body)
        return f"{prefix}{params} => {body}"

    @staticmethod
    def _is_plain(param: Parameter) -> bool:
        return isinstance(param.target, BindingIdentifier) and param.default is None and not param.rest

    def visit_call(self, node: Call) -> str:
        args = ", ".join(self.expr(a) for a in node.arguments)
        return f"{self.expr(node.callee, PREC_POSTFIX)}({args})"

    def visit_member(self, node: Member) -> str:
        return f"{self.expr(node.object, PREC_POSTFIX)}.{node.property}"

    def visit_index(self, node: Index) -> str:
        return f"{self.expr(node.object, PREC_POSTFIX)}[{self.expr(node.index)}]"

    def visit_dynamic_import(self, node) -> str:
        return f"import({self.expr(node.source)})"

    def visit_await(self, node) -> str:
        return "await " + self.expr(node.argument, PREC_UNARY)

    def visit_unary(self, node) -> str:
        operand = self.expr(node.operand, PREC_UNARY)
        if node.operator == "typeof":
            return "typeof " + operand
        if node.operator in ("-", "+") and operand.startswith(node.operator):
            return f"{node.operator} {operand}"
        return node.operator + operand

    def visit_binary(self, node: Binary) -> str:
        level = _BINARY_PRECEDENCE[node.operator]
        left = self.expr(node.left, level)
        right = self.expr(node.right, level + 1)
        return f"{left} {node.operator} {right}"

    def visit_conditional(self, node: Conditional) -> str:
        test = self.expr(node.test, PREC_CONDITIONAL + 1)
        return f"{test} ? {self.expr(node.consequent)} : {self.expr(node.alternate)}"

    def visit_assignment(self, node: Assignment) -> str:
        return f"{self.expr(node.target, PREC_POSTFIX)} {node.operator} {self.expr(node.value)}"


def print_module(module: Module, indent: Optional[str] = None) -> str:
    """Convenience wrapper: print one module with a fresh printer."""
    printer = ModulePrinter(indent) if indent is not None else ModulePrinter()
    return printer.print_module(module)
