"""
Module AST Transformer
Converts the lark parse tree of one module into shared.nodes dataclasses.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from lark import Transformer, v_args
from lark.lexer import Token
from typing_extensions import TypeAlias

from ...shared import (
    ArrayLiteral, ArrayPattern, ArrayType, Assignment, Await, Binary, BindingIdentifier,
    Block, BooleanLiteral, Call, Conditional, DynamicImport, ExportAllDeclaration,
    ExportDeclaration, ExportDefaultDeclaration, ExportNamedDeclaration, ExportSpecifier,
    Expression, ExpressionStatement, FunctionType, FunctionTypeParameter, Identifier,
    IfStatement, ImportDeclaration, ImportSpecifier, Index, KeywordType, LiteralType,
    Member, Module, NullLiteral, ObjectLiteral, ObjectPattern, Parameter, PatternProperty,
    Property, RestElement, ReturnStatement, SourceLocation, SpreadElement, ThrowStatement,
    TypeNode, TypeReference, Unary, UnionType, VariableDeclarator, VariableStatement,
    WhileStatement,
)
from ...shared.errors import DeferloadImplementationError
from .functions import FunctionDefinitionParser
from .literals import LiteralParser

LarkMeta: TypeAlias = Any

logger = logging.getLogger(__name__)


@dataclass
class NamespaceBinding:
    """Internal: `* as name` inside an import clause"""
    name: str


@dataclass
class ImportClauseInfo:
    """Internal: the bindings of an import clause before the source is known"""
    default: Optional[str] = None
    specifiers: List[ImportSpecifier] = field(default_factory=list)
    namespace: Optional[str] = None


def _split_annotation_and_default(rest: tuple):
    """Optional `: T` and `= value` trailing a binding target."""
    type_annotation = next((r for r in rest if isinstance(r, TypeNode)), None)
    default = next((r for r in rest if isinstance(r, Expression)), None)
    return type_annotation, default


@v_args(inline=True, meta=True)
class ModuleTransformer(Transformer):
    """
    Lark tree -> Module.

    current_file must be set by the Parser before transform() is called; it
    is stamped on every SourceLocation.
    """

    def __init__(self) -> None:
        super().__init__()
        self.current_file: str = ""
        self.function_parser = FunctionDefinitionParser(self._extract_location)
        self.literal_parser = LiteralParser(self._extract_location)

    def __default__(self, data, children, meta):
        raise DeferloadImplementationError(
            f"Missing transformer method for grammar rule '{data}'"
        )

    def _extract_location(self, meta: LarkMeta) -> SourceLocation:
        if not self.current_file:
            raise RuntimeError(
                "Parser bug: current_file not set. "
                "Parser must set current_file before transforming."
            )
        if meta is None or getattr(meta, 'empty', True):
            return SourceLocation(file=self.current_file, line=0, column=0)
        return SourceLocation(
            file=self.current_file,
            line=meta.line,
            column=meta.column,
            start=meta.start_pos,
            end=meta.end_pos,
            end_line=meta.end_line,
            end_column=meta.end_column,
        )

    # =========================================================================
    # MODULE STRUCTURE
    # =========================================================================

    def module(self, meta: LarkMeta, *statements) -> Module:
        return Module(body=list(statements), file=self.current_file,
                      location=self._extract_location(meta))

    def import_declaration(self, meta: LarkMeta, clause: ImportClauseInfo, source: Token) -> ImportDeclaration:
        return ImportDeclaration(
            source=self.literal_parser.parse_string(meta, source),
            default=clause.default,
            specifiers=clause.specifiers,
            namespace=clause.namespace,
            location=self._extract_location(meta),
        )

    def side_effect_import(self, meta: LarkMeta, source: Token) -> ImportDeclaration:
        return ImportDeclaration(source=self.literal_parser.parse_string(meta, source),
                                 location=self._extract_location(meta))

    def import_clause(self, meta: LarkMeta, *parts) -> ImportClauseInfo:
        info = ImportClauseInfo()
        for part in parts:
            if isinstance(part, str):
                info.default = part
            elif isinstance(part, list):
                info.specifiers = part
            elif isinstance(part, NamespaceBinding):
                info.namespace = part.name
        return info

    def default_binding(self, meta: LarkMeta, name: Token) -> str:
        return str(name)

    def named_imports(self, meta: LarkMeta, *specifiers: ImportSpecifier) -> List[ImportSpecifier]:
        return list(specifiers)

    def import_specifier(self, meta: LarkMeta, name: str, alias: Optional[Token] = None) -> ImportSpecifier:
        location = self._extract_location(meta)
        if alias is None:
            return ImportSpecifier(local=name, location=location)
        return ImportSpecifier(local=str(alias), imported=name, location=location)

    def namespace_import(self, meta: LarkMeta, name: Token) -> NamespaceBinding:
        return NamespaceBinding(str(name))

    def export_declaration(self, meta: LarkMeta, declaration) -> ExportDeclaration:
        return ExportDeclaration(declaration=declaration, location=self._extract_location(meta))

    def export_default(self, meta: LarkMeta, expression: Expression) -> ExportDefaultDeclaration:
        return ExportDefaultDeclaration(expression=expression, location=self._extract_location(meta))

    def export_from(self, meta: LarkMeta, specifiers: List[ExportSpecifier], source: Token) -> ExportNamedDeclaration:
        return ExportNamedDeclaration(specifiers=specifiers,
                                      source=self.literal_parser.parse_string(meta, source),
                                      location=self._extract_location(meta))

    def export_named(self, meta: LarkMeta, specifiers: List[ExportSpecifier]) -> ExportNamedDeclaration:
        return ExportNamedDeclaration(specifiers=specifiers, location=self._extract_location(meta))

    def export_all(self, meta: LarkMeta, source: Token) -> ExportAllDeclaration:
        return ExportAllDeclaration(source=self.literal_parser.parse_string(meta, source),
                                    location=self._extract_location(meta))

    def export_clause(self, meta: LarkMeta, *specifiers: ExportSpecifier) -> List[ExportSpecifier]:
        return list(specifiers)

    def export_specifier(self, meta: LarkMeta, local: str, exported: Optional[str] = None) -> ExportSpecifier:
        return ExportSpecifier(local=local, exported=exported, location=self._extract_location(meta))

    def export_name(self, meta: LarkMeta, token: Token) -> str:
        return str(token)

    # =========================================================================
    # DECLARATIONS
    # =========================================================================

    def function_declaration(self, meta: LarkMeta, *children):
        return self.function_parser.parse_function_declaration(meta, *children)

    def function_expression(self, meta: LarkMeta, *children):
        return self.function_parser.parse_function_expression(meta, *children)

    def arrow_function(self, meta: LarkMeta, *children):
        return self.function_parser.parse_arrow_function(meta, *children)

    def param_list(self, meta: LarkMeta, *params: Parameter) -> List[Parameter]:
        return list(params)

    def parameter(self, meta: LarkMeta, target, *rest) -> Parameter:
        type_annotation, default = _split_annotation_and_default(rest)
        return Parameter(target=target, type_annotation=type_annotation, default=default,
                         location=self._extract_location(meta))

    def rest_parameter(self, meta: LarkMeta, target, *rest) -> Parameter:
        type_annotation, _ = _split_annotation_and_default(rest)
        return Parameter(target=target, type_annotation=type_annotation, rest=True,
                         location=self._extract_location(meta))

    def binding_identifier(self, meta: LarkMeta, name: Token) -> BindingIdentifier:
        return BindingIdentifier(name=str(name), location=self._extract_location(meta))

    def object_pattern(self, meta: LarkMeta, *properties) -> ObjectPattern:
        return ObjectPattern(properties=list(properties), location=self._extract_location(meta))

    def shorthand_pattern_property(self, meta: LarkMeta, name: Token,
                                   default: Optional[Expression] = None) -> PatternProperty:
        location = self._extract_location(meta)
        return PatternProperty(key=str(name), value=BindingIdentifier(str(name), location=location),
                               default=default, shorthand=True, location=location)

    def keyed_pattern_property(self, meta: LarkMeta, key: str, target,
                               default: Optional[Expression] = None) -> PatternProperty:
        return PatternProperty(key=key, value=target, default=default,
                               location=self._extract_location(meta))

    def rest_pattern_property(self, meta: LarkMeta, name: Token) -> RestElement:
        location = self._extract_location(meta)
        return RestElement(argument=BindingIdentifier(str(name), location=location), location=location)

    def array_pattern(self, meta: LarkMeta, *elements) -> ArrayPattern:
        return ArrayPattern(elements=list(elements), location=self._extract_location(meta))

    def variable_statement(self, meta: LarkMeta, kind: str, *declarations: VariableDeclarator) -> VariableStatement:
        return VariableStatement(kind=kind, declarations=list(declarations),
                                 location=self._extract_location(meta))

    def var_kind(self, meta: LarkMeta, token: Token) -> str:
        return str(token)

    def variable_declarator(self, meta: LarkMeta, target, *rest) -> VariableDeclarator:
        type_annotation, init = _split_annotation_and_default(rest)
        return VariableDeclarator(target=target, init=init, type_annotation=type_annotation,
                                  location=self._extract_location(meta))

    # =========================================================================
    # STATEMENTS
    # =========================================================================

    def block(self, meta: LarkMeta, *children) -> Block:
        body = [c for c in children if not isinstance(c, Token)]
        return Block(body=body, location=self._extract_location(meta))

    def expression_statement(self, meta: LarkMeta, expression: Expression) -> ExpressionStatement:
        return ExpressionStatement(expression=expression, location=self._extract_location(meta))

    def return_statement(self, meta: LarkMeta, argument: Optional[Expression] = None) -> ReturnStatement:
        return ReturnStatement(argument=argument, location=self._extract_location(meta))

    def if_statement(self, meta: LarkMeta, test, consequent, alternate=None) -> IfStatement:
        return IfStatement(test=test, consequent=consequent, alternate=alternate,
                           location=self._extract_location(meta))

    def while_statement(self, meta: LarkMeta, test, body) -> WhileStatement:
        return WhileStatement(test=test, body=body, location=self._extract_location(meta))

    def throw_statement(self, meta: LarkMeta, argument) -> ThrowStatement:
        return ThrowStatement(argument=argument, location=self._extract_location(meta))

    # =========================================================================
    # EXPRESSIONS
    # =========================================================================

    def _operator(self, meta: LarkMeta, token: Token) -> str:
        return str(token)

    assign_op = or_op = and_op = eq_op = rel_op = add_op = mul_op = unary_op = _operator
    property_name = property_key = _operator

    def assignment(self, meta: LarkMeta, target, operator: str, value) -> Assignment:
        return Assignment(operator=operator, target=target, value=value,
                          location=self._extract_location(meta))

    def conditional(self, meta: LarkMeta, test, consequent, alternate) -> Conditional:
        return Conditional(test=test, consequent=consequent, alternate=alternate,
                           location=self._extract_location(meta))

    def binary(self, meta: LarkMeta, left, operator: str, right) -> Binary:
        return Binary(operator=operator, left=left, right=right, location=self._extract_location(meta))

    def await_expr(self, meta: LarkMeta, argument) -> Await:
        return Await(argument=argument, location=self._extract_location(meta))

    def unary(self, meta: LarkMeta, operator: str, operand) -> Unary:
        return Unary(operator=operator, operand=operand, location=self._extract_location(meta))

    def member(self, meta: LarkMeta, obj, prop: str) -> Member:
        return Member(object=obj, property=prop, location=self._extract_location(meta))

    def index(self, meta: LarkMeta, obj, idx) -> Index:
        return Index(object=obj, index=idx, location=self._extract_location(meta))

    def call(self, meta: LarkMeta, callee, arguments: List[Expression]) -> Call:
        return Call(callee=callee, arguments=arguments, location=self._extract_location(meta))

    def arguments(self, meta: LarkMeta, *args: Expression) -> List[Expression]:
        return list(args)

    def spread(self, meta: LarkMeta, argument) -> SpreadElement:
        return SpreadElement(argument=argument, location=self._extract_location(meta))

    spread_property = spread

    def dynamic_import(self, meta: LarkMeta, source) -> DynamicImport:
        return DynamicImport(source=source, location=self._extract_location(meta))

    def identifier(self, meta: LarkMeta, name: Token) -> Identifier:
        return Identifier(name=str(name), location=self._extract_location(meta))

    def string(self, meta: LarkMeta, token: Token):
        return self.literal_parser.parse_string(meta, token)

    def number(self, meta: LarkMeta, token: Token):
        return self.literal_parser.parse_number(meta, token)

    def true_literal(self, meta: LarkMeta) -> BooleanLiteral:
        return BooleanLiteral(value=True, location=self._extract_location(meta))

    def false_literal(self, meta: LarkMeta) -> BooleanLiteral:
        return BooleanLiteral(value=False, location=self._extract_location(meta))

    def null_literal(self, meta: LarkMeta) -> NullLiteral:
        return NullLiteral(location=self._extract_location(meta))

    def array_literal(self, meta: LarkMeta, *elements) -> ArrayLiteral:
        return ArrayLiteral(elements=list(elements), location=self._extract_location(meta))

    def object_literal(self, meta: LarkMeta, *properties) -> ObjectLiteral:
        return ObjectLiteral(properties=list(properties), location=self._extract_location(meta))

    def keyed_property(self, meta: LarkMeta, key: str, value) -> Property:
        return Property(key=key, value=value, location=self._extract_location(meta))

    def shorthand_property(self, meta: LarkMeta, name: Token) -> Property:
        location = self._extract_location(meta)
        return Property(key=str(name), value=Identifier(str(name), location=location),
                        shorthand=True, location=location)

    # =========================================================================
    # TYPES
    # =========================================================================

    def type_annotation(self, meta: LarkMeta, type_node: TypeNode) -> TypeNode:
        return type_node

    def type_reference(self, meta: LarkMeta, name: Token, *arguments: TypeNode) -> TypeReference:
        return TypeReference(name=str(name), arguments=list(arguments),
                             location=self._extract_location(meta))

    def union_type(self, meta: LarkMeta, *types: TypeNode) -> UnionType:
        return UnionType(types=list(types), location=self._extract_location(meta))

    def array_type(self, meta: LarkMeta, element: TypeNode) -> ArrayType:
        return ArrayType(element=element, location=self._extract_location(meta))

    def function_type(self, meta: LarkMeta, *children) -> FunctionType:
        parts = [c for c in children if not isinstance(c, Token)]
        return FunctionType(params=parts[:-1], return_type=parts[-1],
                            location=self._extract_location(meta))

    def type_param(self, meta: LarkMeta, name: Token, type_node: TypeNode) -> FunctionTypeParameter:
        return FunctionTypeParameter(name=str(name), type_annotation=type_node,
                                     location=self._extract_location(meta))

    def void_type(self, meta: LarkMeta) -> KeywordType:
        return KeywordType(keyword="void", location=self._extract_location(meta))

    def null_type(self, meta: LarkMeta) -> KeywordType:
        return KeywordType(keyword="null", location=self._extract_location(meta))

    def literal_type(self, meta: LarkMeta, token: Token) -> LiteralType:
        return LiteralType(raw=str(token), location=self._extract_location(meta))
