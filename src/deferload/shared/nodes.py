"""
Module AST Definitions

Dataclass nodes for the ES module / TypeScript subset the deferred import
pass operates on. Nodes are treated as immutable: passes derive new trees with
dataclasses.replace() and share every subtree they leave untouched.

Visitor Pattern Support:
- Every node has accept(), dispatching to visit_<snake_case_class_name>
- Child fields are discovered from the dataclass fields (see iter_child_fields)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from typing import Any, Iterator, List, Optional, Tuple, TypeVar, Union, TYPE_CHECKING

from .source_location import SourceLocation
from ..utils.config import DEFAULT_EXPORT

if TYPE_CHECKING:
    from .ast_visitor import ASTVisitor

T = TypeVar('T')

_CAMEL_BOUNDARY = re.compile(r'(?<!^)(?=[A-Z])')


def _location_field():
    return field(default=None, compare=False, repr=False)


class ASTNode:
    """
    Base class for all AST nodes.

    Subclasses are dataclasses; `location` is always the last field and takes
    no part in equality, so a parsed tree compares equal to a hand-built one.
    """
    visit_name = "node"

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.visit_name = _CAMEL_BOUNDARY.sub('_', cls.__name__).lower()

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        method = getattr(visitor, f"visit_{self.visit_name}", None)
        if method is None:
            return visitor.generic_visit(self)
        return method(self)


class Statement(ASTNode):
    """Base class for statements"""


class Expression(ASTNode):
    """Base class for expressions"""


class Pattern(ASTNode):
    """Base class for binding targets (never value references)"""


class TypeNode(ASTNode):
    """Base class for type annotations (erased by the printer)"""


def iter_child_fields(node: ASTNode) -> Iterator[Tuple[str, Any]]:
    """Yield (name, value) for every field of node except its location."""
    for f in fields(node):
        if f.name != 'location':
            yield f.name, getattr(node, f.name)


# =============================================================================
# MODULE STRUCTURE
# =============================================================================

@dataclass
class Module(ASTNode):
    """Module root node"""
    body: List[Statement]
    file: str = ""
    location: Optional[SourceLocation] = _location_field()


@dataclass
class ImportSpecifier(ASTNode):
    """
    One named binding of an import clause.

    `import { x }`       -> local='x', imported=None
    `import { x as y }`  -> local='y', imported='x'
    """
    local: str
    imported: Optional[str] = None
    location: Optional[SourceLocation] = _location_field()

    @property
    def export_name(self) -> str:
        return self.imported if self.imported is not None else self.local


@dataclass
class ImportDeclaration(Statement):
    """
    `import d, { a, b as c } from "path";` / `import * as ns from "path";` /
    `import "path";`
    """
    source: 'StringLiteral'
    default: Optional[str] = None
    specifiers: List[ImportSpecifier] = field(default_factory=list)
    namespace: Optional[str] = None
    location: Optional[SourceLocation] = _location_field()

    @property
    def module_path(self) -> str:
        return self.source.value

    def local_names(self) -> List[str]:
        """Every local name this statement binds, in declaration order."""
        names: List[str] = []
        if self.default is not None:
            names.append(self.default)
        if self.namespace is not None:
            names.append(self.namespace)
        names.extend(s.local for s in self.specifiers)
        return names

    def has_bindings(self) -> bool:
        return bool(self.default is not None or self.namespace is not None or self.specifiers)


@dataclass
class ExportSpecifier(ASTNode):
    """`a` or `a as b` inside an export clause"""
    local: str
    exported: Optional[str] = None
    location: Optional[SourceLocation] = _location_field()

    @property
    def export_name(self) -> str:
        return self.exported if self.exported is not None else self.local


@dataclass
class ExportNamedDeclaration(Statement):
    """`export { a, b as c };` or `export { default as x } from "path";`"""
    specifiers: List[ExportSpecifier]
    source: Optional['StringLiteral'] = None
    location: Optional[SourceLocation] = _location_field()


@dataclass
class ExportAllDeclaration(Statement):
    """`export * from "path";`"""
    source: 'StringLiteral'
    location: Optional[SourceLocation] = _location_field()


@dataclass
class ExportDeclaration(Statement):
    """`export function f() {}` / `export const x = ...;`"""
    declaration: Statement
    location: Optional[SourceLocation] = _location_field()


@dataclass
class ExportDefaultDeclaration(Statement):
    """`export default <expression>`"""
    expression: Expression
    location: Optional[SourceLocation] = _location_field()

    @property
    def export_name(self) -> str:
        return DEFAULT_EXPORT


# =============================================================================
# DECLARATIONS AND STATEMENTS
# =============================================================================

@dataclass
class BindingIdentifier(Pattern):
    """A name in binding position (parameter, declarator target)"""
    name: str
    location: Optional[SourceLocation] = _location_field()


@dataclass
class PatternProperty(ASTNode):
    """`key: target = default` inside an object pattern (shorthand when key == target name)"""
    key: str
    value: Pattern
    default: Optional[Expression] = None
    shorthand: bool = False
    location: Optional[SourceLocation] = _location_field()


@dataclass
class RestElement(Pattern):
    """`...target` in a pattern or parameter list"""
    argument: Pattern
    location: Optional[SourceLocation] = _location_field()


@dataclass
class ObjectPattern(Pattern):
    properties: List[Union[PatternProperty, RestElement]]
    location: Optional[SourceLocation] = _location_field()


@dataclass
class ArrayPattern(Pattern):
    elements: List[Pattern]
    location: Optional[SourceLocation] = _location_field()


@dataclass
class Parameter(ASTNode):
    """Function parameter: target, optional annotation and default value"""
    target: Pattern
    type_annotation: Optional[TypeNode] = None
    default: Optional[Expression] = None
    rest: bool = False
    location: Optional[SourceLocation] = _location_field()

    @property
    def simple_name(self) -> Optional[str]:
        """Name bound by a plain identifier parameter, None for patterns."""
        if isinstance(self.target, BindingIdentifier):
            return self.target.name
        return None


@dataclass
class Block(Statement):
    body: List[Statement]
    location: Optional[SourceLocation] = _location_field()


@dataclass
class FunctionDeclaration(Statement):
    name: Optional[str]
    params: List[Parameter]
    body: Block
    is_async: bool = False
    return_type: Optional[TypeNode] = None
    location: Optional[SourceLocation] = _location_field()


@dataclass
class VariableDeclarator(ASTNode):
    target: Pattern
    init: Optional[Expression] = None
    type_annotation: Optional[TypeNode] = None
    location: Optional[SourceLocation] = _location_field()

    @property
    def simple_name(self) -> Optional[str]:
        if isinstance(self.target, BindingIdentifier):
            return self.target.name
        return None


@dataclass
class VariableStatement(Statement):
    """`const|let|var a = 1, b;`"""
    kind: str
    declarations: List[VariableDeclarator]
    location: Optional[SourceLocation] = _location_field()


@dataclass
class ExpressionStatement(Statement):
    expression: Expression
    location: Optional[SourceLocation] = _location_field()


@dataclass
class ReturnStatement(Statement):
    argument: Optional[Expression] = None
    location: Optional[SourceLocation] = _location_field()


@dataclass
class IfStatement(Statement):
    test: Expression
    consequent: Statement
    alternate: Optional[Statement] = None
    location: Optional[SourceLocation] = _location_field()


@dataclass
class WhileStatement(Statement):
    test: Expression
    body: Statement
    location: Optional[SourceLocation] = _location_field()


@dataclass
class ThrowStatement(Statement):
    argument: Expression
    location: Optional[SourceLocation] = _location_field()


# =============================================================================
# EXPRESSIONS
# =============================================================================

@dataclass
class Identifier(Expression):
    """A name in expression (value reference) position"""
    name: str
    location: Optional[SourceLocation] = _location_field()


@dataclass
class StringLiteral(Expression):
    value: str
    raw: Optional[str] = field(default=None, compare=False)
    location: Optional[SourceLocation] = _location_field()


@dataclass
class NumberLiteral(Expression):
    raw: str
    location: Optional[SourceLocation] = _location_field()


@dataclass
class BooleanLiteral(Expression):
    value: bool
    location: Optional[SourceLocation] = _location_field()


@dataclass
class NullLiteral(Expression):
    location: Optional[SourceLocation] = _location_field()


@dataclass
class SpreadElement(Expression):
    argument: Expression
    location: Optional[SourceLocation] = _location_field()


@dataclass
class ArrayLiteral(Expression):
    elements: List[Expression]
    location: Optional[SourceLocation] = _location_field()


@dataclass
class Property(ASTNode):
    """
    Object literal member. For shorthand `{ x }` the value is Identifier('x'),
    which is a value reference to `x`.
    """
    key: str
    value: Expression
    shorthand: bool = False
    location: Optional[SourceLocation] = _location_field()


@dataclass
class ObjectLiteral(Expression):
    properties: List[Union[Property, SpreadElement]]
    location: Optional[SourceLocation] = _location_field()


@dataclass
class FunctionExpression(Expression):
    name: Optional[str]
    params: List[Parameter]
    body: Block
    is_async: bool = False
    return_type: Optional[TypeNode] = None
    location: Optional[SourceLocation] = _location_field()


@dataclass
class ArrowFunction(Expression):
    params: List[Parameter]
    body: Union[Block, Expression]
    is_async: bool = False
    return_type: Optional[TypeNode] = None
    location: Optional[SourceLocation] = _location_field()


@dataclass
class Call(Expression):
    callee: Expression
    arguments: List[Expression]
    location: Optional[SourceLocation] = _location_field()


@dataclass
class Member(Expression):
    """`object.property` - property is a name, not a reference"""
    object: Expression
    property: str
    location: Optional[SourceLocation] = _location_field()


@dataclass
class Index(Expression):
    """`object[index]`"""
    object: Expression
    index: Expression
    location: Optional[SourceLocation] = _location_field()


@dataclass
class Await(Expression):
    argument: Expression
    location: Optional[SourceLocation] = _location_field()


@dataclass
class Unary(Expression):
    operator: str
    operand: Expression
    location: Optional[SourceLocation] = _location_field()


@dataclass
class Binary(Expression):
    operator: str
    left: Expression
    right: Expression
    location: Optional[SourceLocation] = _location_field()


@dataclass
class Conditional(Expression):
    test: Expression
    consequent: Expression
    alternate: Expression
    location: Optional[SourceLocation] = _location_field()


@dataclass
class Assignment(Expression):
    operator: str
    target: Expression
    value: Expression
    location: Optional[SourceLocation] = _location_field()


@dataclass
class DynamicImport(Expression):
    """`import(source)` - the deferred module-load primitive"""
    source: Expression
    location: Optional[SourceLocation] = _location_field()


# =============================================================================
# TYPES
# =============================================================================

@dataclass
class TypeReference(TypeNode):
    """`Name` or `Name<Arg, ...>`"""
    name: str
    arguments: List[TypeNode] = field(default_factory=list)
    location: Optional[SourceLocation] = _location_field()


@dataclass
class ArrayType(TypeNode):
    element: TypeNode
    location: Optional[SourceLocation] = _location_field()


@dataclass
class UnionType(TypeNode):
    types: List[TypeNode]
    location: Optional[SourceLocation] = _location_field()


@dataclass
class FunctionTypeParameter(ASTNode):
    name: str
    type_annotation: TypeNode
    location: Optional[SourceLocation] = _location_field()


@dataclass
class FunctionType(TypeNode):
    """`(a: A) => R`"""
    params: List[FunctionTypeParameter]
    return_type: TypeNode
    location: Optional[SourceLocation] = _location_field()


@dataclass
class KeywordType(TypeNode):
    """`void` / `null`"""
    keyword: str
    location: Optional[SourceLocation] = _location_field()


@dataclass
class LiteralType(TypeNode):
    raw: str
    location: Optional[SourceLocation] = _location_field()


FunctionLike = Union[FunctionDeclaration, FunctionExpression, ArrowFunction]
