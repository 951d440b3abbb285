"""
Shared components: AST nodes, visitors, scopes, binding types and errors.
"""

from .source_location import SourceLocation
from .errors import (
    Error, ErrorReporter, DeferloadError, DeferloadSourceError,
    ConfigurationError, DeferloadImplementationError,
)
from .types import ImportBindingSite, CallSignatureInfo, CandidateBinding, TypeResolver
from .nodes import (
    ASTNode, Statement, Expression, Pattern, TypeNode, Module,
    ImportDeclaration, ImportSpecifier, ExportNamedDeclaration, ExportSpecifier,
    ExportAllDeclaration, ExportDeclaration, ExportDefaultDeclaration,
    BindingIdentifier, PatternProperty, RestElement, ObjectPattern, ArrayPattern,
    Parameter, Block, FunctionDeclaration, VariableDeclarator, VariableStatement,
    ExpressionStatement, ReturnStatement, IfStatement, WhileStatement, ThrowStatement,
    Identifier, StringLiteral, NumberLiteral, BooleanLiteral, NullLiteral,
    SpreadElement, ArrayLiteral, Property, ObjectLiteral, FunctionExpression,
    ArrowFunction, Call, Member, Index, Await, Unary, Binary, Conditional,
    Assignment, DynamicImport,
    TypeReference, ArrayType, UnionType, FunctionTypeParameter, FunctionType,
    KeywordType, LiteralType,
)
from .ast_visitor import ASTVisitor, ASTTransformer
