"""
Type Resolution

TypeScript Pattern: ts.TypeChecker (getAliasedSymbol + getCallSignatures)

Answers one question for the import classifier: given an imported binding,
does calling it produce a deferred result? ProgramTypeResolver answers from
the declarations of the modules in the compilation; MappingTypeResolver
answers from a fixed table and stands in for a host type service.
"""

import logging
from typing import Dict, Optional, Set, Tuple, Union

from ..shared.nodes import (
    ArrowFunction, ExportAllDeclaration, ExportDeclaration, ExportDefaultDeclaration,
    ExportNamedDeclaration, Expression, FunctionDeclaration, FunctionExpression,
    FunctionLike, FunctionType, Identifier, ImportDeclaration, Module, TypeNode,
    TypeReference, VariableDeclarator, VariableStatement,
)
from ..shared.types import CallSignatureInfo, ImportBindingSite
from ..utils.config import DEFAULT_EXPORT, DEFERRED_RESULT_TYPE_NAMES
from .module_system import ModuleGraph

logger = logging.getLogger(__name__)

_Visited = Set[Tuple[str, str, str]]


def is_deferred_type(type_node: Optional[TypeNode]) -> bool:
    """True for `Promise` / `Promise<T>`."""
    return isinstance(type_node, TypeReference) and type_node.name in DEFERRED_RESULT_TYPE_NAMES


def type_name(type_node: Optional[TypeNode]) -> Optional[str]:
    if isinstance(type_node, TypeReference):
        return type_node.name
    return None


def function_signature(fn: FunctionLike) -> CallSignatureInfo:
    """Signature of a function declaration, function expression or arrow function."""
    if is_deferred_type(fn.return_type):
        return CallSignatureInfo(returns_deferred=True, return_type=type_name(fn.return_type))
    if fn.is_async:
        return CallSignatureInfo(returns_deferred=True, return_type="Promise")
    return CallSignatureInfo(returns_deferred=False, return_type=type_name(fn.return_type))


class ProgramTypeResolver:
    """
    Resolves import bindings against the declarations of a ModuleGraph.

    Follows re-exports (`export { a as b } from`, `export * from`), local
    export clauses, imported-then-exported names and identifier initializers.
    Each resolution carries a visited set, so re-export cycles end in None.
    """

    def __init__(self, graph: ModuleGraph):
        self.graph = graph

    def resolve_call_signature(self, site: ImportBindingSite) -> Optional[CallSignatureInfo]:
        target = self.graph.resolve(site.importing_file, site.module_path)
        if target is None:
            return None
        signature = self._resolve_export(target, site.export_name, set())
        logger.debug(f"Resolved {site.module_path}:{site.export_name} "
                     f"from {site.importing_file} -> {signature}")
        return signature

    # -------------------------------------------------------------------------
    # Exports
    # -------------------------------------------------------------------------

    def _resolve_export(self, module_key: Optional[str], export_name: str,
                        visited: _Visited) -> Optional[CallSignatureInfo]:
        if module_key is None:
            return None
        marker = ("export", module_key, export_name)
        if marker in visited:
            logger.debug(f"Re-export cycle at {module_key}:{export_name}")
            return None
        visited.add(marker)
        module = self.graph.get(module_key)
        if module is None:
            return None

        for stmt in module.body:
            if isinstance(stmt, ExportDeclaration):
                signature = self._declaration_signature(module_key, stmt.declaration, export_name, visited)
                if signature is not None:
                    return signature
            elif isinstance(stmt, ExportDefaultDeclaration) and export_name == DEFAULT_EXPORT:
                return self._expression_signature(module_key, stmt.expression, visited)
            elif isinstance(stmt, ExportNamedDeclaration):
                for spec in stmt.specifiers:
                    if spec.export_name != export_name:
                        continue
                    if stmt.source is not None:
                        target = self.graph.resolve(module_key, stmt.source.value)
                        return self._resolve_export(target, spec.local, visited)
                    return self._resolve_local(module_key, spec.local, visited)

        # `export *` never forwards the default export
        if export_name != DEFAULT_EXPORT:
            for stmt in module.body:
                if isinstance(stmt, ExportAllDeclaration):
                    target = self.graph.resolve(module_key, stmt.source.value)
                    signature = self._resolve_export(target, export_name, visited)
                    if signature is not None:
                        return signature
        return None

    # -------------------------------------------------------------------------
    # Local declarations
    # -------------------------------------------------------------------------

    def _declaration_signature(self, module_key: str, declaration, name: str,
                               visited: _Visited) -> Optional[CallSignatureInfo]:
        if isinstance(declaration, FunctionDeclaration) and declaration.name == name:
            return function_signature(declaration)
        if isinstance(declaration, VariableStatement):
            for declarator in declaration.declarations:
                if declarator.simple_name == name:
                    return self._declarator_signature(module_key, declarator, visited)
        return None

    def _resolve_local(self, module_key: str, name: str,
                       visited: _Visited) -> Optional[CallSignatureInfo]:
        marker = ("local", module_key, name)
        if marker in visited:
            return None
        visited.add(marker)
        module: Module = self.graph.get(module_key)

        for stmt in module.body:
            declaration = stmt.declaration if isinstance(stmt, ExportDeclaration) else stmt
            signature = self._declaration_signature(module_key, declaration, name, visited)
            if signature is not None:
                return signature
            if isinstance(stmt, ImportDeclaration):
                target = self.graph.resolve(module_key, stmt.module_path)
                if stmt.default == name:
                    return self._resolve_export(target, DEFAULT_EXPORT, visited)
                for spec in stmt.specifiers:
                    if spec.local == name:
                        return self._resolve_export(target, spec.export_name, visited)
        return None

    def _declarator_signature(self, module_key: str, declarator: VariableDeclarator,
                              visited: _Visited) -> Optional[CallSignatureInfo]:
        annotation = declarator.type_annotation
        if isinstance(annotation, FunctionType):
            return CallSignatureInfo(returns_deferred=is_deferred_type(annotation.return_type),
                                     return_type=type_name(annotation.return_type))
        if declarator.init is None:
            return None
        return self._expression_signature(module_key, declarator.init, visited)

    def _expression_signature(self, module_key: str, expression: Expression,
                              visited: _Visited) -> Optional[CallSignatureInfo]:
        if isinstance(expression, (FunctionExpression, ArrowFunction)):
            return function_signature(expression)
        if isinstance(expression, Identifier):
            return self._resolve_local(module_key, expression.name, visited)
        return None


SignatureEntry = Union[bool, CallSignatureInfo]


class MappingTypeResolver:
    """
    Table-driven resolver.

    Keys are either `(module_path, export_name)` pairs or bare local names;
    the pair is consulted first. Values are CallSignatureInfo or a plain bool
    for returns_deferred.
    """

    def __init__(self, signatures: Dict[Union[str, Tuple[str, str]], SignatureEntry]):
        self.signatures = dict(signatures)

    def resolve_call_signature(self, site: ImportBindingSite) -> Optional[CallSignatureInfo]:
        entry = self.signatures.get((site.module_path, site.export_name))
        if entry is None:
            entry = self.signatures.get(site.local_name)
        if entry is None:
            return None
        if isinstance(entry, bool):
            return CallSignatureInfo(returns_deferred=entry)
        return entry
