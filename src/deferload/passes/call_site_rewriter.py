"""
Call-Site Rewriter

Replaces calls of candidate bindings with deferred loads:

    x(a, b)   ->   import("./file1").then(m => m.x(a, b))

and records, per candidate, whether the name is still referenced anywhere
else. Recording goes through an explicit ScopeStack: a name redeclared by a
function parameter or a local declaration is neither rewritten nor recorded
inside that frame, and the frame's own shadows are subtracted from its
accumulator before it is merged into the parent.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Set

from ..shared.ast_visitor import ASTTransformer, referenced_names
from ..shared.nodes import (
    ArrowFunction, ASTNode, BindingIdentifier, Block, Call, DynamicImport, Expression,
    ExportNamedDeclaration, FunctionDeclaration, FunctionExpression, FunctionLike, Identifier,
    ImportDeclaration, Index, Member, Module, Parameter, Statement, StringLiteral,
    VariableStatement,
)
from ..shared.scope import ScopeKind, ScopeStack
from ..shared.types import CandidateBinding
from ..utils.config import CONTINUATION_METHOD, MODULE_PARAMETER_NAME
from .base import BasePass, ModuleCtxt
from .import_classifier import ImportClassificationPass

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r'^[A-Za-z_$][A-Za-z0-9_$]*$')


@dataclass
class RewriteResult:
    """Rewritten module plus the still-needed flag of every candidate."""
    module: Module
    still_needed: Dict[str, bool] = field(default_factory=dict)
    rewritten_calls: int = 0

    def all_still_needed(self) -> bool:
        return all(self.still_needed.values())


def _same(new: List, old: List) -> bool:
    return len(new) == len(old) and all(a is b for a, b in zip(new, old))


def declared_names(statements: Iterable[Statement]) -> Set[str]:
    """
    Names bound directly in statements: simple const/let/var declarators and
    function declarations.
    """
    names: Set[str] = set()
    for stmt in statements:
        if isinstance(stmt, VariableStatement):
            names.update(d.simple_name for d in stmt.declarations if d.simple_name)
        elif isinstance(stmt, FunctionDeclaration) and stmt.name:
            names.add(stmt.name)
    return names


def module_parameter_name(arguments: List[ASTNode]) -> str:
    """`m`, or the first of m1, m2, ... the arguments do not reference."""
    taken = referenced_names(*arguments)
    if MODULE_PARAMETER_NAME not in taken:
        return MODULE_PARAMETER_NAME
    suffix = 1
    while f"{MODULE_PARAMETER_NAME}{suffix}" in taken:
        suffix += 1
    return f"{MODULE_PARAMETER_NAME}{suffix}"


def build_deferred_load(candidate: CandidateBinding, arguments: List[Expression], location=None) -> Call:
    """`import(path).then(m => m[export](...arguments))`"""
    param = module_parameter_name(arguments)
    module_ref = Identifier(param, location=location)
    if _IDENTIFIER.match(candidate.export_name):
        accessor: Expression = Member(module_ref, candidate.export_name, location=location)
    else:
        accessor = Index(module_ref, StringLiteral(candidate.export_name), location=location)
    continuation = ArrowFunction(
        params=[Parameter(BindingIdentifier(param, location=location), location=location)],
        body=Call(accessor, list(arguments), location=location),
        location=location,
    )
    load = DynamicImport(StringLiteral(candidate.module_path), location=location)
    return Call(Member(load, CONTINUATION_METHOD, location=location), [continuation], location=location)


class CallSiteRewriter(ASTTransformer):
    """
    One-shot transformer over a single module.

    The module frame sits at the bottom of the stack; after the walk its
    accumulator holds exactly the still-needed candidate names.
    """

    def __init__(self, candidates: Iterable[CandidateBinding]):
        self.candidates: Dict[str, CandidateBinding] = {c.local_name: c for c in candidates}
        self.scopes = ScopeStack()
        self.rewritten_calls = 0

    def rewrite(self, module: Module) -> RewriteResult:
        new_module = self.transform(module)
        needed = self.scopes.root.still_needed
        return RewriteResult(
            module=new_module,
            still_needed={name: name in needed for name in self.candidates},
            rewritten_calls=self.rewritten_calls,
        )

    def _is_live_candidate(self, name: str) -> bool:
        return name in self.candidates and not self.scopes.is_shadowed(name)

    # =========================================================================
    # REFERENCES
    # =========================================================================

    def visit_identifier(self, node: Identifier) -> Identifier:
        if self._is_live_candidate(node.name):
            self.scopes.record(node.name)
        return node

    def visit_binding_identifier(self, node: BindingIdentifier) -> BindingIdentifier:
        return node

    def visit_import_declaration(self, node: ImportDeclaration) -> ImportDeclaration:
        return node

    def visit_export_named_declaration(self, node: ExportNamedDeclaration) -> ExportNamedDeclaration:
        # `export { x }` reads the local binding; `export { x } from` does not
        if node.source is None:
            for spec in node.specifiers:
                if self._is_live_candidate(spec.local):
                    self.scopes.record(spec.local)
        return node

    def visit_call(self, node: Call) -> Expression:
        callee = node.callee
        if isinstance(callee, Identifier) and self._is_live_candidate(callee.name):
            candidate = self.candidates[callee.name]
            arguments = self.transform_list(node.arguments)
            self.rewritten_calls += 1
            logger.debug(f"Rewriting call of {callee.name} at {node.location} "
                         f"to a deferred load of {candidate.module_path}")
            return build_deferred_load(candidate, arguments, node.location)
        return self.generic_visit(node)

    # =========================================================================
    # FRAMES
    # =========================================================================

    def _parameter_shadows(self, node: FunctionLike) -> Set[str]:
        names = {p.simple_name for p in node.params if p.simple_name}
        # a function expression's own name is bound inside it
        if isinstance(node, FunctionExpression) and node.name:
            names.add(node.name)
        return names & self.candidates.keys()

    def _visit_function(self, node: FunctionLike) -> FunctionLike:
        # parameter defaults cannot see the body's declarations, so the body
        # gets a frame of its own nested in the parameter frame
        with self.scopes.frame(ScopeKind.FUNCTION, self._parameter_shadows(node)):
            params = self.transform_list(node.params)
            if isinstance(node.body, Block):
                shadows = declared_names(node.body.body) & self.candidates.keys()
                with self.scopes.frame(ScopeKind.BLOCK, shadows):
                    statements = self.transform_list(node.body.body)
                body = node.body if _same(statements, node.body.body) else replace(node.body, body=statements)
            else:
                body = self.transform(node.body)

        changes = {}
        if not _same(params, node.params):
            changes['params'] = params
        if body is not node.body:
            changes['body'] = body
        return replace(node, **changes) if changes else node

    visit_function_declaration = _visit_function
    visit_function_expression = _visit_function
    visit_arrow_function = _visit_function

    def visit_block(self, node: Block) -> Block:
        shadows = declared_names(node.body) & self.candidates.keys()
        with self.scopes.frame(ScopeKind.BLOCK, shadows):
            statements = self.transform_list(node.body)
        return node if _same(statements, node.body) else replace(node, body=statements)


def rewrite_call_sites(module: Module, candidates: Iterable[CandidateBinding]) -> RewriteResult:
    """Rewrite every rewritable call of a candidate and compute the still-needed map."""
    candidates = list(candidates)
    if not candidates:
        return RewriteResult(module=module)
    return CallSiteRewriter(candidates).rewrite(module)


class CallSiteRewritePass(BasePass):
    """Stores the RewriteResult in the context and returns the rewritten module."""
    requires = [ImportClassificationPass]

    def run(self, module: Module, ctx: ModuleCtxt) -> Module:
        candidates = ctx.get_analysis(ImportClassificationPass)
        result = rewrite_call_sites(module, candidates)
        ctx.set_analysis(CallSiteRewritePass, result)
        return result.module
