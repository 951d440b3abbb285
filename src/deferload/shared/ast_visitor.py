"""
AST Visitor Pattern

TypeScript Pattern: ts.forEachChild / ts.visitEachChild

This module provides:
1. ASTVisitor - read-only traversal with default recursion into children
2. ASTTransformer - rebuilding traversal; returns a new tree and shares
   every subtree it did not change

Dispatch goes through node.accept(), which calls visit_<node kind> when the
visitor defines it and generic_visit otherwise.
"""

from abc import ABC
from dataclasses import replace
from typing import Any, Generic, List, Optional, TypeVar

from .nodes import ASTNode, iter_child_fields

T = TypeVar('T')
N = TypeVar('N', bound=ASTNode)


class ASTVisitor(ABC, Generic[T]):
    """
    Base AST visitor with default traversal for all nodes.

    Usage:
        class NameCollector(ASTVisitor[None]):
            def __init__(self):
                self.names = set()

            def visit_identifier(self, node):
                self.names.add(node.name)
    """

    def visit(self, node: ASTNode) -> T:
        return node.accept(self)

    def generic_visit(self, node: ASTNode) -> Optional[T]:
        for _, value in iter_child_fields(node):
            if isinstance(value, ASTNode):
                value.accept(self)
            elif isinstance(value, list):
                for item in value:
                    if isinstance(item, ASTNode):
                        item.accept(self)
        return None


class ASTTransformer(ASTVisitor[ASTNode]):
    """
    Visitor that returns a (possibly new) node for every node it visits.

    Nodes are never mutated: when a child changes, the parent is rebuilt with
    dataclasses.replace(); otherwise the original object is returned, so an
    untouched subtree stays identical (`is`) to the input.
    """

    def transform(self, node: N) -> N:
        return node.accept(self)

    def transform_list(self, items: List[Any]) -> List[Any]:
        return [self.transform(item) if isinstance(item, ASTNode) else item for item in items]

    def generic_visit(self, node: ASTNode) -> ASTNode:
        changes = {}
        for name, value in iter_child_fields(node):
            if isinstance(value, ASTNode):
                new_value = self.transform(value)
            elif isinstance(value, list):
                new_value = self.transform_list(value)
                if all(a is b for a, b in zip(new_value, value)):
                    continue
            else:
                continue
            if new_value is not value:
                changes[name] = new_value
        return replace(node, **changes) if changes else node


class NameCollector(ASTVisitor[None]):
    """Collects every Identifier name referenced under a node."""

    def __init__(self):
        self.names = set()

    def visit_identifier(self, node) -> None:
        self.names.add(node.name)


def referenced_names(*nodes: ASTNode) -> set:
    collector = NameCollector()
    for node in nodes:
        collector.visit(node)
    return collector.names
