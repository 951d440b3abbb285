"""
Function Parser - shared assembly for function declarations, function
expressions and arrow functions.

Lark hands these rules a variable-length child list (optional `async`,
optional name, optional parameter list, optional return type); the parts are
told apart by their types, not their positions.
"""

from typing import Any, Callable, List, Optional, Tuple, Union

from lark.lexer import Token

from ...shared import (
    ArrowFunction, BindingIdentifier, Block, Expression, FunctionDeclaration,
    FunctionExpression, Parameter, SourceLocation, TypeNode,
)

FunctionParts = Tuple[bool, Optional[str], List[Parameter], Optional[TypeNode]]


class FunctionDefinitionParser:
    """Builds function-like nodes from a rule's children."""

    def __init__(self, location_extractor: Callable[[Any], SourceLocation]) -> None:
        self.extract_location = location_extractor

    def parse_function_declaration(self, meta: Any, *children: Any) -> FunctionDeclaration:
        is_async, name, params, return_type = self._parse_parts(children[:-1])
        return FunctionDeclaration(
            name=name,
            params=params,
            body=children[-1],
            is_async=is_async,
            return_type=return_type,
            location=self.extract_location(meta),
        )

    def parse_function_expression(self, meta: Any, *children: Any) -> FunctionExpression:
        is_async, name, params, return_type = self._parse_parts(children[:-1])
        return FunctionExpression(
            name=name,
            params=params,
            body=children[-1],
            is_async=is_async,
            return_type=return_type,
            location=self.extract_location(meta),
        )

    def parse_arrow_function(self, meta: Any, *children: Any) -> ArrowFunction:
        """
        `[async] x => body` or `[async] (params)[: R] => body`.

        The body is always the last child; a single bare parameter arrives as
        a NAME token, a parenthesized list is marked by the ARROW_LPAR token.
        """
        body: Union[Block, Expression] = children[-1]
        head = children[:-1]
        parenthesized = any(isinstance(c, Token) and c.type == "ARROW_LPAR" for c in head)
        is_async, name, params, return_type = self._parse_parts(head)
        if not parenthesized and name is not None:
            location = self.extract_location(meta)
            params = [Parameter(target=BindingIdentifier(name, location=location), location=location)]
        return ArrowFunction(
            params=params,
            body=body,
            is_async=is_async,
            return_type=return_type,
            location=self.extract_location(meta),
        )

    @staticmethod
    def _parse_parts(children: Tuple[Any, ...]) -> FunctionParts:
        is_async = False
        name: Optional[str] = None
        params: List[Parameter] = []
        return_type: Optional[TypeNode] = None
        for item in children:
            if isinstance(item, Token):
                if item.type == "ASYNC":
                    is_async = True
                elif item.type == "NAME":
                    name = str(item)
            elif isinstance(item, list):
                params = item
            elif isinstance(item, TypeNode):
                return_type = item
        return is_async, name, params, return_type
