"""
Function Definition Parser - Extracted from JsTransformer
Handles function declarations, function expressions and arrow functions
"""

from typing import Any, Callable, List, Optional, Tuple, Union

from typing_extensions import TypeAlias
from lark.lexer import Token

from ...shared import (
    ArrowFunctionExpression, BlockStatement, Expression, FunctionDeclaration,
    FunctionExpression, Identifier, ParseFailure, SequenceExpression, SourceLocation,
)

# Type aliases for better clarity
LarkMeta: TypeAlias = Any  # Lark's internal Meta object
LocationExtractor: TypeAlias = Callable[[LarkMeta], Optional[SourceLocation]]
FunctionPart: TypeAlias = Union[Token, List[str], BlockStatement]


class FunctionDefinitionParser:
    """Dedicated parser for the three function forms"""

    def __init__(self, location_extractor: LocationExtractor) -> None:
        self.extract_location = location_extractor

    def parse_declaration(self, meta: LarkMeta, name: Token, *parts: FunctionPart) -> FunctionDeclaration:
        """Grammar: "function" NAME "(" params? ")" block"""
        params, body = self._split_parts(parts)
        return FunctionDeclaration(
            name=str(name),
            params=params,
            body=body.body,
            location=self.extract_location(meta),
        )

    def parse_expression(self, meta: LarkMeta, *parts: FunctionPart) -> FunctionExpression:
        """Grammar: "function" NAME? "(" params? ")" block"""
        name: Optional[str] = None
        if parts and isinstance(parts[0], Token):
            name = str(parts[0])
            parts = parts[1:]
        params, body = self._split_parts(parts)
        return FunctionExpression(
            name=name,
            params=params,
            body=body.body,
            location=self.extract_location(meta),
        )

    def parse_arrow(self, meta: LarkMeta, params: List[str], arrow: Token,
                    body: Union[BlockStatement, Expression]) -> ArrowFunctionExpression:
        """Grammar: arrow_params "=>" (block | assign_expr)"""
        arrow_body: Union[List, Expression] = body.body if isinstance(body, BlockStatement) else body
        return ArrowFunctionExpression(
            params=params,
            body=arrow_body,
            location=self.extract_location(meta),
        )

    def _split_parts(self, parts: Tuple[FunctionPart, ...]) -> Tuple[List[str], BlockStatement]:
        """Remaining children are: params? block"""
        params: List[str] = []
        body: Optional[BlockStatement] = None
        for item in parts:
            if isinstance(item, list):
                params = item
            elif isinstance(item, BlockStatement):
                body = item
        if body is None:
            body = BlockStatement([])
        return params, body


class ParameterParser:
    """Dedicated parser for parameter lists"""

    def __init__(self, location_extractor: LocationExtractor) -> None:
        self.extract_location = location_extractor

    def parse_params(self, names: Tuple[Token, ...]) -> List[str]:
        return [str(name) for name in names]

    def parse_arrow_params(self, meta: LarkMeta, inner: Optional[Union[Token, Expression]]) -> List[str]:
        """
        Arrow parameters are parsed as a parenthesized expression first,
        then narrowed back to a name list: `x`, `(x)`, `(a, b)`, `()`.
        """
        if inner is None:
            return []
        if isinstance(inner, Token):
            return [str(inner)]
        if isinstance(inner, Identifier):
            return [inner.name]
        if isinstance(inner, SequenceExpression) and all(isinstance(e, Identifier) for e in inner.expressions):
            params = [e.name for e in inner.expressions]
            if len(set(params)) != len(params):
                raise ParseFailure("Duplicate parameter name not allowed in this context",
                                   self.extract_location(meta))
            return params
        raise ParseFailure("Invalid arrow function parameter list", self.extract_location(meta))
