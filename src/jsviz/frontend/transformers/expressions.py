"""
Expression Parser - Extracted from JsTransformer
Handles parsing of operator expressions
"""

from typing import Any, Callable, Optional

from typing_extensions import TypeAlias
from lark.lexer import Token

from ...shared import (
    AssignmentExpression, AssignmentOp, BinaryExpression, BinaryOp, Expression,
    LogicalExpression, LogicalOp, SequenceExpression, SourceLocation, UnaryExpression,
    UnaryOp, UpdateExpression, UpdateOp,
)

# Type aliases for better clarity
LarkMeta: TypeAlias = Any  # Lark's internal Meta object
LocationExtractor: TypeAlias = Callable[[LarkMeta], Optional[SourceLocation]]


class OperatorExpressionParser:
    """Dedicated parser for operator expressions. Tokens become operator enums here."""

    def __init__(self, location_extractor: LocationExtractor) -> None:
        self.extract_location = location_extractor

    def parse_binary(self, meta: LarkMeta, left: Expression, operator: Token, right: Expression) -> BinaryExpression:
        """Parse arithmetic, equality and relational expressions"""
        return BinaryExpression(
            operator=BinaryOp(str(operator)),
            left=left,
            right=right,
            location=self.extract_location(meta),
        )

    def parse_logical(self, meta: LarkMeta, left: Expression, operator: Token, right: Expression) -> LogicalExpression:
        """Parse &&, || and ??"""
        return LogicalExpression(
            operator=LogicalOp(str(operator)),
            left=left,
            right=right,
            location=self.extract_location(meta),
        )

    def parse_unary(self, meta: LarkMeta, operator: Token, argument: Expression) -> UnaryExpression:
        return UnaryExpression(
            operator=UnaryOp(str(operator)),
            argument=argument,
            location=self.extract_location(meta),
        )

    def parse_update(self, meta: LarkMeta, operator: Token, argument: Expression, prefix: bool) -> UpdateExpression:
        return UpdateExpression(
            operator=UpdateOp(str(operator)),
            argument=argument,
            prefix=prefix,
            location=self.extract_location(meta),
        )

    def parse_assignment(self, meta: LarkMeta, target: Expression, operator: Token, value: Expression) -> AssignmentExpression:
        return AssignmentExpression(
            operator=AssignmentOp(str(operator)),
            target=target,
            value=value,
            location=self.extract_location(meta),
        )

    def parse_sequence(self, meta: LarkMeta, left: Expression, right: Expression) -> SequenceExpression:
        """The grammar is left recursive, so a left sequence is extended in place"""
        if isinstance(left, SequenceExpression):
            return SequenceExpression(
                expressions=left.expressions + [right],
                location=self.extract_location(meta),
            )
        return SequenceExpression(expressions=[left, right], location=self.extract_location(meta))
