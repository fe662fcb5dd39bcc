"""
JavaScript AST (Abstract Syntax Tree) Definitions

A closed set of node variants for the supported JavaScript subset. Every
node carries its SourceLocation and an accept() method that dispatches to
the matching visit_* method of an ExpressionVisitor or StatementVisitor.
Because those visitors are abstract over every variant, an evaluator that
forgets a node kind cannot even be instantiated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, List, Optional, Union, TYPE_CHECKING, TypeVar

from .source_location import SourceLocation
from .types import AssignmentOp, BinaryOp, LogicalOp, UnaryOp, UpdateOp, VariableKind

if TYPE_CHECKING:
    from .ast_visitor import ExpressionVisitor, StatementVisitor

T = TypeVar('T')


class NodeType(Enum):
    """AST node types"""
    PROGRAM = "Program"
    # Expressions
    LITERAL = "Literal"
    IDENTIFIER = "Identifier"
    BINARY = "BinaryExpression"
    LOGICAL = "LogicalExpression"
    UNARY = "UnaryExpression"
    UPDATE = "UpdateExpression"
    ASSIGNMENT = "AssignmentExpression"
    CONDITIONAL = "ConditionalExpression"
    SEQUENCE = "SequenceExpression"
    CALL = "CallExpression"
    MEMBER = "MemberExpression"
    ARRAY = "ArrayExpression"
    OBJECT = "ObjectExpression"
    SPREAD = "SpreadElement"
    FUNCTION_EXPR = "FunctionExpression"
    ARROW_FUNCTION = "ArrowFunctionExpression"
    THIS = "ThisExpression"
    NEW = "NewExpression"
    UNSUPPORTED_EXPR = "UnsupportedExpression"
    # Statements
    VARIABLE_DECL = "VariableDeclaration"
    FUNCTION_DECL = "FunctionDeclaration"
    EXPR_STMT = "ExpressionStatement"
    IF = "IfStatement"
    WHILE = "WhileStatement"
    DO_WHILE = "DoWhileStatement"
    FOR = "ForStatement"
    BLOCK = "BlockStatement"
    RETURN = "ReturnStatement"
    BREAK = "BreakStatement"
    CONTINUE = "ContinueStatement"
    EMPTY = "EmptyStatement"
    UNSUPPORTED_STMT = "UnsupportedStatement"


class ASTNode:
    """
    Base class for all AST nodes.

    Subclasses are dataclasses whose last field is `location`.
    """
    node_type: ClassVar[NodeType]
    location: Optional[SourceLocation]


class Expression(ASTNode):
    """Base class for expressions"""

    def accept(self, visitor: 'ExpressionVisitor[T]') -> T:
        raise NotImplementedError(f"accept() not implemented for {self.__class__.__name__}")


class Statement(ASTNode):
    """Base class for statements"""

    def accept(self, visitor: 'StatementVisitor[T]') -> T:
        raise NotImplementedError(f"accept() not implemented for {self.__class__.__name__}")


# ============================================
# EXPRESSIONS
# ============================================

@dataclass
class Literal(Expression):
    """Number, string, boolean or null literal"""
    value: Union[int, float, str, bool, None]
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.LITERAL

    def accept(self, visitor):
        return visitor.visit_literal(self)


@dataclass
class Identifier(Expression):
    name: str
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.IDENTIFIER

    def accept(self, visitor):
        return visitor.visit_identifier(self)


@dataclass
class BinaryExpression(Expression):
    operator: BinaryOp
    left: Expression
    right: Expression
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.BINARY

    def accept(self, visitor):
        return visitor.visit_binary_expression(self)


@dataclass
class LogicalExpression(Expression):
    operator: LogicalOp
    left: Expression
    right: Expression
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.LOGICAL

    def accept(self, visitor):
        return visitor.visit_logical_expression(self)


@dataclass
class UnaryExpression(Expression):
    operator: UnaryOp
    argument: Expression
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.UNARY

    def accept(self, visitor):
        return visitor.visit_unary_expression(self)


@dataclass
class UpdateExpression(Expression):
    """`++x`, `x--` ..."""
    operator: UpdateOp
    argument: Expression
    prefix: bool
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.UPDATE

    def accept(self, visitor):
        return visitor.visit_update_expression(self)


@dataclass
class AssignmentExpression(Expression):
    operator: AssignmentOp
    target: Expression
    value: Expression
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.ASSIGNMENT

    def accept(self, visitor):
        return visitor.visit_assignment_expression(self)


@dataclass
class ConditionalExpression(Expression):
    test: Expression
    consequent: Expression
    alternate: Expression
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.CONDITIONAL

    def accept(self, visitor):
        return visitor.visit_conditional_expression(self)


@dataclass
class SequenceExpression(Expression):
    expressions: List[Expression]
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.SEQUENCE

    def accept(self, visitor):
        return visitor.visit_sequence_expression(self)


@dataclass
class CallExpression(Expression):
    callee: Expression
    arguments: List[Expression] = field(default_factory=list)
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.CALL

    def accept(self, visitor):
        return visitor.visit_call_expression(self)


@dataclass
class MemberExpression(Expression):
    """
    `object.property` (computed=False, property is the name) or
    `object[property]` (computed=True, property is an expression).
    """
    object: Expression
    property: Union[str, Expression]
    computed: bool = False
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.MEMBER

    def accept(self, visitor):
        return visitor.visit_member_expression(self)


@dataclass
class SpreadElement(Expression):
    """`...argument` inside an array literal or an argument list"""
    argument: Expression
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.SPREAD

    def accept(self, visitor):
        return visitor.visit_spread_element(self)


@dataclass
class ArrayExpression(Expression):
    elements: List[Expression] = field(default_factory=list)
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.ARRAY

    def accept(self, visitor):
        return visitor.visit_array_expression(self)


@dataclass
class Property:
    """Object literal entry. `key` is None for computed keys."""
    key: Optional[str]
    value: Expression
    computed: bool = False
    shorthand: bool = False
    location: Optional[SourceLocation] = None


@dataclass
class ObjectExpression(Expression):
    properties: List[Property] = field(default_factory=list)
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.OBJECT

    def accept(self, visitor):
        return visitor.visit_object_expression(self)


@dataclass
class FunctionExpression(Expression):
    name: Optional[str]
    params: List[str]
    body: List[Statement]
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.FUNCTION_EXPR

    def accept(self, visitor):
        return visitor.visit_function_expression(self)


@dataclass
class ArrowFunctionExpression(Expression):
    """Arrow function; `body` is a statement list or a single expression."""
    params: List[str]
    body: Union[List[Statement], Expression]
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.ARROW_FUNCTION

    @property
    def expression_body(self) -> bool:
        return isinstance(self.body, Expression)

    def accept(self, visitor):
        return visitor.visit_arrow_function_expression(self)


@dataclass
class ThisExpression(Expression):
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.THIS

    def accept(self, visitor):
        return visitor.visit_this_expression(self)


@dataclass
class NewExpression(Expression):
    callee: Expression
    arguments: List[Expression] = field(default_factory=list)
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.NEW

    def accept(self, visitor):
        return visitor.visit_new_expression(self)


@dataclass
class UnsupportedExpression(Expression):
    """Parsed but not modelled (e.g. a template literal); evaluates to undefined."""
    feature: str
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.UNSUPPORTED_EXPR

    def accept(self, visitor):
        return visitor.visit_unsupported_expression(self)


# ============================================
# STATEMENTS
# ============================================

@dataclass
class VariableDeclarator:
    """One `name = init` pair of a declaration"""
    name: str
    init: Optional[Expression] = None
    location: Optional[SourceLocation] = None


@dataclass
class VariableDeclaration(Statement):
    kind: VariableKind
    declarations: List[VariableDeclarator]
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.VARIABLE_DECL

    def accept(self, visitor):
        return visitor.visit_variable_declaration(self)


@dataclass
class FunctionDeclaration(Statement):
    name: str
    params: List[str]
    body: List[Statement]
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.FUNCTION_DECL

    def accept(self, visitor):
        return visitor.visit_function_declaration(self)


@dataclass
class ExpressionStatement(Statement):
    """
    Expression used as a statement (evaluates expression, discards result).

    Examples:
        counter();
        x = x + 1;
    """
    expression: Expression
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.EXPR_STMT

    def accept(self, visitor):
        return visitor.visit_expression_statement(self)


@dataclass
class IfStatement(Statement):
    test: Expression
    consequent: Statement
    alternate: Optional[Statement] = None
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.IF

    def accept(self, visitor):
        return visitor.visit_if_statement(self)


@dataclass
class WhileStatement(Statement):
    test: Expression
    body: Statement
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.WHILE

    def accept(self, visitor):
        return visitor.visit_while_statement(self)


@dataclass
class DoWhileStatement(Statement):
    body: Statement
    test: Expression
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.DO_WHILE

    def accept(self, visitor):
        return visitor.visit_do_while_statement(self)


@dataclass
class ForStatement(Statement):
    init: Optional[Union[VariableDeclaration, Expression]]
    test: Optional[Expression]
    update: Optional[Expression]
    body: Statement
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.FOR

    def accept(self, visitor):
        return visitor.visit_for_statement(self)


@dataclass
class BlockStatement(Statement):
    body: List[Statement] = field(default_factory=list)
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.BLOCK

    def accept(self, visitor):
        return visitor.visit_block_statement(self)


@dataclass
class ReturnStatement(Statement):
    argument: Optional[Expression] = None
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.RETURN

    def accept(self, visitor):
        return visitor.visit_return_statement(self)


@dataclass
class BreakStatement(Statement):
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.BREAK

    def accept(self, visitor):
        return visitor.visit_break_statement(self)


@dataclass
class ContinueStatement(Statement):
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.CONTINUE

    def accept(self, visitor):
        return visitor.visit_continue_statement(self)


@dataclass
class EmptyStatement(Statement):
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.EMPTY

    def accept(self, visitor):
        return visitor.visit_empty_statement(self)


@dataclass
class UnsupportedStatement(Statement):
    """Parsed but not modelled (try, switch, class, for-in/of ...); skipped when run."""
    feature: str
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.UNSUPPORTED_STMT

    def accept(self, visitor):
        return visitor.visit_unsupported_statement(self)


@dataclass
class Program(ASTNode):
    """Program root node"""
    body: List[Statement] = field(default_factory=list)
    location: Optional[SourceLocation] = None
    node_type: ClassVar[NodeType] = NodeType.PROGRAM
