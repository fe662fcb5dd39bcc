"""
AST Visitors

Abstract visitors over the closed set of node variants in shared/nodes.py.

Design:
- One abstract visit_* method per node kind, no default traversal
- A subclass that misses a node kind cannot be instantiated (TypeError
  from ABC), so the evaluator is checked for exhaustiveness on construction
- Expression and statement visitors are split so each can return its own type

Usage:
    class Printer(ExpressionVisitor[str]):
        def visit_literal(self, node) -> str:
            return repr(node.value)
        ...
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar, TYPE_CHECKING

if TYPE_CHECKING:
    from .nodes import (
        Literal, Identifier, BinaryExpression, LogicalExpression, UnaryExpression,
        UpdateExpression, AssignmentExpression, ConditionalExpression, SequenceExpression,
        CallExpression, MemberExpression, ArrayExpression, ObjectExpression, SpreadElement,
        FunctionExpression, ArrowFunctionExpression, ThisExpression, NewExpression,
        UnsupportedExpression, UnsupportedStatement,
        VariableDeclaration, FunctionDeclaration, ExpressionStatement, IfStatement,
        WhileStatement, DoWhileStatement, ForStatement, BlockStatement, ReturnStatement,
        BreakStatement, ContinueStatement, EmptyStatement,
    )

T = TypeVar('T')


class ExpressionVisitor(ABC, Generic[T]):
    """Visitor over every expression variant."""

    @abstractmethod
    def visit_literal(self, node: 'Literal') -> T: ...

    @abstractmethod
    def visit_identifier(self, node: 'Identifier') -> T: ...

    @abstractmethod
    def visit_binary_expression(self, node: 'BinaryExpression') -> T: ...

    @abstractmethod
    def visit_logical_expression(self, node: 'LogicalExpression') -> T: ...

    @abstractmethod
    def visit_unary_expression(self, node: 'UnaryExpression') -> T: ...

    @abstractmethod
    def visit_update_expression(self, node: 'UpdateExpression') -> T: ...

    @abstractmethod
    def visit_assignment_expression(self, node: 'AssignmentExpression') -> T: ...

    @abstractmethod
    def visit_conditional_expression(self, node: 'ConditionalExpression') -> T: ...

    @abstractmethod
    def visit_sequence_expression(self, node: 'SequenceExpression') -> T: ...

    @abstractmethod
    def visit_call_expression(self, node: 'CallExpression') -> T: ...

    @abstractmethod
    def visit_member_expression(self, node: 'MemberExpression') -> T: ...

    @abstractmethod
    def visit_array_expression(self, node: 'ArrayExpression') -> T: ...

    @abstractmethod
    def visit_object_expression(self, node: 'ObjectExpression') -> T: ...

    @abstractmethod
    def visit_spread_element(self, node: 'SpreadElement') -> T: ...

    @abstractmethod
    def visit_function_expression(self, node: 'FunctionExpression') -> T: ...

    @abstractmethod
    def visit_arrow_function_expression(self, node: 'ArrowFunctionExpression') -> T: ...

    @abstractmethod
    def visit_this_expression(self, node: 'ThisExpression') -> T: ...

    @abstractmethod
    def visit_new_expression(self, node: 'NewExpression') -> T: ...

    @abstractmethod
    def visit_unsupported_expression(self, node: 'UnsupportedExpression') -> T: ...


class StatementVisitor(ABC, Generic[T]):
    """Visitor over every statement variant."""

    @abstractmethod
    def visit_variable_declaration(self, node: 'VariableDeclaration') -> T: ...

    @abstractmethod
    def visit_function_declaration(self, node: 'FunctionDeclaration') -> T: ...

    @abstractmethod
    def visit_expression_statement(self, node: 'ExpressionStatement') -> T: ...

    @abstractmethod
    def visit_if_statement(self, node: 'IfStatement') -> T: ...

    @abstractmethod
    def visit_while_statement(self, node: 'WhileStatement') -> T: ...

    @abstractmethod
    def visit_do_while_statement(self, node: 'DoWhileStatement') -> T: ...

    @abstractmethod
    def visit_for_statement(self, node: 'ForStatement') -> T: ...

    @abstractmethod
    def visit_block_statement(self, node: 'BlockStatement') -> T: ...

    @abstractmethod
    def visit_return_statement(self, node: 'ReturnStatement') -> T: ...

    @abstractmethod
    def visit_break_statement(self, node: 'BreakStatement') -> T: ...

    @abstractmethod
    def visit_continue_statement(self, node: 'ContinueStatement') -> T: ...

    @abstractmethod
    def visit_empty_statement(self, node: 'EmptyStatement') -> T: ...

    @abstractmethod
    def visit_unsupported_statement(self, node: 'UnsupportedStatement') -> T: ...
