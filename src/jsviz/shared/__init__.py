"""
Shared components: locations, errors, values, AST nodes and the scope chain.
"""

from .source_location import SourceLocation
from .errors import (
    Diagnostic, ErrorReporter, JsVizError, ParseFailure, JSReferenceError,
    UninitializedAccess, ConstReassignment, DuplicateDeclaration,
    InterpreterImplementationError,
)
from .types import (
    VariableKind, ScopeKind, BinaryOp, LogicalOp, UnaryOp, AssignmentOp, UpdateOp,
)
from .values import UNDEFINED, Undefined, ObjectReference, RuntimeValue
from .nodes import (
    ASTNode, Expression, Statement, Program, NodeType,
    Literal, Identifier, BinaryExpression, LogicalExpression, UnaryExpression,
    UpdateExpression, AssignmentExpression, ConditionalExpression, SequenceExpression,
    CallExpression, MemberExpression, ArrayExpression, ObjectExpression, Property,
    SpreadElement, FunctionExpression, ArrowFunctionExpression, ThisExpression,
    NewExpression, VariableDeclaration, VariableDeclarator, FunctionDeclaration,
    ExpressionStatement, IfStatement, WhileStatement, DoWhileStatement, ForStatement,
    BlockStatement, ReturnStatement, BreakStatement, ContinueStatement, EmptyStatement,
    UnsupportedExpression, UnsupportedStatement,
)
from .ast_visitor import ExpressionVisitor, StatementVisitor
from .scope import Scope, Variable, VariableSnapshot, ScopeData, ScopeSnapshot
