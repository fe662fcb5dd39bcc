"""
Evaluator

Tree-walking evaluator over the JavaScript AST. Statements return an
Optional[ExecutionFlow] (None means "fall through"); expressions return a
RuntimeValue. Every state-mutating operation asks the StepRecorder for a
timeline step.

Hoisting per program or function body:
1. let/const names enter their temporal dead zone
2. function declarations are bound, so they can be called before their line
3. statements run in order; hoisted declarations are skipped
"""

import logging
from typing import List, Optional

from ..shared.ast_visitor import StatementVisitor
from ..shared.nodes import (
    ASTNode, BlockStatement, BreakStatement, ContinueStatement, DoWhileStatement,
    EmptyStatement, Expression, ExpressionStatement, ForStatement, FunctionDeclaration,
    IfStatement, Program, ReturnStatement, Statement, UnsupportedStatement, VariableDeclaration,
    WhileStatement,
)
from ..shared.scope import Scope
from ..shared.types import ScopeKind, VariableKind
from ..shared.values import UNDEFINED, ObjectReference, RuntimeValue, format_value, to_boolean
from ..utils.base import ExecutionFlow
from ..utils.config import BLOCK_SCOPE_NAME, FOR_SCOPE_NAME, MAX_LOOP_ITERATIONS
from .dom import DomOperation
from .expressions import ExpressionEvaluatorMixin
from .memory import HeapObject
from .recorder import ExecutionStep, StepKind, StepRecorder
from .state import InterpreterState

logger = logging.getLogger(__name__)


class Evaluator(ExpressionEvaluatorMixin, StatementVisitor[Optional[ExecutionFlow]]):
    def __init__(self, state: InterpreterState, max_loop_iterations: int = MAX_LOOP_ITERATIONS):
        self.state = state
        self.recorder = StepRecorder(state)
        self.max_loop_iterations = max_loop_iterations

    # ---- entry points ----

    def evaluate(self, expr: Expression) -> RuntimeValue:
        return expr.accept(self)

    def execute(self, stmt: Statement) -> Optional[ExecutionFlow]:
        state = self.state
        previous = state.location
        if stmt.location is not None:
            state.location = stmt.location
        flow = stmt.accept(self)
        state.location = previous
        return flow

    def execute_program(self, program: Program) -> None:
        """Run a whole program in the global scope; the global frame must already be pushed."""
        self.record(StepKind.BLOCK_ENTER, "Start execution", None)
        self.hoist_declarations(program.body, self.state.global_scope)
        self._execute_statements(program.body, skip_hoisted=True)
        self.record(StepKind.BLOCK_EXIT, "End execution", None)

    def record(
        self,
        kind: StepKind,
        description: str,
        node: Optional[ASTNode],
        dom_operation: Optional[DomOperation] = None,
    ) -> ExecutionStep:
        location = node.location if node is not None else None
        return self.recorder.record(kind, description, location, dom_operation=dom_operation)

    # ---- hoisting ----

    def hoist_declarations(self, statements: List[Statement], scope: Scope) -> None:
        for stmt in statements:
            if isinstance(stmt, VariableDeclaration) and stmt.kind is not VariableKind.VAR:
                for declarator in stmt.declarations:
                    scope.declare_uninitialized(declarator.name, stmt.kind)
        # After the dead-zone pass, so hoisted functions close over those names
        for stmt in statements:
            if isinstance(stmt, FunctionDeclaration):
                self.execute(stmt)

    def _execute_statements(self, statements: List[Statement], skip_hoisted: bool = False) -> Optional[ExecutionFlow]:
        for stmt in statements:
            if skip_hoisted and isinstance(stmt, FunctionDeclaration):
                continue
            flow = self.execute(stmt)
            if flow is not None:
                return flow
        return None

    # ---- calls ----

    def _call_function(self, obj: HeapObject, name: str, args: List[RuntimeValue], node: ASTNode) -> RuntimeValue:
        state = self.state
        function = obj.function
        scope = state.new_scope(name, ScopeKind.FUNCTION, function.scope)
        if function.binding_name is not None:
            scope.declare(function.binding_name, VariableKind.VAR, ObjectReference(obj.heap_id))
        for index, param in enumerate(function.params):
            variable = scope.declare(param, VariableKind.VAR)
            variable.value = args[index] if index < len(args) else UNDEFINED

        return_address = node.location.line if node.location is not None else None
        state.memory.push_frame(name, scope.scope_id, return_address)
        args_text = ", ".join(format_value(arg) for arg in args)
        result: RuntimeValue = UNDEFINED
        try:
            with state.enter_scope(scope):
                self.record(StepKind.CALL, f"Call {name}({args_text})", node)
                if function.expression_body:
                    result = self.evaluate(function.body)
                else:
                    self.hoist_declarations(function.body, scope)
                    flow = self._execute_statements(function.body, skip_hoisted=True)
                    if flow is not None and flow.is_return():
                        result = flow.get_value()
        finally:
            state.memory.pop_frame()
        self.record(StepKind.RETURN, f"Return {format_value(result)} from {name}", node)
        return result

    # ---- statements ----

    def visit_variable_declaration(self, node: VariableDeclaration) -> Optional[ExecutionFlow]:
        scope = self.state.scope
        for declarator in node.declarations:
            if declarator.init is not None:
                value = self._evaluate_named(declarator.init, declarator.name)
            else:
                value = UNDEFINED
            variable = scope.declare(declarator.name, node.kind, value)
            if node.kind is VariableKind.VAR and declarator.init is not None:
                variable.value = value
            description = f"Declare {node.kind.value} {declarator.name}"
            if value is not UNDEFINED:
                description += f" = {format_value(value)}"
            self.record(StepKind.DECLARATION, description, node)
        return None

    def visit_function_declaration(self, node: FunctionDeclaration) -> Optional[ExecutionFlow]:
        reference = self._create_function(node.name, node.params, node.body)
        variable = self.state.scope.declare(node.name, VariableKind.VAR, reference)
        variable.value = reference
        self.record(StepKind.DECLARATION, f"Declare function {node.name}", node)
        return None

    def visit_expression_statement(self, node: ExpressionStatement) -> Optional[ExecutionFlow]:
        self.evaluate(node.expression)
        return None

    def visit_if_statement(self, node: IfStatement) -> Optional[ExecutionFlow]:
        test = self.evaluate(node.test)
        self.record(StepKind.EXPRESSION, f"If condition: {format_value(test)}", node)
        if to_boolean(test):
            return self.execute(node.consequent)
        if node.alternate is not None:
            return self.execute(node.alternate)
        return None

    def visit_while_statement(self, node: WhileStatement) -> Optional[ExecutionFlow]:
        iterations = 0
        while iterations < self.max_loop_iterations:
            test = self.evaluate(node.test)
            self.record(StepKind.EXPRESSION, f"While condition: {format_value(test)}", node)
            if not to_boolean(test):
                break
            flow = self.execute(node.body)
            if flow is not None:
                if flow.is_break():
                    break
                if flow.is_return():
                    return flow
            iterations += 1
        else:
            logger.warning("while loop stopped after %d iterations", self.max_loop_iterations)
        return None

    def visit_do_while_statement(self, node: DoWhileStatement) -> Optional[ExecutionFlow]:
        iterations = 0
        while iterations < self.max_loop_iterations:
            flow = self.execute(node.body)
            if flow is not None:
                if flow.is_break():
                    break
                if flow.is_return():
                    return flow
            iterations += 1
            test = self.evaluate(node.test)
            self.record(StepKind.EXPRESSION, f"Do-while condition: {format_value(test)}", node)
            if not to_boolean(test):
                break
        else:
            logger.warning("do-while loop stopped after %d iterations", self.max_loop_iterations)
        return None

    def visit_for_statement(self, node: ForStatement) -> Optional[ExecutionFlow]:
        state = self.state
        init = node.init
        # let/const loop variables get a fresh binding per iteration
        per_iteration = isinstance(init, VariableDeclaration) and init.kind is not VariableKind.VAR
        for_scope = state.new_scope(FOR_SCOPE_NAME, ScopeKind.BLOCK, state.scope)

        with state.enter_scope(for_scope):
            self.record(StepKind.BLOCK_ENTER, "Enter for loop", node)
            if isinstance(init, VariableDeclaration):
                self.execute(init)
            elif init is not None:
                self.evaluate(init)

            iterations = 0
            while iterations < self.max_loop_iterations:
                if node.test is not None:
                    test = self.evaluate(node.test)
                    self.record(StepKind.EXPRESSION, f"For condition: {format_value(test)}", node)
                    if not to_boolean(test):
                        break
                flow = self.execute(node.body)
                if flow is not None:
                    if flow.is_break():
                        break
                    if flow.is_return():
                        return flow
                if per_iteration:
                    state.scope = state.copy_scope(state.scope)
                if node.update is not None:
                    self.evaluate(node.update)
                iterations += 1
            else:
                logger.warning("for loop stopped after %d iterations", self.max_loop_iterations)

        self.record(StepKind.BLOCK_EXIT, "Exit for loop", node)
        return None

    def visit_block_statement(self, node: BlockStatement) -> Optional[ExecutionFlow]:
        state = self.state
        scope = state.new_scope(BLOCK_SCOPE_NAME, ScopeKind.BLOCK, state.scope)
        with state.enter_scope(scope):
            for stmt in node.body:
                if isinstance(stmt, VariableDeclaration) and stmt.kind is not VariableKind.VAR:
                    for declarator in stmt.declarations:
                        scope.declare_uninitialized(declarator.name, stmt.kind)
            return self._execute_statements(node.body)

    def visit_return_statement(self, node: ReturnStatement) -> Optional[ExecutionFlow]:
        value = self.evaluate(node.argument) if node.argument is not None else UNDEFINED
        return ExecutionFlow.return_value(value)

    def visit_break_statement(self, node: BreakStatement) -> Optional[ExecutionFlow]:
        return ExecutionFlow.break_loop()

    def visit_continue_statement(self, node: ContinueStatement) -> Optional[ExecutionFlow]:
        return ExecutionFlow.continue_loop()

    def visit_empty_statement(self, node: EmptyStatement) -> Optional[ExecutionFlow]:
        return None

    def visit_unsupported_statement(self, node: UnsupportedStatement) -> Optional[ExecutionFlow]:
        logger.warning("%s is not supported; skipping (line %s)",
                       node.feature, node.location.line if node.location else "?")
        return None
