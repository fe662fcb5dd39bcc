"""Expression visitors of the evaluator. All lookups go through the current scope."""

import logging
import math
from typing import Dict, List, Optional, Union

from ..shared.ast_visitor import ExpressionVisitor
from ..shared.nodes import (
    ArrayExpression, ArrowFunctionExpression, AssignmentExpression, BinaryExpression,
    CallExpression, ConditionalExpression, Expression, FunctionExpression, Identifier,
    Literal, LogicalExpression, MemberExpression, NewExpression, ObjectExpression,
    SequenceExpression, SpreadElement, Statement, ThisExpression, UnaryExpression,
    UnsupportedExpression, UpdateExpression,
)
from ..shared.types import AssignmentOp, LogicalOp, UnaryOp
from ..shared.values import (
    UNDEFINED, ObjectReference, RuntimeValue, format_value, is_nullish, to_boolean,
    to_number, to_property_key, to_string,
)
from ..utils.config import ANONYMOUS_FUNCTION_NAME
from .closures import capture_closure_variables
from .dom import (
    DomOperation, DomOperationType, ElementLookup, is_document_access,
    match_element_lookup, member_name, property_operation,
)
from .memory import FunctionData, HeapObjectType, MemoryModel
from .operators import binary_operation, unary_operation, update_value
from .recorder import StepKind
from .state import ConsoleMessage

logger = logging.getLogger(__name__)

DOM_STEP_DESCRIPTION = "DOM operation (skipped in visualization)"

# Read-only globals used when no binding shadows them
GLOBAL_CONSTANTS: Dict[str, RuntimeValue] = {
    "undefined": UNDEFINED,
    "NaN": math.nan,
    "Infinity": math.inf,
}

_INSPECT_DEPTH = 2


def inspect_value(value: RuntimeValue, memory: MemoryModel, depth: int = 0) -> str:
    """Console rendering: strings raw at top level, arrays and objects expanded."""
    if isinstance(value, str):
        return value if depth == 0 else f"'{value}'"
    if not isinstance(value, ObjectReference):
        return to_string(value)
    obj = memory.get_object(value.heap_id)
    if obj is None:
        return str(value)
    if obj.is_function:
        return f"[Function: {obj.name or ANONYMOUS_FUNCTION_NAME}]"
    if obj.type is HeapObjectType.ARRAY:
        if depth >= _INSPECT_DEPTH:
            return "[Array]"
        length = int(to_number(obj.properties.get("length", 0)))
        items = [inspect_value(obj.properties.get(str(i), UNDEFINED), memory, depth + 1)
                 for i in range(length)]
        return "[" + ", ".join(items) + "]"
    if depth >= _INSPECT_DEPTH:
        return "[Object]"
    if not obj.properties:
        return "{}"
    fields = [f"{key}: {inspect_value(item, memory, depth + 1)}"
              for key, item in obj.properties.items()]
    return "{ " + ", ".join(fields) + " }"


class ExpressionEvaluatorMixin(ExpressionVisitor[RuntimeValue]):
    """
    Expression half of the evaluator.

    Expects the host class to provide `state`, `record(kind, description, node)`,
    `evaluate(expr)` and `_call_function(obj, name, args, node)`.
    """

    # ---- literals and names ----

    def visit_literal(self, node: Literal) -> RuntimeValue:
        return node.value

    def visit_identifier(self, node: Identifier) -> RuntimeValue:
        scope = self.state.scope
        if node.name in GLOBAL_CONSTANTS and not scope.has(node.name):
            return GLOBAL_CONSTANTS[node.name]
        return scope.get(node.name)

    def visit_this_expression(self, node: ThisExpression) -> RuntimeValue:
        logger.warning("'this' is not modelled; evaluating to undefined")
        return UNDEFINED

    def visit_new_expression(self, node: NewExpression) -> RuntimeValue:
        logger.warning("'new' is not modelled; evaluating to undefined")
        return UNDEFINED

    def visit_unsupported_expression(self, node: UnsupportedExpression) -> RuntimeValue:
        logger.warning("%s is not supported; evaluating to undefined (line %s)",
                       node.feature, node.location.line if node.location else "?")
        return UNDEFINED

    # ---- operators ----

    def visit_binary_expression(self, node: BinaryExpression) -> RuntimeValue:
        left = self.evaluate(node.left)
        right = self.evaluate(node.right)
        return binary_operation(node.operator, left, right)

    def visit_logical_expression(self, node: LogicalExpression) -> RuntimeValue:
        left = self.evaluate(node.left)
        if node.operator is LogicalOp.AND:
            return self.evaluate(node.right) if to_boolean(left) else left
        if node.operator is LogicalOp.OR:
            return left if to_boolean(left) else self.evaluate(node.right)
        return self.evaluate(node.right) if is_nullish(left) else left

    def visit_unary_expression(self, node: UnaryExpression) -> RuntimeValue:
        argument = node.argument
        if (node.operator is UnaryOp.TYPEOF and isinstance(argument, Identifier)
                and argument.name not in GLOBAL_CONSTANTS
                and not self.state.scope.has(argument.name)):
            # typeof on an undeclared name is not an error
            return "undefined"
        return unary_operation(node.operator, self.evaluate(argument), self.state.memory)

    def visit_update_expression(self, node: UpdateExpression) -> RuntimeValue:
        target = node.argument
        if not isinstance(target, Identifier):
            current = to_number(self.evaluate(target))
            logger.warning("Update of a non-identifier target is not written back")
            return update_value(node.operator, current) if node.prefix else current
        current = self.visit_identifier(target)
        updated = update_value(node.operator, current)
        self.state.scope.assign(target.name, updated)
        self.record(StepKind.ASSIGNMENT, f"Update {target.name} to {format_value(updated)}", node)
        return updated if node.prefix else to_number(current)

    def visit_assignment_expression(self, node: AssignmentExpression) -> RuntimeValue:
        target = node.target
        if isinstance(target, Identifier):
            binary = node.operator.binary
            if binary is None:
                value = self._evaluate_named(node.value, target.name)
            else:
                current = self.visit_identifier(target)
                value = binary_operation(binary, current, self.evaluate(node.value))
            self.state.scope.assign(target.name, value)
            self.record(StepKind.ASSIGNMENT, f"Assign {target.name} = {format_value(value)}", node)
            return value

        if isinstance(target, MemberExpression) and node.operator is AssignmentOp.ASSIGN:
            lookup = match_element_lookup(target.object)
            prop = member_name(target)
            if lookup is not None and prop is not None:
                return self._dom_property_assignment(node, lookup, prop)
        # Property writes are evaluated for their value only
        return self.evaluate(node.value)

    def visit_conditional_expression(self, node: ConditionalExpression) -> RuntimeValue:
        if to_boolean(self.evaluate(node.test)):
            return self.evaluate(node.consequent)
        return self.evaluate(node.alternate)

    def visit_sequence_expression(self, node: SequenceExpression) -> RuntimeValue:
        result: RuntimeValue = UNDEFINED
        for expr in node.expressions:
            result = self.evaluate(expr)
        return result

    # ---- objects ----

    def visit_member_expression(self, node: MemberExpression) -> RuntimeValue:
        if is_document_access(node):
            return UNDEFINED
        obj = self.evaluate(node.object)
        key = self._property_key(node)
        if isinstance(obj, ObjectReference):
            return self.state.memory.get_property(obj.heap_id, key)
        return UNDEFINED

    def visit_array_expression(self, node: ArrayExpression) -> RuntimeValue:
        elements = self._evaluate_list(node.elements)
        properties: Dict[str, RuntimeValue] = {str(i): value for i, value in enumerate(elements)}
        properties["length"] = len(elements)
        heap_id = self.state.memory.allocate(HeapObjectType.ARRAY, properties)
        return ObjectReference(heap_id)

    def visit_object_expression(self, node: ObjectExpression) -> RuntimeValue:
        properties: Dict[str, RuntimeValue] = {}
        for prop in node.properties:
            if prop.computed or prop.key is None:
                logger.warning("Computed object keys are not supported; property skipped")
                continue
            properties[prop.key] = self._evaluate_named(prop.value, prop.key)
        heap_id = self.state.memory.allocate(HeapObjectType.OBJECT, properties)
        return ObjectReference(heap_id)

    def visit_spread_element(self, node: SpreadElement) -> RuntimeValue:
        logger.warning("Spread outside an array literal or argument list is ignored")
        return UNDEFINED

    # ---- functions ----

    def visit_function_expression(self, node: FunctionExpression) -> RuntimeValue:
        return self._create_function(node.name, node.params, node.body, binding_name=node.name)

    def visit_arrow_function_expression(self, node: ArrowFunctionExpression) -> RuntimeValue:
        return self._create_function(None, node.params, node.body, is_arrow=True)

    def visit_call_expression(self, node: CallExpression) -> RuntimeValue:
        callee = node.callee
        if self._is_console_call(callee):
            self._console_call(node)
            return UNDEFINED
        if is_document_access(callee):
            self._dom_call(node)
            return UNDEFINED

        name, value = self._resolve_callee(callee)
        obj = None
        if isinstance(value, ObjectReference):
            obj = self.state.memory.get_object(value.heap_id)
        if obj is None or obj.function is None:
            self.record(StepKind.CALL, f"Call {name}() (not found)", node)
            return UNDEFINED
        args = self._evaluate_list(node.arguments)
        return self._call_function(obj, name, args, node)

    # ---- helpers ----

    def _create_function(
        self,
        name: Optional[str],
        params: List[str],
        body: Union[List[Statement], Expression],
        is_arrow: bool = False,
        binding_name: Optional[str] = None,
    ) -> ObjectReference:
        state = self.state
        closure = capture_closure_variables(state.scope)
        heap_id = state.memory.allocate(
            HeapObjectType.FUNCTION,
            name=name or ANONYMOUS_FUNCTION_NAME,
            closure=closure or None,
            function=FunctionData(params=list(params), body=body, scope=state.scope,
                                  is_arrow=is_arrow, binding_name=binding_name),
        )
        return ObjectReference(heap_id)

    def _evaluate_named(self, expr: Expression, name: str) -> RuntimeValue:
        """Anonymous functions take the name of the binding they are assigned to."""
        if isinstance(expr, FunctionExpression) and expr.name is None:
            return self._create_function(name, expr.params, expr.body)
        if isinstance(expr, ArrowFunctionExpression):
            return self._create_function(name, expr.params, expr.body, is_arrow=True)
        return self.evaluate(expr)

    def _evaluate_list(self, exprs: List[Expression]) -> List[RuntimeValue]:
        values: List[RuntimeValue] = []
        for expr in exprs:
            if isinstance(expr, SpreadElement):
                values.extend(self._spread_values(self.evaluate(expr.argument)))
            else:
                values.append(self.evaluate(expr))
        return values

    def _spread_values(self, value: RuntimeValue) -> List[RuntimeValue]:
        if isinstance(value, str):
            return list(value)
        if isinstance(value, ObjectReference):
            obj = self.state.memory.get_object(value.heap_id)
            if obj is not None and obj.type is HeapObjectType.ARRAY:
                length = int(to_number(obj.properties.get("length", 0)))
                return [obj.properties.get(str(i), UNDEFINED) for i in range(length)]
        logger.warning("Cannot spread %s; nothing inserted", format_value(value))
        return []

    def _property_key(self, node: MemberExpression) -> str:
        if not node.computed:
            return node.property
        return to_property_key(self.evaluate(node.property))

    def _resolve_callee(self, callee: Expression):
        """
        Display name and value of a call target. The value is None when the
        target hangs off an unbound identifier, either directly (`foo()`) or as
        the root of a member chain (`Math.floor()`, `JSON.parse()`).
        """
        if isinstance(callee, Identifier):
            if not self.state.scope.has(callee.name):
                return callee.name, None
            return callee.name, self.visit_identifier(callee)
        if isinstance(callee, MemberExpression):
            root = callee.object
            while isinstance(root, MemberExpression):
                root = root.object
            if isinstance(root, Identifier) and not self.state.scope.has(root.name):
                return member_name(callee) or ANONYMOUS_FUNCTION_NAME, None
        value = self.evaluate(callee)
        if isinstance(callee, MemberExpression):
            return member_name(callee) or ANONYMOUS_FUNCTION_NAME, value
        if isinstance(value, ObjectReference):
            obj = self.state.memory.get_object(value.heap_id)
            if obj is not None and obj.name:
                return obj.name, value
        return ANONYMOUS_FUNCTION_NAME, value

    # ---- host objects ----

    def _is_console_call(self, callee: Expression) -> bool:
        return (isinstance(callee, MemberExpression)
                and isinstance(callee.object, Identifier)
                and callee.object.name == "console"
                and not self.state.scope.has("console"))

    def _console_call(self, node: CallExpression) -> None:
        memory = self.state.memory
        args = self._evaluate_list(node.arguments)
        level = member_name(node.callee) or "log"
        text = " ".join(inspect_value(arg, memory) for arg in args)
        line = node.location.line if node.location is not None else 0
        self.state.console.append(ConsoleMessage(level=level, text=text, line=line))
        logger.debug("console.%s: %s", level, text)

    def _element_selector(self, lookup: ElementLookup) -> str:
        text = to_string(self.evaluate(lookup.argument)) if lookup.argument is not None else "undefined"
        return lookup.selector_for(text)

    def _dom_property_assignment(self, node: AssignmentExpression, lookup: ElementLookup, prop: str) -> RuntimeValue:
        selector = self._element_selector(lookup)
        value = self.evaluate(node.value)
        op_type = property_operation(prop)
        operation = DomOperation(
            type=op_type,
            selector=selector,
            value=to_string(value),
            property=prop if op_type is DomOperationType.SET_PROPERTY else None,
        )
        self.record(StepKind.CALL, DOM_STEP_DESCRIPTION, node, dom_operation=operation)
        return value

    def _dom_call(self, node: CallExpression) -> None:
        callee = node.callee
        operation = None
        if isinstance(callee, MemberExpression) and member_name(callee) == "setAttribute":
            lookup = match_element_lookup(callee.object)
            if lookup is not None:
                selector = self._element_selector(lookup)
                args = self._evaluate_list(node.arguments)
                operation = DomOperation(
                    type=DomOperationType.SET_ATTRIBUTE,
                    selector=selector,
                    value=to_string(args[1]) if len(args) > 1 else "undefined",
                    property=to_string(args[0]) if args else "undefined",
                )
        self.record(StepKind.CALL, DOM_STEP_DESCRIPTION, node, dom_operation=operation)
