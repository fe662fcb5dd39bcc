"""
Timeline serialization
======================

Converts recorded steps to plain dicts (camelCase keys, JSON-ready) for the
visualizer front end, and to one-line text for terminal output.

Values that JSON cannot carry natively are tagged:

    undefined        -> {"type": "undefined"}
    heap reference   -> {"type": "reference", "heapId": "heap_0"}
    NaN / Infinity   -> {"type": "number", "value": "NaN"}
"""

import json
import math
from typing import Any, Dict, List, Optional, Sequence

from ..shared.scope import ScopeData, ScopeSnapshot
from ..shared.values import UNDEFINED, ObjectReference, RuntimeValue, number_to_string
from .dom import DomOperation
from .memory import FrameSnapshot, HeapObjectSnapshot, MemorySnapshot
from .recorder import ExecutionStep


def value_to_json(value: RuntimeValue) -> Any:
    if value is UNDEFINED:
        return {"type": "undefined"}
    if isinstance(value, ObjectReference):
        return {"type": "reference", "heapId": value.heap_id}
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return {"type": "number", "value": number_to_string(value)}
    return value


def _scope_to_dict(scope: ScopeData) -> Dict[str, Any]:
    return {
        "id": scope.scope_id,
        "name": scope.name,
        "type": scope.kind.value,
        "parentId": scope.parent_id,
        "variables": {
            variable.name: {
                "name": variable.name,
                "value": value_to_json(variable.value),
                "kind": variable.kind.value,
                "initialized": variable.initialized,
            }
            for variable in scope.variables
        },
    }


def scope_snapshot_to_dict(snapshot: ScopeSnapshot) -> Dict[str, Any]:
    return {
        "currentScopeId": snapshot.current_scope_id,
        "scopes": [_scope_to_dict(scope) for scope in snapshot.chain],
    }


def _heap_object_to_dict(obj: HeapObjectSnapshot) -> Dict[str, Any]:
    result: Dict[str, Any] = {
        "id": obj.heap_id,
        "type": obj.type.value,
        "properties": {key: value_to_json(value) for key, value in obj.properties},
    }
    if obj.name is not None:
        result["name"] = obj.name
    if obj.closure is not None:
        result["closure"] = [
            {"name": var.name, "value": value_to_json(var.value), "fromScope": var.from_scope}
            for var in obj.closure
        ]
    return result


def _frame_to_dict(frame: FrameSnapshot) -> Dict[str, Any]:
    return {
        "id": frame.frame_id,
        "functionName": frame.function_name,
        "scopeId": frame.scope_id,
        "returnAddress": frame.return_address,
        "localVariables": [
            {"name": var.name, "value": value_to_json(var.value), "kind": var.kind.value}
            for var in frame.locals
        ],
    }


def memory_snapshot_to_dict(snapshot: MemorySnapshot) -> Dict[str, Any]:
    return {
        "heap": [_heap_object_to_dict(obj) for obj in snapshot.heap],
        "callStack": [_frame_to_dict(frame) for frame in snapshot.stack],
    }


def dom_operation_to_dict(operation: DomOperation) -> Dict[str, Any]:
    result = {
        "type": operation.type.value,
        "selector": operation.selector,
        "value": operation.value,
    }
    if operation.property is not None:
        result["property"] = operation.property
    return result


def step_to_dict(step: ExecutionStep) -> Dict[str, Any]:
    result: Dict[str, Any] = {
        "id": step.step_id,
        "type": step.kind.value,
        "description": step.description,
        "line": step.line,
        "column": step.column,
        "scopeSnapshot": scope_snapshot_to_dict(step.scope_snapshot),
        "memorySnapshot": memory_snapshot_to_dict(step.memory_snapshot),
    }
    if step.dom_operation is not None:
        result["domOperation"] = dom_operation_to_dict(step.dom_operation)
    return result


def timeline_to_dicts(steps: Sequence[ExecutionStep]) -> List[Dict[str, Any]]:
    return [step_to_dict(step) for step in steps]


def timeline_to_json(steps: Sequence[ExecutionStep], indent: Optional[int] = None) -> str:
    return json.dumps(timeline_to_dicts(steps), indent=indent, allow_nan=False)


def format_step(step: ExecutionStep) -> str:
    """One-line rendering: `  3 [assignment] 2:0 Assign x = 1`."""
    text = f"{step.step_id:>3} [{step.kind.value}] {step.line}:{step.column} {step.description}"
    if step.dom_operation is not None:
        op = step.dom_operation
        text += f" <{op.type.value} {op.selector}={op.value!r}>"
    return text
