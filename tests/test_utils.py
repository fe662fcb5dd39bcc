"""
Test utilities for the jsviz test suite.

Helpers for the run-then-inspect pattern: run a source string, then look at
the recorded timeline, the final scope chain or a heap object.
"""

import sys
from pathlib import Path
from typing import List, Optional

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from jsviz.runtime.driver import ExecutionResult, get_default_driver
from jsviz.runtime.memory import HeapObjectSnapshot, MemorySnapshot
from jsviz.runtime.recorder import ExecutionStep, StepKind
from jsviz.shared.values import UNDEFINED, ObjectReference, RuntimeValue


def run_js(source: str, driver=None, source_file: str = "<test>") -> ExecutionResult:
    """Run source with the given driver (default: the process-wide one)."""
    d = driver if driver is not None else get_default_driver()
    return d.run(source, source_file)


def descriptions(result: ExecutionResult) -> List[str]:
    return [step.description for step in result.steps]


def steps_of_kind(result: ExecutionResult, kind: StepKind) -> List[ExecutionStep]:
    return [step for step in result.steps if step.kind is kind]


def steps_starting_with(result: ExecutionResult, prefix: str) -> List[ExecutionStep]:
    return [step for step in result.steps if step.description.startswith(prefix)]


def final_value(result: ExecutionResult, name: str) -> RuntimeValue:
    """Value of `name` as seen from the scope current at the last step."""
    assert result.success, f"Execution failed: {descriptions(result)}"
    return result.final_step.scope_snapshot.value_of(name)


def heap_object(memory: MemorySnapshot, value: RuntimeValue) -> HeapObjectSnapshot:
    assert isinstance(value, ObjectReference), f"expected a reference, got {value!r}"
    obj = memory.get_object(value.heap_id)
    assert obj is not None, f"{value.heap_id} missing from heap"
    return obj


def array_items(memory: MemorySnapshot, value: RuntimeValue) -> List[RuntimeValue]:
    """Elements of an array heap object, in index order."""
    obj = heap_object(memory, value)
    length = obj.get("length", 0)
    return [obj.get(str(i)) for i in range(length)]


def error_message(result: ExecutionResult) -> Optional[str]:
    """Message of the terminal error step, or None for successful runs."""
    if result.success:
        return None
    description = result.steps[0].description
    assert description.startswith("Error: ")
    return description[len("Error: "):]


__all__ = [
    "UNDEFINED", "run_js", "descriptions", "steps_of_kind", "steps_starting_with",
    "final_value", "heap_object", "array_items", "error_message",
]
