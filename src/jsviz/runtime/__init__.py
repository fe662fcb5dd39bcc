"""
Runtime: evaluator, memory model and the step timeline.
"""

from .driver import ExecutionResult, InterpreterDriver, get_default_driver, run_interpreter
from .recorder import ExecutionStep, StepKind
from .serialization import step_to_dict, timeline_to_json

__all__ = [
    "ExecutionResult", "InterpreterDriver", "get_default_driver", "run_interpreter",
    "ExecutionStep", "StepKind", "step_to_dict", "timeline_to_json",
]
