"""Step-by-step JavaScript execution recorder for visualization."""

from .runtime import ExecutionResult, ExecutionStep, InterpreterDriver, StepKind, run_interpreter

__version__ = "0.1.0"

__all__ = ["ExecutionResult", "ExecutionStep", "InterpreterDriver", "StepKind", "run_interpreter"]
