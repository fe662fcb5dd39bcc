"""
Step Recorder

After every state-mutating operation the evaluator asks the recorder for a
step. The recorder refreshes closures and frame locals, freezes the scope
chain and memory, and appends an immutable ExecutionStep to the timeline.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ..shared.scope import ScopeSnapshot
from ..shared.source_location import SourceLocation
from .closures import refresh_closures, refresh_frame_locals
from .dom import DomOperation
from .memory import MemorySnapshot
from .state import InterpreterState


class StepKind(Enum):
    DECLARATION = "declaration"
    ASSIGNMENT = "assignment"
    CALL = "call"
    RETURN = "return"
    EXPRESSION = "expression"
    BLOCK_ENTER = "block-enter"
    BLOCK_EXIT = "block-exit"


@dataclass(frozen=True)
class ExecutionStep:
    """
    One timeline entry.

    `line` is 1-based and `column` 0-based. Snapshots are tuples of frozen
    records, so nothing executed later can change a recorded step.
    """
    step_id: int
    kind: StepKind
    description: str
    line: int
    column: int
    scope_snapshot: ScopeSnapshot
    memory_snapshot: MemorySnapshot
    dom_operation: Optional[DomOperation] = None


def step_position(location: Optional[SourceLocation]) -> Tuple[int, int]:
    if location is None or location.line < 1:
        return 1, 0
    return location.line, location.column0


class StepRecorder:
    def __init__(self, state: InterpreterState):
        self.state = state

    def snapshot(self) -> Tuple[ScopeSnapshot, MemorySnapshot]:
        state = self.state
        refresh_closures(state.memory)
        refresh_frame_locals(state.memory, state.scopes)
        return state.scope.snapshot(), state.memory.snapshot()

    def record(
        self,
        kind: StepKind,
        description: str,
        location: Optional[SourceLocation],
        dom_operation: Optional[DomOperation] = None,
    ) -> ExecutionStep:
        scope_snapshot, memory_snapshot = self.snapshot()
        line, column = step_position(location)
        step = ExecutionStep(
            step_id=self.state.step_id,
            kind=kind,
            description=description,
            line=line,
            column=column,
            scope_snapshot=scope_snapshot,
            memory_snapshot=memory_snapshot,
            dom_operation=dom_operation,
        )
        self.state.step_id += 1
        self.state.steps.append(step)
        return step


def error_step(message: str, location: Optional[SourceLocation]) -> ExecutionStep:
    """Terminal step of a failed run: the message and nothing else."""
    line, column = step_position(location)
    return ExecutionStep(
        step_id=0,
        kind=StepKind.EXPRESSION,
        description=f"Error: {message}",
        line=line,
        column=column,
        scope_snapshot=ScopeSnapshot.empty(),
        memory_snapshot=MemorySnapshot.empty(),
    )
