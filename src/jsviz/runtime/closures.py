"""
Closure capture and live refresh.

Each recorded step is an immutable copy, so before every snapshot the
projections that look "live" in the timeline are recomputed:

    function objects -> captured variables from their defining scope chain
    stack frames     -> locals from the scope registered under the frame's id
"""

from typing import Dict, List

from ..shared.scope import Scope
from ..shared.types import ScopeKind
from .memory import ClosureVariable, FrameVariable, MemoryModel


def capture_closure_variables(scope: Scope) -> List[ClosureVariable]:
    """Every variable from `scope` up to, but excluding, the global scope."""
    captured: List[ClosureVariable] = []
    for current in scope.chain():
        if current.kind is ScopeKind.GLOBAL:
            break
        for name, variable in current.variables.items():
            captured.append(ClosureVariable(name=name, value=variable.value, from_scope=current.name))
    return captured


def refresh_closures(memory: MemoryModel) -> None:
    # Functions created with nothing to capture stay without a closure.
    for obj in memory.functions():
        if obj.closure and obj.function is not None:
            obj.closure = capture_closure_variables(obj.function.scope)


def refresh_frame_locals(memory: MemoryModel, scopes: Dict[str, Scope]) -> None:
    for frame in memory.stack:
        scope = scopes.get(frame.scope_id)
        if scope is None:
            continue
        frame.locals = [
            FrameVariable(name=name, value=variable.value, kind=variable.kind)
            for name, variable in scope.variables.items()
        ]
