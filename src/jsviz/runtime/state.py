"""
Interpreter state

Everything a run mutates lives in one InterpreterState: the current scope,
the scope registry, the memory model, the recorded steps and the console.
No two runs share a state, and ids restart at `_0` for every new state.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, TYPE_CHECKING

from ..shared.scope import Scope
from ..shared.source_location import SourceLocation
from ..shared.types import ScopeKind
from ..utils.config import FRAME_ID_PREFIX, GLOBAL_SCOPE_NAME, HEAP_ID_PREFIX, SCOPE_ID_PREFIX
from .memory import MemoryModel

if TYPE_CHECKING:
    from .recorder import ExecutionStep


class IdGenerator:
    """Per-run counters for scope, heap and frame ids."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._scope = 0
        self._heap = 0
        self._frame = 0

    def next_scope_id(self) -> str:
        scope_id = f"{SCOPE_ID_PREFIX}_{self._scope}"
        self._scope += 1
        return scope_id

    def next_heap_id(self) -> str:
        heap_id = f"{HEAP_ID_PREFIX}_{self._heap}"
        self._heap += 1
        return heap_id

    def next_frame_id(self) -> str:
        frame_id = f"{FRAME_ID_PREFIX}_{self._frame}"
        self._frame += 1
        return frame_id


@dataclass(frozen=True)
class ConsoleMessage:
    """One console.* call: method name, rendered arguments, source line."""
    level: str
    text: str
    line: int


class InterpreterState:
    def __init__(self, ids: Optional[IdGenerator] = None):
        self.ids = ids if ids is not None else IdGenerator()
        # Scope arena: every scope ever created, by id
        self.scopes: Dict[str, Scope] = {}
        self.memory = MemoryModel(self.ids)
        self.global_scope = self.new_scope(GLOBAL_SCOPE_NAME, ScopeKind.GLOBAL, None)
        self.scope: Scope = self.global_scope
        self.steps: List['ExecutionStep'] = []
        self.step_id = 0
        self.console: List[ConsoleMessage] = []
        # Statement being executed, reported when a run aborts
        self.location: Optional[SourceLocation] = None

    def new_scope(self, name: str, kind: ScopeKind, parent: Optional[Scope]) -> Scope:
        scope = Scope(self.ids.next_scope_id(), name, kind, parent)
        self.scopes[scope.scope_id] = scope
        return scope

    def copy_scope(self, scope: Scope) -> Scope:
        clone = scope.copy(self.ids.next_scope_id())
        self.scopes[clone.scope_id] = clone
        return clone

    @contextmanager
    def enter_scope(self, scope: Scope) -> Iterator[Scope]:
        """Make `scope` current; the previous scope is restored on every exit path."""
        previous = self.scope
        self.scope = scope
        try:
            yield scope
        finally:
            self.scope = previous
