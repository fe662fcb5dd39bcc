"""
Memory Model

Heap of reference-typed objects (plain objects, arrays, functions) plus an
explicit call stack. Heap entries are never freed during a run: every object
stays inspectable by id until the run ends.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple, Union, TYPE_CHECKING

from ..shared.errors import InterpreterImplementationError
from ..shared.nodes import Expression, Statement
from ..shared.scope import Scope
from ..shared.types import VariableKind
from ..shared.values import UNDEFINED, RuntimeValue

if TYPE_CHECKING:
    from .state import IdGenerator


class HeapObjectType(Enum):
    OBJECT = "object"
    ARRAY = "array"
    FUNCTION = "function"


@dataclass(eq=False)
class FunctionData:
    """
    What a function object needs to be called.

    `scope` is the defining scope itself, not a copy: holding it is the whole
    closure mechanism.
    """
    params: List[str]
    body: Union[List[Statement], Expression]
    scope: Scope
    is_arrow: bool = False
    # Own name of a named function expression, bound inside its body
    binding_name: Optional[str] = None

    @property
    def expression_body(self) -> bool:
        return isinstance(self.body, Expression)


@dataclass(frozen=True)
class ClosureVariable:
    """Captured variable as seen at the last refresh."""
    name: str
    value: RuntimeValue
    from_scope: str


@dataclass(frozen=True)
class FrameVariable:
    name: str
    value: RuntimeValue
    kind: VariableKind


@dataclass(eq=False)
class HeapObject:
    heap_id: str
    type: HeapObjectType
    properties: Dict[str, RuntimeValue] = field(default_factory=dict)
    name: Optional[str] = None
    closure: Optional[List[ClosureVariable]] = None
    function: Optional[FunctionData] = None

    @property
    def is_function(self) -> bool:
        return self.type is HeapObjectType.FUNCTION


@dataclass(eq=False)
class StackFrame:
    frame_id: str
    function_name: str
    scope_id: str
    return_address: Optional[int] = None
    locals: List[FrameVariable] = field(default_factory=list)


# ==================== SNAPSHOTS ====================

@dataclass(frozen=True)
class HeapObjectSnapshot:
    heap_id: str
    type: HeapObjectType
    properties: Tuple[Tuple[str, RuntimeValue], ...] = ()
    name: Optional[str] = None
    closure: Optional[Tuple[ClosureVariable, ...]] = None

    def get(self, key: str, default: RuntimeValue = UNDEFINED) -> RuntimeValue:
        for prop_key, value in self.properties:
            if prop_key == key:
                return value
        return default

    def closure_value(self, name: str, default: RuntimeValue = UNDEFINED) -> RuntimeValue:
        for variable in self.closure or ():
            if variable.name == name:
                return variable.value
        return default


@dataclass(frozen=True)
class FrameSnapshot:
    frame_id: str
    function_name: str
    scope_id: str
    return_address: Optional[int] = None
    locals: Tuple[FrameVariable, ...] = ()


@dataclass(frozen=True)
class MemorySnapshot:
    heap: Tuple[HeapObjectSnapshot, ...] = ()
    stack: Tuple[FrameSnapshot, ...] = ()

    @classmethod
    def empty(cls) -> MemorySnapshot:
        return cls()

    def get_object(self, heap_id: str) -> Optional[HeapObjectSnapshot]:
        for obj in self.heap:
            if obj.heap_id == heap_id:
                return obj
        return None

    @property
    def depth(self) -> int:
        return len(self.stack)


# ==================== MEMORY MODEL ====================

class MemoryModel:
    """Heap + call stack of one run. Ids come from the run's IdGenerator."""

    def __init__(self, ids: 'IdGenerator'):
        self.ids = ids
        self.heap: Dict[str, HeapObject] = {}
        self.stack: List[StackFrame] = []

    # ---- heap ----

    def allocate(
        self,
        type: HeapObjectType,
        properties: Optional[Dict[str, RuntimeValue]] = None,
        name: Optional[str] = None,
        closure: Optional[List[ClosureVariable]] = None,
        function: Optional[FunctionData] = None,
    ) -> str:
        heap_id = self.ids.next_heap_id()
        self.heap[heap_id] = HeapObject(
            heap_id=heap_id,
            type=type,
            properties=dict(properties) if properties else {},
            name=name,
            closure=closure,
            function=function,
        )
        return heap_id

    def get_object(self, heap_id: str) -> Optional[HeapObject]:
        return self.heap.get(heap_id)

    def set_property(self, heap_id: str, key: str, value: RuntimeValue) -> None:
        """Missing ids are ignored; objects are never created on demand."""
        obj = self.heap.get(heap_id)
        if obj is not None:
            obj.properties[key] = value

    def get_property(self, heap_id: str, key: str) -> RuntimeValue:
        obj = self.heap.get(heap_id)
        if obj is None:
            return UNDEFINED
        return obj.properties.get(key, UNDEFINED)

    def functions(self) -> Iterator[HeapObject]:
        return (obj for obj in self.heap.values() if obj.is_function)

    # ---- call stack ----

    def push_frame(self, function_name: str, scope_id: str, return_address: Optional[int] = None) -> StackFrame:
        frame = StackFrame(
            frame_id=self.ids.next_frame_id(),
            function_name=function_name,
            scope_id=scope_id,
            return_address=return_address,
        )
        self.stack.append(frame)
        return frame

    def pop_frame(self) -> StackFrame:
        if not self.stack:
            raise InterpreterImplementationError("pop_frame() on an empty call stack")
        return self.stack.pop()

    def current_frame(self) -> Optional[StackFrame]:
        return self.stack[-1] if self.stack else None

    # ---- snapshot ----

    def snapshot(self) -> MemorySnapshot:
        """Copy every property table, closure list and frame local list."""
        return MemorySnapshot(
            heap=tuple(
                HeapObjectSnapshot(
                    heap_id=obj.heap_id,
                    type=obj.type,
                    properties=tuple(obj.properties.items()),
                    name=obj.name,
                    closure=tuple(obj.closure) if obj.closure is not None else None,
                )
                for obj in self.heap.values()
            ),
            stack=tuple(
                FrameSnapshot(
                    frame_id=frame.frame_id,
                    function_name=frame.function_name,
                    scope_id=frame.scope_id,
                    return_address=frame.return_address,
                    locals=tuple(frame.locals),
                )
                for frame in self.stack
            ),
        )
