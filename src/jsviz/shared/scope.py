"""
Lexical scope chain.

Each Scope maps name -> Variable and points at exactly one parent (None for
the global scope). Reads and writes resolve innermost to outermost.

    var        -> installed in the nearest function-or-global scope
    let/const  -> installed in the current scope; may first be hoisted as an
                  uninitialized placeholder (temporal dead zone)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from .errors import ConstReassignment, DuplicateDeclaration, JSReferenceError, UninitializedAccess
from .types import ScopeKind, VariableKind
from .values import UNDEFINED, RuntimeValue


@dataclass
class Variable:
    """One live binding."""
    name: str
    value: RuntimeValue
    kind: VariableKind
    initialized: bool = True

    @property
    def in_dead_zone(self) -> bool:
        return not self.initialized and self.kind is not VariableKind.VAR


# -----------------------------------------------------------------------------
# Snapshots (immutable copies handed to recorded steps)
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class VariableSnapshot:
    name: str
    value: RuntimeValue
    kind: VariableKind
    initialized: bool


@dataclass(frozen=True)
class ScopeData:
    """Frozen copy of one scope's variable table."""
    scope_id: str
    name: str
    kind: ScopeKind
    parent_id: Optional[str] = None
    variables: Tuple[VariableSnapshot, ...] = ()

    def get(self, name: str) -> Optional[VariableSnapshot]:
        for variable in self.variables:
            if variable.name == name:
                return variable
        return None

    def names(self) -> List[str]:
        return [v.name for v in self.variables]


@dataclass(frozen=True)
class ScopeSnapshot:
    """Scope chain at one instant, nearest scope first."""
    current_scope_id: str = ""
    chain: Tuple[ScopeData, ...] = ()

    @classmethod
    def empty(cls) -> ScopeSnapshot:
        return cls()

    @property
    def current(self) -> Optional[ScopeData]:
        return self.chain[0] if self.chain else None

    def lookup(self, name: str) -> Optional[VariableSnapshot]:
        """Resolve a name the way the live chain would."""
        for data in self.chain:
            found = data.get(name)
            if found is not None:
                return found
        return None

    def value_of(self, name: str, default: RuntimeValue = UNDEFINED) -> RuntimeValue:
        found = self.lookup(name)
        return found.value if found is not None else default


# -----------------------------------------------------------------------------
# Scope
# -----------------------------------------------------------------------------


@dataclass(eq=False)
class Scope:
    """
    One scope level.

    Scopes are never freed during a run: a function object keeps its defining
    scope reachable through FunctionData.scope, and the interpreter state keeps
    every scope registered by id.
    """
    scope_id: str
    name: str
    kind: ScopeKind
    parent: Optional[Scope] = None
    variables: Dict[str, Variable] = field(default_factory=dict)

    # ---- resolution ----

    def resolve(self, name: str) -> Optional[Scope]:
        """Scope in the chain that owns `name`, innermost first."""
        scope: Optional[Scope] = self
        while scope is not None:
            if name in scope.variables:
                return scope
            scope = scope.parent
        return None

    def has(self, name: str) -> bool:
        return self.resolve(name) is not None

    def has_own(self, name: str) -> bool:
        return name in self.variables

    def function_scope(self) -> Scope:
        """Nearest function-or-global scope (where `var` lands)."""
        scope = self
        while scope.kind is ScopeKind.BLOCK and scope.parent is not None:
            scope = scope.parent
        return scope

    def chain(self) -> Iterator[Scope]:
        scope: Optional[Scope] = self
        while scope is not None:
            yield scope
            scope = scope.parent

    # ---- declaration ----

    def declare(self, name: str, kind: VariableKind, value: RuntimeValue = UNDEFINED) -> Variable:
        """
        Install a binding.

        Re-declaring a `var` leaves the existing binding alone. A let/const
        whose hoisted placeholder lives in this scope gets initialized; any
        other clash in this exact scope is a DuplicateDeclaration.
        """
        if kind is VariableKind.VAR:
            target = self.function_scope()
            existing = target.variables.get(name)
            if existing is not None:
                if existing.kind is not VariableKind.VAR:
                    raise DuplicateDeclaration(name)
                return existing
            variable = Variable(name, value, kind)
            target.variables[name] = variable
            return variable

        existing = self.variables.get(name)
        if existing is not None:
            if existing.initialized or existing.kind is not kind:
                raise DuplicateDeclaration(name)
            existing.value = value
            existing.initialized = True
            return existing
        variable = Variable(name, value, kind)
        self.variables[name] = variable
        return variable

    def declare_uninitialized(self, name: str, kind: VariableKind) -> Variable:
        """Hoist a let/const into its temporal dead zone."""
        if name in self.variables:
            raise DuplicateDeclaration(name)
        variable = Variable(name, UNDEFINED, kind, initialized=False)
        self.variables[name] = variable
        return variable

    # ---- access ----

    def get(self, name: str) -> RuntimeValue:
        owner = self.resolve(name)
        if owner is None:
            raise JSReferenceError(name)
        variable = owner.variables[name]
        if variable.in_dead_zone:
            raise UninitializedAccess(name)
        return variable.value

    def assign(self, name: str, value: RuntimeValue) -> None:
        owner = self.resolve(name)
        if owner is None:
            raise JSReferenceError(name)
        variable = owner.variables[name]
        if variable.in_dead_zone:
            raise UninitializedAccess(name)
        if variable.kind is VariableKind.CONST:
            raise ConstReassignment(name)
        variable.value = value
        variable.initialized = True

    def copy(self, scope_id: str) -> Scope:
        """Sibling scope with the same parent and copies of every binding."""
        clone = Scope(scope_id, self.name, self.kind, self.parent)
        for name, variable in self.variables.items():
            clone.variables[name] = Variable(variable.name, variable.value,
                                             variable.kind, variable.initialized)
        return clone

    # ---- snapshots ----

    def to_data(self) -> ScopeData:
        return ScopeData(
            scope_id=self.scope_id,
            name=self.name,
            kind=self.kind,
            parent_id=self.parent.scope_id if self.parent is not None else None,
            variables=tuple(
                VariableSnapshot(v.name, v.value, v.kind, v.initialized)
                for v in self.variables.values()
            ),
        )

    def snapshot(self) -> ScopeSnapshot:
        """Immutable copy of this scope and every ancestor, nearest first."""
        return ScopeSnapshot(
            current_scope_id=self.scope_id,
            chain=tuple(scope.to_data() for scope in self.chain()),
        )

    def __repr__(self) -> str:
        parent_id = self.parent.scope_id if self.parent else None
        return f"Scope({self.scope_id!r}, {self.name!r}, {self.kind.value}, parent={parent_id!r})"
