"""
Tests for the lexical scope chain: declaration placement, TDZ, const,
shadowing, per-iteration copies and snapshots.
"""

import pytest

from jsviz.shared.errors import (
    ConstReassignment, DuplicateDeclaration, JSReferenceError, UninitializedAccess,
)
from jsviz.shared.scope import Scope
from jsviz.shared.types import ScopeKind, VariableKind
from jsviz.shared.values import UNDEFINED


def _global() -> Scope:
    return Scope("scope_0", "global", ScopeKind.GLOBAL)


class TestDeclarations:
    """Where bindings land and which redeclarations are legal"""

    def test_let_stays_in_block(self):
        g = _global()
        block = Scope("scope_1", "block", ScopeKind.BLOCK, g)
        block.declare("y", VariableKind.LET, 2)
        assert block.get("y") == 2
        assert not g.has("y")

    def test_var_hoists_to_function_scope(self):
        """var inside nested blocks lands in the nearest function scope"""
        g = _global()
        fn = Scope("scope_1", "f", ScopeKind.FUNCTION, g)
        inner = Scope("scope_3", "block", ScopeKind.BLOCK,
                      Scope("scope_2", "block", ScopeKind.BLOCK, fn))
        inner.declare("v", VariableKind.VAR, 1)
        assert fn.has_own("v")
        assert not inner.has_own("v")
        assert not g.has("v")

    def test_var_in_global_block(self):
        g = _global()
        block = Scope("scope_1", "block", ScopeKind.BLOCK, g)
        block.declare("v", VariableKind.VAR, "x")
        assert g.get("v") == "x"

    def test_var_redeclaration_returns_existing(self):
        g = _global()
        first = g.declare("x", VariableKind.VAR, 1)
        second = g.declare("x", VariableKind.VAR)
        assert first is second
        assert g.get("x") == 1

    def test_duplicate_let(self):
        g = _global()
        g.declare("x", VariableKind.LET, 1)
        with pytest.raises(DuplicateDeclaration) as exc:
            g.declare("x", VariableKind.LET, 2)
        assert str(exc.value) == "Identifier 'x' has already been declared"

    def test_var_over_let_is_duplicate(self):
        g = _global()
        g.declare("x", VariableKind.LET, 1)
        with pytest.raises(DuplicateDeclaration):
            g.declare("x", VariableKind.VAR, 2)

    def test_shadowing(self):
        g = _global()
        g.declare("x", VariableKind.LET, "outer")
        block = Scope("scope_1", "block", ScopeKind.BLOCK, g)
        block.declare("x", VariableKind.LET, "inner")
        assert block.get("x") == "inner"
        assert g.get("x") == "outer"


class TestTemporalDeadZone:
    """Hoisted let/const placeholders"""

    def test_read_before_initialization(self):
        g = _global()
        g.declare_uninitialized("z", VariableKind.LET)
        with pytest.raises(UninitializedAccess) as exc:
            g.get("z")
        assert str(exc.value) == "Cannot access 'z' before initialization"

    def test_write_before_initialization(self):
        g = _global()
        g.declare_uninitialized("z", VariableKind.LET)
        with pytest.raises(UninitializedAccess):
            g.assign("z", 1)

    def test_declaration_initializes_placeholder(self):
        g = _global()
        placeholder = g.declare_uninitialized("z", VariableKind.CONST)
        declared = g.declare("z", VariableKind.CONST, 3)
        assert placeholder is declared
        assert g.get("z") == 3

    def test_placeholder_twice_is_duplicate(self):
        g = _global()
        g.declare_uninitialized("z", VariableKind.LET)
        with pytest.raises(DuplicateDeclaration):
            g.declare_uninitialized("z", VariableKind.LET)


class TestAccess:
    """get / assign resolution"""

    def test_unresolved_read(self):
        with pytest.raises(JSReferenceError) as exc:
            _global().get("q")
        assert str(exc.value) == "q is not defined"

    def test_unresolved_write(self):
        with pytest.raises(JSReferenceError):
            _global().assign("q", 1)

    def test_const_reassignment(self):
        g = _global()
        g.declare("c", VariableKind.CONST, 1)
        with pytest.raises(ConstReassignment) as exc:
            g.assign("c", 2)
        assert str(exc.value) == "Assignment to constant variable 'c'"
        assert g.get("c") == 1

    def test_assign_writes_owning_scope(self):
        g = _global()
        g.declare("n", VariableKind.LET, 0)
        block = Scope("scope_1", "block", ScopeKind.BLOCK, g)
        block.assign("n", 5)
        assert g.get("n") == 5
        assert not block.has_own("n")


class TestCopiesAndSnapshots:
    """Per-iteration copies and immutable snapshots"""

    def test_copy_is_independent_sibling(self):
        g = _global()
        loop = Scope("scope_1", "for", ScopeKind.BLOCK, g)
        loop.declare("i", VariableKind.LET, 0)
        clone = loop.copy("scope_2")
        clone.assign("i", 1)
        assert clone.parent is g
        assert clone.name == "for"
        assert loop.get("i") == 0
        assert clone.get("i") == 1

    def test_snapshot_nearest_first(self):
        g = _global()
        g.declare("a", VariableKind.LET, 1)
        fn = Scope("scope_1", "f", ScopeKind.FUNCTION, g)
        fn.declare("b", VariableKind.VAR, 2)
        snap = fn.snapshot()
        assert snap.current_scope_id == "scope_1"
        assert [data.scope_id for data in snap.chain] == ["scope_1", "scope_0"]
        assert snap.chain[0].parent_id == "scope_0"
        assert snap.value_of("a") == 1
        assert snap.value_of("b") == 2
        assert snap.value_of("missing") is UNDEFINED

    def test_snapshot_does_not_follow_later_writes(self):
        g = _global()
        g.declare("x", VariableKind.LET, 1)
        snap = g.snapshot()
        g.assign("x", 2)
        assert snap.value_of("x") == 1

    def test_snapshot_records_dead_zone(self):
        g = _global()
        g.declare_uninitialized("t", VariableKind.LET)
        variable = g.snapshot().lookup("t")
        assert variable is not None
        assert variable.initialized is False
        assert variable.kind is VariableKind.LET
