"""
Shared enums: binding kinds, scope kinds and operators.

Operators are parsed straight into these enums so the evaluator never
compares raw operator strings.
"""

from enum import Enum
from typing import Optional


class VariableKind(Enum):
    """Declaration keyword a binding was introduced with."""
    VAR = "var"
    LET = "let"
    CONST = "const"


class ScopeKind(Enum):
    GLOBAL = "global"
    FUNCTION = "function"
    BLOCK = "block"


class BinaryOp(Enum):
    """Binary operators - compile-time checked enum"""
    # Arithmetic
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    POW = "**"

    # Equality
    EQ = "=="
    STRICT_EQ = "==="
    NE = "!="
    STRICT_NE = "!=="

    # Relational
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="


class LogicalOp(Enum):
    """Short-circuiting operators"""
    AND = "&&"
    OR = "||"
    NULLISH = "??"


class UnaryOp(Enum):
    NOT = "!"
    NEG = "-"
    POS = "+"
    TYPEOF = "typeof"
    VOID = "void"


class AssignmentOp(Enum):
    ASSIGN = "="
    ADD = "+="
    SUB = "-="
    MUL = "*="
    DIV = "/="
    MOD = "%="

    @property
    def binary(self) -> Optional[BinaryOp]:
        """Operator applied against the current value; None for plain `=`."""
        if self is AssignmentOp.ASSIGN:
            return None
        return BinaryOp(self.value[:-1])


class UpdateOp(Enum):
    INCREMENT = "++"
    DECREMENT = "--"
