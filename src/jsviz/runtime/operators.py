"""
Operator semantics.

Coercion-light JavaScript rules over RuntimeValue:
- `+` concatenates when either side is a string (or an object reference)
- other arithmetic coerces with ToNumber; `/` and `%` by zero give
  Infinity / NaN instead of raising
- `==` follows the abstract equality shortcuts for primitives, `===` never coerces
"""

import logging
import math
from typing import Union

from ..shared.types import BinaryOp, UnaryOp, UpdateOp
from ..shared.values import (
    MAX_SAFE_INTEGER, UNDEFINED, ObjectReference, RuntimeValue, is_nullish, is_number,
    normalize_number, to_boolean, to_number, to_string,
)
from .memory import MemoryModel

logger = logging.getLogger(__name__)

Number = Union[int, float]


def _as_number(value: Number) -> Number:
    """Keep results inside double-precision territory."""
    if isinstance(value, int) and abs(value) > MAX_SAFE_INTEGER:
        try:
            return float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
    return normalize_number(value)


def _category(value: RuntimeValue) -> str:
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


# ==================== ARITHMETIC ====================

def add(left: RuntimeValue, right: RuntimeValue) -> RuntimeValue:
    if isinstance(left, (str, ObjectReference)) or isinstance(right, (str, ObjectReference)):
        return to_string(left) + to_string(right)
    return _as_number(to_number(left) + to_number(right))


def divide(left: Number, right: Number) -> Number:
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        sign = math.copysign(1, left) * math.copysign(1, right)
        return math.inf if sign > 0 else -math.inf
    return _as_number(left / right)


def remainder(left: Number, right: Number) -> Number:
    if right == 0 or math.isnan(left) or math.isnan(right) or math.isinf(left):
        return math.nan
    if math.isinf(right):
        return left
    if isinstance(left, int) and isinstance(right, int):
        # Sign follows the dividend
        return int(math.fmod(left, right)) if abs(left) <= MAX_SAFE_INTEGER else math.fmod(left, right)
    return _as_number(math.fmod(left, right))


def power(base: Number, exponent: Number) -> Number:
    if math.isnan(exponent) or (abs(base) == 1 and math.isinf(exponent)):
        return math.nan
    if isinstance(base, int) and isinstance(exponent, int) and exponent >= 0:
        return _as_number(base ** exponent)
    try:
        return _as_number(math.pow(base, exponent))
    except OverflowError:
        return math.inf
    except ValueError:
        # 0 ** negative, or a negative base with a fractional exponent
        return math.inf if base == 0 else math.nan


def _arithmetic(op: BinaryOp, left: Number, right: Number) -> Number:
    if op is BinaryOp.SUB:
        return _as_number(left - right)
    if op is BinaryOp.MUL:
        product = left * right
        if product == 0 and math.copysign(1, left) * math.copysign(1, right) < 0:
            return -0.0
        return _as_number(product)
    if op is BinaryOp.DIV:
        return divide(left, right)
    if op is BinaryOp.MOD:
        return remainder(left, right)
    return power(left, right)


# ==================== COMPARISON ====================

def strict_equals(left: RuntimeValue, right: RuntimeValue) -> bool:
    if _category(left) != _category(right):
        return False
    if is_number(left):
        return left == right  # NaN != NaN
    return left == right


def loose_equals(left: RuntimeValue, right: RuntimeValue) -> bool:
    if is_nullish(left) or is_nullish(right):
        return is_nullish(left) and is_nullish(right)
    left_cat, right_cat = _category(left), _category(right)
    if left_cat == right_cat:
        return strict_equals(left, right)
    if left_cat == "object" or right_cat == "object":
        return False
    return to_number(left) == to_number(right)


def relational(op: BinaryOp, left: RuntimeValue, right: RuntimeValue) -> bool:
    if isinstance(left, str) and isinstance(right, str):
        a, b = left, right
    else:
        a, b = to_number(left), to_number(right)
        if math.isnan(a) or math.isnan(b):
            return False
    if op is BinaryOp.LT:
        return a < b
    if op is BinaryOp.LE:
        return a <= b
    if op is BinaryOp.GT:
        return a > b
    return a >= b


# ==================== DISPATCH ====================

def binary_operation(op: BinaryOp, left: RuntimeValue, right: RuntimeValue) -> RuntimeValue:
    if op is BinaryOp.ADD:
        return add(left, right)
    if op in (BinaryOp.SUB, BinaryOp.MUL, BinaryOp.DIV, BinaryOp.MOD, BinaryOp.POW):
        return _arithmetic(op, to_number(left), to_number(right))
    if op is BinaryOp.STRICT_EQ:
        return strict_equals(left, right)
    if op is BinaryOp.STRICT_NE:
        return not strict_equals(left, right)
    if op is BinaryOp.EQ:
        return loose_equals(left, right)
    if op is BinaryOp.NE:
        return not loose_equals(left, right)
    if op in (BinaryOp.LT, BinaryOp.LE, BinaryOp.GT, BinaryOp.GE):
        return relational(op, left, right)
    logger.warning("Unsupported binary operator: %s", op)
    return UNDEFINED


def type_of(value: RuntimeValue, memory: MemoryModel) -> str:
    if isinstance(value, ObjectReference):
        obj = memory.get_object(value.heap_id)
        return "function" if obj is not None and obj.is_function else "object"
    if value is None:
        return "object"
    return _category(value)


def unary_operation(op: UnaryOp, value: RuntimeValue, memory: MemoryModel) -> RuntimeValue:
    if op is UnaryOp.NOT:
        return not to_boolean(value)
    if op is UnaryOp.NEG:
        number = to_number(value)
        if number == 0:
            # an int zero has no sign to flip
            return _as_number(-float(number))
        return _as_number(-number)
    if op is UnaryOp.POS:
        return to_number(value)
    if op is UnaryOp.TYPEOF:
        return type_of(value, memory)
    if op is UnaryOp.VOID:
        return UNDEFINED
    logger.warning("Unsupported unary operator: %s", op)
    return UNDEFINED


def update_value(op: UpdateOp, current: RuntimeValue) -> Number:
    number = to_number(current)
    return _as_number(number + 1 if op is UpdateOp.INCREMENT else number - 1)
