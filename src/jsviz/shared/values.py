"""
Runtime values

JavaScript values are represented with plain Python objects:

    undefined  -> UNDEFINED (singleton)
    null       -> None
    boolean    -> bool
    number     -> int / float (integral results are normalized to int)
    string     -> str
    reference  -> ObjectReference(heap_id)

Objects, arrays and functions live on the heap and are only ever handled
through an ObjectReference, so assigning one never copies it.
"""

import math
from dataclasses import dataclass
from typing import Union


class Undefined:
    """The JavaScript `undefined` value."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "undefined"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


UNDEFINED = Undefined()


@dataclass(frozen=True)
class ObjectReference:
    """Pointer to a heap object. Carries the id, never the object."""
    heap_id: str

    def __str__(self) -> str:
        return f"<ref:{self.heap_id}>"


RuntimeValue = Union[Undefined, None, bool, int, float, str, ObjectReference]

MAX_SAFE_INTEGER = 2 ** 53


def is_number(value: RuntimeValue) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_nullish(value: RuntimeValue) -> bool:
    return value is None or value is UNDEFINED


def normalize_number(value: Union[int, float]) -> Union[int, float]:
    """
    Collapse integral floats to int so `6 / 3` displays as `2`. Negative zero
    stays a float; an int cannot carry its sign.
    """
    if isinstance(value, float) and math.isfinite(value) and value.is_integer() \
            and abs(value) <= MAX_SAFE_INTEGER and not is_negative_zero(value):
        return int(value)
    return value


def is_negative_zero(value: Union[int, float]) -> bool:
    return value == 0 and math.copysign(1.0, value) < 0


# ==================== COERCIONS ====================

def to_boolean(value: RuntimeValue) -> bool:
    if value is UNDEFINED or value is None:
        return False
    if isinstance(value, bool):
        return value
    if is_number(value):
        return not (value == 0 or math.isnan(value))
    if isinstance(value, str):
        return value != ""
    return True


def to_number(value: RuntimeValue) -> Union[int, float]:
    if value is UNDEFINED:
        return math.nan
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if is_number(value):
        return value
    if isinstance(value, str):
        return _string_to_number(value)
    return math.nan


def _string_to_number(text: str) -> Union[int, float]:
    stripped = text.strip()
    if stripped == "":
        return 0
    if stripped in ("Infinity", "+Infinity"):
        return math.inf
    if stripped == "-Infinity":
        return -math.inf
    lowered = stripped.lower()
    try:
        if lowered.startswith("0x"):
            return int(lowered, 16)
        if lowered in ("inf", "+inf", "-inf", "nan", "infinity", "+infinity", "-infinity"):
            return math.nan
        return normalize_number(float(stripped))
    except ValueError:
        return math.nan


def number_to_string(value: Union[int, float]) -> str:
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    if "e" in text:
        mantissa, exponent = text.split("e")
        exp = int(exponent)
        text = f"{mantissa}e{'+' if exp > 0 else '-'}{abs(exp)}"
    return text


def to_string(value: RuntimeValue) -> str:
    """ToString for primitives. References render as a generic object tag."""
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        return number_to_string(value)
    if isinstance(value, str):
        return value
    return "[object Object]"


def to_property_key(value: RuntimeValue) -> str:
    return to_string(value)


def format_value(value: RuntimeValue) -> str:
    """Render a value for a step description: strings quoted, references by id."""
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, ObjectReference):
        return str(value)
    return to_string(value)
