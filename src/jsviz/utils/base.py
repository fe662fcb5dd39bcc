"""
Base Classes and Utilities for jsviz
Statement completion signals and Lark position helpers
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..shared.source_location import SourceLocation
from ..shared.values import UNDEFINED, RuntimeValue


class ExecutionFlowTag(Enum):
    RETURN = "return"
    BREAK = "break"
    CONTINUE = "continue"


@dataclass
class ExecutionFlow:
    """
    Non-local completion of a statement, propagated without exceptions.

    Statements that complete normally return None; everything else returns
    one of these and the nearest consumer (loop or call) unwraps it.
    """
    tag: ExecutionFlowTag
    value: RuntimeValue = UNDEFINED

    @classmethod
    def return_value(cls, value: RuntimeValue) -> 'ExecutionFlow':
        return cls(ExecutionFlowTag.RETURN, value)

    @classmethod
    def break_loop(cls) -> 'ExecutionFlow':
        return cls(ExecutionFlowTag.BREAK)

    @classmethod
    def continue_loop(cls) -> 'ExecutionFlow':
        return cls(ExecutionFlowTag.CONTINUE)

    def is_return(self) -> bool:
        return self.tag is ExecutionFlowTag.RETURN

    def is_break(self) -> bool:
        return self.tag is ExecutionFlowTag.BREAK

    def get_value(self) -> RuntimeValue:
        return self.value


def location_from_meta(meta: Any, file: str) -> Optional[SourceLocation]:
    """SourceLocation for a Lark tree's meta; None when the rule matched nothing."""
    if meta is None or getattr(meta, 'empty', False):
        return None
    line = getattr(meta, 'line', None)
    column = getattr(meta, 'column', None)
    if line is None or column is None:
        return None
    return SourceLocation(
        file=file,
        line=line,
        column=column,
        start=getattr(meta, 'start_pos', 0) or 0,
        end=getattr(meta, 'end_pos', 0) or 0,
        end_line=getattr(meta, 'end_line', 0) or 0,
        end_column=getattr(meta, 'end_column', 0) or 0,
    )
