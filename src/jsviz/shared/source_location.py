"""
Source Location (Span)

Every AST node carries one so that each recorded step can point back at the
line and column that produced it.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLocation:
    """
    Source location of a node.

    - File, line, column (+ optional start/end character offsets)
    - Lines and columns are 1-based, as reported by the parser
    - Immutable (frozen) for hashability
    """
    file: str
    line: int
    column: int
    start: int = 0
    end: int = 0
    end_line: int = 0
    end_column: int = 0

    @property
    def column0(self) -> int:
        """0-based column, the convention editors use for highlighting."""
        return max(self.column - 1, 0)

    def __str__(self) -> str:
        """Format as file:line:column"""
        return f"{self.file}:{self.line}:{self.column}"
