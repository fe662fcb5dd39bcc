"""
Error Reporting

Exception taxonomy raised by the parser, the scope chain and the memory
model, plus a rustc-style diagnostic renderer used by the command line.
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional, List, Dict
from .source_location import SourceLocation


# Characters that end the token a caret underline points at
_TOKEN_END = frozenset(" \t;,()[]{}")

_ANSI = {
    "bold": "\033[1m",
    "red": "\033[31m",
    "blue": "\033[34m",
    "cyan": "\033[36m",
}
_ANSI_RESET = "\033[0m"


def color_enabled() -> bool:
    """Color on a terminal unless NO_COLOR or JSVIZ_COLOR=0/never says otherwise."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("JSVIZ_COLOR", "").lower() in ("0", "false", "no", "never"):
        return False
    return sys.stderr.isatty()


@dataclass
class Diagnostic:
    """One reported problem, located in a source file when the location is known."""
    message: str
    location: Optional[SourceLocation]
    code: Optional[str] = None
    help: Optional[str] = None


class DiagnosticRenderer:
    """
    Renders a Diagnostic against the source it points into:

        error[E0002]: x is not defined
         --> counter.js:3:5
          |
        3 |     x = x + 1;
          |     ^
    """

    def __init__(self, source_files: Dict[str, str], color: bool):
        self.source_files = source_files
        self.color = color

    def paint(self, text: str, *styles: str) -> str:
        if not self.color or not styles:
            return text
        return "".join(_ANSI[s] for s in styles) + text + _ANSI_RESET

    def render(self, diagnostic: Diagnostic) -> str:
        code = f"[{diagnostic.code}]" if diagnostic.code else ""
        lines = [self.paint(f"error{code}", "bold", "red") + self.paint(f": {diagnostic.message}", "bold")]

        loc = diagnostic.location
        source = self.source_files.get(loc.file) if loc is not None else None
        if source is None:
            where = str(loc) if loc is not None else "<unknown location>"
            lines.append(self.paint(" --> ", "bold", "blue") + where)
            lines.extend(self._help_lines(diagnostic, 1))
            return "\n".join(lines)

        gutter = len(str(loc.line))
        source_lines = source.split("\n")
        text = source_lines[loc.line - 1] if 0 < loc.line <= len(source_lines) else ""
        start = max(loc.column, 1) - 1
        width = self._span_width(loc, text, start)

        lines.append(self.paint(" " * gutter + "--> ", "bold", "blue") + str(loc))
        lines.append(self.paint(" " * (gutter + 1) + "|", "bold", "blue"))
        lines.append(self.paint(f"{loc.line} | ", "bold", "blue") + text)
        lines.append(self.paint(" " * (gutter + 1) + "| ", "bold", "blue")
                     + self.paint(" " * start + "^" * width, "bold", "red"))
        lines.extend(self._help_lines(diagnostic, gutter))
        return "\n".join(lines)

    @staticmethod
    def _span_width(loc: SourceLocation, text: str, start: int) -> int:
        if loc.end_column > loc.column and loc.end_line in (0, loc.line):
            return loc.end_column - loc.column
        width = 0
        for ch in text[start:]:
            if ch in _TOKEN_END:
                break
            width += 1
        return max(1, width)

    def _help_lines(self, diagnostic: Diagnostic, gutter: int) -> List[str]:
        if not diagnostic.help:
            return []
        pad = " " * (gutter + 1)
        return [
            self.paint(pad + "|", "bold", "blue"),
            self.paint(pad + "= ", "bold", "cyan") + self.paint("help: ", "bold") + diagnostic.help,
        ]


class ErrorReporter:
    """Collects diagnostics and renders them against the sources they refer to."""

    def __init__(self, source_files: Dict[str, str]):
        self.source_files = source_files
        self.errors: List[Diagnostic] = []

    def report_error(
        self,
        message: str,
        location: Optional[SourceLocation],
        code: Optional[str] = None,
        help: Optional[str] = None,
    ) -> None:
        self.errors.append(Diagnostic(message, location, code=code, help=help))

    def report_exception(self, exc: "JsVizError") -> None:
        self.report_error(exc.message, exc.location, code=exc.error_code, help=exc.help_text)

    def format_all_errors(self, color: Optional[bool] = None) -> str:
        renderer = DiagnosticRenderer(self.source_files, color_enabled() if color is None else color)
        return "\n\n".join(renderer.render(error) for error in self.errors)

    def has_errors(self) -> bool:
        return bool(self.errors)


# ============================================================================
# Exception Classes
# ============================================================================

class JsVizError(Exception):
    """Base exception for every error caused by the interpreted program."""
    error_code = "E0001"
    help_text: Optional[str] = None

    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self):
        return self.message


class ParseFailure(JsVizError):
    """Malformed source; the run aborts before any statement executes."""
    error_code = "E0001"


class JSReferenceError(JsVizError):
    """An identifier could not be resolved on read or write."""
    error_code = "E0002"

    def __init__(self, name: str, location: Optional[SourceLocation] = None):
        super().__init__(f"{name} is not defined", location)
        self.name = name


class UninitializedAccess(JsVizError):
    """A let/const binding was touched inside its temporal dead zone."""
    error_code = "E0003"
    help_text = "move the declaration above its first use"

    def __init__(self, name: str, location: Optional[SourceLocation] = None):
        super().__init__(f"Cannot access '{name}' before initialization", location)
        self.name = name


class ConstReassignment(JsVizError):
    """A const binding was written after initialization."""
    error_code = "E0004"
    help_text = "declare the variable with `let` if it needs to change"

    def __init__(self, name: str, location: Optional[SourceLocation] = None):
        super().__init__(f"Assignment to constant variable '{name}'", location)
        self.name = name


class DuplicateDeclaration(JsVizError):
    """A let/const name was declared twice in the same scope."""
    error_code = "E0005"

    def __init__(self, name: str, location: Optional[SourceLocation] = None):
        super().__init__(f"Identifier '{name}' has already been declared", location)
        self.name = name


class InterpreterImplementationError(Exception):
    """
    Error in the interpreter itself, not in the interpreted program.

    Raised for broken internal invariants such as popping an empty call stack.
    """
    def __init__(self, message: str, error_code: str = "E9999"):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self):
        return f"[{self.error_code}] {self.message}"
