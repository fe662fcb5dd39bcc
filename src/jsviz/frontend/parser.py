"""
Parser

Lark LALR parser for the JavaScript subset, plus the transformer that turns
the parse tree into shared.nodes.
"""

import logging
from pathlib import Path
from typing import Optional

from lark import Lark
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken, VisitError

from ..shared.errors import InterpreterImplementationError, JsVizError, ParseFailure
from ..shared.nodes import Program
from ..shared.source_location import SourceLocation
from ..utils.config import DEFAULT_PARSER_CACHE_FILE, DEFAULT_SOURCE_FILE
from .transformers.base import JsTransformer

logger = logging.getLogger(__name__)

GRAMMAR_PATH = Path(__file__).parent / "grammar.lark"


class Parser:
    """
    Source text -> Program.

    The compiled parse tables are stateless between calls, so one Parser can
    serve any number of runs.
    """

    def __init__(self, cache_file: Optional[str] = DEFAULT_PARSER_CACHE_FILE):
        # cache=None disables Lark's on-disk table cache
        self.parser = Lark.open(
            str(GRAMMAR_PATH),
            start='program',
            parser='lalr',              # Required for caching
            cache=cache_file,           # Built-in caching
            propagate_positions=True,   # Every node gets line/column
            maybe_placeholders=False,   # Clean meta handling
        )
        self.transformer = JsTransformer()

    def parse(self, source: str, source_file: str = DEFAULT_SOURCE_FILE) -> Program:
        """
        Parse source code to AST.

        Raises ParseFailure for malformed source.
        """
        self.transformer.current_file = source_file
        try:
            tree = self.parser.parse(source)
        except UnexpectedInput as e:
            raise ParseFailure(self._describe(e), self._location(e, source_file)) from e

        try:
            program = self.transformer.transform(tree)
        except VisitError as e:
            if isinstance(e.orig_exc, JsVizError):
                raise e.orig_exc from e
            raise InterpreterImplementationError(
                f"Transformer failed on rule '{e.rule}': {e.orig_exc}"
            ) from e

        logger.debug("Parsed %s: %d top-level statements", source_file, len(program.body))
        return program

    @staticmethod
    def _describe(e: UnexpectedInput) -> str:
        if isinstance(e, UnexpectedEOF):
            return "Unexpected end of input"
        if isinstance(e, UnexpectedToken):
            if e.token.type == '$END':
                return "Unexpected end of input"
            return f"Unexpected token '{e.token}'"
        if isinstance(e, UnexpectedCharacters):
            return f"Unexpected character '{e.char}'"
        return "Invalid syntax"

    @staticmethod
    def _location(e: UnexpectedInput, source_file: str) -> SourceLocation:
        line = getattr(e, 'line', None)
        column = getattr(e, 'column', None)
        if not isinstance(line, int) or line < 1:
            line = 1
        if not isinstance(column, int) or column < 1:
            column = 1
        return SourceLocation(file=source_file, line=line, column=column)
