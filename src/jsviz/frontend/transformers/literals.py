"""
Literal Parser - Extracted from JsTransformer
Handles parsing of all literal types (numbers, strings, booleans, null)
"""

import re
from typing import Optional, Union

from lark.lexer import Token

from ...shared import Literal, SourceLocation
from ...shared.values import normalize_number

_SIMPLE_ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    'b': '\b',
    'f': '\f',
    'v': '\v',
    '0': '\0',
}

_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\n|.)")


class LiteralParser:
    """Dedicated parser for literal values"""

    @staticmethod
    def parse(token: Token, location: Optional[SourceLocation]) -> Literal:
        """Parse a NUMBER / STRING / TRUE / FALSE / NULL token into a Literal"""
        parser = LiteralParser()
        token_type = token.type
        if token_type == 'NUMBER':
            return Literal(value=parser.parse_number(str(token)), location=location)
        if token_type == 'STRING':
            return Literal(value=parser.parse_string(str(token)), location=location)
        if token_type == 'TRUE':
            return Literal(value=True, location=location)
        if token_type == 'FALSE':
            return Literal(value=False, location=location)
        if token_type == 'NULL':
            return Literal(value=None, location=location)
        return Literal(value=str(token), location=location)

    def parse_number(self, text: str) -> Union[int, float]:
        """Parse numeric literal (decimal, exponent or hex)"""
        lowered = text.lower()
        if lowered.startswith('0x'):
            return int(lowered, 16)
        if '.' in lowered or 'e' in lowered:
            return normalize_number(float(lowered))
        return int(lowered)

    def parse_string(self, quoted: str) -> str:
        """Strip the quotes and resolve escape sequences"""
        return _ESCAPE_RE.sub(self._unescape, quoted[1:-1])

    @staticmethod
    def _unescape(match: 're.Match') -> str:
        body = match.group(1)
        if body.startswith('u{'):
            return chr(int(body[2:-1], 16))
        if body.startswith('u') and len(body) == 5:
            return chr(int(body[1:], 16))
        if body.startswith('x') and len(body) == 3:
            return chr(int(body[1:], 16))
        if body == '\n':
            # Line continuation
            return ''
        return _SIMPLE_ESCAPES.get(body, body)
