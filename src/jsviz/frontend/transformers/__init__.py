"""
jsviz AST Transformers
======================

Specialized transformers for different AST node types.
"""

from .base import JsTransformer
from .literals import LiteralParser
from .functions import FunctionDefinitionParser, ParameterParser
from .expressions import OperatorExpressionParser

__all__ = [
    'JsTransformer',
    'LiteralParser',
    'FunctionDefinitionParser',
    'ParameterParser',
    'OperatorExpressionParser',
]
