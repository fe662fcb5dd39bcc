"""
Configuration constants to replace magic numbers throughout jsviz
"""

import os
import tempfile

# Evaluation limits
MAX_LOOP_ITERATIONS = 1000  # Per loop statement; no step is recorded for the cutoff

# Identifier prefixes (ids render as prefix_N, N restarting at 0 every run)
SCOPE_ID_PREFIX = "scope"
HEAP_ID_PREFIX = "heap"
FRAME_ID_PREFIX = "frame"

# Display names
GLOBAL_SCOPE_NAME = "global"
GLOBAL_FRAME_NAME = "global"
BLOCK_SCOPE_NAME = "block"
FOR_SCOPE_NAME = "for"
ANONYMOUS_FUNCTION_NAME = "anonymous"

# Keywords that can never name a binding, even in syntax this interpreter only
# parses and skips
RESERVED_WORDS = frozenset({
    "break", "case", "catch", "class", "const", "continue", "debugger", "default",
    "delete", "do", "else", "export", "extends", "false", "finally", "for",
    "function", "if", "import", "in", "instanceof", "new", "null", "return",
    "super", "switch", "this", "throw", "true", "try", "typeof", "var", "void",
    "while", "with",
})

# Parser configuration constants (cache under temp dir to avoid cluttering project root)
DEFAULT_PARSER_CACHE_FILE = os.path.join(tempfile.gettempdir(), "jsviz_parser.cache")
DEFAULT_SOURCE_FILE = "<script>"

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"
