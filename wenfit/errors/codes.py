"""Stable error code taxonomy.

Codes are plain strings on the wire so adapters and message templates can key
on them without importing this module:

    invalid_type               wrong primitive/structural kind
    string.* number.* date.*   per-constraint violations
    array.*
    required unknown_keys      structural problems
    circular_reference
    max_depth                  input nested deeper than the stack allows
    enum.invalid
    union.invalid              no member matched (member errors in meta)
    custom                     refine predicate failed or raised
    plugin.error               global rule failed or raised
    transform.error            transform raised
    async.error                deferred step raised
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Built-in error codes emitted by the engine."""
    # Type
    INVALID_TYPE = "invalid_type"

    # String
    STRING_MIN = "string.min"
    STRING_MAX = "string.max"
    STRING_LENGTH = "string.length"
    STRING_PATTERN = "string.pattern"
    STRING_EMAIL = "string.email"
    STRING_URL = "string.url"

    # Number
    NUMBER_MIN = "number.min"
    NUMBER_MAX = "number.max"
    NUMBER_INT = "number.int"
    NUMBER_POSITIVE = "number.positive"
    NUMBER_NEGATIVE = "number.negative"
    NUMBER_FINITE = "number.finite"
    NUMBER_PARSE_INT = "number.parse_int"
    NUMBER_PARSE_FLOAT = "number.parse_float"

    # Date
    DATE_MIN = "date.min"
    DATE_MAX = "date.max"

    # Array
    ARRAY_MIN = "array.min"
    ARRAY_MAX = "array.max"
    ARRAY_LENGTH = "array.length"

    # Structural
    REQUIRED = "required"
    UNKNOWN_KEYS = "unknown_keys"
    CIRCULAR_REFERENCE = "circular_reference"
    MAX_DEPTH = "max_depth"

    # Enum
    ENUM_INVALID = "enum.invalid"

    # Union
    UNION_INVALID = "union.invalid"

    # User-supplied code paths
    CUSTOM = "custom"
    PLUGIN_ERROR = "plugin.error"
    TRANSFORM_ERROR = "transform.error"
    ASYNC_ERROR = "async.error"

    def __str__(self) -> str:
        return self.value

    @property
    def category(self) -> str:
        """Origin of the error, as grouped in the taxonomy."""
        if self is ErrorCode.INVALID_TYPE:
            return "type"
        if self in (ErrorCode.REQUIRED, ErrorCode.UNKNOWN_KEYS, ErrorCode.CIRCULAR_REFERENCE,
                    ErrorCode.MAX_DEPTH):
            return "structural"
        if self is ErrorCode.UNION_INVALID:
            return "union"
        if self is ErrorCode.CUSTOM:
            return "custom"
        if self is ErrorCode.PLUGIN_ERROR:
            return "plugin"
        if self in (ErrorCode.TRANSFORM_ERROR, ErrorCode.ASYNC_ERROR):
            return "runtime"
        return "constraint"


def code_value(code: ErrorCode | str) -> str:
    """Normalize an ErrorCode member or free-form custom code to its string."""
    return code.value if isinstance(code, ErrorCode) else str(code)
