"""Error model: codes, records, the parse() exception and message templates."""
from .codes import ErrorCode, code_value
from .types import PathSegment, ValidationIssue, ValidationError
from .messages import (
    MessageTemplate,
    MessageRegistry,
    get_message_registry,
    set_error_message,
    set_error_messages,
    clear_error_messages,
)

__all__ = [
    "ErrorCode",
    "code_value",
    "PathSegment",
    "ValidationIssue",
    "ValidationError",
    "MessageTemplate",
    "MessageRegistry",
    "get_message_registry",
    "set_error_message",
    "set_error_messages",
    "clear_error_messages",
]
