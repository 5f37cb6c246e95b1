"""Wenfit: runtime data validation.

Compose immutable schemas, validate untyped input, get every error in one
pass with paths and stable codes, and receive a validated (possibly
transformed) output.

    from wenfit import object_, string, number

    user = object_({"id": string(), "age": number().int().optional()})
    result = user.safe_parse(payload)
    if not result.success:
        return [e.to_dict() for e in result.errors]
"""
from typing import Any, Awaitable

from wenfit.core import (
    MISSING,
    ArraySchema,
    BooleanSchema,
    DateSchema,
    DefaultSchema,
    EnumSchema,
    IntersectionSchema,
    LazySchema,
    NullableSchema,
    NumberSchema,
    ObjectSchema,
    OptionalSchema,
    ParseContext,
    ParseFloatSchema,
    ParseIntSchema,
    RefineSchema,
    Schema,
    StringSchema,
    TransformSchema,
    UnionSchema,
    array,
    boolean,
    date,
    enum_,
    intersection,
    lazy,
    number,
    object_,
    parse_float,
    parse_int,
    string,
    union,
)
from wenfit.errors import (
    ErrorCode,
    MessageRegistry,
    ValidationError,
    ValidationIssue,
    clear_error_messages,
    get_message_registry,
    set_error_message,
    set_error_messages,
)
from wenfit.generators import JSONSchemaGenerator, OpenAPIGenerator
from wenfit.plugins import (
    GlobalRule,
    Plugin,
    PluginAlreadyRegisteredError,
    PluginRegistry,
    RulePlugin,
    clear_plugins,
    get_plugin_registry,
    register_plugin,
)
from wenfit.result import Failure, Success, ValidationResult
from wenfit.transformers import TransformerPipeline

__version__ = "0.1.0"


def parse(schema: Schema, value: Any, **registries: Any) -> Any:
    """Validate value against schema, raising ValidationError on failure."""
    return schema.parse(value, **registries)


def safe_parse(schema: Schema, value: Any, **registries: Any) -> ValidationResult | Awaitable[ValidationResult]:
    """Validate value against schema without raising."""
    return schema.safe_parse(value, **registries)


def to_json_schema(schema: Schema) -> dict[str, Any]:
    return schema.to_json_schema()


__all__ = [
    "MISSING",
    # Schemas
    "Schema",
    "ParseContext",
    "StringSchema",
    "NumberSchema",
    "BooleanSchema",
    "DateSchema",
    "EnumSchema",
    "ParseIntSchema",
    "ParseFloatSchema",
    "ObjectSchema",
    "ArraySchema",
    "UnionSchema",
    "IntersectionSchema",
    "LazySchema",
    "OptionalSchema",
    "NullableSchema",
    "DefaultSchema",
    "TransformSchema",
    "RefineSchema",
    # Factories
    "string",
    "number",
    "boolean",
    "date",
    "enum_",
    "parse_int",
    "parse_float",
    "object_",
    "array",
    "union",
    "intersection",
    "lazy",
    # Entry points
    "parse",
    "safe_parse",
    "to_json_schema",
    # Results and errors
    "Success",
    "Failure",
    "ValidationResult",
    "ValidationIssue",
    "ValidationError",
    "ErrorCode",
    # Messages
    "MessageRegistry",
    "get_message_registry",
    "set_error_message",
    "set_error_messages",
    "clear_error_messages",
    # Plugins
    "GlobalRule",
    "Plugin",
    "RulePlugin",
    "PluginRegistry",
    "PluginAlreadyRegisteredError",
    "get_plugin_registry",
    "register_plugin",
    "clear_plugins",
    # Export and pipelines
    "JSONSchemaGenerator",
    "OpenAPIGenerator",
    "TransformerPipeline",
]
