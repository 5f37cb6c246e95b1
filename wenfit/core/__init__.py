"""Schema engine: contract, context, modifiers, composites and leaf schemas."""
from .outcome import MISSING, INVALID, Ok, Err
from .context import ParseContext
from .schema import Check, Schema
from .modifiers import (
    OptionalSchema,
    NullableSchema,
    DefaultSchema,
    TransformSchema,
    RefineSchema,
)
from .objects import ObjectSchema, object_
from .arrays import ArraySchema, array
from .unions import UnionSchema, IntersectionSchema, union, intersection
from .lazy import LazySchema, lazy
from .primitives import (
    StringSchema,
    NumberSchema,
    BooleanSchema,
    DateSchema,
    EnumSchema,
    ParseIntSchema,
    ParseFloatSchema,
    string,
    number,
    boolean,
    date,
    enum_,
    parse_int,
    parse_float,
)

__all__ = [
    "MISSING",
    "INVALID",
    "Ok",
    "Err",
    "ParseContext",
    "Check",
    "Schema",
    "OptionalSchema",
    "NullableSchema",
    "DefaultSchema",
    "TransformSchema",
    "RefineSchema",
    "ObjectSchema",
    "ArraySchema",
    "UnionSchema",
    "IntersectionSchema",
    "LazySchema",
    "StringSchema",
    "NumberSchema",
    "BooleanSchema",
    "DateSchema",
    "EnumSchema",
    "ParseIntSchema",
    "ParseFloatSchema",
    "object_",
    "array",
    "union",
    "intersection",
    "lazy",
    "string",
    "number",
    "boolean",
    "date",
    "enum_",
    "parse_int",
    "parse_float",
]
