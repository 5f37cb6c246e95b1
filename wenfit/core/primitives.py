"""Leaf Primitive Schemas

string, number, boolean, date and enum checks. Leaf schemas stop at the first
failing constraint, in a fixed order per type. Every constraint method takes
an optional message that overrides both the template registry and the
default text.

Features:
- Frozen dataclass schemas; constraint methods return new instances
- Patterns compiled once when the constraint is added
- Constraint details in error meta for templates
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from datetime import date as Date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable
from urllib.parse import urlparse

from wenfit.core.context import ParseContext
from wenfit.core.outcome import INVALID, Attempt, Ok, type_name
from wenfit.core.schema import Check, Schema
from wenfit.errors import ErrorCode

_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _invalid_type(ctx: ParseContext, expected: str, value: Any, message: str | None = None) -> Attempt[Any]:
    ctx.report(ErrorCode.INVALID_TYPE, message or f"Expected {expected}",
        meta={"expected": expected, "received": type_name(value)})
    return INVALID


# ============================================================================
# String
# ============================================================================

@dataclass(frozen=True, slots=True)
class StringSchema(Schema):
    min_length: Check | None = None
    max_length: Check | None = None
    exact_length: Check | None = None
    regex: Check | None = None
    email_format: Check | None = None
    url_format: Check | None = None

    def _attempt(self, value: Any, ctx: ParseContext) -> Attempt[str]:
        if not isinstance(value, str): return _invalid_type(ctx, "string", value)
        size = len(value)
        if (c := self.min_length) and size < c.value:
            ctx.report(ErrorCode.STRING_MIN, f"String must be at least {c.value} characters",
                meta={"min": c.value, "actual": size}, message=c.message)
            return INVALID
        if (c := self.max_length) and size > c.value:
            ctx.report(ErrorCode.STRING_MAX, f"String must be at most {c.value} characters",
                meta={"max": c.value, "actual": size}, message=c.message)
            return INVALID
        if (c := self.exact_length) and size != c.value:
            ctx.report(ErrorCode.STRING_LENGTH, f"String must be exactly {c.value} characters",
                meta={"length": c.value, "actual": size}, message=c.message)
            return INVALID
        if (c := self.regex) and not c.value.search(value):
            ctx.report(ErrorCode.STRING_PATTERN, "String does not match pattern",
                meta={"pattern": c.value.pattern}, message=c.message)
            return INVALID
        if (c := self.email_format) and not _EMAIL.match(value):
            ctx.report(ErrorCode.STRING_EMAIL, "Invalid email format", message=c.message)
            return INVALID
        if (c := self.url_format) and not _is_url(value):
            ctx.report(ErrorCode.STRING_URL, "Invalid URL format", message=c.message)
            return INVALID
        return Ok(value)

    def min(self, length: int, message: str | None = None) -> StringSchema:
        return replace(self, min_length=Check(length, message))

    def max(self, length: int, message: str | None = None) -> StringSchema:
        return replace(self, max_length=Check(length, message))

    def length(self, exact: int, message: str | None = None) -> StringSchema:
        return replace(self, exact_length=Check(exact, message))

    def pattern(self, pattern: str | re.Pattern, message: str | None = None) -> StringSchema:
        """Require a regex match anywhere in the string (anchor it for full matches)."""
        return replace(self, regex=Check(re.compile(pattern), message))

    def email(self, message: str | None = None) -> StringSchema:
        return replace(self, email_format=Check(True, message))

    def url(self, message: str | None = None) -> StringSchema:
        return replace(self, url_format=Check(True, message))

    def trim(self) -> Schema: return self.transform(str.strip)

    def to_lower(self) -> Schema: return self.transform(str.lower)

    def to_upper(self) -> Schema: return self.transform(str.upper)

    def to_json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": "string"}
        if self.min_length: schema["minLength"] = self.min_length.value
        if self.max_length: schema["maxLength"] = self.max_length.value
        if self.exact_length: schema["minLength"] = schema["maxLength"] = self.exact_length.value
        if self.regex: schema["pattern"] = self.regex.value.pattern
        if self.email_format: schema["format"] = "email"
        if self.url_format: schema["format"] = "uri"
        return schema


def _is_url(value: str) -> bool:
    try:
        parts = urlparse(value)
    except ValueError:
        return False
    return bool(parts.scheme and parts.netloc)


# ============================================================================
# Number
# ============================================================================

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _is_nan(value: Any) -> bool:
    if isinstance(value, float): return math.isnan(value)
    return isinstance(value, Decimal) and value.is_nan()


def _is_integral(value: Any) -> bool:
    if isinstance(value, int): return True
    if isinstance(value, float): return value.is_integer()
    return value.is_finite() and value == value.to_integral_value()


@dataclass(frozen=True, slots=True)
class NumberSchema(Schema):
    """int, float or Decimal (never bool). NaN is rejected as a type error."""
    minimum: Check | None = None
    maximum: Check | None = None
    integer: Check | None = None
    must_be_positive: Check | None = None
    must_be_negative: Check | None = None
    must_be_finite: Check | None = None

    def _attempt(self, value: Any, ctx: ParseContext) -> Attempt[Any]:
        if not _is_number(value): return _invalid_type(ctx, "number", value)
        if _is_nan(value):
            ctx.report(ErrorCode.INVALID_TYPE, "Expected number, received NaN",
                meta={"expected": "number", "received": "NaN"})
            return INVALID
        if (c := self.must_be_finite) and not math.isfinite(value):
            ctx.report(ErrorCode.NUMBER_FINITE, "Number must be finite", message=c.message)
            return INVALID
        if (c := self.minimum) and value < c.value:
            ctx.report(ErrorCode.NUMBER_MIN, f"Number must be at least {c.value}",
                meta={"min": c.value, "actual": value}, message=c.message)
            return INVALID
        if (c := self.maximum) and value > c.value:
            ctx.report(ErrorCode.NUMBER_MAX, f"Number must be at most {c.value}",
                meta={"max": c.value, "actual": value}, message=c.message)
            return INVALID
        if (c := self.integer) and not _is_integral(value):
            ctx.report(ErrorCode.NUMBER_INT, "Number must be an integer", meta={"actual": value}, message=c.message)
            return INVALID
        if (c := self.must_be_positive) and value <= 0:
            ctx.report(ErrorCode.NUMBER_POSITIVE, "Number must be positive", meta={"actual": value}, message=c.message)
            return INVALID
        if (c := self.must_be_negative) and value >= 0:
            ctx.report(ErrorCode.NUMBER_NEGATIVE, "Number must be negative", meta={"actual": value}, message=c.message)
            return INVALID
        return Ok(value)

    def min(self, value: int | float | Decimal, message: str | None = None) -> NumberSchema:
        return replace(self, minimum=Check(value, message))

    def max(self, value: int | float | Decimal, message: str | None = None) -> NumberSchema:
        return replace(self, maximum=Check(value, message))

    def int(self, message: str | None = None) -> NumberSchema:
        return replace(self, integer=Check(True, message))

    def positive(self, message: str | None = None) -> NumberSchema:
        return replace(self, must_be_positive=Check(True, message))

    def negative(self, message: str | None = None) -> NumberSchema:
        return replace(self, must_be_negative=Check(True, message))

    def finite(self, message: str | None = None) -> NumberSchema:
        return replace(self, must_be_finite=Check(True, message))

    def to_json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": "integer" if self.integer else "number"}
        if self.minimum: schema["minimum"] = self.minimum.value
        if self.maximum: schema["maximum"] = self.maximum.value
        return schema


@dataclass(frozen=True, slots=True)
class ParseIntSchema(Schema):
    """Decimal integer string to int."""

    def _attempt(self, value: Any, ctx: ParseContext) -> Attempt[int]:
        if not isinstance(value, str): return _invalid_type(ctx, "string", value, "Expected string for parse_int")
        try:
            return Ok(int(value.strip(), 10))
        except ValueError:
            ctx.report(ErrorCode.NUMBER_PARSE_INT, "Failed to parse string as integer", meta={"received": value})
            return INVALID

    def to_json_schema(self) -> dict[str, Any]: return {"type": "string"}


@dataclass(frozen=True, slots=True)
class ParseFloatSchema(Schema):
    """Numeric string to float; 'nan' is rejected."""

    def _attempt(self, value: Any, ctx: ParseContext) -> Attempt[float]:
        if not isinstance(value, str): return _invalid_type(ctx, "string", value, "Expected string for parse_float")
        try:
            parsed = float(value.strip())
        except ValueError:
            parsed = math.nan
        if math.isnan(parsed):
            ctx.report(ErrorCode.NUMBER_PARSE_FLOAT, "Failed to parse string as float", meta={"received": value})
            return INVALID
        return Ok(parsed)

    def to_json_schema(self) -> dict[str, Any]: return {"type": "string"}


# ============================================================================
# Boolean, Date, Enum
# ============================================================================

@dataclass(frozen=True, slots=True)
class BooleanSchema(Schema):
    def _attempt(self, value: Any, ctx: ParseContext) -> Attempt[bool]:
        if not isinstance(value, bool): return _invalid_type(ctx, "boolean", value)
        return Ok(value)

    def to_json_schema(self) -> dict[str, Any]: return {"type": "boolean"}


def _is_aware(value: Date) -> bool:
    return isinstance(value, datetime) and value.utcoffset() is not None


def _mixed_awareness(value: Date, bound: Date) -> bool:
    """True when both are datetimes and exactly one carries a UTC offset."""
    if not (isinstance(value, datetime) and isinstance(bound, datetime)): return False
    return _is_aware(value) != _is_aware(bound)


def _comparable(value: Date, bound: Date) -> tuple[Date, Date]:
    """Promote a plain date to midnight when compared against a datetime."""
    if isinstance(value, datetime) == isinstance(bound, datetime): return value, bound
    if not isinstance(value, datetime): value = datetime.combine(value, time(), tzinfo=bound.tzinfo)
    else: bound = datetime.combine(bound, time(), tzinfo=value.tzinfo)
    return value, bound


@dataclass(frozen=True, slots=True)
class DateSchema(Schema):
    """datetime.date or datetime.datetime instances; bounds are inclusive."""
    earliest: Check | None = None
    latest: Check | None = None

    def _attempt(self, value: Any, ctx: ParseContext) -> Attempt[Date]:
        if not isinstance(value, Date): return _invalid_type(ctx, "date", value)
        for c in (self.earliest, self.latest):
            if c and _mixed_awareness(value, c.value):
                expected = "timezone-aware datetime" if _is_aware(c.value) else "naive datetime"
                return _invalid_type(ctx, expected, value)
        if (c := self.earliest) and (pair := _comparable(value, c.value))[0] < pair[1]:
            ctx.report(ErrorCode.DATE_MIN, f"Date must be at or after {c.value.isoformat()}",
                meta={"min": c.value.isoformat(), "actual": value.isoformat()}, message=c.message)
            return INVALID
        if (c := self.latest) and (pair := _comparable(value, c.value))[0] > pair[1]:
            ctx.report(ErrorCode.DATE_MAX, f"Date must be at or before {c.value.isoformat()}",
                meta={"max": c.value.isoformat(), "actual": value.isoformat()}, message=c.message)
            return INVALID
        return Ok(value)

    def min(self, value: Date, message: str | None = None) -> DateSchema:
        return replace(self, earliest=Check(value, message))

    def max(self, value: Date, message: str | None = None) -> DateSchema:
        return replace(self, latest=Check(value, message))

    def to_json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": "string", "format": "date-time"}
        if self.earliest: schema["formatMinimum"] = self.earliest.value.isoformat()
        if self.latest: schema["formatMaximum"] = self.latest.value.isoformat()
        return schema


@dataclass(frozen=True, slots=True)
class EnumSchema(Schema):
    """Value must equal one of a fixed set (True never matches 1)."""
    values: tuple[Any, ...]

    def _attempt(self, value: Any, ctx: ParseContext) -> Attempt[Any]:
        if any(_same(value, v) for v in self.values): return Ok(value)
        ctx.report(ErrorCode.ENUM_INVALID,
            f"Invalid enum value. Expected one of: {', '.join(str(v) for v in self.values)}",
            meta={"allowed_values": list(self.values), "received": value})
        return INVALID

    def to_json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"enum": list(self.values)}
        if all(isinstance(v, str) for v in self.values): schema["type"] = "string"
        elif all(_is_number(v) for v in self.values): schema["type"] = "number"
        return schema


def _same(value: Any, allowed: Any) -> bool:
    return isinstance(value, bool) == isinstance(allowed, bool) and value == allowed


# ============================================================================
# Factories
# ============================================================================

def string() -> StringSchema: return StringSchema()


def number() -> NumberSchema: return NumberSchema()


def boolean() -> BooleanSchema: return BooleanSchema()


def date() -> DateSchema: return DateSchema()


def enum_(values: Iterable[Any] | type[Enum]) -> EnumSchema:
    """Enum schema from a list of values or a Python Enum class (its member values)."""
    if isinstance(values, type) and issubclass(values, Enum): values = [member.value for member in values]
    values = tuple(values)
    if not values: raise ValueError("enum_() requires at least one value")
    return EnumSchema(values)


def parse_int() -> ParseIntSchema: return ParseIntSchema()


def parse_float() -> ParseFloatSchema: return ParseFloatSchema()
