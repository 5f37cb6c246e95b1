"""Object Schema

Validates a mapping against a declared shape of property schemas.

- Every property is checked; errors from all properties are kept
- A missing key is a 'required' error unless its schema accepts absence
  (optional/default), in which case the schema sees MISSING
- Unknown keys: 'passthrough' copies them to the output, 'strict' rejects
  them with one aggregated error
- A mapping that is already being traversed higher up fails with
  'circular_reference' instead of recursing
- Output is always a new dict; the input is never mutated
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Iterable, Literal

from wenfit.config import get_settings
from wenfit.core.context import ParseContext
from wenfit.core.outcome import INVALID, MISSING, Attempt, Ok, Outcome, gather, type_name
from wenfit.core.schema import Schema
from wenfit.errors import ErrorCode

UnknownKeys = Literal["passthrough", "strict"]

_MODES = ("passthrough", "strict")


@dataclass(frozen=True, slots=True)
class ObjectSchema(Schema):
    shape: Mapping[str, Schema] = field(default_factory=dict)
    unknown_keys: UnknownKeys = "passthrough"

    def __post_init__(self):
        if self.unknown_keys not in _MODES:
            raise ValueError(f"unknown_keys must be one of {_MODES}, got {self.unknown_keys!r}")
        object.__setattr__(self, "shape", MappingProxyType(dict(self.shape)))

    def _attempt(self, value: Any, ctx: ParseContext) -> Attempt[dict[str, Any]]:
        if not isinstance(value, Mapping):
            ctx.report(ErrorCode.INVALID_TYPE, "Expected object", meta={"expected": "object", "received": type_name(value)})
            return INVALID
        if ctx.has_visited(value):
            ctx.report(ErrorCode.CIRCULAR_REFERENCE, "Circular reference detected")
            return INVALID

        ctx.mark_visited(value)
        try:
            attempts = [self._property(key, schema, value, ctx) for key, schema in self.shape.items()]
            unknown = [key for key in value if key not in self.shape]
            extras: dict[Any, Any] = {}
            if unknown and self.unknown_keys == "strict":
                ctx.report(ErrorCode.UNKNOWN_KEYS, f"Unknown properties: {', '.join(str(k) for k in unknown)}",
                    meta={"unknown_keys": unknown})
                attempts.append(INVALID)
            elif unknown:
                extras = {key: value[key] for key in unknown}
        finally:
            ctx.unmark_visited(value)

        keys = list(self.shape)
        return gather(attempts, lambda outcomes: _assemble(keys, outcomes, extras))

    @staticmethod
    def _property(key: str, schema: Schema, value: Mapping, ctx: ParseContext) -> Attempt[Any]:
        with ctx.at(key):
            if key in value: return schema._attempt(value[key], ctx)
            if schema.accepts_missing: return schema._attempt(MISSING, ctx)
            ctx.report(ErrorCode.REQUIRED, f"Required property '{key}' is missing", meta={"key": key})
            return INVALID

    # Shape algebra --------------------------------------------------------

    def strict(self) -> ObjectSchema:
        """Reject keys not declared in the shape."""
        return replace(self, unknown_keys="strict")

    def passthrough(self) -> ObjectSchema:
        """Copy undeclared keys to the output unchanged."""
        return replace(self, unknown_keys="passthrough")

    def pick(self, keys: Iterable[str]) -> ObjectSchema:
        wanted = set(keys)
        return replace(self, shape={k: s for k, s in self.shape.items() if k in wanted})

    def omit(self, keys: Iterable[str]) -> ObjectSchema:
        dropped = set(keys)
        return replace(self, shape={k: s for k, s in self.shape.items() if k not in dropped})

    def extend(self, shape: Mapping[str, Schema]) -> ObjectSchema:
        """Add properties; later declarations replace earlier ones."""
        return replace(self, shape={**self.shape, **shape})

    def merge(self, other: ObjectSchema) -> ObjectSchema:
        """Combine with another object schema, keeping this one's unknown-key mode."""
        return self.extend(other.shape)

    def keys(self) -> list[str]: return list(self.shape)

    def to_json_schema(self) -> dict[str, Any]:
        properties = {key: schema.to_json_schema() for key, schema in self.shape.items()}
        required = [key for key, schema in self.shape.items() if not schema.accepts_missing]
        schema: dict[str, Any] = {"type": "object", "properties": properties}
        if required: schema["required"] = required
        schema["additionalProperties"] = self.unknown_keys != "strict"
        return schema


def _assemble(keys: list[str], outcomes: list[Outcome[Any]], extras: dict[Any, Any]) -> Outcome[dict[str, Any]]:
    if not all(isinstance(o, Ok) for o in outcomes): return INVALID
    result = {key: o.value for key, o in zip(keys, outcomes) if o.value is not MISSING}
    result.update(extras)
    return Ok(result)


def object_(shape: Mapping[str, Schema] | None = None, *, unknown_keys: UnknownKeys | None = None) -> ObjectSchema:
    """Object schema; the unknown-key mode defaults to WENFIT_DEFAULT_UNKNOWN_KEYS."""
    return ObjectSchema(dict(shape or {}), unknown_keys or get_settings().DEFAULT_UNKNOWN_KEYS)
