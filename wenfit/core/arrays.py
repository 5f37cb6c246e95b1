"""Array Schema

Validates every element of a list or tuple against one element schema,
pushing the index onto the path. Element errors never stop later elements,
and length constraints are checked independently of the elements, so one
pass reports everything. A sequence that contains itself fails with
'circular_reference'.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from wenfit.core.context import ParseContext
from wenfit.core.outcome import INVALID, Attempt, Ok, Outcome, gather, type_name
from wenfit.core.schema import Check, Schema
from wenfit.errors import ErrorCode


@dataclass(frozen=True, slots=True)
class ArraySchema(Schema):
    element: Schema
    min_items: Check | None = None
    max_items: Check | None = None
    exact_items: Check | None = None

    def _attempt(self, value: Any, ctx: ParseContext) -> Attempt[list[Any]]:
        if not isinstance(value, (list, tuple)):
            ctx.report(ErrorCode.INVALID_TYPE, "Expected array", meta={"expected": "array", "received": type_name(value)})
            return INVALID
        if ctx.has_visited(value):
            ctx.report(ErrorCode.CIRCULAR_REFERENCE, "Circular reference detected")
            return INVALID

        ctx.mark_visited(value)
        try:
            attempts: list[Attempt[Any]] = []
            for index, item in enumerate(value):
                with ctx.at(index): attempts.append(self.element._attempt(item, ctx))
        finally:
            ctx.unmark_visited(value)

        size = len(value)
        if (c := self.min_items) and size < c.value:
            ctx.report(ErrorCode.ARRAY_MIN, f"Array must have at least {c.value} elements",
                meta={"min": c.value, "actual": size}, message=c.message)
            attempts.append(INVALID)
        if (c := self.max_items) and size > c.value:
            ctx.report(ErrorCode.ARRAY_MAX, f"Array must have at most {c.value} elements",
                meta={"max": c.value, "actual": size}, message=c.message)
            attempts.append(INVALID)
        if (c := self.exact_items) and size != c.value:
            ctx.report(ErrorCode.ARRAY_LENGTH, f"Array must have exactly {c.value} elements",
                meta={"length": c.value, "actual": size}, message=c.message)
            attempts.append(INVALID)
        return gather(attempts, _assemble)

    def min(self, length: int, message: str | None = None) -> ArraySchema:
        return replace(self, min_items=Check(length, message))

    def max(self, length: int, message: str | None = None) -> ArraySchema:
        return replace(self, max_items=Check(length, message))

    def length(self, length: int, message: str | None = None) -> ArraySchema:
        return replace(self, exact_items=Check(length, message))

    def nonempty(self, message: str | None = None) -> ArraySchema:
        return self.min(1, message or "Array must not be empty")

    def to_json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": "array", "items": self.element.to_json_schema()}
        if self.min_items: schema["minItems"] = self.min_items.value
        if self.max_items: schema["maxItems"] = self.max_items.value
        if self.exact_items: schema["minItems"] = schema["maxItems"] = self.exact_items.value
        return schema


def _assemble(outcomes: list[Outcome[Any]]) -> Outcome[list[Any]]:
    if not all(isinstance(o, Ok) for o in outcomes): return INVALID
    return Ok([o.value for o in outcomes])


def array(element: Schema) -> ArraySchema: return ArraySchema(element)
