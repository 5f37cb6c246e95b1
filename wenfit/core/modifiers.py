"""Modifier Schemas

Wrappers that alter how an inner schema accepts or post-processes a value:

- OptionalSchema: accepts MISSING without delegating
- NullableSchema: accepts None without delegating
- DefaultSchema: substitutes a default for MISSING, then validates it
- TransformSchema: maps the validated output
- RefineSchema: custom predicate after every built-in check has passed

Transform and refine leave MISSING untouched: an absent optional property has
no value to map or check.
"""
from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from wenfit.core.context import ParseContext
from wenfit.core.outcome import INVALID, MISSING, Attempt, Ok, Outcome, then
from wenfit.core.schema import Predicate, Schema
from wenfit.errors import ErrorCode


@dataclass(frozen=True, slots=True)
class OptionalSchema(Schema):
    inner: Schema

    @property
    def accepts_missing(self) -> bool: return True

    def _attempt(self, value: Any, ctx: ParseContext) -> Attempt[Any]:
        if value is MISSING: return Ok(MISSING)
        return self.inner._attempt(value, ctx)

    def to_json_schema(self) -> dict[str, Any]:
        """Same as inner; optionality shows up in the parent's required list."""
        return self.inner.to_json_schema()


@dataclass(frozen=True, slots=True)
class NullableSchema(Schema):
    inner: Schema

    @property
    def accepts_missing(self) -> bool: return self.inner.accepts_missing

    def _attempt(self, value: Any, ctx: ParseContext) -> Attempt[Any]:
        if value is None: return Ok(None)
        return self.inner._attempt(value, ctx)

    def to_json_schema(self) -> dict[str, Any]:
        return {"anyOf": [self.inner.to_json_schema(), {"type": "null"}]}


@dataclass(frozen=True, slots=True)
class DefaultSchema(Schema):
    """Default applied before validation, so an invalid default fails like any other input."""
    inner: Schema
    default_value: Any = None
    factory: Callable[[], Any] | None = None

    @property
    def accepts_missing(self) -> bool: return True

    def _attempt(self, value: Any, ctx: ParseContext) -> Attempt[Any]:
        if value is not MISSING: return self.inner._attempt(value, ctx)
        if self.factory is None: return self.inner._attempt(self.default_value, ctx)
        try:
            value = self.factory()
        except Exception as e:
            ctx.report(ErrorCode.TRANSFORM_ERROR, str(e) or "Default factory failed", meta={"exception": str(e)})
            return INVALID
        return self.inner._attempt(value, ctx)

    def to_json_schema(self) -> dict[str, Any]:
        result = self.inner.to_json_schema()
        if self.factory is None: result = {**result, "default": self.default_value}
        return result


@dataclass(frozen=True, slots=True)
class TransformSchema(Schema):
    inner: Schema
    fn: Callable[[Any], Any]

    @property
    def accepts_missing(self) -> bool: return self.inner.accepts_missing

    def _attempt(self, value: Any, ctx: ParseContext) -> Attempt[Any]:
        attempt = self.inner._attempt(value, ctx)
        sink = ctx.fork(attach=True)
        return then(attempt, lambda outcome: self._apply(outcome, sink))

    def _apply(self, outcome: Outcome[Any], ctx: ParseContext) -> Outcome[Any]:
        if not isinstance(outcome, Ok) or outcome.value is MISSING: return outcome
        try:
            return Ok(self.fn(outcome.value))
        except Exception as e:
            ctx.report(ErrorCode.TRANSFORM_ERROR, str(e) or "Transformation failed", meta={"exception": str(e)})
            return INVALID

    def to_json_schema(self) -> dict[str, Any]: return self.inner.to_json_schema()


@dataclass(frozen=True, slots=True)
class RefineSchema(Schema):
    """Predicate check layered on the inner schema.

    A false verdict, or an exception raised while evaluating the predicate,
    records exactly one error with the configured message and code.
    """
    inner: Schema
    predicate: Predicate
    message: str | None = None
    code: ErrorCode | str = ErrorCode.CUSTOM

    @property
    def accepts_missing(self) -> bool: return self.inner.accepts_missing

    def _attempt(self, value: Any, ctx: ParseContext) -> Attempt[Any]:
        attempt = self.inner._attempt(value, ctx)
        sink = ctx.fork(attach=True)
        return then(attempt, lambda outcome: self._check(outcome, sink))

    def _check(self, outcome: Outcome[Any], ctx: ParseContext) -> Attempt[Any]:
        if not isinstance(outcome, Ok) or outcome.value is MISSING: return outcome
        try:
            verdict = self.predicate(outcome.value)
        except Exception as e:
            return self._fail(ctx, e)
        if inspect.isawaitable(verdict):
            ctx.mark_async()
            return self._check_later(verdict, outcome, ctx)
        return outcome if verdict else self._fail(ctx)

    async def _check_later(self, verdict: Awaitable[bool], outcome: Ok[Any], ctx: ParseContext) -> Outcome[Any]:
        try:
            passed = await verdict
        except Exception as e:
            return self._fail(ctx, e)
        return outcome if passed else self._fail(ctx)

    def _fail(self, ctx: ParseContext, exc: Exception | None = None) -> Outcome[Any]:
        ctx.report(self.code, "Invalid value", meta={"exception": str(exc)} if exc is not None else None,
            message=self.message)
        return INVALID

    def to_json_schema(self) -> dict[str, Any]: return self.inner.to_json_schema()
