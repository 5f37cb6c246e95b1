"""Schema Contract

Every schema implements one internal step, _attempt(value, ctx), returning
Ok(output), Err() (reasons already recorded on ctx), or an awaitable of one of
those. The public entry points are built on top of it:

- safe_parse(): never raises; Success/Failure, or an awaitable of one when a
  refinement or global rule needs awaiting
- parse(): output directly, raising ValidationError with the full error list
- safe_parse_async()/parse_async(): always awaitable, for callers that prefer
  a single finish mode

Schemas are immutable. Constraint and modifier methods return new schemas and
never touch the receiver, so one schema can be shared freely.
"""
from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Sequence

from wenfit.core.context import ParseContext
from wenfit.core.outcome import MISSING, Attempt, Ok, Outcome, is_deferred, settle
from wenfit.errors import ErrorCode, MessageRegistry
from wenfit.logging import get_logger
from wenfit.plugins.registry import GlobalRule, PluginRegistry
from wenfit.result import Failure, Success, ValidationResult

if TYPE_CHECKING:
    from wenfit.core.modifiers import (
        DefaultSchema,
        NullableSchema,
        OptionalSchema,
        RefineSchema,
        TransformSchema,
    )
    from wenfit.core.unions import IntersectionSchema, UnionSchema

log = get_logger(__name__)

Predicate = Callable[[Any], "bool | Awaitable[bool]"]


@dataclass(frozen=True, slots=True)
class Check:
    """A configured constraint: its bound plus an optional per-call message."""
    value: Any = None
    message: str | None = None


class Schema(ABC):
    """Base class for all schemas.

    Composable via operators:
    - a | b: union, first matching member wins
    - a & b: intersection, every member must pass
    """

    __slots__ = ()

    @abstractmethod
    def _attempt(self, value: Any, ctx: ParseContext) -> Attempt[Any]:
        """Validate value against this schema, recording failures on ctx."""

    @abstractmethod
    def to_json_schema(self) -> dict[str, Any]:
        """Best-effort JSON Schema descriptor (transforms and refinements are invisible)."""

    @property
    def accepts_missing(self) -> bool:
        """True when an absent object key is handed to this schema instead of failing as required."""
        return False

    # Entry points ---------------------------------------------------------

    def safe_parse(self, value: Any, *, messages: MessageRegistry | None = None,
                   plugins: PluginRegistry | None = None) -> ValidationResult | Awaitable[ValidationResult]:
        """Validate value without raising.

        Returns a coroutine instead of a result when any step needs awaiting.
        """
        ctx = ParseContext(messages=messages, plugins=plugins)
        try:
            attempt = self._attempt(value, ctx)
        except RecursionError:
            return _too_deep(ctx)
        if is_deferred(attempt) or ctx.is_async:
            log.debug("async_completion", schema=type(self).__name__)
            return self._complete_later(attempt, value, ctx)
        return self._complete(attempt, value, ctx)

    def parse(self, value: Any, *, messages: MessageRegistry | None = None,
              plugins: PluginRegistry | None = None) -> Any:
        """Validate value and return the output, raising ValidationError on failure."""
        result = self.safe_parse(value, messages=messages, plugins=plugins)
        if is_deferred(result): return _unwrap_later(result)
        return result.unwrap()

    async def safe_parse_async(self, value: Any, *, messages: MessageRegistry | None = None,
                               plugins: PluginRegistry | None = None) -> ValidationResult:
        result = self.safe_parse(value, messages=messages, plugins=plugins)
        return await result if is_deferred(result) else result

    async def parse_async(self, value: Any, *, messages: MessageRegistry | None = None,
                          plugins: PluginRegistry | None = None) -> Any:
        return (await self.safe_parse_async(value, messages=messages, plugins=plugins)).unwrap()

    def _complete(self, outcome: Outcome[Any], raw: Any, ctx: ParseContext) -> ValidationResult | Awaitable[ValidationResult]:
        if isinstance(outcome, Ok) and not ctx.has_errors():
            pending = _check_global_rules(self, raw, ctx, ctx.plugins.global_rules())
            if pending is not None:
                log.debug("async_completion", schema=type(self).__name__, reason="global_rule")
                return self._complete_later(_after(pending, outcome), raw, ctx, rules_done=True)
        return _result(outcome, ctx)

    async def _complete_later(self, attempt: Attempt[Any], raw: Any, ctx: ParseContext, *,
                              rules_done: bool = False) -> ValidationResult:
        try:
            outcome = await settle(attempt)
        except RecursionError:
            return _too_deep(ctx)
        except Exception as e:
            ctx.add_error(ErrorCode.ASYNC_ERROR, str(e) or "Async validation failed", path=())
            return _result(None, ctx)
        if not rules_done and isinstance(outcome, Ok) and not ctx.has_errors():
            pending = _check_global_rules(self, raw, ctx, ctx.plugins.global_rules())
            if pending is not None: await pending
        return _result(outcome, ctx)

    # Modifier factories ---------------------------------------------------

    def optional(self) -> OptionalSchema:
        """Accept an absent value (MISSING) without consulting this schema."""
        from wenfit.core.modifiers import OptionalSchema
        return OptionalSchema(self)

    def nullable(self) -> NullableSchema:
        """Accept None without consulting this schema."""
        from wenfit.core.modifiers import NullableSchema
        return NullableSchema(self)

    def default(self, value: Any = None, *, factory: Callable[[], Any] | None = None) -> DefaultSchema:
        """Substitute value (or factory()) for an absent input, then validate it.

        Never applies to None.
        """
        from wenfit.core.modifiers import DefaultSchema
        return DefaultSchema(self, value, factory)

    def transform(self, fn: Callable[[Any], Any]) -> TransformSchema:
        """Map the validated output; exceptions become transform errors."""
        from wenfit.core.modifiers import TransformSchema
        return TransformSchema(self, fn)

    def refine(self, predicate: Predicate, message: str | None = None, *,
               code: ErrorCode | str = ErrorCode.CUSTOM) -> RefineSchema:
        """Add a custom check that runs after every built-in check has passed.

        The predicate may be a coroutine function. Refinements run in the
        order they were attached and stop at the first failure.
        """
        from wenfit.core.modifiers import RefineSchema
        return RefineSchema(self, predicate, message, code)

    def __or__(self, other: Schema) -> UnionSchema:
        from wenfit.core.unions import UnionSchema
        return UnionSchema((self, other))

    def __and__(self, other: Schema) -> IntersectionSchema:
        from wenfit.core.unions import IntersectionSchema
        return IntersectionSchema((self, other))


def _result(outcome: Outcome[Any] | None, ctx: ParseContext) -> ValidationResult:
    errors = ctx.errors
    if errors: return Failure(tuple(errors))
    if not isinstance(outcome, Ok):
        # Err without a recorded reason only happens on a broken custom schema
        ctx.add_error(ErrorCode.CUSTOM, "Invalid value", path=())
        return Failure(tuple(ctx.errors))
    return Success(None if outcome.value is MISSING else outcome.value)


def _too_deep(ctx: ParseContext) -> ValidationResult:
    log.warning("max_depth_exceeded", errors_before=len(ctx.errors))
    ctx.add_error(ErrorCode.MAX_DEPTH, "Input is nested too deeply to validate", path=())
    return Failure(tuple(ctx.errors))


async def _unwrap_later(pending: Awaitable[ValidationResult]) -> Any:
    return (await pending).unwrap()


async def _after(pending: Awaitable[None], outcome: Outcome[Any]) -> Outcome[Any]:
    await pending
    return outcome


# Global rules ---------------------------------------------------------------

def _check_global_rules(schema: Schema, raw: Any, ctx: ParseContext,
                        rules: Sequence[GlobalRule], start: int = 0) -> Awaitable[None] | None:
    """Run rules in registration order; switch to a coroutine at the first deferred verdict."""
    for index in range(start, len(rules)):
        rule = rules[index]
        try:
            verdict = rule.validate(schema, raw)
        except Exception as e:
            _rule_failed(rule, ctx, e)
            continue
        if inspect.isawaitable(verdict):
            ctx.mark_async()
            return _check_global_rules_later(schema, raw, ctx, rules, index, verdict)
        if not verdict: _rule_failed(rule, ctx)
    return None


async def _check_global_rules_later(schema: Schema, raw: Any, ctx: ParseContext, rules: Sequence[GlobalRule],
                                    index: int, verdict: Awaitable[bool]) -> None:
    try:
        passed = await verdict
    except Exception as e:
        _rule_failed(rules[index], ctx, e)
    else:
        if not passed: _rule_failed(rules[index], ctx)
    rest = _check_global_rules(schema, raw, ctx, rules, index + 1)
    if rest is not None: await rest


def _rule_failed(rule: GlobalRule, ctx: ParseContext, exc: Exception | None = None) -> None:
    message = (str(exc) if exc is not None else "") or rule.message
    ctx.add_error(rule.code or ErrorCode.PLUGIN_ERROR, message, path=())
