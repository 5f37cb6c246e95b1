"""Union and Intersection Schemas

Union: members are tried in declaration order against the same raw input,
each on an isolated fork of the context; the first member that succeeds
provides the output. When every member fails, one 'union.invalid' error is
recorded whose meta carries each member's own error list.

Intersection: every member validates the same raw input on its own attached
fork, so member errors land in the outer context in member order. The output
is that of the last member, which means a later member's transforms win for
overlapping structure. Callers relying on a particular output shape should
put that member last.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from wenfit.core.context import ParseContext
from wenfit.core.outcome import INVALID, Attempt, Ok, Outcome, gather, is_deferred, settle
from wenfit.core.schema import Schema
from wenfit.errors import ErrorCode, ValidationIssue


@dataclass(frozen=True, slots=True)
class UnionSchema(Schema):
    options: tuple[Schema, ...]

    def __post_init__(self):
        if not self.options: raise ValueError("union() requires at least one member schema")

    @property
    def accepts_missing(self) -> bool: return any(option.accepts_missing for option in self.options)

    def _attempt(self, value: Any, ctx: ParseContext) -> Attempt[Any]:
        return self._try_from(0, value, ctx, [])

    def _try_from(self, start: int, value: Any, ctx: ParseContext,
                  failures: list[list[ValidationIssue]]) -> Attempt[Any]:
        for index in range(start, len(self.options)):
            branch = ctx.fork()
            attempt = self.options[index]._attempt(value, branch)
            if is_deferred(attempt):
                # traversal moves on before this resumes; report through a fork pinned here
                return self._resume(index, attempt, branch, value, ctx.fork(attach=True), failures)
            if isinstance(attempt, Ok) and not branch.has_errors(): return attempt
            failures.append(branch.errors)
        return self._no_match(ctx, failures)

    async def _resume(self, index: int, attempt: Attempt[Any], branch: ParseContext, value: Any,
                      ctx: ParseContext, failures: list[list[ValidationIssue]]) -> Outcome[Any]:
        outcome = await settle(attempt)
        if isinstance(outcome, Ok) and not branch.has_errors(): return outcome
        failures.append(branch.errors)
        return await settle(self._try_from(index + 1, value, ctx, failures))

    @staticmethod
    def _no_match(ctx: ParseContext, failures: list[list[ValidationIssue]]) -> Outcome[Any]:
        ctx.report(ErrorCode.UNION_INVALID, "Input did not match any union member", meta={"union_errors": failures})
        return INVALID

    def __or__(self, other: Schema) -> UnionSchema: return UnionSchema((*self.options, other))

    def to_json_schema(self) -> dict[str, Any]:
        return {"anyOf": [option.to_json_schema() for option in self.options]}


@dataclass(frozen=True, slots=True)
class IntersectionSchema(Schema):
    members: tuple[Schema, ...]

    def __post_init__(self):
        if not self.members: raise ValueError("intersection() requires at least one member schema")

    @property
    def accepts_missing(self) -> bool: return all(member.accepts_missing for member in self.members)

    def _attempt(self, value: Any, ctx: ParseContext) -> Attempt[Any]:
        attempts = [member._attempt(value, ctx.fork(attach=True)) for member in self.members]
        return gather(attempts, _last_success)

    def __and__(self, other: Schema) -> IntersectionSchema: return IntersectionSchema((*self.members, other))

    def to_json_schema(self) -> dict[str, Any]:
        return {"allOf": [member.to_json_schema() for member in self.members]}


def _last_success(outcomes: list[Outcome[Any]]) -> Outcome[Any]:
    if not all(isinstance(o, Ok) for o in outcomes): return INVALID
    return outcomes[-1]


def union(options: Iterable[Schema]) -> UnionSchema: return UnionSchema(tuple(options))


def intersection(members: Iterable[Schema]) -> IntersectionSchema: return IntersectionSchema(tuple(members))
