"""Lazy Schema

Defers building the wrapped schema until it is first needed, so a schema can
refer to itself:

    node = object_({
        "value": number(),
        "children": array(lazy(lambda: node)),
    })

Recursion through data is bounded by the visited-set check in object and
array schemas, and input nested deeper than the interpreter stack allows
fails with a max_depth error. Recursion through export is cut with an
empty descriptor.

The getter runs outside validation: an exception it raises is a schema
definition bug and propagates to the caller. A failed getter is retried on
the next use.
"""
from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Callable

from wenfit.core.context import ParseContext
from wenfit.core.outcome import Attempt
from wenfit.core.schema import Schema

_exporting: ContextVar[frozenset[int]] = ContextVar("wenfit_lazy_exporting", default=frozenset())


@dataclass(frozen=True, slots=True)
class LazySchema(Schema):
    getter: Callable[[], Schema]
    _resolved: list[Schema] = field(default_factory=list, init=False, repr=False, compare=False)

    @property
    def schema(self) -> Schema:
        """The wrapped schema, built once."""
        if not self._resolved: self._resolved.append(self.getter())
        return self._resolved[0]

    @property
    def accepts_missing(self) -> bool: return self.schema.accepts_missing

    def _attempt(self, value: Any, ctx: ParseContext) -> Attempt[Any]:
        return self.schema._attempt(value, ctx)

    def to_json_schema(self) -> dict[str, Any]:
        active = _exporting.get()
        if id(self) in active: return {}
        token = _exporting.set(active | {id(self)})
        try:
            return self.schema.to_json_schema()
        finally:
            _exporting.reset(token)


def lazy(getter: Callable[[], Schema]) -> LazySchema: return LazySchema(getter)
