"""Internal attempt outcomes.

A schema's attempt step returns Ok(value), Err(), or an awaitable resolving to
one of those. Err carries no payload: the reasons are already recorded in the
parse context. The helpers below let composite schemas be written once for
both finish modes; child awaitables are always settled one at a time, in
traversal order.
"""
from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Sequence, TypeVar, Union, final

T = TypeVar("T")


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T


@final
@dataclass(frozen=True, slots=True)
class Err:
    pass


INVALID = Err()

Outcome = Union[Ok[T], Err]
Attempt = Union[Ok[T], Err, Awaitable[Union[Ok[T], Err]]]


@final
class _Missing:
    """Marker for an absent value (a missing key, or no input at all)."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None: cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str: return "MISSING"

    def __bool__(self) -> bool: return False

    def __reduce__(self) -> str: return "MISSING"


MISSING: Any = _Missing()


def is_deferred(attempt: Any) -> bool:
    return inspect.isawaitable(attempt)


async def settle(attempt: Attempt[T]) -> Outcome[T]:
    """Await an attempt until it is a concrete Ok/Err."""
    while is_deferred(attempt): attempt = await attempt
    return attempt


def then(attempt: Attempt[T], step: Callable[[Outcome[T]], Attempt[Any]]) -> Attempt[Any]:
    """Feed the settled outcome to step, deferring only if attempt is deferred."""
    if not is_deferred(attempt): return step(attempt)

    async def _later():
        return await settle(step(await settle(attempt)))

    return _later()


def gather(attempts: Sequence[Attempt[Any]], finish: Callable[[list[Outcome[Any]]], Attempt[T]]) -> Attempt[T]:
    """Combine child attempts; finish sees them settled, in their original order."""
    if not any(is_deferred(a) for a in attempts): return finish(list(attempts))

    async def _later():
        settled = [await settle(a) for a in attempts]
        return await settle(finish(settled))

    return _later()


def type_name(value: Any) -> str:
    """Kind of value for invalid_type meta ('missing', 'null', or the Python type name)."""
    if value is MISSING: return "missing"
    if value is None: return "null"
    return type(value).__name__
