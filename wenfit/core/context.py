"""Parse Context

Per-call mutable traversal state. One context is created by each top-level
parse/safe_parse call and discarded when the call completes.

Tracks:
- path: stack of keys/indices for the current location
- errors: issues in traversal order
- visited: identities of containers on the current descent (cycle detection)
- async flag: set once any step needs awaiting, never cleared

Deferred steps finish after traversal has moved on, so they cannot append to
the end of the error list without scrambling its order. Instead they work on
an attached fork: the fork's error list is spliced into the parent's at the
position where the fork was created, and anything it records later shows up
in that position.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Mapping

from wenfit.errors import (
    ErrorCode,
    MessageRegistry,
    PathSegment,
    ValidationIssue,
    code_value,
    get_message_registry,
)
from wenfit.plugins.registry import PluginRegistry, get_plugin_registry


class ParseContext:
    """Traversal state for a single validation call."""

    __slots__ = ("path", "visited", "messages", "plugins", "_entries", "_async", "_parent")

    def __init__(self, *, messages: MessageRegistry | None = None, plugins: PluginRegistry | None = None):
        self.path: list[PathSegment] = []
        self.visited: set[int] = set()
        self.messages = messages if messages is not None else get_message_registry()
        self.plugins = plugins if plugins is not None else get_plugin_registry()
        self._entries: list[ValidationIssue | list] = []
        self._async = False
        self._parent: ParseContext | None = None

    def fork(self, *, attach: bool = False) -> ParseContext:
        """Child context at the current location with its own error list.

        attach=True splices the child's errors into this context at the
        current position; otherwise the child is isolated.
        """
        child = ParseContext(messages=self.messages, plugins=self.plugins)
        child.path = list(self.path)
        child.visited = set(self.visited)
        child._parent = self
        if attach: self._entries.append(child._entries)
        return child

    # Path -----------------------------------------------------------------

    def push_path(self, segment: PathSegment) -> None: self.path.append(segment)

    def pop_path(self) -> PathSegment | None: return self.path.pop() if self.path else None

    @contextmanager
    def at(self, segment: PathSegment) -> Iterator[ParseContext]:
        self.push_path(segment)
        try:
            yield self
        finally:
            self.pop_path()

    @property
    def current_path(self) -> tuple[PathSegment, ...]: return tuple(self.path)

    # Errors ---------------------------------------------------------------

    def add_error(self, code: ErrorCode | str, message: str, *, meta: Mapping[str, Any] | None = None,
                  path: tuple[PathSegment, ...] | None = None) -> None:
        """Record an issue verbatim at the current (or given) path."""
        self._entries.append(ValidationIssue(path=self.current_path if path is None else tuple(path),
            message=message, code=code_value(code), meta=dict(meta) if meta is not None else None))

    def report(self, code: ErrorCode | str, default_message: str, *, meta: Mapping[str, Any] | None = None,
               message: str | None = None) -> None:
        """Record a built-in error: per-call message, then template, then default text."""
        text = message if message else self.messages.format(code, default_message, meta)
        self.add_error(code, text, meta=meta)

    @property
    def errors(self) -> list[ValidationIssue]:
        """All issues in traversal order, including those of attached forks."""
        out: list[ValidationIssue] = []
        _flatten(self._entries, out)
        return out

    def has_errors(self) -> bool: return bool(self.errors)

    # Cycle detection ------------------------------------------------------

    def has_visited(self, obj: Any) -> bool: return id(obj) in self.visited

    def mark_visited(self, obj: Any) -> None: self.visited.add(id(obj))

    def unmark_visited(self, obj: Any) -> None: self.visited.discard(id(obj))

    # Async ----------------------------------------------------------------

    def mark_async(self) -> None:
        ctx: ParseContext | None = self
        while ctx is not None and not ctx._async:
            ctx._async = True
            ctx = ctx._parent

    @property
    def is_async(self) -> bool: return self._async


def _flatten(entries: list, out: list[ValidationIssue]) -> None:
    for entry in entries:
        if isinstance(entry, list): _flatten(entry, out)
        else: out.append(entry)
