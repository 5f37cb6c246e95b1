"""Validation Error Types

Structured error records with JSON-style paths and stable codes, plus the
exception raised by parse() that bundles every record of a failed call.

Error Format:
{
    "path": ["user", "addresses", 0, "street"],
    "message": "Required property 'street' is missing",
    "code": "required",
    "meta": {"key": "street"}
}
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

PathSegment = str | int


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """A single validation failure.

    - path: location of the offending value, empty for root-level failures
    - message: human-readable text (never empty)
    - code: stable machine-readable code (never empty)
    - meta: constraint details used for templates and remediation
    """
    path: tuple[PathSegment, ...]
    message: str
    code: str
    meta: dict[str, Any] | None = None

    @property
    def location(self) -> str:
        """Dotted path for display, 'root' when the path is empty."""
        return ".".join(str(segment) for segment in self.path) if self.path else "root"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the adapter-facing error shape."""
        result: dict[str, Any] = {"path": list(self.path), "message": self.message, "code": self.code}
        if self.meta is not None: result["meta"] = _serialize_meta(self.meta)
        return result


def _serialize_meta(value: Any) -> Any:
    """Render nested issues (e.g. union member errors) as plain dicts."""
    if isinstance(value, ValidationIssue): return value.to_dict()
    if isinstance(value, dict): return {k: _serialize_meta(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)): return [_serialize_meta(v) for v in value]
    return value


@dataclass(eq=False)
class ValidationError(Exception):
    """Raised by parse() with the complete error list of the failed call.

    Never carries a partial or first-only list: every issue collected during
    the call is attached.
    """
    errors: list[ValidationIssue]
    message: str = "Validation failed"

    def __post_init__(self):
        super().__init__(self.message)

    def __str__(self) -> str:
        if not self.errors: return self.message
        if len(self.errors) == 1: return f"{(e := self.errors[0]).location}: {e.message}"
        return f"{self.message} ({len(self.errors)} errors)"

    @property
    def first_error(self) -> ValidationIssue | None: return self.errors[0] if self.errors else None

    @property
    def codes(self) -> list[str]: return [e.code for e in self.errors]

    def format(self) -> str:
        """One 'path: message' line per error."""
        return "\n".join(f"{e.location}: {e.message}" for e in self.errors)

    def flatten(self) -> dict[str, list[str]]:
        """Group messages by dotted path."""
        result: dict[str, list[str]] = {}
        for error in self.errors: result.setdefault(error.location, []).append(error.message)
        return result

    def errors_at(self, path: Sequence[PathSegment]) -> list[ValidationIssue]:
        return [e for e in self.errors if e.path == tuple(path)]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for API responses."""
        return {"error": {"type": "validation_error", "message": self.message,
            "error_count": len(self.errors), "errors": [e.to_dict() for e in self.errors]}}
