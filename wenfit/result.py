"""Validation Result Types

The public outcome of safe_parse(): exactly one of Success (validated data)
or Failure (a non-empty, ordered tuple of issues). Both variants are frozen,
support structural pattern matching, and serialize to the adapter shape:

    match schema.safe_parse(payload):
        case Success(data):
            save(data)
        case Failure(errors):
            return [e.to_dict() for e in errors]
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, NoReturn, TypeVar, Union, final

from wenfit.errors import ValidationError, ValidationIssue

T = TypeVar("T")
U = TypeVar("U")


@final
@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    """Validation passed; data is the validated (possibly transformed) output."""
    data: T

    @property
    def success(self) -> bool: return True

    @property
    def errors(self) -> tuple[ValidationIssue, ...]: return ()

    def unwrap(self) -> T: return self.data

    def unwrap_or(self, default: T) -> T: return self.data

    def map(self, f: Callable[[T], U]) -> Success[U]:
        """Transform the validated data."""
        return Success(f(self.data))

    def match(self, ok: Callable[[T], U], err: Callable[[tuple[ValidationIssue, ...]], U]) -> U:
        return ok(self.data)

    def to_dict(self) -> dict[str, Any]: return {"success": True, "data": self.data}


@final
@dataclass(frozen=True, slots=True)
class Failure:
    """Validation failed; errors holds every issue in traversal order."""
    errors: tuple[ValidationIssue, ...]

    def __post_init__(self):
        if not self.errors: raise ValueError("Failure requires at least one error")

    @property
    def success(self) -> bool: return False

    def unwrap(self) -> NoReturn:
        """Raise the structured error carrying the full error list."""
        raise ValidationError(list(self.errors))

    def unwrap_or(self, default: T) -> T: return default

    def map(self, f: Callable[[Any], U]) -> Failure: return self

    def match(self, ok: Callable[[Any], U], err: Callable[[tuple[ValidationIssue, ...]], U]) -> U:
        return err(self.errors)

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "errors": [e.to_dict() for e in self.errors]}


ValidationResult = Union[Success[T], Failure]
