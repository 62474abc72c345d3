"""
Result values returned by every public structural and file operation.

A Result holds either a value or an error object exposing ``kind`` and
``message``; operations return one instead of raising.
"""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from basic_tools_mcp.exceptions import ResultError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[Any] = None

    @classmethod
    def ok(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def err(cls, error: Any) -> "Result[T]":
        if error is None:
            raise ValueError("Result.err requires an error")
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @property
    def is_err(self) -> bool:
        return self.error is not None

    @property
    def kind(self) -> Optional[str]:
        """Error kind as a plain string, or None for a success."""
        if self.error is None:
            return None
        kind = getattr(self.error, "kind", None)
        return getattr(kind, "value", kind)

    def unwrap(self) -> T:
        """Return the value or raise ResultError carrying the error."""
        if self.error is not None:
            raise ResultError(self.error)
        return self.value

    def unwrap_or(self, default: T) -> T:
        return default if self.error is not None else self.value
