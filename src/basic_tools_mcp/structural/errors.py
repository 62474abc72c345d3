"""Error values carried by failed structural operations."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    PARSE_FAILED = "parse-failed"
    NO_FORM = "no-form"
    INSERT_FAILED = "insert-failed"
    INVALID_TEMPLATE = "invalid-template"


@dataclass(frozen=True)
class StructuralError:
    """
    A failed structural operation.

    Attributes:
        kind: One of ErrorKind
        message: Human-readable description
        target_line: Requested line, for NO_FORM
        attempted_text: Substituted text that failed to parse, for INVALID_TEMPLATE
        cause: Inner error, e.g. the template error behind INSERT_FAILED
    """

    kind: ErrorKind
    message: str
    target_line: Optional[int] = None
    attempted_text: Optional[str] = None
    cause: Optional["StructuralError"] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind.value, "message": self.message}
        if self.target_line is not None:
            data["target_line"] = self.target_line
        if self.attempted_text is not None:
            data["attempted_text"] = self.attempted_text
        if self.cause is not None:
            data["cause"] = self.cause.to_dict()
        return data


# Template failures are structural errors of kind INVALID_TEMPLATE
TemplateError = StructuralError
