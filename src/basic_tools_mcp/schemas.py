from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class CheckReport(BaseModel):
    """
    Delimiter check of inline code or a file.
    """
    has_error: bool
    source: str
    # Diagnostic for the first structural problem, when there is one
    issue: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None


class LocateReport(BaseModel):
    """
    Top-level form found for a line.
    """
    source: str
    line: int
    start_line: int
    end_line: int
    form: str


class WrapReport(BaseModel):
    """
    Result of wrapping the form at a line in a template.
    """
    source: str
    line: int
    text: str
    written: bool = False


class FormatReport(BaseModel):
    """
    Result of running code through an external formatter.
    """
    formatted: str
    changed: bool
    source: str


class EvalReport(BaseModel):
    """
    Transcript of an nREPL evaluation.
    """
    output: str
    host: str
    port: int


class NreplPort(BaseModel):
    host: str
    port: int
    port_file: str


class DiscoverReport(BaseModel):
    """
    nREPL servers found from port files.
    """
    ports: List[NreplPort] = Field(default_factory=list)
    count: int = 0


class ToolErrorPayload(BaseModel):
    """
    Error returned by a tool instead of raising.
    """
    status: str = "error"
    error_type: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)
