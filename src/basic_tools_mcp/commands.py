"""
Clojure command handlers shared by the MCP `clojure` tool and the CLI.

Commands: check, locate, wrap, format, eval, discover.
Every handler returns a plain dict; failures are error payloads, never
exceptions.
"""

from typing import Any, Callable, Dict, Optional, Tuple, Union

from basic_tools_mcp.config import get_config
from basic_tools_mcp.files import read_text, write_file
from basic_tools_mcp.formatter import format_code
from basic_tools_mcp.logging_config import logger
from basic_tools_mcp.nrepl import discover_ports, eval_code
from basic_tools_mcp.parser import parse
from basic_tools_mcp.result import Result
from basic_tools_mcp.schemas import (
    CheckReport,
    DiscoverReport,
    EvalReport,
    FormatReport,
    LocateReport,
    NreplPort,
    ToolErrorPayload,
    WrapReport,
)
from basic_tools_mcp.structural import (
    Template,
    is_clojure_source_file,
    locate_top_level_form,
    wrap_in_source,
)

Params = Dict[str, Any]


def error_payload(error_type: str, message: str, **details: Any) -> Dict[str, Any]:
    """Build the error dict every tool returns on failure."""
    return ToolErrorPayload(error_type=error_type, message=message, details=details).model_dump()


def result_error_payload(result: Result, **details: Any) -> Dict[str, Any]:
    """Error dict for a failed Result, keeping the error's kind and context."""
    error = result.error
    to_dict = getattr(error, "to_dict", None)
    if to_dict is not None:
        details = {**to_dict(), **details}
        details.pop("kind", None)
        details.pop("message", None)
    elif getattr(error, "path", None):
        details = {"path": error.path, **details}
    return error_payload(result.kind or "error", getattr(error, "message", str(error)), **details)


def _resolve_text(params: Params) -> Union[Tuple[str, str], Dict[str, Any]]:
    """(text, source label) from 'code' or 'file_path', or an error payload."""
    code = params.get("code")
    file_path = params.get("file_path")
    if code is not None:
        return code, "inline"
    if file_path:
        read = read_text(file_path)
        if read.is_err:
            return result_error_payload(read)
        return read.value, file_path
    return error_payload("missing_parameter", "Provide 'code' (string) or 'file_path'")


def _coerce_line(value: Any) -> Optional[int]:
    """Line numbers arrive as JSON numbers; accept integral floats."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def handle_check(params: Params) -> Dict[str, Any]:
    resolved = _resolve_text(params)
    if isinstance(resolved, dict):
        return resolved
    text, source = resolved

    result = parse(text)
    report = CheckReport(has_error=result.structural_invalid, source=source)
    if result.issue is not None:
        report.issue = result.issue.message
        report.line = result.issue.line
        report.column = result.issue.column
    return report.model_dump()


def handle_locate(params: Params) -> Dict[str, Any]:
    line = _coerce_line(params.get("line"))
    if line is None:
        return error_payload("missing_parameter", "Requires 'line' (positive integer)")
    resolved = _resolve_text(params)
    if isinstance(resolved, dict):
        return resolved
    text, source = resolved

    located = locate_top_level_form(text, line)
    if located is None:
        return error_payload("no-form", f"No top-level form found at line {line}", target_line=line)
    return LocateReport(
        source=source,
        line=line,
        start_line=located.start_line,
        end_line=located.end_line,
        form=located.text,
    ).model_dump()


def handle_wrap(params: Params) -> Dict[str, Any]:
    line = _coerce_line(params.get("line"))
    template = params.get("template")
    if line is None:
        return error_payload("missing_parameter", "Requires 'line' (positive integer)")
    if not template:
        return error_payload("missing_parameter", "Requires 'template' containing a placeholder")
    resolved = _resolve_text(params)
    if isinstance(resolved, dict):
        return resolved
    text, source = resolved

    file_path = params.get("file_path") if params.get("code") is None else None
    if file_path and not is_clojure_source_file(file_path):
        logger.warning(f"Wrapping a file without a Clojure extension: {file_path}")

    result = wrap_in_source(text, line, Template(template, get_config().placeholder))
    if result.is_err:
        return result_error_payload(result, target_line=line)

    written = False
    if file_path and params.get("write", True):
        write = write_file(file_path, result.value)
        if write.is_err:
            return result_error_payload(write)
        written = True

    return WrapReport(source=source, line=line, text=result.value, written=written).model_dump()


def handle_format(params: Params) -> Dict[str, Any]:
    resolved = _resolve_text(params)
    if isinstance(resolved, dict):
        return resolved
    text, source = resolved

    result = format_code(text)
    if result.is_err:
        return result_error_payload(result)

    formatted = result.value
    if "\r\n" in text and "\r\n" not in formatted:
        # Formatter output is read in text mode, which drops carriage returns
        formatted = formatted.replace("\n", "\r\n")
    changed = formatted != text
    if source != "inline" and changed:
        write = write_file(source, formatted)
        if write.is_err:
            return result_error_payload(write)

    return FormatReport(formatted=formatted, changed=changed, source=source).model_dump()


def handle_eval(params: Params) -> Dict[str, Any]:
    code = params.get("code")
    port = _coerce_line(params.get("port"))
    if code is None or port is None:
        return error_payload("missing_parameter", "Requires 'code' and 'port'")

    host = params.get("host") or get_config().nrepl_host
    timeout = _coerce_line(params.get("timeout"))
    result = eval_code(code, port, host=host, timeout_ms=timeout)
    if result.is_err:
        return error_payload(result.kind, result.error.message, host=host, port=port)
    return EvalReport(output=result.value, host=host, port=port).model_dump()


def handle_discover(params: Params) -> Dict[str, Any]:
    result = discover_ports(params.get("directory"), host=params.get("host"))
    if result.is_err:
        return error_payload(result.kind, result.error.message)
    ports = [NreplPort(**entry) for entry in result.value]
    return DiscoverReport(ports=ports, count=len(ports)).model_dump()


COMMAND_HANDLERS: Dict[str, Callable[[Params], Dict[str, Any]]] = {
    "check": handle_check,
    "locate": handle_locate,
    "wrap": handle_wrap,
    "format": handle_format,
    "eval": handle_eval,
    "discover": handle_discover,
}


def available_commands():
    return sorted(COMMAND_HANDLERS)


def is_error(response: Dict[str, Any]) -> bool:
    return response.get("status") == "error"


def handle_clojure(command: str, **params: Any) -> Dict[str, Any]:
    """
    Dispatch a clojure command.

    Args:
        command: One of check, locate, wrap, format, eval, discover
        **params: Command parameters (code, file_path, line, template, port, host, timeout)

    Returns:
        Command response dict, or an error payload
    """
    handler = COMMAND_HANDLERS.get(command)
    if handler is None:
        return error_payload(
            "unknown_command",
            f"Unknown command: {command}",
            command=command,
            available=available_commands(),
        )

    try:
        return handler(params)
    except Exception as e:
        logger.error(f"clojure command failed: {command}: {e}")
        return error_payload("command_failed", "Failed to handle command", command=command, details=str(e))
