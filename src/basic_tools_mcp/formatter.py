"""
ClojureFormatter: format Clojure code with an external formatter.

Tries each configured formatter in order and uses the first one on PATH.
"""

import shutil
import subprocess
from dataclasses import dataclass
from typing import Dict, List, Optional

from basic_tools_mcp.config import get_config
from basic_tools_mcp.exceptions import FormatterError
from basic_tools_mcp.logging_config import logger
from basic_tools_mcp.result import Result
from basic_tools_mcp.structural import is_balanced

# Each formatter reads code on stdin and writes the result to stdout
FORMATTERS: List[Dict[str, object]] = [
    {
        "name": "cljfmt",
        "command": "cljfmt",
        "args": ["fix", "-"],
    },
    {
        "name": "zprint",
        "command": "zprint",
        "args": [],
    },
]


@dataclass(frozen=True)
class FormatError:
    message: str
    formatter: Optional[str] = None
    kind: str = "format-failed"


class ClojureFormatter:
    """
    Run Clojure source through cljfmt or zprint.

    Unbalanced input is rejected before any subprocess is started.
    """

    def __init__(self, formatters: Optional[List[Dict[str, object]]] = None, timeout: Optional[int] = None):
        self.formatters = formatters if formatters is not None else FORMATTERS
        self.timeout = timeout if timeout is not None else get_config().formatter_timeout_s

    def find_formatter(self) -> Optional[Dict[str, object]]:
        """First configured formatter available on PATH."""
        for formatter in self.formatters:
            if shutil.which(formatter["command"]):
                return formatter
        return None

    def _run(self, formatter: Dict[str, object], code: str) -> str:
        command = [formatter["command"]] + list(formatter["args"])
        try:
            completed = subprocess.run(
                command,
                input=code,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise FormatterError(formatter["command"], f"timeout after {self.timeout}s")
        except OSError as e:
            raise FormatterError(formatter["command"], str(e))

        if completed.returncode != 0:
            raise FormatterError(formatter["command"], (completed.stderr or completed.stdout).strip())
        return completed.stdout

    def format_code(self, code: str) -> Result[str]:
        """
        Format code.

        Returns:
            Result with formatted code, or a FormatError
        """
        if not is_balanced(code):
            return Result.err(FormatError("Code has unbalanced delimiters; refusing to format"))

        formatter = self.find_formatter()
        if formatter is None:
            names = ", ".join(str(f["name"]) for f in self.formatters)
            logger.warning(f"No Clojure formatter found in PATH (tried: {names})")
            return Result.err(FormatError(f"No Clojure formatter found in PATH (tried: {names})"))

        try:
            formatted = self._run(formatter, code)
        except FormatterError as e:
            logger.error(f"Formatter failed: {e}")
            return Result.err(FormatError(f"Format failed: {e.message}", e.command))

        logger.debug(f"Formatted {len(code)} chars with {formatter['name']}")
        return Result.ok(formatted)


def format_code(code: str) -> Result[str]:
    """Format code with the first available formatter."""
    return ClojureFormatter().format_code(code)
