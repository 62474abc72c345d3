"""
basic-tools-mcp - Structural editing of Clojure source for AI agents

MCP server and CLI for delimiter checking, locating and wrapping top-level
forms, formatting, and nREPL evaluation.
"""

__version__ = "0.1.0"

# Core exports
from basic_tools_mcp.parser import parse, tokenize
from basic_tools_mcp.result import Result
from basic_tools_mcp.structural import (
    ErrorKind,
    StructuralError,
    Template,
    is_balanced,
    locate_top_level_form,
    wrap_form_str,
    wrap_in_source,
)

# MCP server
from basic_tools_mcp.mcp import create_server, run_server

__all__ = [
    "__version__",
    "parse",
    "tokenize",
    "Result",
    "ErrorKind",
    "StructuralError",
    "Template",
    "is_balanced",
    "locate_top_level_form",
    "wrap_form_str",
    "wrap_in_source",
    "create_server",
    "run_server",
]
