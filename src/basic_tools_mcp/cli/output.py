"""
CLI Output Utilities

Machine-aware output functions that adapt based on machine mode.
"""

import json
from typing import Any, Dict, Optional

import typer
from rich.console import Console as RichConsole
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from basic_tools_mcp.cli.config import CLIConfig

_console = RichConsole()


def get_console() -> RichConsole:
    return _console


def echo(message: str = "", **kwargs) -> None:
    """Print a plain message; typer.echo handles encoding in both modes."""
    typer.echo(message, **kwargs)


def print_json(data: Dict[str, Any], minified: Optional[bool] = None) -> None:
    """
    Print JSON data respecting machine mode.
    In machine mode, always minifies. In human mode, pretty prints.
    """
    if minified is None:
        minified = CLIConfig.is_machine_mode()

    if minified:
        echo(json.dumps(data, separators=(',', ':')))
    else:
        echo(json.dumps(data, indent=2))


def print_code(code: str, title: Optional[str] = None) -> None:
    """Show Clojure code with syntax highlighting (human mode only)."""
    _console.print(Panel(Syntax(code, "clojure", line_numbers=False), title=title))


def print_table(rows: Dict[str, Any], title: Optional[str] = None) -> None:
    table = Table(title=title, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in rows.items():
        table.add_row(str(key), str(value))
    _console.print(table)


def print_error(message: str, code: Optional[str] = None, details: Optional[Dict[str, Any]] = None) -> None:
    """
    Print an error message respecting machine mode.
    In machine mode, outputs a structured JSON error.
    """
    if CLIConfig.is_machine_mode():
        error_obj: Dict[str, Any] = {"status": "error", "message": message}
        if code:
            error_obj["error_type"] = code
        if details:
            error_obj["details"] = details
        print_json(error_obj)
    else:
        label = f" ({code})" if code else ""
        _console.print(f"[red]Error{escape(label)}: {escape(message)}[/red]")
