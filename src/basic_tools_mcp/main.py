import typer
from pathlib import Path
from typing import Any, Dict, Optional

from rich.markup import escape

from basic_tools_mcp import __version__
from basic_tools_mcp.cli.config import CLIConfig
from basic_tools_mcp.cli.output import echo, get_console, print_code, print_error, print_json, print_table
from basic_tools_mcp.commands import handle_clojure, is_error
from basic_tools_mcp.logging_config import setup_logging

app = typer.Typer()
console = get_console()


# Global CLI callback for flags that apply to all commands
@app.callback()
def global_options(
    human: bool = typer.Option(
        False,
        "--human",
        "-H",
        help="Enable human mode: pretty output with tables and colors (also via BASIC_TOOLS_HUMAN_MODE env var)"
    ),
):
    """
    basic-tools-mcp: structural editing for Clojure source

    Machine mode is DEFAULT (minified JSON).
    Use --human/-H for pretty output.
    """
    if human:
        CLIConfig.set_machine_mode(False)
    else:
        # Machine mode is default - suppress console logging
        setup_logging(suppress_console=True)


def _source_params(file: Optional[Path], code: Optional[str]) -> Dict[str, Any]:
    if code is None and file is None:
        print_error("Provide a FILE argument or --code", code="missing_parameter")
        raise typer.Exit(code=1)
    if code is not None:
        return {"code": code}
    return {"file_path": str(file)}


def _emit(response: Dict[str, Any], human_render=None) -> None:
    """Print a command response; errors exit with status 1."""
    if is_error(response):
        print_error(response["message"], code=response.get("error_type"), details=response.get("details") or None)
        raise typer.Exit(code=1)
    if CLIConfig.is_machine_mode() or human_render is None:
        print_json(response)
    else:
        human_render(response)


@app.command()
def version():
    """Print the version."""
    if CLIConfig.is_machine_mode():
        print_json({"version": __version__})
    else:
        console.print(f"basic-tools-mcp [bold]{__version__}[/bold]")


@app.command()
def check(
    file: Optional[Path] = typer.Argument(None, help="Clojure file to check."),
    code: Optional[str] = typer.Option(None, "--code", "-c", help="Inline code to check instead of a file."),
):
    """
    Check that delimiters are balanced.
    Exits with status 1 when the source is structurally invalid.
    """
    response = handle_clojure("check", **_source_params(file, code))

    def render(r):
        if r["has_error"]:
            console.print(f"[red]Unbalanced[/red] {escape(r['source'])}: {escape(r['issue'] or '')}")
        else:
            console.print(f"[green]Balanced[/green] {escape(r['source'])}")

    _emit(response, render)
    if response.get("has_error"):
        raise typer.Exit(code=1)


@app.command()
def locate(
    line: int = typer.Argument(..., help="1-based line number."),
    file: Optional[Path] = typer.Argument(None, help="Clojure file to search."),
    code: Optional[str] = typer.Option(None, "--code", "-c", help="Inline code instead of a file."),
):
    """
    Show the top-level form that spans a line.
    """
    response = handle_clojure("locate", line=line, **_source_params(file, code))

    def render(r):
        print_code(r["form"], title=f"lines {r['start_line']}-{r['end_line']}")

    _emit(response, render)


@app.command()
def wrap(
    line: int = typer.Argument(..., help="1-based line number of the form to wrap."),
    template: str = typer.Argument(..., help="Template with exactly one placeholder, e.g. '(comment %s)'."),
    file: Optional[Path] = typer.Argument(None, help="Clojure file to edit."),
    code: Optional[str] = typer.Option(None, "--code", "-c", help="Inline code instead of a file."),
    write: bool = typer.Option(False, "--write", "-w", help="Write the result back to FILE."),
):
    """
    Wrap the top-level form at LINE in TEMPLATE.
    Prints the edited source; the file is only modified with --write.
    """
    params = _source_params(file, code)
    response = handle_clojure("wrap", line=line, template=template, write=write, **params)

    def render(r):
        print_code(r["text"], title=escape(r["source"]))
        if r["written"]:
            console.print(f"[green]Wrote[/green] {escape(r['source'])}")

    _emit(response, render)


@app.command("format")
def format_cmd(
    file: Optional[Path] = typer.Argument(None, help="Clojure file to format in place."),
    code: Optional[str] = typer.Option(None, "--code", "-c", help="Inline code to format."),
):
    """
    Format code with cljfmt or zprint, whichever is on PATH.
    """
    response = handle_clojure("format", **_source_params(file, code))

    def render(r):
        print_code(r["formatted"], title="changed" if r["changed"] else "unchanged")

    _emit(response, render)


@app.command("eval")
def eval_cmd(
    code: str = typer.Argument(..., help="Clojure code to evaluate."),
    port: int = typer.Option(..., "--port", "-p", help="nREPL port."),
    host: Optional[str] = typer.Option(None, "--host", help="nREPL host (default from config)."),
    timeout: Optional[int] = typer.Option(None, "--timeout", "-t", help="Timeout in milliseconds."),
):
    """
    Evaluate code on a running nREPL server.
    """
    params: Dict[str, Any] = {"code": code, "port": port}
    if host:
        params["host"] = host
    if timeout is not None:
        params["timeout"] = timeout
    response = handle_clojure("eval", **params)
    _emit(response, lambda r: echo(r["output"]))


@app.command()
def discover(
    directory: Optional[Path] = typer.Argument(None, help="Project directory (default: current directory)."),
    host: Optional[str] = typer.Option(None, "--host", help="Host to probe."),
):
    """
    Find running nREPL servers from project port files.
    """
    params: Dict[str, Any] = {}
    if directory is not None:
        params["directory"] = str(directory)
    if host:
        params["host"] = host
    response = handle_clojure("discover", **params)

    def render(r):
        if not r["ports"]:
            console.print("No nREPL servers found.")
        for entry in r["ports"]:
            print_table(entry, title=f"nREPL {entry['host']}:{entry['port']}")

    _emit(response, render)


@app.command()
def serve():
    """
    Run the MCP server over stdio.
    """
    from basic_tools_mcp.mcp import run_server

    run_server()


if __name__ == "__main__":
    app()
