"""The `clojure` supertool: one MCP tool dispatching on a command name."""
from typing import Optional

from basic_tools_mcp.commands import handle_clojure


def register(mcp):
    @mcp.tool()
    def clojure(
        command: str,
        code: Optional[str] = None,
        file_path: Optional[str] = None,
        line: Optional[int] = None,
        template: Optional[str] = None,
        write: Optional[bool] = None,
        port: Optional[int] = None,
        host: Optional[str] = None,
        timeout: Optional[int] = None,
        directory: Optional[str] = None,
    ) -> dict:
        """
        Clojure dev tools.

        Commands:
            check: delimiter errors in 'code' or 'file_path'
            locate: top-level form containing 'line'
            wrap: wrap the top-level form at 'line' with 'template' ('%s' marks the form);
                  with 'file_path' the file is rewritten unless 'write' is false
            format: format with cljfmt/zprint ('file_path' is rewritten)
            eval: evaluate 'code' on the nREPL server at 'port' ('host', 'timeout' ms optional)
            discover: nREPL servers advertised by port files in 'directory'
                      (default: the server's working directory)

        Returns:
            Command result, or {"status": "error", "error_type": ..., "message": ...}
        """
        params = {
            "code": code,
            "file_path": file_path,
            "line": line,
            "template": template,
            "write": write,
            "port": port,
            "host": host,
            "timeout": timeout,
            "directory": directory,
        }
        return handle_clojure(command, **{k: v for k, v in params.items() if v is not None})
