"""File tools: read_file, file_write, glob_files, grep."""
from typing import Optional

from basic_tools_mcp import files as file_core
from basic_tools_mcp.commands import result_error_payload


def _text_response(result) -> dict:
    if result.is_err:
        return result_error_payload(result)
    return {"status": "ok", "text": result.value}


def register(mcp):
    @mcp.tool()
    def read_file(path: str, offset: int = 0, limit: Optional[int] = None) -> dict:
        """
        Read the contents of a file as numbered lines.

        Args:
            path: Absolute path to the file
            offset: Line number to start from (default: 0)
            limit: Max lines to read (default: 2000)
        """
        return _text_response(file_core.read_file(path, offset=offset, limit=limit))

    @mcp.tool()
    def file_write(file_path: str, content: str) -> dict:
        """
        Write content to a file. Creates parent directories if needed.

        Args:
            file_path: Absolute path to write
            content: Content to write
        """
        return _text_response(file_core.write_file(file_path, content))

    @mcp.tool()
    def glob_files(pattern: str, path: Optional[str] = None) -> dict:
        """
        Find files matching a glob pattern.

        Examples:
            glob_files(pattern="**/*.clj")
            glob_files(pattern="src/**/*.cljs", path="/project")
        """
        return _text_response(file_core.glob_files(pattern, path=path))

    @mcp.tool()
    def grep(
        pattern: str,
        path: Optional[str] = None,
        include: Optional[str] = None,
        max_results: Optional[int] = None,
    ) -> dict:
        """
        Search for a regex pattern in files using ripgrep.

        Examples:
            grep(pattern="defn.*foo")
            grep(pattern="TODO", path="src/", include="*.clj")
        """
        return _text_response(
            file_core.grep_files(pattern, path=path, include=include, max_results=max_results)
        )
