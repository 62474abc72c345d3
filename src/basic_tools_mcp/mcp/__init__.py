"""MCP server exposing the clojure supertool and file tools."""

from .server import create_server, run_server

__all__ = ["create_server", "run_server"]
