"""FastMCP server setup and tool registration."""
from fastmcp import FastMCP

from basic_tools_mcp import __version__
from basic_tools_mcp.logging_config import logger, reset_logging, setup_logging

from .tools import clojure, files


def create_server() -> FastMCP:
    """Create and configure the MCP server."""
    mcp = FastMCP("basic-tools-mcp")

    # Clojure supertool (check, locate, wrap, format, eval, discover)
    clojure.register(mcp)

    # Standalone file tools
    files.register(mcp)

    return mcp


def run_server():
    """Run the MCP server over stdio."""
    # stdio carries the protocol; keep the console sink off
    reset_logging()
    setup_logging(suppress_console=True)
    logger.info(f"Starting basic-tools-mcp server v{__version__}")
    server = create_server()
    server.run(show_banner=False)
