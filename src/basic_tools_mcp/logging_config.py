"""
Loguru setup shared by the CLI, the MCP server and the core modules.

Modules import `logger` from here so that sinks are configured exactly once.
Stdout is left alone: the MCP stdio transport and machine-mode CLI output
both own it, so the console sink is stderr and can be switched off.
"""

import sys
import os
from pathlib import Path
from loguru import logger

_logging_configured = False


def setup_logging(level="INFO", suppress_console=None, enable_file_logging=None):
    """
    Configures the global logger.

    By default, only console logging is enabled. File logging is opt-in via
    BASIC_TOOLS_FILE_LOGGING=1 environment variable or enable_file_logging=True.

    Args:
        level: Logging level (default: INFO)
        suppress_console: If True, suppress console logging. If None, check BASIC_TOOLS_MACHINE_MODE env var.
        enable_file_logging: If True, enable file logging. If None, check BASIC_TOOLS_FILE_LOGGING env var.
    """
    global _logging_configured

    # Only configure once to avoid duplicate handlers
    if _logging_configured:
        return
    _logging_configured = True

    logger.remove()

    if suppress_console is None:
        suppress_console = os.getenv("BASIC_TOOLS_MACHINE_MODE", "").lower() in ("1", "true", "yes")

    # Console goes to stderr; stdout belongs to the MCP stdio transport
    if not suppress_console:
        logger.add(
            sys.stderr,
            level=level,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
            colorize=True
        )

    if enable_file_logging is None:
        enable_file_logging = os.getenv("BASIC_TOOLS_FILE_LOGGING", "").lower() in ("1", "true", "yes")

    if enable_file_logging:
        from basic_tools_mcp.config import get_config
        log_dir = Path(get_config().log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_dir / "basic-tools-mcp.log",
            level="INFO",
            rotation="10 MB",
            retention="1 day",
            compression="gz",
            catch=True,
            serialize=False
        )


def reset_logging():
    """Allow the next setup_logging() call to reconfigure sinks."""
    global _logging_configured
    _logging_configured = False


# Configure the logger on import (will check env var for machine mode)
setup_logging()
