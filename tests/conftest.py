"""
Pytest configuration for the basic-tools-mcp test suite.

This conftest.py provides:
- Machine-mode logging (suppresses console output)
- Config and CLI mode reset between tests
- Temp directories and sample Clojure sources
"""

import os
import shutil
import tempfile
from pathlib import Path

import pytest

from basic_tools_mcp.cli.config import CLIConfig
from basic_tools_mcp.config import reset_config
from basic_tools_mcp.logging_config import setup_logging


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Configure pytest for AI-friendly operation."""
    os.environ.setdefault("BASIC_TOOLS_MACHINE_MODE", "1")


# ============================================================================
# LOGGING / STATE FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Machine mode by default - suppress console logs for clean test output.
    """
    setup_logging(level="DEBUG", suppress_console=True)


@pytest.fixture(autouse=True)
def reset_global_state():
    """Config and CLI mode are process-wide; start every test clean."""
    reset_config()
    CLIConfig.reset()
    yield
    reset_config()
    CLIConfig.reset()


# ============================================================================
# TEMPORARY DIRECTORY FIXTURES
# ============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory that's cleaned up after the test."""
    tmp = Path(tempfile.mkdtemp(prefix="basic_tools_test_"))
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


SAMPLE_SOURCE = "(ns example)\n\n(defn foo [x]\n  (+ x 1))\n\n(defn bar [y]\n  (* y 2))"


@pytest.fixture
def sample_source():
    """Three top-level forms: ns on line 1, foo on 3-4, bar on 6-7."""
    return SAMPLE_SOURCE


@pytest.fixture
def clj_file(temp_dir):
    path = temp_dir / "src" / "example" / "core.clj"
    path.parent.mkdir(parents=True)
    path.write_text(SAMPLE_SOURCE, encoding="utf-8")
    return path
