"""
Configuration for basic-tools-mcp.

Every value can be overridden with a BASIC_TOOLS_* environment variable.
Values not set in the environment fall back to an optional TOML file, then to
the defaults below.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

try:  # Python 3.11+
    import tomllib
except ImportError:  # pragma: no cover - fallback for older environments
    import tomli as tomllib

from basic_tools_mcp.exceptions import ConfigError


DEFAULT_READ_LIMIT = 2000
DEFAULT_GLOB_MAX_RESULTS = 1000
DEFAULT_GREP_MAX_RESULTS = 100
DEFAULT_NREPL_HOST = "localhost"
DEFAULT_NREPL_TIMEOUT_MS = 120_000
DEFAULT_FORMATTER_TIMEOUT_S = 30
DEFAULT_PLACEHOLDER = "%s"


def load_config_file() -> Optional[Dict[str, Any]]:
    """
    Load configuration from file.

    Priority:
    1. BASIC_TOOLS_CONFIG environment variable
    2. ./basic-tools.toml (project config)
    3. ~/.config/basic-tools/config.toml (user config)

    Returns:
        Configuration dict or None if no config found
    """
    config_paths = []

    env_config = os.environ.get("BASIC_TOOLS_CONFIG")
    if env_config:
        config_paths.append(Path(env_config))

    config_paths.append(Path("basic-tools.toml"))
    config_paths.append(Path.home() / ".config" / "basic-tools" / "config.toml")

    for path in config_paths:
        if path.exists():
            try:
                with open(path, "rb") as f:
                    return tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigError(f"Invalid config file {path}: {e}") from e

    return None


def get_config_value(key: str, default: Any = None) -> Any:
    """
    Get a configuration file value by dot-notation key.

    Example:
        get_config_value("nrepl.host", "localhost")
        get_config_value("files.read_limit", 2000)
    """
    config = load_config_file()
    if config is None:
        return default

    value = config
    for part in key.split("."):
        if isinstance(value, dict) and part in value:
            value = value[part]
        else:
            return default
    return value


def _env_int(key: str, file_key: str, default: int) -> int:
    """Read integer from environment variable, then config file."""
    value = os.getenv(key)
    if value is None:
        value = get_config_value(file_key, default)
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _env_str(key: str, file_key: str, default: str) -> str:
    """Read string from environment variable, then config file."""
    value = os.getenv(key)
    if value is None:
        value = get_config_value(file_key, default)
    return str(value)


def _default_log_dir() -> str:
    return str(Path.home() / ".basic-tools-mcp" / "logs")


@dataclass
class ToolsConfig:
    """
    Unified configuration for the file, formatter and nREPL tools.

    Environment Variables:
        BASIC_TOOLS_READ_LIMIT: Lines returned by read_file by default (default: 2000)
        BASIC_TOOLS_GLOB_MAX_RESULTS: Max paths returned by glob_files (default: 1000)
        BASIC_TOOLS_GREP_MAX_RESULTS: Default max lines returned by grep (default: 100)
        BASIC_TOOLS_NREPL_HOST: Default nREPL host (default: localhost)
        BASIC_TOOLS_NREPL_TIMEOUT_MS: Default eval timeout (default: 120000)
        BASIC_TOOLS_FORMATTER_TIMEOUT: Formatter subprocess timeout in seconds (default: 30)
        BASIC_TOOLS_LOG_DIR: Directory for the opt-in log file
        BASIC_TOOLS_PLACEHOLDER: Marker substituted by wrap templates (default: %s)
    """

    read_default_limit: int = field(default_factory=lambda: _env_int(
        "BASIC_TOOLS_READ_LIMIT", "files.read_limit", DEFAULT_READ_LIMIT
    ))
    glob_max_results: int = field(default_factory=lambda: _env_int(
        "BASIC_TOOLS_GLOB_MAX_RESULTS", "files.glob_max_results", DEFAULT_GLOB_MAX_RESULTS
    ))
    grep_max_results: int = field(default_factory=lambda: _env_int(
        "BASIC_TOOLS_GREP_MAX_RESULTS", "files.grep_max_results", DEFAULT_GREP_MAX_RESULTS
    ))

    nrepl_host: str = field(default_factory=lambda: _env_str(
        "BASIC_TOOLS_NREPL_HOST", "nrepl.host", DEFAULT_NREPL_HOST
    ))
    nrepl_timeout_ms: int = field(default_factory=lambda: _env_int(
        "BASIC_TOOLS_NREPL_TIMEOUT_MS", "nrepl.timeout_ms", DEFAULT_NREPL_TIMEOUT_MS
    ))

    formatter_timeout_s: int = field(default_factory=lambda: _env_int(
        "BASIC_TOOLS_FORMATTER_TIMEOUT", "formatter.timeout_s", DEFAULT_FORMATTER_TIMEOUT_S
    ))

    log_dir: str = field(default_factory=lambda: _env_str(
        "BASIC_TOOLS_LOG_DIR", "logging.dir", _default_log_dir()
    ))

    placeholder: str = field(default_factory=lambda: _env_str(
        "BASIC_TOOLS_PLACEHOLDER", "structural.placeholder", DEFAULT_PLACEHOLDER
    ))

    def __post_init__(self):
        if not self.placeholder:
            raise ConfigError("Template placeholder must be a non-empty string")

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary (for JSON output)."""
        return {
            "read_default_limit": self.read_default_limit,
            "glob_max_results": self.glob_max_results,
            "grep_max_results": self.grep_max_results,
            "nrepl_host": self.nrepl_host,
            "nrepl_timeout_ms": self.nrepl_timeout_ms,
            "formatter_timeout_s": self.formatter_timeout_s,
            "log_dir": self.log_dir,
            "placeholder": self.placeholder,
        }


# Global instance for convenience
_default_config: Optional[ToolsConfig] = None


def get_config() -> ToolsConfig:
    """Get the global tools configuration."""
    global _default_config
    if _default_config is None:
        _default_config = ToolsConfig()
    return _default_config


def reset_config() -> None:
    """Reset global config (useful after env var changes or for testing)."""
    global _default_config
    _default_config = None
