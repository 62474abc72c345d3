"""
CLI Configuration

Machine mode (the default) prints minified JSON only; human mode uses rich.
"""

import os
from typing import Optional


class CLIConfig:
    """Configuration for CLI commands"""

    _machine_mode: Optional[bool] = None

    @classmethod
    def set_machine_mode(cls, enabled: bool) -> None:
        """Set machine mode (pure data output, no presentation)"""
        cls._machine_mode = enabled

    @classmethod
    def reset(cls) -> None:
        cls._machine_mode = None

    @classmethod
    def is_machine_mode(cls) -> bool:
        """
        Check if machine mode is active.

        Returns False only if human mode is explicitly requested, by flag or
        BASIC_TOOLS_HUMAN_MODE.
        """
        if cls._machine_mode is not None:
            return cls._machine_mode
        if os.getenv("BASIC_TOOLS_HUMAN_MODE", "").lower() in ("1", "true", "yes"):
            return False
        return True
