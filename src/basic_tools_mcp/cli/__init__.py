"""
CLI support modules: machine-mode configuration and output helpers.
"""

from basic_tools_mcp.cli import config, output

__all__ = ['config', 'output']
