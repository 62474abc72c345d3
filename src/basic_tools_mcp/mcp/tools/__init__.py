"""MCP tool registrations."""

__all__ = [
    "clojure",
    "files",
]
