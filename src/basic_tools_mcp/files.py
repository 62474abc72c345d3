"""
File tools: read, write, glob and grep.

Each function returns a Result whose error is a FileError; nothing here
raises for missing files or failing subprocesses.
"""

import shutil
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from basic_tools_mcp.config import get_config
from basic_tools_mcp.logging_config import logger
from basic_tools_mcp.result import Result

NO_MATCHES = "No matches found"


class FileErrorKind(str, Enum):
    NOT_FOUND = "not-found"
    READ_FAILURE = "read-failure"
    WRITE_FAILURE = "write-failure"


@dataclass(frozen=True)
class FileError:
    kind: FileErrorKind
    message: str
    path: Optional[str] = None


def _format_numbered_lines(text: str, offset: int, limit: int) -> str:
    """Format lines with line numbers, applying offset and limit."""
    selected = text.splitlines()[offset:offset + limit]
    return "\n".join(
        "%6d→%s" % (offset + i + 1, line) for i, line in enumerate(selected)
    )


def read_file(path: str, offset: Optional[int] = None, limit: Optional[int] = None) -> Result[str]:
    """
    Read a file as numbered lines.

    Args:
        path: File to read
        offset: Number of lines to skip (default: 0)
        limit: Max lines to return (default: configured read limit)
    """
    offset = max(0, offset or 0)
    limit = limit if limit is not None else get_config().read_default_limit

    file_path = Path(path)
    if not file_path.is_file():
        return Result.err(FileError(FileErrorKind.NOT_FOUND, f"File not found: {path}", str(path)))

    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read {path}: {e}")
        return Result.err(FileError(FileErrorKind.READ_FAILURE, f"Failed to read {path}: {e}", str(path)))

    return Result.ok(_format_numbered_lines(text, offset, limit))


def read_text(path: str) -> Result[str]:
    """Read a file's raw text; line endings are returned untranslated."""
    file_path = Path(path)
    if not file_path.is_file():
        return Result.err(FileError(FileErrorKind.NOT_FOUND, f"File not found: {path}", str(path)))
    try:
        with open(file_path, encoding="utf-8", newline="") as f:
            return Result.ok(f.read())
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read {path}: {e}")
        return Result.err(FileError(FileErrorKind.READ_FAILURE, f"Failed to read {path}: {e}", str(path)))


def write_file(file_path: str, content: str) -> Result[str]:
    """Write content verbatim to a file, creating parent directories if needed."""
    path = Path(file_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
    except OSError as e:
        logger.error(f"Failed to write {file_path}: {e}")
        return Result.err(FileError(FileErrorKind.WRITE_FAILURE, f"Failed to write {file_path}: {e}", str(file_path)))

    logger.info(f"Wrote {len(content)} chars to {file_path}")
    return Result.ok(f"File written: {file_path}")


def glob_files(pattern: str, path: Optional[str] = None) -> Result[str]:
    """Find files under path (default: cwd) matching a glob pattern."""
    root = Path(path) if path else Path.cwd()
    if not root.is_dir():
        return Result.err(FileError(FileErrorKind.NOT_FOUND, f"Directory not found: {root}", str(root)))

    try:
        matches = sorted(str(p) for p in root.glob(pattern))
    except (OSError, ValueError) as e:
        return Result.err(FileError(FileErrorKind.READ_FAILURE, f"Glob failed: {e}", str(root)))

    matches = matches[:get_config().glob_max_results]
    return Result.ok("\n".join(matches) if matches else NO_MATCHES)


def grep_files(
    pattern: str,
    path: Optional[str] = None,
    include: Optional[str] = None,
    max_results: Optional[int] = None,
) -> Result[str]:
    """
    Search for a regex pattern with ripgrep.

    Args:
        pattern: Regex to search for
        path: Directory to search (default: ".")
        include: Glob of files to include (e.g. "*.clj")
        max_results: Max lines returned (default: configured grep limit)
    """
    root = path or "."
    limit = max_results if max_results is not None else get_config().grep_max_results

    if not shutil.which("rg"):
        return Result.err(FileError(FileErrorKind.READ_FAILURE, "ripgrep (rg) not found in PATH", root))

    args = ["rg", "--line-number", "--no-heading"]
    if include:
        args += ["--glob", include]
    args += ["--", pattern, root]

    try:
        completed = subprocess.run(args, capture_output=True, text=True, timeout=60)
    except subprocess.TimeoutExpired:
        return Result.err(FileError(FileErrorKind.READ_FAILURE, "grep timeout after 60s", root))
    except OSError as e:
        return Result.err(FileError(FileErrorKind.READ_FAILURE, f"grep failed: {e}", root))

    # rg exits 1 when nothing matched, 2 on errors
    if completed.returncode > 1:
        message = completed.stderr.strip() or f"rg exited with {completed.returncode}"
        return Result.err(FileError(FileErrorKind.READ_FAILURE, message, root))

    lines = completed.stdout.splitlines()[:limit]
    return Result.ok("\n".join(lines) if lines else NO_MATCHES)
