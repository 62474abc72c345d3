"""
Structural editing operations on source strings.

No I/O. Every public function here is total: malformed, empty or adversarial
input yields False, None or an error Result, never an exception.
"""

from dataclasses import dataclass
from pathlib import PurePath
from typing import Optional, Union

from basic_tools_mcp.logging_config import logger
from basic_tools_mcp.parser import Cursor, Document, parse
from basic_tools_mcp.result import Result

from .errors import ErrorKind, StructuralError
from .template import Template

CLOJURE_EXTENSIONS = frozenset({".clj", ".cljs", ".cljc", ".edn"})


@dataclass(frozen=True)
class LocatedForm:
    """A top-level form found for a line. Stale as soon as its document is edited."""

    cursor: Cursor
    start_line: int
    end_line: int

    @property
    def text(self) -> str:
        return self.cursor.text


def is_clojure_source_file(file_path: Union[str, PurePath]) -> bool:
    """True if file_path has a Clojure source extension."""
    return PurePath(str(file_path)).suffix.lower() in CLOJURE_EXTENSIONS


def is_balanced(source: str) -> bool:
    """
    Check whether every delimiter in source is matched.

    Returns False for unterminated strings and for non-string input.
    """
    if not isinstance(source, str):
        return False
    try:
        return not parse(source).structural_invalid
    except Exception as e:
        logger.debug(f"Balance check failed unexpectedly: {e}")
        return False


def count_top_level_forms(source: str) -> Optional[int]:
    """Number of top-level semantic forms, or None if source is invalid."""
    if not isinstance(source, str):
        return None
    result = parse(source)
    if result.structural_invalid:
        return None
    return len(result.document.semantic_children())


def _locate_in(document: Document, target_line: int) -> Optional[LocatedForm]:
    cursor = Cursor.first(document)
    while not cursor.is_end:
        start = cursor.start_line
        if start > target_line:
            return None
        end = cursor.end_line
        if start <= target_line <= end:
            return LocatedForm(cursor=cursor, start_line=start, end_line=end)
        cursor = cursor.next()
    return None


def locate_top_level_form(source: str, target_line: int) -> Optional[LocatedForm]:
    """
    Find the top-level form whose lines include target_line (1-based).

    Returns:
        LocatedForm, or None when no form spans the line or source is invalid
    """
    if not isinstance(source, str) or isinstance(target_line, bool) or not isinstance(target_line, int):
        return None
    if target_line < 1:
        return None
    try:
        result = parse(source)
        if result.structural_invalid:
            return None
        return _locate_in(result.document, target_line)
    except Exception as e:
        logger.debug(f"Locate failed unexpectedly: {e}")
        return None


def _invalid_template(message: str, attempted_text: Optional[str]) -> Result[str]:
    return Result.err(StructuralError(
        kind=ErrorKind.INVALID_TEMPLATE,
        message=message,
        attempted_text=attempted_text,
    ))


def wrap_form_str(form_text: str, template: Union[Template, str]) -> Result[str]:
    """
    Substitute form_text into template and check the result parses.

    Args:
        form_text: Text of the form to wrap
        template: Template (or string) with exactly one placeholder

    Returns:
        Result with the wrapped text, or an INVALID_TEMPLATE error
    """
    try:
        if not isinstance(form_text, str):
            return _invalid_template(f"Form must be a string, got {type(form_text).__name__}", None)
        template = Template.coerce(template)
        if not template.is_valid:
            return _invalid_template(
                f"Template must contain exactly one '{template.placeholder}' placeholder "
                f"(found {template.marker_count})",
                template.text,
            )

        wrapped = template.render(form_text)
        result = parse(wrapped)
        if result.structural_invalid:
            return _invalid_template(f"Wrapped form is not balanced: {result.issue}", wrapped)
        return Result.ok(result.document.text)
    except Exception as e:
        logger.debug(f"wrap_form_str failed unexpectedly: {e}")
        return _invalid_template(f"Template substitution failed: {e}", None)


def _insert_failed(message: str, cause: Optional[StructuralError] = None) -> Result[str]:
    return Result.err(StructuralError(kind=ErrorKind.INSERT_FAILED, message=message, cause=cause))


def _wrap_in_source(source: str, target_line: int, template: Union[Template, str]) -> Result[str]:
    result = parse(source)
    if result.structural_invalid:
        return Result.err(StructuralError(
            kind=ErrorKind.PARSE_FAILED,
            message=f"Source has invalid syntax: {result.issue}",
        ))

    located = _locate_in(result.document, target_line)
    if located is None:
        return Result.err(StructuralError(
            kind=ErrorKind.NO_FORM,
            message=f"No top-level form found at line {target_line}",
            target_line=target_line,
        ))

    wrapped = wrap_form_str(located.text, template)
    if wrapped.is_err:
        return _insert_failed(f"Could not wrap form at line {located.start_line}", wrapped.error)

    fragment = parse(wrapped.value)
    if fragment.structural_invalid:
        return _insert_failed(f"Wrapped text failed to reparse: {fragment.issue}")
    forms = fragment.document.semantic_children()
    if len(forms) != 1:
        return _insert_failed(f"Wrapped text must be exactly one form (found {len(forms)})")

    edited = located.cursor.splice(fragment.document.children)
    output = edited.root_string()

    check = parse(output)
    if check.structural_invalid:
        return _insert_failed(f"Edited source failed to reparse: {check.issue}")
    before = len(result.document.semantic_children())
    after = len(check.document.semantic_children())
    if before != after:
        return _insert_failed(f"Edit changed the number of top-level forms ({before} -> {after})")

    logger.debug(f"Wrapped form at lines {located.start_line}-{located.end_line}")
    return Result.ok(output)


def wrap_in_source(source: str, target_line: int, template: Union[Template, str]) -> Result[str]:
    """
    Wrap the top-level form at target_line in source with template.

    Every other byte of source is preserved.

    Args:
        source: Source text
        target_line: 1-based line inside the form to wrap
        template: Template (or string) with exactly one placeholder

    Returns:
        Result with the new source, or a PARSE_FAILED, NO_FORM or
        INSERT_FAILED error
    """
    try:
        if not isinstance(source, str):
            raise TypeError(f"Source must be a string, got {type(source).__name__}")
        if isinstance(target_line, bool) or not isinstance(target_line, int) or target_line < 1:
            return Result.err(StructuralError(
                kind=ErrorKind.NO_FORM,
                message=f"No top-level form found at line {target_line}",
                target_line=target_line if isinstance(target_line, int) else None,
            ))
        return _wrap_in_source(source, target_line, template)
    except Exception as e:
        logger.debug(f"wrap_in_source failed unexpectedly: {e}")
        return Result.err(StructuralError(
            kind=ErrorKind.PARSE_FAILED,
            message=f"Source has invalid syntax: {e}",
        ))
