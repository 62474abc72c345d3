"""
Lossless S-expression parser.

tokenize -> build_document -> Document, navigated and edited with Cursor.
"""

from basic_tools_mcp.exceptions import LexicalError, StructuralInvalidError

from .builder import BuildResult, IssueKind, StructuralIssue, build_document
from .cursor import Cursor
from .nodes import Composite, CompositeKind, Document, Leaf, Node, iter_tokens, serialize
from .positions import Position, PositionIndex
from .tokens import Token, TokenKind, tokenize


def parse(source: str) -> BuildResult:
    """
    Parse text into a Document without raising on malformed input.

    Lexical errors are reported as an issue of kind LEXICAL.
    """
    try:
        tokens = tokenize(source)
    except LexicalError as e:
        return BuildResult(issue=StructuralIssue(
            kind=IssueKind.LEXICAL,
            message=e.message,
            offset=e.offset,
            line=e.line,
            column=e.column,
        ))
    return build_document(tokens, source)


def parse_or_raise(source: str) -> Document:
    """Parse text, raising StructuralInvalidError for any invalid input."""
    result = parse(source)
    if result.structural_invalid:
        raise StructuralInvalidError(result.issue)
    return result.document


__all__ = [
    "parse",
    "parse_or_raise",
    "tokenize",
    "build_document",
    "serialize",
    "iter_tokens",
    "BuildResult",
    "StructuralIssue",
    "IssueKind",
    "Token",
    "TokenKind",
    "Document",
    "Composite",
    "CompositeKind",
    "Leaf",
    "Node",
    "Cursor",
    "Position",
    "PositionIndex",
]
