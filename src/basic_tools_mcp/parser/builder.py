"""
Tree builder: turn a token list into a Document with an explicit stack.

Unmatched and mismatched delimiters never raise here; they produce a
BuildResult whose ``issue`` describes the first structural problem.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from basic_tools_mcp.logging_config import logger

from .nodes import Composite, Document, Leaf, Node, composite_kind_for
from .tokens import CLOSING, Token, TokenKind


class IssueKind(str, Enum):
    MISMATCHED_CLOSE = "mismatched-close"
    UNMATCHED_CLOSE = "unmatched-close"
    UNTERMINATED = "unterminated"
    DANGLING_PREFIX = "dangling-prefix"
    LEXICAL = "lexical"


@dataclass(frozen=True)
class StructuralIssue:
    """Diagnostic for a structural-invalid parse (1-based line and column)."""

    kind: IssueKind
    message: str
    offset: int
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.message} at line {self.line}, column {self.column}"


@dataclass(frozen=True)
class BuildResult:
    """Outcome of building a tree: a document, or the issue that prevented it."""

    document: Optional[Document] = None
    issue: Optional[StructuralIssue] = None

    @property
    def structural_invalid(self) -> bool:
        return self.issue is not None


@dataclass
class _Frame:
    open: Optional[Token]
    children: List[Node] = field(default_factory=list)
    # Forms still owed to a reader-macro prefix; 0 for delimited frames
    remaining: int = 0

    @property
    def is_prefix(self) -> bool:
        return self.open is not None and self.open.kind is TokenKind.PREFIX

    def close(self, close_token: Optional[Token]) -> Composite:
        return Composite(
            kind=composite_kind_for(self.open),
            open=self.open,
            children=tuple(self.children),
            close=close_token,
        )


class _LineTracker:
    """Tracks line/column of the token stream as the builder consumes it."""

    def __init__(self):
        self.line = 1
        self.column = 1

    def advance(self, text: str) -> None:
        newlines = text.count("\n")
        if newlines:
            self.line += newlines
            self.column = len(text) - text.rfind("\n")
        else:
            self.column += len(text)


def _attach(stack: List[_Frame], node: Node) -> None:
    """Attach a completed semantic node, closing any prefixes it satisfies."""
    while True:
        top = stack[-1]
        top.children.append(node)
        if not top.is_prefix:
            return
        top.remaining -= 1
        if top.remaining > 0:
            return
        stack.pop()
        node = top.close(None)


def build_document(tokens: Sequence[Token], source: Optional[str] = None) -> BuildResult:
    """
    Build a Document from tokens.

    Args:
        tokens: Output of tokenize()
        source: Original text (defaults to the concatenated token text)

    Returns:
        BuildResult with either a document or a structural issue
    """
    if source is None:
        source = "".join(token.text for token in tokens)

    stack: List[_Frame] = [_Frame(open=None)]
    position = _LineTracker()

    def issue(kind: IssueKind, message: str, token: Optional[Token]) -> BuildResult:
        offset = token.offset if token is not None else len(source)
        found = StructuralIssue(kind, message, offset, position.line, position.column)
        logger.debug(f"Structural issue: {found}")
        return BuildResult(issue=found)

    for token in tokens:
        kind = token.kind
        if kind is TokenKind.OPEN:
            stack.append(_Frame(open=token))
        elif kind is TokenKind.PREFIX:
            stack.append(_Frame(open=token, remaining=token.arity))
        elif kind is TokenKind.CLOSE:
            top = stack[-1]
            if top.open is None:
                return issue(IssueKind.UNMATCHED_CLOSE, f"Unmatched '{token.text}'", token)
            if top.is_prefix:
                return issue(
                    IssueKind.DANGLING_PREFIX,
                    f"'{top.open.text}' has no form before '{token.text}'",
                    token,
                )
            expected = CLOSING[top.open.text]
            if token.text != expected:
                return issue(
                    IssueKind.MISMATCHED_CLOSE,
                    f"Expected '{expected}' to close '{top.open.text}' but found '{token.text}'",
                    token,
                )
            stack.pop()
            _attach(stack, top.close(token))
        elif token.is_trivia:
            stack[-1].children.append(Leaf(token))
        else:
            _attach(stack, Leaf(token))
        position.advance(token.text)

    if len(stack) > 1:
        top = stack[-1]
        if top.is_prefix:
            return issue(IssueKind.DANGLING_PREFIX, f"'{top.open.text}' has no form before end of input", None)
        return issue(IssueKind.UNTERMINATED, f"Unclosed '{top.open.text}' at end of input", None)

    return BuildResult(document=Document(children=tuple(stack[0].children), source=source))
