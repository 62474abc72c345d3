"""
Immutable syntax tree for lossless S-expression parsing.

Nodes never change after construction. Edits build new ancestors along the
edited path and share every untouched subtree with the previous tree.
Identity equality is used throughout so that comparison and hashing never
walk a (possibly very deep) subtree.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator, List, Optional, Tuple, Union

from .tokens import Token, TokenKind


class CompositeKind(str, Enum):
    LIST = "list"
    VECTOR = "vector"
    MAP = "map"
    SET = "set"
    FN = "fn"
    PREFIXED = "prefixed"


_OPEN_KINDS = {
    "(": CompositeKind.LIST,
    "[": CompositeKind.VECTOR,
    "{": CompositeKind.MAP,
    "#{": CompositeKind.SET,
    "#(": CompositeKind.FN,
}


def composite_kind_for(open_token: Token) -> CompositeKind:
    if open_token.kind is TokenKind.PREFIX:
        return CompositeKind.PREFIXED
    return _OPEN_KINDS[open_token.text]


@dataclass(frozen=True, eq=False)
class Leaf:
    """A single token: atom, string, char or trivia."""

    token: Token

    @property
    def is_trivia(self) -> bool:
        return self.token.is_trivia

    @property
    def is_composite(self) -> bool:
        return False

    @property
    def tag(self) -> str:
        return self.token.kind.value

    @property
    def text(self) -> str:
        return self.token.text

    def __repr__(self) -> str:
        return f"Leaf({self.token.kind.value}, {self.token.text!r})"


@dataclass(frozen=True, eq=False)
class Composite:
    """
    A delimited form or a reader-macro prefixed form.

    ``close`` is None only for PREFIXED nodes, whose children are the forms
    (and interleaved trivia) the prefix applies to.
    """

    kind: CompositeKind
    open: Token
    children: Tuple["Node", ...] = ()
    close: Optional[Token] = None

    @property
    def is_trivia(self) -> bool:
        return False

    @property
    def is_composite(self) -> bool:
        return True

    @property
    def tag(self) -> str:
        return self.kind.value

    @property
    def text(self) -> str:
        return serialize(self)

    def semantic_children(self) -> List["Node"]:
        return [child for child in self.children if not child.is_trivia]

    def with_children(self, children: Tuple["Node", ...]) -> "Composite":
        return replace(self, children=tuple(children))

    def __repr__(self) -> str:
        close = self.close.text if self.close else ""
        return f"Composite({self.kind.value}, {self.open.text!r}..{close!r}, {len(self.children)} children)"


Node = Union[Leaf, Composite]


@dataclass(frozen=True, eq=False)
class Document:
    """
    Root of a parsed tree: top-level nodes plus the text it was parsed from.

    ``source`` is kept for error reporting; after an edit it still holds the
    text of the original parse, while ``text`` reflects the current tree.
    """

    children: Tuple[Node, ...] = ()
    source: str = field(default="", repr=False)

    @property
    def text(self) -> str:
        return serialize(self)

    def semantic_children(self) -> List[Node]:
        return [child for child in self.children if not child.is_trivia]

    def with_children(self, children: Tuple[Node, ...]) -> "Document":
        return replace(self, children=tuple(children))

    def __repr__(self) -> str:
        return f"Document({len(self.children)} top-level nodes)"


def iter_tokens(root: Union[Document, Node]) -> Iterator[Token]:
    """Yield every token under root in source order, without recursion."""
    stack: List[Union[Document, Node, Token]] = [root]
    while stack:
        item = stack.pop()
        if isinstance(item, Token):
            yield item
        elif isinstance(item, Leaf):
            yield item.token
        elif isinstance(item, Composite):
            if item.close is not None:
                stack.append(item.close)
            stack.extend(reversed(item.children))
            stack.append(item.open)
        else:
            stack.extend(reversed(item.children))


def serialize(root: Union[Document, Node]) -> str:
    """Exact text of a document or node: every token's text in tree order."""
    return "".join(token.text for token in iter_tokens(root))
