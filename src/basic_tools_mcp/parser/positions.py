"""
Position index: 1-based line/column of nodes in a document.

Start positions are computed on demand and cached by child-index path;
walking the siblings of one container in order costs one pass over their
text. End lines are never stored; they are derived from the node's own text
on every call.
"""

from dataclasses import dataclass
from typing import Dict, Tuple, Union

from .nodes import Composite, Document, Node, serialize

Path = Tuple[int, ...]


@dataclass(frozen=True)
class Position:
    offset: int
    line: int
    column: int

    def advance(self, text: str) -> "Position":
        """Position just past text, starting here."""
        newlines = text.count("\n")
        if newlines:
            column = len(text) - text.rfind("\n")
        else:
            column = self.column + len(text)
        return Position(self.offset + len(text), self.line + newlines, column)


START = Position(0, 1, 1)


def end_line(node: Node, start: int) -> int:
    """Line of the node's last character, given its start line."""
    return start + serialize(node).count("\n")


class PositionIndex:
    """Start positions of nodes in one (immutable) document, addressed by path."""

    def __init__(self, document: Document):
        self.document = document
        self._starts: Dict[Path, Position] = {}

    def _content_start(self, container: Union[Document, Composite], path: Path) -> Position:
        """Position of a container's first child."""
        if not path:
            return START
        return self.position(path).advance(container.open.text)

    def position(self, path: Path) -> Position:
        cached = self._starts.get(path)
        if cached is not None:
            return cached
        if not path:
            raise KeyError(path)

        container: Union[Document, Node] = self.document
        for depth, index in enumerate(path):
            prefix = path[:depth]
            children = container.children
            if not 0 <= index < len(children):
                raise KeyError(path)

            # Resume from the nearest cached sibling at or before index
            j = index
            while j > 0 and prefix + (j,) not in self._starts:
                j -= 1
            position = self._starts.get(prefix + (j,))
            if position is None:
                position = self._content_start(container, prefix)
                self._starts[prefix + (0,)] = position
            while j < index:
                position = position.advance(serialize(children[j]))
                j += 1
                self._starts[prefix + (j,)] = position

            container = children[index]
            if depth < len(path) - 1 and not isinstance(container, Composite):
                raise KeyError(path)

        return self._starts[path]

    def start_line(self, path: Path) -> int:
        return self.position(path).line

    def start_column(self, path: Path) -> int:
        return self.position(path).column

    def end_line(self, path: Path, node: Node) -> int:
        return end_line(node, self.position(path).line)
