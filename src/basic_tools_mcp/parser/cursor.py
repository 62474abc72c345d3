"""
Cursor: navigation and replace-in-place over an immutable Document.

A cursor is a (document, path) pair. Navigation skips trivia, the same way a
zipper over source code moves between forms. Editing never mutates: replace
and splice rebuild only the ancestors on the path and return a cursor on a new
document, so cursors taken before an edit keep reading the old tree.
"""

from typing import List, Optional, Sequence, Tuple, Union

from basic_tools_mcp.exceptions import CursorError

from .nodes import Composite, Document, Node, serialize
from .positions import Path, Position, PositionIndex


class _DocumentState:
    """Per-document data shared by every cursor on that document."""

    def __init__(self, document: Document):
        self.document = document
        self._index: Optional[PositionIndex] = None

    @property
    def index(self) -> PositionIndex:
        if self._index is None:
            self._index = PositionIndex(self.document)
        return self._index


def _children_of(parent: Union[Document, Node]) -> Tuple[Node, ...]:
    if isinstance(parent, (Document, Composite)):
        return parent.children
    return ()


def _first_semantic(children: Sequence[Node], start: int = 0) -> Optional[int]:
    for i in range(start, len(children)):
        if not children[i].is_trivia:
            return i
    return None


class Cursor:
    """
    Location of one node inside a document, or the end marker.

    The end marker has ``path is None``; moving from it returns it again.
    """

    __slots__ = ("_state", "path")

    def __init__(self, state: _DocumentState, path: Optional[Path]):
        self._state = state
        self.path = path

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def first(cls, document: Document) -> "Cursor":
        """Cursor at the first top-level form, or the end marker."""
        state = _DocumentState(document)
        index = _first_semantic(document.children)
        return cls(state, None if index is None else (index,))

    def _at(self, path: Optional[Path]) -> "Cursor":
        return Cursor(self._state, path)

    def _end(self) -> "Cursor":
        return Cursor(self._state, None)

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def document(self) -> Document:
        return self._state.document

    @property
    def is_end(self) -> bool:
        return self.path is None

    def _require_node(self) -> Path:
        if self.path is None:
            raise CursorError("Cursor is at the end marker")
        return self.path

    def _parent(self, path: Path) -> Union[Document, Node]:
        parent: Union[Document, Node] = self.document
        for i in path[:-1]:
            parent = _children_of(parent)[i]
        return parent

    @property
    def node(self) -> Node:
        path = self._require_node()
        return _children_of(self._parent(path))[path[-1]]

    @property
    def text(self) -> str:
        """Exact source text of the node under the cursor."""
        return serialize(self.node)

    @property
    def position(self) -> Position:
        return self._state.index.position(self._require_node())

    @property
    def start_line(self) -> int:
        return self.position.line

    @property
    def start_column(self) -> int:
        return self.position.column

    @property
    def end_line(self) -> int:
        # Derived from the node text on every call
        return self.start_line + self.text.count("\n")

    @property
    def depth(self) -> int:
        return len(self._require_node()) - 1

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def next(self) -> "Cursor":
        """Next semantic sibling, or the end marker."""
        if self.path is None:
            return self
        siblings = _children_of(self._parent(self.path))
        index = _first_semantic(siblings, self.path[-1] + 1)
        if index is None:
            return self._end()
        return self._at(self.path[:-1] + (index,))

    def prev(self) -> "Cursor":
        """Previous semantic sibling, or the end marker."""
        if self.path is None:
            return self
        siblings = _children_of(self._parent(self.path))
        for i in range(self.path[-1] - 1, -1, -1):
            if not siblings[i].is_trivia:
                return self._at(self.path[:-1] + (i,))
        return self._end()

    def up(self) -> "Cursor":
        """Enclosing form, or the end marker at top level."""
        if self.path is None or len(self.path) == 1:
            return self._end()
        return self._at(self.path[:-1])

    def down(self) -> "Cursor":
        """First semantic child of a composite, or the end marker."""
        if self.path is None:
            return self
        index = _first_semantic(_children_of(self.node))
        if index is None:
            return self._end()
        return self._at(self.path + (index,))

    def siblings(self) -> List["Cursor"]:
        """This cursor and every following semantic sibling."""
        result = []
        cursor = self
        while not cursor.is_end:
            result.append(cursor)
            cursor = cursor.next()
        return result

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def splice(self, nodes: Sequence[Node]) -> "Cursor":
        """
        Replace the node under the cursor with a sequence of nodes.

        Returns:
            Cursor on the new document, at the first semantic inserted node
            (or the end marker if nothing semantic was inserted)
        """
        path = self._require_node()
        nodes = tuple(nodes)

        # Collect the ancestor chain: ancestors[k] holds the children indexed by path[k]
        ancestors: List[Union[Document, Node]] = [self.document]
        for i in path[:-1]:
            ancestors.append(_children_of(ancestors[-1])[i])

        position = path[-1]
        children = _children_of(ancestors[-1])
        rebuilt: Union[Document, Node] = ancestors[-1].with_children(
            children[:position] + nodes + children[position + 1:]
        )
        for depth in range(len(path) - 2, -1, -1):
            parent = ancestors[depth]
            siblings = _children_of(parent)
            i = path[depth]
            rebuilt = parent.with_children(siblings[:i] + (rebuilt,) + siblings[i + 1:])

        state = _DocumentState(rebuilt)
        first = _first_semantic(nodes)
        if first is None:
            return Cursor(state, None)
        return Cursor(state, path[:-1] + (position + first,))

    def replace(self, node: Node) -> "Cursor":
        """Replace the node under the cursor; returns a cursor on the new document."""
        return self.splice((node,))

    def root_string(self) -> str:
        """Serialized text of the whole document this cursor belongs to."""
        return serialize(self.document)

    def __repr__(self) -> str:
        if self.path is None:
            return "Cursor(<end>)"
        return f"Cursor(path={self.path}, node={self.node!r})"
