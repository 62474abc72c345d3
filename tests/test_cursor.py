"""
Tests for Cursor navigation, editing and the position index.
"""

import pytest

from basic_tools_mcp.exceptions import CursorError
from basic_tools_mcp.parser import Cursor, Position, PositionIndex, parse

pytestmark = pytest.mark.fast


def first(source):
    return Cursor.first(parse(source).document)


def only_node(source):
    return parse(source).document.semantic_children()[0]


class TestPositionIndex:

    def test_positions_inside_composite(self):
        document = parse("(a\n b)").document
        index = PositionIndex(document)
        assert index.position((0,)) == Position(0, 1, 1)
        assert index.position((0, 0)) == Position(1, 1, 2)
        assert index.position((0, 2)) == Position(3, 2, 1)
        assert index.position((0, 3)) == Position(4, 2, 2)
        assert index.end_line((0,), document.children[0]) == 2

    def test_positions_after_leading_trivia(self):
        document = parse(";; header\n\n  (a)").document
        index = PositionIndex(document)
        path = (len(document.children) - 1,)
        assert index.start_line(path) == 3
        assert index.start_column(path) == 3

    def test_multiline_string_advances_lines(self):
        document = parse('"a\nb" x').document
        assert PositionIndex(document).start_line((2,)) == 2

    def test_out_of_range_path(self):
        index = PositionIndex(parse("(a)").document)
        with pytest.raises(KeyError):
            index.position((5,))
        with pytest.raises(KeyError):
            index.position((0, 0, 0))

    def test_advance(self):
        assert Position(0, 1, 1).advance("ab") == Position(2, 1, 3)
        assert Position(0, 1, 5).advance("a\nbc") == Position(4, 2, 3)


class TestNavigation:

    def test_first_and_next(self, sample_source):
        cursor = first(sample_source)
        assert cursor.text == "(ns example)"
        foo = cursor.next()
        assert foo.text == "(defn foo [x]\n  (+ x 1))"
        assert (foo.start_line, foo.end_line) == (3, 4)
        bar = foo.next()
        assert (bar.start_line, bar.end_line) == (6, 7)
        assert bar.next().is_end

    def test_end_marker_is_terminal(self, sample_source):
        end = first(sample_source).next().next().next()
        assert end.is_end
        assert end.next().is_end
        assert end.prev().is_end
        assert end.down().is_end
        with pytest.raises(CursorError):
            end.text

    def test_first_on_empty_documents(self):
        assert first("").is_end
        assert first("; only a comment\n").is_end

    def test_prev(self, sample_source):
        foo = first(sample_source).next()
        assert foo.prev().text == "(ns example)"
        assert foo.prev().prev().is_end

    def test_down_and_up(self, sample_source):
        foo = first(sample_source).next()
        head = foo.down()
        assert head.text == "defn"
        assert head.depth == 1
        assert head.start_column == 2
        params = head.next().next()
        assert params.text == "[x]"
        assert params.up().text == foo.text
        assert foo.up().is_end

    def test_down_on_leaf_and_empty_list(self):
        assert first("x").down().is_end
        assert first("()").down().is_end
        assert first("( ; c\n )").down().is_end

    def test_siblings(self, sample_source):
        texts = [c.text for c in first(sample_source).siblings()]
        assert texts[0] == "(ns example)"
        assert len(texts) == 3

    def test_navigation_skips_trivia(self):
        cursor = first("(a ;; x\n b)").down()
        assert cursor.next().text == "b"
        assert cursor.next().next().is_end


class TestEditing:

    def test_replace_top_level(self, sample_source):
        cursor = first(sample_source)
        edited = cursor.replace(only_node("(ns other)"))
        assert edited.text == "(ns other)"
        assert edited.root_string() == sample_source.replace("(ns example)", "(ns other)")
        # The old cursor still reads the old document
        assert cursor.root_string() == sample_source
        assert cursor.text == "(ns example)"

    def test_replace_nested_rebuilds_ancestors(self, sample_source):
        name = first(sample_source).next().down().next()
        assert name.text == "foo"
        edited = name.replace(only_node("baz"))
        assert "(defn baz [x]\n  (+ x 1))" in edited.root_string()
        assert edited.up().text.startswith("(defn baz")
        assert edited.document is not name.document

    def test_untouched_subtrees_are_shared(self, sample_source):
        cursor = first(sample_source)
        edited = cursor.replace(only_node("(ns other)"))
        assert edited.document.children[-1] is cursor.document.children[-1]

    def test_splice_multiple_nodes(self):
        cursor = first("(a)")
        fragment = parse("b c").document.children
        edited = cursor.splice(fragment)
        assert edited.root_string() == "b c"
        assert edited.text == "b"
        assert edited.next().text == "c"

    def test_splice_nothing_semantic(self):
        edited = first("(a) (b)").splice(())
        assert edited.is_end
        assert edited.root_string() == " (b)"

    def test_positions_recomputed_after_edit(self, sample_source):
        ns = first(sample_source)
        edited = ns.replace(only_node("(ns\n  example)"))
        foo = edited.next()
        assert (foo.start_line, foo.end_line) == (4, 5)

    def test_edit_at_end_marker_raises(self):
        with pytest.raises(CursorError):
            first("").replace(only_node("x"))
