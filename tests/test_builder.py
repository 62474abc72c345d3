"""
Tests for the tree builder and the parse() entry points.
"""

import pytest

from basic_tools_mcp.exceptions import StructuralInvalidError
from basic_tools_mcp.parser import (
    Composite,
    CompositeKind,
    IssueKind,
    Leaf,
    build_document,
    parse,
    parse_or_raise,
    serialize,
    tokenize,
)

pytestmark = pytest.mark.fast


def only_form(source):
    forms = parse(source).document.semantic_children()
    assert len(forms) == 1
    return forms[0]


class TestTreeShape:

    def test_nested_composites(self):
        form = only_form("(a [b {c d}])")
        assert isinstance(form, Composite)
        assert form.kind is CompositeKind.LIST
        children = form.semantic_children()
        assert [c.text for c in children] == ["a", "[b {c d}]"]
        assert children[1].kind is CompositeKind.VECTOR
        assert children[1].semantic_children()[1].kind is CompositeKind.MAP

    @pytest.mark.parametrize("source,kind", [
        ("()", CompositeKind.LIST),
        ("[]", CompositeKind.VECTOR),
        ("{}", CompositeKind.MAP),
        ("#{1 2}", CompositeKind.SET),
        ("#(inc %)", CompositeKind.FN),
    ])
    def test_composite_kinds(self, source, kind):
        assert only_form(source).kind is kind

    def test_trivia_kept_as_children(self):
        form = only_form("(a ; note\n b)")
        assert [c.tag for c in form.children] == ["atom", "whitespace", "comment", "newline", "whitespace", "atom"]
        assert len(form.semantic_children()) == 2

    def test_atom_at_top_level(self):
        form = only_form("  :keyword  ")
        assert isinstance(form, Leaf)
        assert form.text == ":keyword"

    def test_empty_and_trivia_only_documents_are_valid(self):
        for source in ["", "   ", "; just a comment\n", ",,\n\n"]:
            result = parse(source)
            assert not result.structural_invalid
            assert result.document.semantic_children() == []

    def test_document_keeps_source(self):
        assert parse("(a)\n").document.source == "(a)\n"


class TestPrefixedForms:

    def test_quote_wraps_next_form(self):
        form = only_form("'(a b)")
        assert form.kind is CompositeKind.PREFIXED
        assert form.open.text == "'"
        assert form.close is None
        assert form.semantic_children()[0].kind is CompositeKind.LIST

    def test_metadata_takes_two_forms(self):
        form = only_form("^:private x")
        assert form.kind is CompositeKind.PREFIXED
        assert [c.text for c in form.semantic_children()] == [":private", "x"]

    def test_stacked_metadata_is_one_form(self):
        form = only_form("^{:a 1} ^:b x")
        inner = form.semantic_children()[1]
        assert inner.kind is CompositeKind.PREFIXED
        assert [c.text for c in inner.semantic_children()] == [":b", "x"]

    def test_nested_prefixes(self):
        form = only_form("''x")
        assert form.semantic_children()[0].semantic_children()[0].text == "x"

    def test_discard_counts_as_form(self):
        forms = parse("#_ x y").document.semantic_children()
        assert [f.text for f in forms] == ["#_ x", "y"]

    def test_reader_conditional(self):
        form = only_form("#?(:clj 1 :cljs 2)")
        assert form.open.text == "#?"
        assert form.semantic_children()[0].kind is CompositeKind.LIST

    def test_tagged_literal(self):
        assert only_form('#inst "2020-01-01"').open.text == "#inst"


class TestStructuralIssues:

    @pytest.mark.parametrize("source,kind", [
        ("(a]", IssueKind.MISMATCHED_CLOSE),
        ("{:a [1 2}", IssueKind.MISMATCHED_CLOSE),
        (")", IssueKind.UNMATCHED_CLOSE),
        ("(a) )", IssueKind.UNMATCHED_CLOSE),
        ("(defn f [x", IssueKind.UNTERMINATED),
        ("(((", IssueKind.UNTERMINATED),
        ("(')", IssueKind.DANGLING_PREFIX),
        ("(a) '", IssueKind.DANGLING_PREFIX),
        ("^:meta", IssueKind.DANGLING_PREFIX),
        ('(str "abc)', IssueKind.LEXICAL),
    ])
    def test_issue_kinds(self, source, kind):
        result = parse(source)
        assert result.structural_invalid
        assert result.document is None
        assert result.issue.kind is kind

    def test_issue_position(self):
        issue = parse("(a\n  ]").issue
        assert issue.kind is IssueKind.MISMATCHED_CLOSE
        assert (issue.line, issue.column) == (2, 3)
        assert issue.offset == 5

    def test_unterminated_reports_end_of_input(self):
        issue = parse("(a\n b").issue
        assert issue.offset == len("(a\n b")
        assert issue.line == 2
        assert "at line 2" in str(issue)

    def test_parse_or_raise(self):
        with pytest.raises(StructuralInvalidError) as exc_info:
            parse_or_raise("(a")
        assert exc_info.value.issue.kind is IssueKind.UNTERMINATED
        assert parse_or_raise("(a)").text == "(a)"


class TestLosslessness:

    @pytest.mark.parametrize("source", [
        "(ns example\n  (:require [clojure.string :as str]))\n\n;; comment\n(defn f [x] x)\n",
        "{:a 1, :b #{2 3}}  ; trailing",
        "^{:doc \"x\"}\n(def x #?(:clj 1 :cljs 2))",
        "(let [c \\( s \"(\"] `(~@c ~s @a #'v))",
        "#_#_ a b c",
        "",
    ])
    def test_round_trip(self, source):
        document = parse(source).document
        assert document.text == source
        assert serialize(document) == source

    def test_every_node_reproduces_its_span(self):
        source = "(a [b \"c\"] {:d #{e}}) ; x\n'(f)"
        document = build_document(tokenize(source)).document
        offset = 0
        for child in document.children:
            text = serialize(child)
            assert source[offset:offset + len(text)] == text
            offset += len(text)
        assert offset == len(source)

    def test_source_defaults_to_token_text(self):
        assert build_document(tokenize("(a)")).document.source == "(a)"
