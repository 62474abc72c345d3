"""
Tests for the structural operations: balance, locate and wrap.
"""

import pytest

from basic_tools_mcp.exceptions import ResultError
from basic_tools_mcp.structural import (
    ErrorKind,
    Template,
    count_top_level_forms,
    is_balanced,
    is_clojure_source_file,
    locate_top_level_form,
    wrap_form_str,
    wrap_in_source,
)

pytestmark = pytest.mark.fast


class TestIsBalanced:

    @pytest.mark.parametrize("source", [
        "(defn f [x] x)",
        "{:a 1 :b [2 3]}",
        "(let [a 1\n      b 2]\n  (+ a b))",
        "#{1 2 3}",
        "(str \"(\" \\) \"]\")",
        "; (unclosed in comment\n(a)",
        "",
        "   \n\t",
        "just atoms here",
    ])
    def test_valid(self, source):
        assert is_balanced(source) is True

    @pytest.mark.parametrize("source", [
        "(defn f [x",
        "(((",
        "{:a [1 2}",
        ")",
        "(a))",
        "(str \"unterminated)",
        "(a \\",
        "'",
    ])
    def test_invalid(self, source):
        assert is_balanced(source) is False

    @pytest.mark.parametrize("value", [None, 42, b"(a)", ["(a)"]])
    def test_non_string_is_false(self, value):
        assert is_balanced(value) is False


class TestLocateTopLevelForm:

    def test_locate_from_inside_body(self, sample_source):
        located = locate_top_level_form(sample_source, 4)
        assert located is not None
        assert located.start_line == 3
        assert located.end_line == 4
        assert located.text == "(defn foo [x]\n  (+ x 1))"

    @pytest.mark.parametrize("line,start", [(1, 1), (3, 3), (6, 6), (7, 6)])
    def test_each_form(self, sample_source, line, start):
        assert locate_top_level_form(sample_source, line).start_line == start

    @pytest.mark.parametrize("line", [2, 5, 8, 100])
    def test_blank_lines_and_past_end(self, sample_source, line):
        assert locate_top_level_form(sample_source, line) is None

    @pytest.mark.parametrize("line", [0, -1, True, 1.0, "1", None])
    def test_invalid_line_values(self, sample_source, line):
        assert locate_top_level_form(sample_source, line) is None

    def test_comment_lines_are_not_forms(self):
        source = ";; header\n(a)\n; trailing"
        assert locate_top_level_form(source, 1) is None
        assert locate_top_level_form(source, 2).text == "(a)"
        assert locate_top_level_form(source, 3) is None

    def test_first_form_on_shared_line(self):
        assert locate_top_level_form("(a) (b)", 1).text == "(a)"

    def test_form_ending_on_line_of_next(self):
        located = locate_top_level_form("(a\n b) (c)", 2)
        assert located.text == "(a\n b)"

    def test_top_level_atoms(self):
        located = locate_top_level_form("x\n:y", 2)
        assert located.text == ":y"

    def test_invalid_source(self):
        assert locate_top_level_form("(defn f [x", 1) is None
        assert locate_top_level_form(None, 1) is None

    def test_multiline_string_extends_form(self):
        source = '(def doc "line one\nline two\nline three")\n(next)'
        located = locate_top_level_form(source, 3)
        assert (located.start_line, located.end_line) == (1, 3)


class TestWrapFormStr:

    def test_substitution(self):
        result = wrap_form_str("(+ 1 2)", "(when-let [v %s] v)")
        assert result.is_ok
        assert result.value == "(when-let [v (+ 1 2)] v)"

    def test_unbalanced_template(self):
        result = wrap_form_str("(+ 1 2)", "(or (guard %s")
        assert result.is_err
        assert result.kind == "invalid-template"
        assert result.error.kind is ErrorKind.INVALID_TEMPLATE
        assert result.error.attempted_text == "(or (guard (+ 1 2)"

    def test_marker_inside_form_is_left_alone(self):
        result = wrap_form_str('(format "%s" x)', "(do %s)")
        assert result.value == '(do (format "%s" x))'

    @pytest.mark.parametrize("template", ["(do)", "(%s %s)", ""])
    def test_template_needs_exactly_one_marker(self, template):
        result = wrap_form_str("(a)", template)
        assert result.kind == "invalid-template"
        assert "exactly one" in result.error.message

    def test_template_object_with_custom_placeholder(self):
        result = wrap_form_str("(a)", Template("(comment <FORM>)", "<FORM>"))
        assert result.value == "(comment (a))"

    def test_non_string_inputs(self):
        assert wrap_form_str(None, "(do %s)").kind == "invalid-template"
        assert wrap_form_str("(a)", 42).kind == "invalid-template"

    def test_unbalanced_form_text(self):
        assert wrap_form_str("(a", "(do %s)").kind == "invalid-template"


class TestWrapInSource:

    def test_wrap_first_line_of_form(self, sample_source):
        result = wrap_in_source(sample_source, 3, "(do %s)")
        assert result.is_ok
        assert "(do (defn foo" in result.value
        assert "(ns example)" in result.value
        assert "(defn bar [y]\n  (* y 2))" in result.value
        assert result.value == (
            "(ns example)\n\n(do (defn foo [x]\n  (+ x 1)))\n\n(defn bar [y]\n  (* y 2))"
        )

    def test_wrap_from_inner_line(self, sample_source):
        assert wrap_in_source(sample_source, 4, "(do %s)").value == \
            wrap_in_source(sample_source, 3, "(do %s)").value

    def test_line_past_all_forms(self, sample_source):
        result = wrap_in_source(sample_source, 100, "(do %s)")
        assert result.kind == "no-form"
        assert result.error.target_line == 100

    def test_blank_line(self, sample_source):
        assert wrap_in_source(sample_source, 2, "(do %s)").kind == "no-form"

    @pytest.mark.parametrize("line", [0, -3, True, "3"])
    def test_bad_line_values(self, sample_source, line):
        assert wrap_in_source(sample_source, line, "(do %s)").kind == "no-form"

    def test_invalid_source(self):
        result = wrap_in_source("(defn f [x", 1, "(do %s)")
        assert result.kind == "parse-failed"

    def test_non_string_source(self):
        assert wrap_in_source(None, 1, "(do %s)").kind == "parse-failed"

    def test_bad_template_is_insert_failed(self, sample_source):
        result = wrap_in_source(sample_source, 3, "(do %s")
        assert result.kind == "insert-failed"
        assert result.error.cause.kind is ErrorKind.INVALID_TEMPLATE
        assert result.error.cause.attempted_text.startswith("(do (defn foo")

    def test_template_adding_a_form_is_insert_failed(self, sample_source):
        result = wrap_in_source(sample_source, 3, "%s (extra)")
        assert result.kind == "insert-failed"

    def test_template_removing_the_form_is_insert_failed(self, sample_source):
        result = wrap_in_source(sample_source, 3, "; %s")
        assert result.kind == "insert-failed"

    def test_discard_template(self, sample_source):
        result = wrap_in_source(sample_source, 6, "#_%s")
        assert result.value.endswith("\n\n#_(defn bar [y]\n  (* y 2))")

    def test_other_bytes_preserved(self):
        source = (
            ";; Copyright header\n"
            "(ns app.core)   ; trailing comment\n"
            "\n"
            "(defn  handler\n"
            "  [req]   {:status 200})\n"
            ",,\n"
            "(def x 1)\n"
        )
        result = wrap_in_source(source, 5, "(comment %s)")
        assert result.is_ok
        prefix = ";; Copyright header\n(ns app.core)   ; trailing comment\n\n"
        suffix = "\n,,\n(def x 1)\n"
        assert result.value == prefix + "(comment (defn  handler\n  [req]   {:status 200}))" + suffix

    def test_single_form_source(self):
        assert wrap_in_source("(f)", 1, "(try %s (catch Exception e nil))").value == \
            "(try (f) (catch Exception e nil))"

    def test_unwrap(self, sample_source):
        assert wrap_in_source(sample_source, 1, "(do %s)").unwrap().startswith("(do (ns example))")
        with pytest.raises(ResultError):
            wrap_in_source(sample_source, 100, "(do %s)").unwrap()
        assert wrap_in_source(sample_source, 100, "(do %s)").unwrap_or("fallback") == "fallback"


class TestHelpers:

    def test_count_top_level_forms(self, sample_source):
        assert count_top_level_forms(sample_source) == 3
        assert count_top_level_forms("") == 0
        assert count_top_level_forms("; c\n") == 0
        assert count_top_level_forms("(a") is None

    @pytest.mark.parametrize("path,expected", [
        ("src/app/core.clj", True),
        ("src/app/core.cljs", True),
        ("src/app/core.CLJC", True),
        ("deps.edn", True),
        ("README.md", False),
        ("core.clj.bak", False),
        ("Makefile", False),
    ])
    def test_is_clojure_source_file(self, path, expected):
        assert is_clojure_source_file(path) is expected

    def test_template_values(self):
        template = Template("(do %s)")
        assert template.is_valid
        assert template.marker_count == 1
        assert template.render("x") == "(do x)"
        assert str(template) == "(do %s)"
        assert Template.coerce(template) is template
        with pytest.raises(TypeError):
            Template.coerce(42)
