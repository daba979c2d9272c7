"""
Tests for the template parser.
"""

import pytest

from whisker.errors import ParseError
from whisker.template.nodes import (
    CommentNode, DelimiterNode, PartialNode, SectionNode, TextNode, VariableNode,
)
from whisker.template.parser import TemplateParser, parse_template
from whisker.template.lexer import tokenize_template
from whisker.template.tokens import Tags


class TestTemplateParser:
    """Node construction."""

    def test_text_only(self):
        ast = parse_template("just text")
        assert ast == (TextNode("just text"),)

    def test_result_is_immutable_tuple(self):
        ast = parse_template("{{a}}")
        assert isinstance(ast, tuple)

    def test_variables(self):
        ast = parse_template("{{a}}{{{b}}}{{&c}}")
        assert ast == (
            VariableNode("a", escape=True),
            VariableNode("b", escape=False),
            VariableNode("c", escape=False),
        )

    def test_section_body_range(self):
        ast = parse_template("<{{#list}}[{{.}}]{{/list}}>")
        section = ast[1]
        assert isinstance(section, SectionNode)
        assert section.name == "list"
        assert section.inverted is False
        assert (section.start, section.end) == (2, 5)
        assert ast[section.start:section.end] == (
            TextNode("["), VariableNode("."), TextNode("]"),
        )
        assert ast[5] == TextNode(">")

    def test_nested_sections(self):
        ast = parse_template("{{#a}}{{#b}}x{{/b}}{{^c}}y{{/c}}{{/a}}")
        outer, inner, _, inverted, _ = ast
        assert (outer.start, outer.end) == (1, 5)
        assert (inner.start, inner.end) == (2, 3)
        assert inverted.inverted is True
        assert (inverted.start, inverted.end) == (4, 5)

    def test_empty_section(self):
        ast = parse_template("{{#a}}{{/a}}")
        assert len(ast) == 1
        assert (ast[0].start, ast[0].end) == (1, 1)

    def test_section_raw_body(self):
        source = "{{#wrap}}Hi {{name}}!{{/wrap}}"
        ast = parse_template(source)
        assert ast[0].raw == "Hi {{name}}!"

    def test_section_raw_body_keeps_standalone_whitespace(self):
        ast = parse_template("{{#wrap}}\n  {{name}}\n{{/wrap}}\n")
        assert ast[0].raw == "\n  {{name}}\n"

    def test_section_remembers_delimiters(self):
        ast = parse_template("{{=<% %>=}}<%#a%>x<%/a%>")
        assert ast[0] == DelimiterNode(Tags("<%", "%>"))
        assert ast[1].tags == Tags("<%", "%>")

    def test_partial_and_comment_nodes(self):
        ast = parse_template("  {{>item}}\n{{!note}}x")
        assert ast == (PartialNode("item", "  "), CommentNode("note"), TextNode("x"))

    def test_whitespace_in_names(self):
        ast = parse_template("{{# a }}{{/a }}")
        assert ast[0].name == "a"

    def test_parser_class_directly(self):
        source = "{{#a}}b{{/a}}"
        ast = TemplateParser(tokenize_template(source), source).parse()
        assert ast[0].raw == "b"


class TestParserErrors:
    """Section balancing errors."""

    def test_unclosed_section_names_it(self):
        with pytest.raises(ParseError, match="Unclosed section 'a'") as exc_info:
            parse_template("{{#a}}no closer")
        assert exc_info.value.line == 1
        assert exc_info.value.column == 1

    def test_innermost_unclosed_section_is_reported(self):
        with pytest.raises(ParseError, match="Unclosed section 'b'"):
            parse_template("{{#a}}\n{{#b}}\n{{/a}}")

    def test_mismatched_closer(self):
        with pytest.raises(ParseError) as exc_info:
            parse_template("{{#a}}x\n{{/b}}")
        err = exc_info.value
        assert "'a'" in str(err) and "'b'" in str(err)
        assert err.line == 2

    def test_unopened_section(self):
        with pytest.raises(ParseError, match="Unopened section 'x'"):
            parse_template("text {{/x}}")

    def test_names_are_case_sensitive(self):
        with pytest.raises(ParseError):
            parse_template("{{#Name}}{{/name}}")
