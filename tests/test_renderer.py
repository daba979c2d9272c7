"""
Tests for the public rendering API.
"""

import threading
from pathlib import Path

import pytest

import whisker
from whisker import (
    DictLoader, FileSystemLoader, LoaderError, MissingKeyError, ParseError,
    Renderer, RenderSettings, Tags, TemplateRegistry,
)
from whisker.template.tokens import DEFAULT_TAGS


class TestModuleRender:

    def test_render(self):
        assert whisker.render("Hello {{name}}", {"name": "you"}) == "Hello you"

    def test_render_with_partials(self):
        assert whisker.render("[{{>p}}]", {"v": 1}, {"p": "{{v}}"}) == "[1]"

    def test_settings_keywords(self):
        with pytest.raises(MissingKeyError):
            whisker.render("{{x}}", {}, strict=True)
        assert whisker.render("{{x}}", {"x": "<"}, escape=whisker.no_escape) == "<"

    def test_none_keywords_keep_defaults(self):
        assert whisker.render("{{x}}", {"x": "<"}, escape=None) == "&lt;"

    def test_parse_errors_propagate(self):
        with pytest.raises(ParseError):
            whisker.render("{{#a}}", {})


class TestRenderer:

    def test_render_and_cache(self, renderer: Renderer):
        assert renderer.render("{{a}}", {"a": 1}) == "1"
        assert renderer.render("{{a}}", {"a": 2}) == "2"
        assert len(renderer.cache) == 1

    def test_parse_returns_cached_ast(self, renderer: Renderer):
        first = renderer.parse("{{#a}}b{{/a}}")
        assert renderer.parse("{{#a}}b{{/a}}") is first

    def test_parse_with_tag_string(self, renderer: Renderer):
        ast = renderer.parse("<%x%>", "<% %>")
        assert ast[0].name == "x"
        assert ("<%x%>", Tags("<%", "%>")) in renderer.cache

    def test_parse_with_bad_tag_string(self, renderer: Renderer):
        with pytest.raises(ValueError):
            renderer.parse("x", "<%")

    def test_render_with_initial_tags(self, renderer: Renderer):
        out = renderer.render("[[name]] {{name}}", {"name": "x"}, tags=Tags("[[", "]]"))
        assert out == "x {{name}}"

    def test_cache_template_and_clear(self, renderer: Renderer):
        renderer.cache_template("{{a}}")
        renderer.cache_template("<%a%>", "<% %>")
        assert ("{{a}}", DEFAULT_TAGS) in renderer.cache
        assert len(renderer.cache) == 2
        renderer.clear_cache()
        assert len(renderer.cache) == 0

    def test_renderers_do_not_share_caches(self):
        one, two = Renderer(), Renderer()
        one.cache_template("{{a}}")
        assert len(two.cache) == 0

    def test_per_call_settings_override_registry(self, strict_renderer: Renderer):
        with pytest.raises(MissingKeyError):
            strict_renderer.render("{{x}}", {})
        assert strict_renderer.render("{{x}}", {}, settings=RenderSettings()) == ""

    def test_template_loader(self):
        registry = TemplateRegistry(template_loader=DictLoader({"hello": "Hi {{name}}"}))
        renderer = Renderer(registry)
        assert renderer.render("hello", {"name": "Ann"}) == "Hi Ann"

    def test_unknown_template(self):
        renderer = Renderer(TemplateRegistry(template_loader=DictLoader({})))
        with pytest.raises(LoaderError, match="Template not found: nope"):
            renderer.render("nope", {})

    def test_partial_map_takes_priority_over_loader(self):
        registry = TemplateRegistry(partial_loader=DictLoader({"p": "loader", "q": "q-loader"}))
        renderer = Renderer(registry)
        assert renderer.render("{{>p}} {{>q}}", {}, partials={"p": "map"}) == "map q-loader"

    def test_custom_value_getter(self):
        class Record:
            def __init__(self, fields):
                self.fields = fields

        registry = TemplateRegistry()
        registry.register_value_getter(Record, lambda rec, key: rec.fields.get(key, whisker.MISSING))
        renderer = Renderer(registry)
        assert renderer.render("{{#r}}{{id}}{{/r}}", {"r": Record({"id": 7})}) == "7"

    def test_concurrent_renders_share_cache(self, renderer: Renderer):
        template = "{{#items}}{{.}}{{/items}}"
        results = {}

        def worker(n):
            results[n] = renderer.render(template, {"items": list(range(n))})

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(1, 9)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results[3] == "012"
        assert results[8] == "01234567"
        assert len(renderer.cache) == 1


class TestFileTemplates:

    def test_page_with_partials(self, tmpproj: Path):
        templates = tmpproj / "templates"
        registry = TemplateRegistry(
            template_loader=FileSystemLoader(templates),
            partial_loader=FileSystemLoader(templates),
        )
        view = {"title": "Fruit & Veg", "items": [{"name": "apple"}, {"name": "kale"}]}
        out = Renderer(registry).render("page", view)
        assert out == "<h1>Fruit &amp; Veg</h1>\n  <li>apple</li>\n  <li>kale</li>\n"


class TestMustacheBehaviour:
    """End to end checks of the template language."""

    @pytest.mark.parametrize("template, view, expected", [
        ("{{a}}", {"a": "<&>"}, "&lt;&amp;&gt;"),
        ("{{{a}}}", {"a": "<&>"}, "<&>"),
        ("{{#a}}x{{/a}}", {"a": [1, 2, 3]}, "xxx"),
        ("{{^a}}x{{/a}}", {"a": []}, "x"),
        ("{{#a}}{{b}}{{/a}}", {"a": {"b": 1}, "b": 2}, "1"),
        ("{{a.b}}|{{#a}}{{c}}{{/a}}", {"a": {"b": "B"}, "c": "C"}, "B|C"),
        ("{{=<% %>=}}<%a%>", {"a": 1}, "1"),
        ("a{{! comment }}b", {}, "ab"),
        ("  {{#a}}\n  x\n  {{/a}}\n", {"a": True}, "  x\n"),
    ])
    def test_examples(self, renderer: Renderer, template, view, expected):
        assert renderer.render(template, view) == expected

    def test_partial_indentation(self, renderer: Renderer):
        out = renderer.render("<ul>\n  {{>li}}\n</ul>", {"x": "1"}, partials={"li": "<li>{{x}}</li>\n"})
        assert out == "<ul>\n  <li>1</li>\n</ul>"

    def test_unclosed_section_reports_name_and_position(self, renderer: Renderer):
        with pytest.raises(ParseError) as exc_info:
            renderer.render("line\n  {{#list}}\n", {})
        assert "'list'" in str(exc_info.value)
        assert (exc_info.value.line, exc_info.value.column) == (2, 3)
