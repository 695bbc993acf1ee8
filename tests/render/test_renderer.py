"""
Tests for doclink.render.renderer - the Renderer facade and RenderOptions.
"""

import logging

import pytest

from doclink.comment import Link
from doclink.exceptions import ValidationError
from doclink.render import (
    DEFAULT_ANCHOR_KINDS,
    EXAMPLE_ERROR_HTML,
    DeclHTML,
    Example,
    Kind,
    Renderer,
    RenderOptions,
    heading_id,
)


class TestDocHTML:
    """Tests for Renderer.doc_html()."""

    def test_package_doc(self, shapes):
        """Package docs link page declarations, members and namespaces."""
        r = Renderer(shapes)
        assert r.doc_html(shapes.doc) == (
            '<p>Package shapes draws <a href="#Circle">Circle</a> and Square values.\n</p>\n'
            '<p>Use <a href="#Circle.area">Circle.area</a> to measure a circle, or '
            '<a href="/math">math</a>.<a href="/math#pi">pi</a> directly.\n</p>'
        )

    def test_links_collected(self, shapes):
        """Links sections of package docs are collected."""
        r = Renderer(shapes)
        r.doc_html(shapes.doc)
        assert r.links == [Link("Shapes guide", "https://example.com/guide")]

    def test_links_accumulate(self, shapes):
        """Links from several docs are appended in order."""
        r = Renderer(shapes)
        r.doc_html("Text.\n\nLinks\n\n- One, /one")
        r.doc_html("Text.\n\nLinks\n\n- Two, /two")
        assert [link.text for link in r.links] == ["One", "Two"]

    def test_links_heading_never_first(self, shapes):
        """A Links title as the first line is prose."""
        r = Renderer(shapes)
        assert r.doc_html("Links\n\n- One, /one") == "<p>Links\n</p>\n<p>- One, /one\n</p>"
        assert r.links == []

    def test_heading(self, shapes):
        """Headings get an ID and a permalink."""
        html = Renderer(shapes).doc_html("Intro.\n\nThe Details\n\nBody.")
        assert (
            '<h4 id="hdr-The_Details">The Details'
            '<a class="Documentation-idLink" href="#hdr-The_Details">¶</a></h4>'
        ) in html

    def test_command_toc_heading(self, shapes):
        """enable_command_toc renders headings as h3."""
        r = Renderer(shapes, RenderOptions(enable_command_toc=True))
        assert '<h3 id="hdr-Usage">Usage' in r.doc_html("Intro.\n\nUsage\n\nBody.")

    def test_permalinks_disabled(self, shapes):
        """disable_permalinks drops the heading permalink."""
        r = Renderer(shapes, RenderOptions(disable_permalinks=True))
        html = r.doc_html("Intro.\n\nUsage\n\nBody.")
        assert '<h4 id="hdr-Usage">Usage</h4>' in html

    def test_preformat_not_linked(self, shapes):
        """Preformatted text is not linked."""
        html = Renderer(shapes).doc_html("Example:\n\n    Circle(2)")
        assert html.endswith("<pre>Circle(2)\n</pre>")

    def test_hotlinking_disabled(self, shapes):
        """enable_hotlinking=False keeps only URL links."""
        r = Renderer(shapes, RenderOptions(enable_hotlinking=False))
        assert r.doc_html("See Circle at https://example.com") == (
            '<p>See Circle at <a href="https://example.com">https://example.com</a>\n</p>'
        )

    def test_custom_package_url(self, shapes):
        """package_url builds the links to other packages."""
        r = Renderer(shapes, RenderOptions(package_url=lambda path: f"https://pkg.example/{path}"))
        assert '<a href="https://pkg.example/math#pi">pi</a>' in r.doc_html("Uses math.pi here.")


class TestDeclHTML:
    """Tests for Renderer.decl_html()."""

    def test_returns_doc_and_decl(self, shapes):
        """decl_html() returns both doc and declaration HTML."""
        part = Renderer(shapes).decl_html("Scale doc.", shapes.declarations[0])
        assert isinstance(part, DeclHTML)
        assert part.doc == "<p>Scale doc.\n</p>"
        assert part.decl.startswith('<span id="SCALE"')

    def test_members_resolve_in_doc(self, shapes):
        """Members of the declaration link from its doc."""
        circle = shapes.declarations[3]
        part = Renderer(shapes).decl_html("Set radius first.", circle)
        assert part.doc == '<p>Set <a href="#Circle.radius">radius</a> first.\n</p>'

    def test_links_section_not_extracted(self, shapes):
        """Declaration docs keep their Links section."""
        r = Renderer(shapes)
        r.decl_html("Text.\n\nLinks\n\n- One, /one", shapes.declarations[0])
        assert r.links == []

    def test_format_error_logged(self, shapes, monkeypatch, caplog):
        """An unparsable declaration is logged as a warning."""
        monkeypatch.setattr("doclink.render.decl.print_declaration", lambda decl, nodes=None: "def (")
        with caplog.at_level(logging.WARNING, logger="doclink"):
            Renderer(shapes).decl_html("", shapes.declarations[0])

        assert any(r.getMessage() == "Declaration not formatted" for r in caplog.records)


class TestCodeHTML:
    """Tests for Renderer.code_html()."""

    def test_example(self, shapes):
        """Examples render as example code blocks."""
        ex = Example.from_code("def example():\n    print(largest([]))\n    # Output: None\n")
        assert Renderer(shapes).code_html(ex) == (
            '<pre class="Documentation-exampleCode">print(largest([]))</pre>'
        )

    def test_missing_code_placeholder(self, shapes):
        """Missing code renders the error placeholder."""
        assert Renderer(shapes).code_html(Example(code=None)) == EXAMPLE_ERROR_HTML
        assert Renderer(shapes).code_html(None) == EXAMPLE_ERROR_HTML


class TestSynopsis:
    """Tests for Renderer.synopsis()."""

    def test_function(self, shapes):
        """synopsis() gives the one-line signature."""
        assert Renderer(shapes).synopsis(shapes.declarations[3].methods[1]) == "def area(self) -> float"


class TestHeadingID:
    """Tests for heading_id()."""

    def test_non_alphanumerics_replaced(self):
        """Non-alphanumerics in heading IDs become underscores."""
        assert heading_id("Modules, module versions, and more") == "hdr-Modules__module_versions__and_more"


class TestRenderOptions:
    """Tests for RenderOptions validation and defaults."""

    def test_defaults(self):
        """RenderOptions() uses the documented defaults."""
        opts = RenderOptions()
        assert opts.enable_hotlinking is True
        assert opts.disable_permalinks is False
        assert opts.enable_command_toc is False
        assert opts.max_string_size == 125
        assert opts.max_elements == 100
        assert opts.anchor_kinds == DEFAULT_ANCHOR_KINDS
        assert opts.wrap_receiver_methods is False
        assert opts.package_url("numpy") == "/numpy"

    def test_thresholds_follow_config(self, restore_config):
        """Trim thresholds default to the process config."""
        restore_config.max_elements = 9
        assert RenderOptions().max_elements == 9

    def test_anchor_kinds_accept_strings(self):
        """anchor_kinds accepts kind names."""
        assert RenderOptions(anchor_kinds={"field"}).anchor_kinds == frozenset({Kind.FIELD})

    def test_unknown_anchor_kind(self):
        """Unknown kind names raise ValidationError."""
        with pytest.raises(ValidationError):
            RenderOptions(anchor_kinds={"widget"})

    def test_negative_threshold(self):
        """Negative thresholds raise ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            RenderOptions(max_elements=-1)

        assert exc_info.value.code == "INVALID_ARGUMENT"

    def test_package_url_must_be_callable(self):
        """package_url must be callable."""
        with pytest.raises(ValidationError):
            RenderOptions(package_url="https://example.com")

    def test_frozen(self):
        """RenderOptions cannot be changed after creation."""
        opts = RenderOptions()
        with pytest.raises(AttributeError):
            opts.max_elements = 3

    def test_wraps(self):
        """Only selected kinds without a receiver are wrapped."""
        opts = RenderOptions()
        assert opts.wraps(Kind.FIELD, has_receiver=False)
        assert not opts.wraps(Kind.TYPE, has_receiver=False)
        assert not opts.wraps(Kind.FIELD, has_receiver=True)
