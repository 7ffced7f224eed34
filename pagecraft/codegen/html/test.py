"""Unit tests for the static HTML emitter."""

import pytest

from pagecraft.codegen import CodeGenerationOptions, generate

from .lib import HtmlEmitter


class TestHtmlEmitter:
    """Tests for HtmlEmitter."""

    @pytest.mark.unit
    def test_name(self):
        """Emitter has correct name."""
        assert HtmlEmitter().name == "html"

    @pytest.mark.unit
    def test_files(self, nested_document):
        """A page and a stylesheet, nothing to install."""
        result = generate(nested_document, "html")
        assert result.paths == ["index.html", "styles.css"]
        assert result.dependencies == {}
        assert result.scripts == {}

    @pytest.mark.unit
    def test_body(self, nested_document):
        """Roots render inside the page wrapper in order."""
        result = generate(nested_document, "html", CodeGenerationOptions(indent_size=2))
        page = result.get_file("index.html").content
        expected = (
            '    <div class="pc-app">\n'
            '      <section class="pc-section">\n'
            '        <article class="pc-card">\n'
            "          <h3>Plans</h3>\n"
            '          <h2 class="pc-title">Pro</h2>\n'
            '          <button class="pc-cta">Buy now</button>\n'
            "        </article>\n"
            "      </section>\n"
            '      <p class="pc-note">Prices include VAT</p>\n'
            "    </div>\n"
        )
        assert expected in page
        assert '<link rel="stylesheet" href="styles.css" />' in page

    @pytest.mark.unit
    def test_stylesheet(self, nested_document):
        """Every rendered component gets a positioned rule."""
        css = generate(nested_document, "html").get_file("styles.css").content
        for class_name in ("pc-app", "pc-section", "pc-card", "pc-title", "pc-cta", "pc-note"):
            assert f".{class_name} {{" in css
        assert "left: 20px;" in css

    @pytest.mark.unit
    def test_escaping(self, empty_document):
        """Text and attribute values are escaped."""
        empty_document.create_component("text", props={"text": "<b>bold</b> & co"})
        empty_document.create_component("link", props={"text": "Docs", "href": '/a?q="x"'})
        page = generate(empty_document, "html").get_file("index.html").content
        assert "&lt;b&gt;bold&lt;/b&gt; &amp; co" in page
        assert 'href="/a?q=&quot;x&quot;"' in page

    @pytest.mark.unit
    def test_void_elements(self, empty_document):
        """Void tags have no closing tag."""
        empty_document.create_component("image", props={"src": "logo.png", "alt": "Logo"})
        page = generate(empty_document, "html").get_file("index.html").content
        assert 'src="logo.png"' in page
        assert "</img>" not in page

    @pytest.mark.unit
    def test_typescript_ignored(self, empty_document):
        """TypeScript requests produce a diagnostic only."""
        result = generate(empty_document, "html", CodeGenerationOptions(typescript=True))
        assert [d.code for d in result.diagnostics] == ["typescript_ignored"]
        assert result.paths == ["index.html", "styles.css"]
