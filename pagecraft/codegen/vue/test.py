"""Unit tests for the Vue emitter."""

import pytest

from pagecraft.codegen import CodeGenerationOptions, generate

from .lib import VueEmitter, VueTemplateDialect


class TestVueEmitter:
    """Tests for VueEmitter."""

    @pytest.mark.unit
    def test_name(self):
        """Emitter has correct name."""
        assert VueEmitter().name == "vue"

    @pytest.mark.unit
    def test_file_layout(self, nested_document):
        """One SFC per root plus the Vite scaffold."""
        result = generate(nested_document, "vue")
        assert result.paths == [
            "src/components/Section.vue",
            "src/components/Text.vue",
            "src/App.vue",
            "src/main.js",
            "index.html",
            "package.json",
            "vite.config.js",
        ]
        assert result.dependencies == {"vue": "^3.4.0"}

    @pytest.mark.unit
    def test_single_file_component(self, nested_document):
        """SFCs hold the template and scoped styles."""
        result = generate(nested_document, "vue", CodeGenerationOptions(indent_size=2))
        content = result.get_file("src/components/Text.vue").content
        assert content.startswith(
            "<script setup>\n</script>\n\n"
            "<template>\n"
            '  <p class="pc-note">Prices include VAT</p>\n'
            "</template>\n"
        )
        assert "<style scoped>\n.pc-note {\n  position: absolute;\n  left: 600px;" in content

    @pytest.mark.unit
    def test_app_registers_components(self, nested_document):
        """App.vue imports and places every root component."""
        app = generate(nested_document, "vue").get_file("src/App.vue").content
        assert "<script setup>" in app
        assert "import Section from './components/Section.vue';" in app
        assert app.index("<Section />") < app.index("<Text />")

    @pytest.mark.unit
    def test_typescript(self, nested_document):
        """TypeScript mode uses lang="ts" scripts and vue-tsc."""
        result = generate(nested_document, "vue", CodeGenerationOptions(typescript=True))
        assert '<script setup lang="ts">' in result.get_file("src/App.vue").content
        assert "src/main.ts" in result.paths
        assert "tsconfig.json" in result.paths
        assert result.scripts["build"] == "vue-tsc && vite build"

    @pytest.mark.unit
    def test_bindings(self, empty_document):
        """Non-string props become bound attributes."""
        empty_document.create_component("textarea", props={"rows": 8, "name": "bio"})
        sfc = generate(empty_document, "vue").get_file("src/components/Textarea.vue").content
        assert ':rows="8"' in sfc
        assert 'name="bio"' in sfc


class TestVueTemplateDialect:
    """Tests for Vue attribute and text spelling."""

    @pytest.fixture
    def dialect(self):
        return VueTemplateDialect(CodeGenerationOptions(indent_size=2))

    @pytest.mark.unit
    def test_boolean_true(self, dialect):
        assert dialect.attribute("required", True) == " required"

    @pytest.mark.unit
    def test_boolean_false_bound(self, dialect):
        assert dialect.attribute("controls", False) == ' :controls="false"'

    @pytest.mark.unit
    def test_mustache_text(self, dialect):
        """Text containing interpolation markers is emitted as an expression."""
        assert dialect.text("{{ price }}") == "{{ '{{ price }}' }}"

    @pytest.mark.unit
    def test_escapes_markup(self, dialect):
        assert dialect.text("a < b") == "a &lt; b"
