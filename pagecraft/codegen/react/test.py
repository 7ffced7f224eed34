"""Unit tests for the React emitter."""

import json

import pytest

from pagecraft.codegen import CodeGenerationOptions, generate

from .lib import JsxDialect, ReactEmitter


@pytest.fixture
def emitter():
    """Create a ReactEmitter instance."""
    return ReactEmitter()


class TestReactEmitter:
    """Tests for ReactEmitter."""

    @pytest.mark.unit
    def test_name(self, emitter):
        """Emitter has correct name."""
        assert emitter.name == "react"

    @pytest.mark.unit
    def test_file_layout(self, nested_document):
        """One component and stylesheet per root plus the Vite scaffold."""
        result = generate(nested_document, "react", CodeGenerationOptions(indent_size=2))
        assert result.paths == [
            "src/components/Section.jsx",
            "src/components/Section.css",
            "src/components/Text.jsx",
            "src/components/Text.css",
            "src/App.jsx",
            "src/App.css",
            "src/main.jsx",
            "index.html",
            "package.json",
            "vite.config.js",
        ]

    @pytest.mark.unit
    def test_component_markup(self, nested_document):
        """Nested components render as nested JSX with class hooks."""
        result = generate(nested_document, "react", CodeGenerationOptions(indent_size=2))
        content = result.get_file("src/components/Section.jsx").content
        assert content == (
            "import './Section.css';\n"
            "\n"
            "export default function Section() {\n"
            "  return (\n"
            '    <section className="pc-section">\n'
            '      <article className="pc-card">\n'
            "        <h3>Plans</h3>\n"
            '        <h2 className="pc-title">Pro</h2>\n'
            '        <button className="pc-cta">Buy now</button>\n'
            "      </article>\n"
            "    </section>\n"
            "  );\n"
            "}\n"
        )

    @pytest.mark.unit
    def test_app_imports_components(self, nested_document):
        """App renders every root component in order."""
        app = generate(nested_document, "react").get_file("src/App.jsx").content
        assert "import Section from './components/Section';" in app
        assert app.index("<Section />") < app.index("<Text />")

    @pytest.mark.unit
    def test_typescript(self, nested_document):
        """TypeScript mode switches extensions and adds tsconfig and types."""
        result = generate(nested_document, "react", CodeGenerationOptions(typescript=True))
        assert "src/App.tsx" in result.paths
        assert "tsconfig.json" in result.paths
        assert "vite.config.ts" in result.paths
        assert "typescript" in result.dev_dependencies
        assert ": JSX.Element" in result.get_file("src/App.tsx").content
        assert "getElementById('root')!" in result.get_file("src/main.tsx").content

    @pytest.mark.unit
    def test_without_styles(self, nested_document):
        """No stylesheets or class hooks when styles are disabled."""
        result = generate(nested_document, "react", CodeGenerationOptions(include_styles=False))
        assert not [p for p in result.paths if p.endswith(".css")]
        assert "className" not in result.get_file("src/components/Section.jsx").content

    @pytest.mark.unit
    def test_without_imports(self, nested_document):
        """Import statements are omitted on request."""
        result = generate(nested_document, "react", CodeGenerationOptions(include_imports=False))
        assert "import" not in result.get_file("src/App.jsx").content

    @pytest.mark.unit
    def test_manifest(self, empty_document):
        """package.json carries dependencies and scripts."""
        result = generate(empty_document, "react", CodeGenerationOptions(app_name="Landing"))
        manifest = json.loads(result.get_file("package.json").content)
        assert manifest["name"] == "landing"
        assert manifest["dependencies"] == {"react": "^18.2.0", "react-dom": "^18.2.0"}
        assert manifest["scripts"]["build"] == "vite build"
        assert result.get_file("src/App.jsx").content.count("export default function Landing") == 1


class TestJsxDialect:
    """Tests for JSX attribute and text spelling."""

    @pytest.fixture
    def dialect(self):
        return JsxDialect(CodeGenerationOptions(indent_size=2))

    @pytest.mark.unit
    def test_string_attribute(self, dialect):
        assert dialect.attribute("href", "/pricing") == ' href="/pricing"'

    @pytest.mark.unit
    def test_renamed_attribute(self, dialect):
        """HTML names map to their React props."""
        assert dialect.attribute("autoplay", True) == " autoPlay"
        assert dialect.attribute("value", "x") == ' defaultValue="x"'

    @pytest.mark.unit
    def test_non_string_attribute(self, dialect):
        """Numbers, False and structures become expressions."""
        assert dialect.attribute("rows", 6) == " rows={6}"
        assert dialect.attribute("disabled", False) == " disabled={false}"

    @pytest.mark.unit
    def test_text_with_braces(self, dialect):
        """Text that JSX would parse is emitted as a string expression."""
        assert dialect.text("a {b}") == '{"a {b}"}'
        assert dialect.text("plain") == "plain"
