"""Unit tests for the shared code generation pipeline."""

import pytest

from pagecraft.model import Breakpoint, Document, Flags

from .lib import (
    ELEMENT_TAGS,
    CodeGenerationOptions,
    CodeGenerationRequest,
    RenderNode,
    attribute_name,
    component_names,
    filter_props,
    freeze_document,
    generate,
    generate_request,
    get_emitter,
    kebab_case,
    list_targets,
    node_css,
    pascal_case,
    resolve_element,
    write_result,
)


def _node(component_type, props=None, style=None, **geometry):
    return RenderNode(
        id=geometry.pop("id", "n1"),
        type=component_type,
        props=props or {},
        style=style or {},
        x=geometry.get("x", 0),
        y=geometry.get("y", 0),
        width=geometry.get("width", 100),
        height=geometry.get("height", 40),
    )


class TestRegistry:
    """Tests for emitter registration and lookup."""

    @pytest.mark.unit
    def test_list_targets(self):
        """All four targets are registered."""
        assert list_targets() == ["angular", "html", "react", "vue"]

    @pytest.mark.unit
    def test_get_emitter(self):
        """Lookup returns a fresh emitter instance."""
        assert get_emitter("vue").name == "vue"

    @pytest.mark.unit
    def test_unknown_target(self):
        """Unknown targets raise KeyError naming the alternatives."""
        with pytest.raises(KeyError, match="Available: angular, html, react, vue"):
            get_emitter("svelte")

    @pytest.mark.unit
    def test_default_target_from_environment(self, nested_document, monkeypatch):
        """PAGECRAFT_DEFAULT_TARGET picks the target when none is given."""
        monkeypatch.setenv("PAGECRAFT_DEFAULT_TARGET", "html")
        assert generate(nested_document).target == "html"

    @pytest.mark.unit
    def test_request(self, nested_document):
        """Requests carry target, document and options."""
        request = CodeGenerationRequest("vue", nested_document)
        assert generate_request(request).target == "vue"


class TestFreeze:
    """Tests for the frozen render tree."""

    @pytest.mark.unit
    def test_structure(self, nested_document):
        """Roots and children keep document order."""
        roots = freeze_document(nested_document)
        assert [r.id for r in roots] == ["section", "note"]
        assert [n.id for n in roots[0].walk()] == ["section", "card", "title", "cta"]

    @pytest.mark.unit
    def test_hidden_skipped(self, nested_document):
        """Invisible components and their subtrees are not rendered."""
        nested_document.require("card").flags.visible = False
        roots = freeze_document(nested_document)
        assert [n.id for n in roots[0].walk()] == ["section"]

    @pytest.mark.unit
    def test_detached_from_document(self, nested_document):
        """Later edits do not reach a frozen tree."""
        roots = freeze_document(nested_document)
        nested_document.require("note").props["text"] = "changed"
        assert roots[1].props["text"] == "Prices include VAT"
        with pytest.raises(TypeError):
            roots[1].props["text"] = "x"


class TestGenerate:
    """Tests for generate() guarantees shared by all targets."""

    @pytest.mark.unit
    @pytest.mark.parametrize("target", ["react", "vue", "angular", "html"])
    def test_deterministic(self, nested_document, target):
        """Equal documents and options give identical output."""
        options = CodeGenerationOptions(indent_size=2)
        first = generate(nested_document, target, options)
        second = generate(nested_document, target, options)
        assert first.to_dict() == second.to_dict()

    @pytest.mark.unit
    @pytest.mark.parametrize("target", ["react", "vue", "angular", "html"])
    def test_pure(self, nested_document, target):
        """Generation does not mutate the document."""
        before = nested_document.to_dict()
        generate(nested_document, target)
        assert nested_document.to_dict() == before

    @pytest.mark.unit
    @pytest.mark.parametrize("target", ["react", "vue", "angular", "html"])
    def test_breakpoint_is_view_state(self, nested_document, target):
        """The canvas breakpoint does not change generated code."""
        desktop = generate(nested_document, target)
        nested_document.settings.active_breakpoint = Breakpoint.MOBILE
        assert generate(nested_document, target).to_dict() == desktop.to_dict()

    @pytest.mark.unit
    def test_unknown_type_diagnostic(self, empty_document):
        """Unmapped types render as div and are reported."""
        empty_document.create_component("carousel")
        result = generate(empty_document, "html")
        [diagnostic] = result.diagnostics
        assert diagnostic.code == "unknown_type"
        assert "<div" in result.get_file("index.html").content

    @pytest.mark.unit
    def test_estimates(self, nested_document):
        """Advisory estimates stay in range."""
        result = generate(nested_document, "react")
        assert result.estimated_bundle_kb > 40
        assert 0 <= result.performance_score <= 100

    @pytest.mark.unit
    def test_indent_from_environment(self, nested_document, monkeypatch):
        """PAGECRAFT_INDENT_SIZE sets the default indentation."""
        monkeypatch.setenv("PAGECRAFT_INDENT_SIZE", "4")
        result = generate(nested_document, "html")
        assert '\n        <div class="pc-app">' in result.get_file("index.html").content

    @pytest.mark.unit
    def test_write_result(self, nested_document, tmp_path):
        """Files land below the output directory."""
        result = generate(nested_document, "react")
        written = write_result(result, tmp_path)
        assert len(written) == len(result.files)
        assert (tmp_path / "src" / "App.jsx").read_text() == result.get_file("src/App.jsx").content


class TestElements:
    """Tests for element resolution."""

    @pytest.mark.unit
    def test_every_builtin_type_mapped(self):
        """The mapping table covers the whole built-in palette."""
        from pagecraft.schema import ComponentType

        assert {t.value for t in ComponentType} <= set(ELEMENT_TAGS)

    @pytest.mark.unit
    def test_defaults_omitted(self):
        """Props equal to documented defaults are not emitted."""
        element = resolve_element(
            _node("button", {"text": "Save", "variant": "primary", "disabled": False})
        )
        assert element.attributes == ()
        assert element.content == "Save"

    @pytest.mark.unit
    def test_content_kept_at_default(self):
        """Text content renders even when it equals the default."""
        assert resolve_element(_node("button", {"text": "Button"})).content == "Button"

    @pytest.mark.unit
    def test_empty_and_none_omitted(self):
        """Empty strings and None are never attributes."""
        assert filter_props("input", {"placeholder": "", "name": None, "value": "x"}) == {
            "value": "x"
        }

    @pytest.mark.unit
    def test_custom_props_become_data_attributes(self):
        """Non-standard props use data-* names."""
        element = resolve_element(_node("button", {"variant": "ghost", "trackingId": 7}))
        assert element.attributes == (("data-variant", "ghost"), ("data-tracking-id", 7))

    @pytest.mark.unit
    def test_heading_level(self):
        element = resolve_element(_node("heading", {"text": "Hi", "level": 1}))
        assert element.tag == "h1"
        assert element.attributes == ()

    @pytest.mark.unit
    def test_ordered_list(self):
        """Ordered lists switch to <ol>."""
        element = resolve_element(_node("list", {"items": ["a", "b"], "ordered": True}))
        assert element.tag == "ol"
        assert [i.text for i in element.items] == ["a", "b"]

    @pytest.mark.unit
    def test_checkbox(self):
        """Checkboxes are typed inputs with an accessible label."""
        element = resolve_element(_node("checkbox", {"label": "Agree", "checked": True}))
        assert element.tag == "input"
        assert element.void
        assert element.attributes == (
            ("type", "checkbox"),
            ("aria-label", "Agree"),
            ("checked", True),
        )

    @pytest.mark.unit
    def test_navbar_links(self):
        """Link dictionaries become anchors with attributes."""
        element = resolve_element(
            _node("navbar", {"brand": "Acme", "links": [{"text": "Docs", "href": "/docs"}]})
        )
        assert element.slots == (("strong", "Acme"),)
        [link] = element.items
        assert (link.text, link.attributes) == ("Docs", (("href", "/docs"),))

    @pytest.mark.unit
    def test_hero_slots(self):
        """Hero props render as heading, paragraph and button."""
        element = resolve_element(_node("hero", {"title": "Ship", "subtitle": "Fast"}))
        assert element.slots == (
            ("h1", "Ship"),
            ("p", "Fast"),
            ("button", "Get Started"),
        )


class TestCss:
    """Tests for style conversion."""

    @pytest.mark.unit
    def test_positioning(self):
        css = dict(node_css(_node("text", x=10, y=0, width=120.5, height="auto")))
        assert css == {
            "position": "absolute",
            "left": "10px",
            "top": "0",
            "width": "120.5px",
            "height": "auto",
        }

    @pytest.mark.unit
    def test_user_style(self):
        """camelCase keys become kebab-case; unitless keys stay bare."""
        css = dict(
            node_css(_node("text", style={"backgroundColor": "#fff", "fontSize": 18, "opacity": 0.5}))
        )
        assert css["background-color"] == "#fff"
        assert css["font-size"] == "18px"
        assert css["opacity"] == "0.5"

    @pytest.mark.unit
    def test_initial_values_skipped(self):
        """Style entries equal to CSS initial values are dropped."""
        css = dict(node_css(_node("text", style={"opacity": 1, "display": "block", "color": ""})))
        assert "opacity" not in css
        assert "display" not in css
        assert "color" not in css


class TestNaming:
    """Tests for naming helpers."""

    @pytest.mark.unit
    def test_case_helpers(self):
        assert kebab_case("backgroundColor") == "background-color"
        assert pascal_case("call-to-action") == "CallToAction"
        assert attribute_name("href") == "href"
        assert attribute_name("ctaText") == "data-cta-text"

    @pytest.mark.unit
    def test_component_names_unique(self):
        """Repeated types get numeric suffixes; the app name is reserved."""
        roots = (
            _node("card", id="c1"),
            _node("card", id="c2"),
            _node("app", id="c3"),
        )
        assert component_names(roots) == {"c1": "Card", "c2": "Card2", "c3": "App2"}

    @pytest.mark.unit
    def test_component_names_from_name_prop(self):
        roots = (_node("group", {"name": "Pricing table"}, id="g1"),)
        assert component_names(roots) == {"g1": "PricingTable"}


class TestHiddenRoots:
    """Tests for documents with hidden roots."""

    @pytest.mark.unit
    def test_hidden_root_not_emitted(self):
        doc = Document(id="d", name="D")
        doc.create_component("text", props={"text": "shown"})
        hidden = doc.create_component("text", props={"text": "hidden"})
        hidden.flags = Flags(visible=False)
        page = generate(doc, "html").get_file("index.html").content
        assert "shown" in page
        assert "hidden" not in page
