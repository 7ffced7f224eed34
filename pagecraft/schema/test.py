"""Unit tests for the component registry."""

import pytest

from .lib import (
    COMPONENT_REGISTRY,
    BuiltinRegistry,
    ComponentCategory,
    ComponentSpec,
    ComponentType,
    get_component_spec,
    get_default_props,
    is_default_prop,
    is_default_style,
)


class TestComponentRegistry:
    """Tests for the built-in registry table."""

    @pytest.mark.unit
    def test_every_builtin_type_is_registered(self):
        """Each ComponentType member has a spec."""
        for component_type in ComponentType:
            assert component_type.value in COMPONENT_REGISTRY

    @pytest.mark.unit
    def test_spec_type_matches_key(self):
        for key, spec in COMPONENT_REGISTRY.items():
            assert spec.type == key

    @pytest.mark.unit
    def test_accepts_only_on_droppable(self):
        """Child type filters only make sense on drop zones."""
        for spec in COMPONENT_REGISTRY.values():
            if spec.accepts is not None:
                assert spec.droppable

    @pytest.mark.unit
    def test_unknown_type_returns_none(self):
        assert get_component_spec("carousel") is None
        assert BuiltinRegistry().get("carousel") is None

    @pytest.mark.unit
    def test_to_dict_is_json_friendly(self):
        data = COMPONENT_REGISTRY["form"].to_dict()
        assert data["category"] == "form"
        assert isinstance(data["accepts"], list)
        assert data["constraints"]["min_width"] is None


class TestBuiltinRegistry:
    """Tests for the registry object."""

    @pytest.mark.unit
    def test_register_overrides_builtin(self):
        registry = BuiltinRegistry()
        custom = ComponentSpec(
            type="button",
            category=ComponentCategory.FORM,
            description="Pill button",
            default_props={"text": "Go"},
        )
        registry.register(custom)
        assert registry.get("button").default_props == {"text": "Go"}
        # The module table is untouched
        assert COMPONENT_REGISTRY["button"].default_props["text"] == "Button"

    @pytest.mark.unit
    def test_extra_specs(self):
        extra = ComponentSpec(
            type="carousel",
            category=ComponentCategory.MEDIA,
            description="Slides",
        )
        registry = BuiltinRegistry(extra={"carousel": extra})
        assert "carousel" in registry.types()
        assert "carousel" in registry.by_category(ComponentCategory.MEDIA)


class TestDefaults:
    """Tests for documented default lookups."""

    @pytest.mark.unit
    def test_default_props_are_copies(self):
        props = get_default_props("button")
        props["text"] = "changed"
        assert get_default_props("button")["text"] == "Button"

    @pytest.mark.unit
    def test_is_default_prop(self):
        assert is_default_prop("button", "variant", "primary")
        assert not is_default_prop("button", "variant", "ghost")
        assert not is_default_prop("button", "unknown", "x")
        assert not is_default_prop("carousel", "text", "x")

    @pytest.mark.unit
    def test_bool_never_matches_number(self):
        assert is_default_prop("textarea", "rows", 4)
        assert is_default_prop("textarea", "rows", 4.0)
        assert not is_default_prop("button", "disabled", 0)

    @pytest.mark.unit
    def test_is_default_style(self):
        assert is_default_style("opacity", 1)
        assert is_default_style("margin", "0px")
        assert not is_default_style("opacity", 0.5)
        assert not is_default_style("color", "red")
