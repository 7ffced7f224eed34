"""Authoritative component registry for the page builder.

This module is the single source of truth for what each built-in component
type looks like when it is created:
- default props (also the "documented defaults" the code generator omits)
- default size and resize constraints
- drop-zone behaviour (whether it accepts children, and which types)

The core consults the registry only when a component is created. Anything
that satisfies `ComponentRegistry` can stand in for `BuiltinRegistry`.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

Length = float | str


class ComponentCategory(str, Enum):
    """High-level palette groupings."""

    LAYOUT = "layout"
    NAVIGATION = "navigation"
    CONTENT = "content"
    FORM = "form"
    MEDIA = "media"


class ComponentType(str, Enum):
    """Built-in component type tags.

    Component `type` fields are plain strings so documents can carry types
    the registry does not know; this enum only names the built-in palette.
    """

    # Layout
    CONTAINER = "container"
    GROUP = "group"
    SECTION = "section"
    HERO = "hero"
    CARD = "card"
    GRID = "grid"

    # Navigation
    NAVBAR = "navbar"
    FOOTER = "footer"
    LINK = "link"

    # Content
    HEADING = "heading"
    TEXT = "text"
    LIST = "list"
    DIVIDER = "divider"

    # Form
    FORM = "form"
    BUTTON = "button"
    INPUT = "input"
    TEXTAREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"

    # Media
    IMAGE = "image"
    ICON = "icon"
    VIDEO = "video"


@dataclass(frozen=True)
class ConstraintDefaults:
    """Resize constraints a new component starts with."""

    min_width: float | None = None
    min_height: float | None = None
    max_width: float | None = None
    max_height: float | None = None
    aspect_ratio: float | None = None

    def to_dict(self) -> dict[str, float | None]:
        """Convert to keyword arguments for the document model."""
        return {
            "min_width": self.min_width,
            "min_height": self.min_height,
            "max_width": self.max_width,
            "max_height": self.max_height,
            "aspect_ratio": self.aspect_ratio,
        }


@dataclass(frozen=True)
class ComponentSpec:
    """Creation-time metadata for one component type.

    Attributes:
        type: Type tag stored on components.
        category: Palette grouping.
        description: Human-readable description.
        default_props: Props a new instance starts with.
        default_size: (width, height); either may be "auto".
        constraints: Resize constraints copied onto new instances.
        droppable: Whether the component accepts dropped children.
        accepts: Child types admitted when droppable (None = any type).
    """

    type: str
    category: ComponentCategory
    description: str
    default_props: dict[str, Any] = field(default_factory=dict)
    default_size: tuple[Length, Length] = (100.0, 40.0)
    constraints: ConstraintDefaults = field(default_factory=ConstraintDefaults)
    droppable: bool = False
    accepts: tuple[str, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert metadata to a JSON-friendly dictionary."""
        return {
            "type": self.type,
            "category": self.category.value,
            "description": self.description,
            "default_props": dict(self.default_props),
            "default_size": list(self.default_size),
            "constraints": self.constraints.to_dict(),
            "droppable": self.droppable,
            "accepts": list(self.accepts) if self.accepts is not None else None,
        }


class ComponentRegistry(Protocol):
    """Lookup contract for component creation metadata."""

    def get(self, component_type: str) -> ComponentSpec | None:
        """Return metadata for a type, or None when the type is unknown."""
        ...


_FORM_CHILDREN = ("heading", "text", "input", "textarea", "select", "checkbox", "button")
_NAV_CHILDREN = ("link", "button", "image", "icon", "text")

COMPONENT_REGISTRY: dict[str, ComponentSpec] = {
    # === LAYOUT ===
    "container": ComponentSpec(
        type="container",
        category=ComponentCategory.LAYOUT,
        description="Generic positioned container",
        default_size=(400.0, 300.0),
        droppable=True,
    ),
    "group": ComponentSpec(
        type="group",
        category=ComponentCategory.LAYOUT,
        description="Container produced by grouping a selection",
        default_props={"name": "Group"},
        default_size=(200.0, 200.0),
        droppable=True,
    ),
    "section": ComponentSpec(
        type="section",
        category=ComponentCategory.LAYOUT,
        description="Full-width page section",
        default_size=(1200.0, 400.0),
        constraints=ConstraintDefaults(min_height=40.0),
        droppable=True,
    ),
    "hero": ComponentSpec(
        type="hero",
        category=ComponentCategory.LAYOUT,
        description="Headline banner with call to action",
        default_props={
            "title": "Welcome",
            "subtitle": "",
            "ctaText": "Get Started",
        },
        default_size=(1200.0, 600.0),
        constraints=ConstraintDefaults(min_height=200.0),
    ),
    "card": ComponentSpec(
        type="card",
        category=ComponentCategory.LAYOUT,
        description="Elevated content panel",
        default_props={"title": "", "elevated": True},
        default_size=(320.0, 240.0),
        constraints=ConstraintDefaults(min_width=120.0, min_height=80.0),
        droppable=True,
    ),
    "grid": ComponentSpec(
        type="grid",
        category=ComponentCategory.LAYOUT,
        description="Column grid container",
        default_props={"columns": 3, "gap": 16},
        default_size=(960.0, 400.0),
        droppable=True,
    ),
    # === NAVIGATION ===
    "navbar": ComponentSpec(
        type="navbar",
        category=ComponentCategory.NAVIGATION,
        description="Top navigation bar",
        default_props={"brand": "Brand", "links": []},
        default_size=(1200.0, 64.0),
        constraints=ConstraintDefaults(min_height=40.0, max_height=120.0),
        droppable=True,
        accepts=_NAV_CHILDREN,
    ),
    "footer": ComponentSpec(
        type="footer",
        category=ComponentCategory.NAVIGATION,
        description="Page footer",
        default_props={"text": ""},
        default_size=(1200.0, 120.0),
        droppable=True,
        accepts=_NAV_CHILDREN,
    ),
    "link": ComponentSpec(
        type="link",
        category=ComponentCategory.NAVIGATION,
        description="Hyperlink",
        default_props={"text": "Link", "href": "#", "target": "_self"},
        default_size=("auto", 24.0),
    ),
    # === CONTENT ===
    "heading": ComponentSpec(
        type="heading",
        category=ComponentCategory.CONTENT,
        description="Section heading",
        default_props={"text": "Heading"},
        default_size=(400.0, 48.0),
    ),
    "text": ComponentSpec(
        type="text",
        category=ComponentCategory.CONTENT,
        description="Paragraph of body text",
        default_props={"text": "Text"},
        default_size=(300.0, "auto"),
    ),
    "list": ComponentSpec(
        type="list",
        category=ComponentCategory.CONTENT,
        description="Bulleted or numbered list",
        default_props={"items": [], "ordered": False},
        default_size=(300.0, "auto"),
    ),
    "divider": ComponentSpec(
        type="divider",
        category=ComponentCategory.CONTENT,
        description="Horizontal rule",
        default_size=(400.0, 1.0),
        constraints=ConstraintDefaults(min_height=1.0, max_height=8.0),
    ),
    # === FORM ===
    "form": ComponentSpec(
        type="form",
        category=ComponentCategory.FORM,
        description="Form wrapper",
        default_props={"action": "", "method": "post"},
        default_size=(400.0, 320.0),
        droppable=True,
        accepts=_FORM_CHILDREN,
    ),
    "button": ComponentSpec(
        type="button",
        category=ComponentCategory.FORM,
        description="Clickable button",
        default_props={
            "text": "Button",
            "variant": "primary",
            "disabled": False,
            "type": "button",
        },
        default_size=(120.0, 40.0),
        constraints=ConstraintDefaults(min_width=40.0, min_height=24.0),
    ),
    "input": ComponentSpec(
        type="input",
        category=ComponentCategory.FORM,
        description="Single-line text field",
        default_props={
            "type": "text",
            "placeholder": "",
            "name": "",
            "value": "",
            "required": False,
        },
        default_size=(240.0, 40.0),
        constraints=ConstraintDefaults(min_width=80.0, min_height=24.0),
    ),
    "textarea": ComponentSpec(
        type="textarea",
        category=ComponentCategory.FORM,
        description="Multi-line text field",
        default_props={"placeholder": "", "name": "", "rows": 4},
        default_size=(240.0, 96.0),
        constraints=ConstraintDefaults(min_width=80.0, min_height=40.0),
    ),
    "select": ComponentSpec(
        type="select",
        category=ComponentCategory.FORM,
        description="Drop-down choice",
        default_props={"name": "", "options": []},
        default_size=(200.0, 40.0),
    ),
    "checkbox": ComponentSpec(
        type="checkbox",
        category=ComponentCategory.FORM,
        description="Boolean toggle",
        default_props={"label": "", "name": "", "checked": False},
        default_size=(24.0, 24.0),
        constraints=ConstraintDefaults(aspect_ratio=1.0),
    ),
    # === MEDIA ===
    "image": ComponentSpec(
        type="image",
        category=ComponentCategory.MEDIA,
        description="Raster or vector image",
        default_props={"src": "", "alt": ""},
        default_size=(320.0, 200.0),
        constraints=ConstraintDefaults(min_width=16.0, min_height=16.0),
    ),
    "icon": ComponentSpec(
        type="icon",
        category=ComponentCategory.MEDIA,
        description="Named glyph",
        default_props={"name": "star"},
        default_size=(24.0, 24.0),
        constraints=ConstraintDefaults(
            min_width=8.0, max_width=256.0, aspect_ratio=1.0
        ),
    ),
    "video": ComponentSpec(
        type="video",
        category=ComponentCategory.MEDIA,
        description="Embedded video player",
        default_props={"src": "", "controls": True, "autoplay": False},
        default_size=(640.0, 360.0),
        constraints=ConstraintDefaults(min_width=160.0, aspect_ratio=16 / 9),
    ),
}

# Style values that equal the CSS initial value; emitting them is redundant.
STYLE_DEFAULTS: dict[str, Any] = {
    "opacity": 1,
    "zIndex": "auto",
    "visibility": "visible",
    "transform": "none",
    "display": "block",
    "fontStyle": "normal",
    "fontWeight": "normal",
    "textDecoration": "none",
    "borderWidth": 0,
    "margin": 0,
    "padding": 0,
    "rotation": 0,
}


class BuiltinRegistry:
    """Registry backed by the built-in `COMPONENT_REGISTRY` table.

    Args:
        extra: Additional or overriding specs keyed by type.
    """

    def __init__(self, extra: dict[str, ComponentSpec] | None = None):
        self._specs = dict(COMPONENT_REGISTRY)
        if extra:
            self._specs.update(extra)

    def get(self, component_type: str) -> ComponentSpec | None:
        """Return metadata for a type, or None when the type is unknown."""
        return self._specs.get(component_type)

    def register(self, spec: ComponentSpec) -> ComponentSpec:
        """Add or replace a component spec."""
        self._specs[spec.type] = spec
        return spec

    def types(self) -> list[str]:
        """List registered type tags in registration order."""
        return list(self._specs)

    def by_category(self, category: ComponentCategory) -> list[str]:
        """List registered type tags in a palette category."""
        return [t for t, spec in self._specs.items() if spec.category == category]


def get_component_spec(component_type: str) -> ComponentSpec | None:
    """Get built-in metadata for a component type.

    Args:
        component_type: Type tag to look up.

    Returns:
        ComponentSpec, or None for types outside the built-in palette.
    """
    return COMPONENT_REGISTRY.get(component_type)


def get_default_props(component_type: str) -> dict[str, Any]:
    """Get the documented default props for a type (empty if unknown)."""
    spec = COMPONENT_REGISTRY.get(component_type)
    return dict(spec.default_props) if spec else {}


def is_default_prop(component_type: str, key: str, value: Any) -> bool:
    """Check whether a prop value equals its documented default.

    Booleans only match booleans, so `False` never counts as a default of `0`.
    """
    defaults = get_default_props(component_type)
    if key not in defaults:
        return False
    default = defaults[key]
    if isinstance(default, bool) or isinstance(value, bool):
        return type(default) is type(value) and default == value
    return default == value


def is_default_style(key: str, value: Any) -> bool:
    """Check whether a style value equals the CSS initial value."""
    if key not in STYLE_DEFAULTS:
        return False
    default = STYLE_DEFAULTS[key]
    if isinstance(default, (int, float)) and isinstance(value, str):
        return value.strip() in (str(default), f"{default}px")
    return default == value


__all__ = [
    "ComponentCategory",
    "ComponentType",
    "ConstraintDefaults",
    "ComponentSpec",
    "ComponentRegistry",
    "BuiltinRegistry",
    "COMPONENT_REGISTRY",
    "STYLE_DEFAULTS",
    "get_component_spec",
    "get_default_props",
    "is_default_prop",
    "is_default_style",
]
