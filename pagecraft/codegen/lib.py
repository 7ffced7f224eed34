"""Code generation pipeline shared by every target.

Generation runs on a frozen copy of the document (`freeze_document`), so it
never observes or causes mutation. Each node is resolved once into an
`Element` (tag, attributes, text content, repeated items, CSS) using the
`ELEMENT_TEMPLATES` table; target emitters only decide how to spell that
element in their grammar and which project files surround it.
"""

from __future__ import annotations

import html
import json
import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Protocol

from pagecraft.config import EnvVar, get_environment
from pagecraft.model import AUTO, Component, Document
from pagecraft.schema import get_default_props, is_default_prop, is_default_style

logger = logging.getLogger(__name__)


# =============================================================================
# Request / result types
# =============================================================================


class FileKind(str, Enum):
    """Role of a generated file."""

    COMPONENT = "component"
    PAGE = "page"
    STYLE = "style"
    CONFIG = "config"
    MANIFEST = "manifest"
    MARKUP = "markup"


@dataclass(frozen=True)
class GeneratedFile:
    """One file of the virtual output tree.

    Attributes:
        name: File name.
        path: Project-relative path (forward slashes).
        content: File text.
        kind: Role of the file.
    """

    name: str
    path: str
    content: str
    kind: FileKind


@dataclass(frozen=True)
class Diagnostic:
    """Non-fatal generation issue.

    Attributes:
        node_id: Component the issue concerns ("" for document-wide issues).
        code: Machine-readable code (e.g. "unknown_type").
        message: Human-readable explanation.
    """

    node_id: str
    code: str
    message: str


def _default_indent() -> int:
    return get_environment(EnvVar.PAGECRAFT_INDENT_SIZE)


@dataclass
class CodeGenerationOptions:
    """Knobs shared by every target.

    Attributes:
        typescript: Emit TypeScript where the target supports it.
        include_imports: Emit import statements in generated sources.
        include_styles: Emit stylesheets and class hooks.
        indent_size: Spaces per nesting level (PAGECRAFT_INDENT_SIZE).
        app_name: Name of the page/app root and the npm package.
    """

    typescript: bool = False
    include_imports: bool = True
    include_styles: bool = True
    indent_size: int = field(default_factory=_default_indent)
    app_name: str = "App"


@dataclass
class CodeGenerationRequest:
    """Everything needed to run one generation."""

    target: str
    document: Document
    options: CodeGenerationOptions = field(default_factory=CodeGenerationOptions)


@dataclass
class CodeGenerationResult:
    """Virtual file set plus manifest data.

    Attributes:
        target: Emitter that produced the files.
        files: Files in emission order.
        dependencies: npm package -> version range.
        dev_dependencies: npm dev package -> version range.
        scripts: npm script name -> command.
        diagnostics: Non-fatal issues found while generating.
        estimated_bundle_kb: Advisory size estimate.
        performance_score: Advisory 0-100 score.
    """

    target: str
    files: list[GeneratedFile] = field(default_factory=list)
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    scripts: dict[str, str] = field(default_factory=dict)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    estimated_bundle_kb: float = 0.0
    performance_score: int = 100

    @property
    def has_diagnostics(self) -> bool:
        """Check if any diagnostics were emitted."""
        return len(self.diagnostics) > 0

    @property
    def paths(self) -> list[str]:
        return [f.path for f in self.files]

    def get_file(self, path: str) -> GeneratedFile | None:
        """Find a file by project-relative path."""
        return next((f for f in self.files if f.path == path), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "target": self.target,
            "files": [
                {"name": f.name, "path": f.path, "content": f.content, "kind": f.kind.value}
                for f in self.files
            ],
            "dependencies": self.dependencies,
            "dev_dependencies": self.dev_dependencies,
            "scripts": self.scripts,
            "diagnostics": [
                {"node_id": d.node_id, "code": d.code, "message": d.message}
                for d in self.diagnostics
            ],
            "estimated_bundle_kb": self.estimated_bundle_kb,
            "performance_score": self.performance_score,
        }


class ExportPackager(Protocol):
    """Turns a generated file set into a downloadable archive."""

    def package(self, result: CodeGenerationResult) -> bytes:
        """Build an archive from the files and manifest."""
        ...


def write_result(result: CodeGenerationResult, directory: Path | str) -> list[Path]:
    """Write every generated file below a directory.

    Returns:
        Paths written, in emission order.
    """
    root = Path(directory)
    written = []
    for generated in result.files:
        target = root / generated.path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(generated.content, encoding="utf-8")
        written.append(target)
    logger.info(f"Wrote {len(written)} {result.target} files to {root}")
    return written


# =============================================================================
# Frozen tree
# =============================================================================


@dataclass(frozen=True)
class RenderNode:
    """Read-only component view walked by emitters."""

    id: str
    type: str
    props: Mapping[str, Any]
    style: Mapping[str, Any]
    x: float
    y: float
    width: float | str
    height: float | str
    children: tuple[RenderNode, ...] = ()

    def walk(self):
        """Yield this node and every descendant in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()


def _freeze(document: Document, component: Component) -> RenderNode:
    return RenderNode(
        id=component.id,
        type=component.type,
        props=MappingProxyType(dict(component.props)),
        style=MappingProxyType(dict(component.style)),
        x=component.position.x,
        y=component.position.y,
        width=component.size.width,
        height=component.size.height,
        children=tuple(
            _freeze(document, child)
            for child in document.children_of(component.id)
            if child.flags.visible
        ),
    )


def freeze_document(document: Document) -> tuple[RenderNode, ...]:
    """Snapshot the visible component tree for generation.

    Works on a deep copy, so later edits to the document cannot leak into a
    generation in progress. Hidden components (and their subtrees) are left
    out.
    """
    frozen = document.model_copy(deep=True)
    return tuple(
        _freeze(frozen, root) for root in frozen.children_of(None) if root.flags.visible
    )


# =============================================================================
# Element mapping table
# =============================================================================


@dataclass(frozen=True)
class ElementTemplate:
    """How one component type maps onto markup.

    Attributes:
        tag: Output tag.
        content: Prop rendered as text content.
        items: Prop holding repeated entries.
        item_tag: Tag of each repeated entry.
        slots: (prop, tag) pairs rendered as leading child elements.
        void: Tag has no closing tag.
        fixed: Attributes always present.
        renames: Prop -> attribute name overrides.
        ordered_tag: Tag used instead when the `ordered` prop is true.
        level_prop: Prop selecting the heading level (h1-h6).
    """

    tag: str
    content: str | None = None
    items: str | None = None
    item_tag: str = "li"
    slots: tuple[tuple[str, str], ...] = ()
    void: bool = False
    fixed: tuple[tuple[str, str], ...] = ()
    renames: tuple[tuple[str, str], ...] = ()
    ordered_tag: str | None = None
    level_prop: str | None = None

    @property
    def consumed(self) -> frozenset[str]:
        """Props rendered structurally rather than as attributes."""
        names = {p for p, _ in self.slots}
        for name in (self.content, self.items, self.level_prop):
            if name:
                names.add(name)
        if self.ordered_tag:
            names.add("ordered")
        return frozenset(names)


FALLBACK_TEMPLATE = ElementTemplate(tag="div")

ELEMENT_TEMPLATES: dict[str, ElementTemplate] = {
    # Layout
    "container": ElementTemplate(tag="div"),
    "group": ElementTemplate(tag="div"),
    "section": ElementTemplate(tag="section"),
    "hero": ElementTemplate(
        tag="section",
        slots=(("title", "h1"), ("subtitle", "p"), ("ctaText", "button")),
    ),
    "card": ElementTemplate(tag="article", slots=(("title", "h3"),)),
    "grid": ElementTemplate(tag="div"),
    # Navigation
    "navbar": ElementTemplate(
        tag="nav", slots=(("brand", "strong"),), items="links", item_tag="a"
    ),
    "footer": ElementTemplate(tag="footer", content="text"),
    "link": ElementTemplate(tag="a", content="text"),
    # Content
    "heading": ElementTemplate(tag="h2", content="text", level_prop="level"),
    "text": ElementTemplate(tag="p", content="text"),
    "list": ElementTemplate(tag="ul", items="items", ordered_tag="ol"),
    "divider": ElementTemplate(tag="hr", void=True),
    # Form
    "form": ElementTemplate(tag="form"),
    "button": ElementTemplate(tag="button", content="text"),
    "input": ElementTemplate(tag="input", void=True),
    "textarea": ElementTemplate(tag="textarea"),
    "select": ElementTemplate(tag="select", items="options", item_tag="option"),
    "checkbox": ElementTemplate(
        tag="input",
        void=True,
        fixed=(("type", "checkbox"),),
        renames=(("label", "aria-label"),),
    ),
    # Media
    "image": ElementTemplate(tag="img", void=True),
    "icon": ElementTemplate(tag="i", renames=(("name", "data-icon"),)),
    "video": ElementTemplate(tag="video"),
}

ELEMENT_TAGS: dict[str, str] = {t: tpl.tag for t, tpl in ELEMENT_TEMPLATES.items()}

STANDARD_ATTRIBUTES = frozenset(
    {
        "action",
        "alt",
        "autoplay",
        "checked",
        "controls",
        "disabled",
        "href",
        "method",
        "name",
        "placeholder",
        "required",
        "rows",
        "src",
        "target",
        "type",
        "value",
    }
)

UNITLESS_STYLES = frozenset(
    {"opacity", "zIndex", "fontWeight", "lineHeight", "flex", "flexGrow", "flexShrink", "order"}
)

# Advisory heuristics
BYTES_PER_KB = 1024.0
COMPRESSION_RATIO = 0.35


# =============================================================================
# Element resolution
# =============================================================================


@dataclass(frozen=True)
class Item:
    """One repeated entry (list item, select option, nav link)."""

    text: str
    attributes: tuple[tuple[str, Any], ...] = ()


@dataclass(frozen=True)
class Element:
    """A node resolved against the mapping table."""

    node: RenderNode
    tag: str
    attributes: tuple[tuple[str, Any], ...]
    content: str | None
    items: tuple[Item, ...]
    item_tag: str
    slots: tuple[tuple[str, str], ...]
    void: bool
    class_name: str
    css: tuple[tuple[str, str], ...]

    @property
    def is_empty(self) -> bool:
        """No content, slots, items or children."""
        return not (self.content or self.slots or self.items or self.node.children)


def kebab_case(name: str) -> str:
    """camelCase -> kebab-case."""
    return re.sub(r"(?<!^)(?=[A-Z])", "-", name).lower()


def pascal_case(name: str) -> str:
    """Any identifier-ish string -> PascalCase."""
    parts = re.split(r"[^0-9a-zA-Z]+", name)
    result = "".join(p[:1].upper() + p[1:] for p in parts if p)
    if not result or result[0].isdigit():
        result = f"C{result}"
    return result


def camel_case(name: str) -> str:
    pascal = pascal_case(name)
    return pascal[:1].lower() + pascal[1:]


def class_name_for(node: RenderNode) -> str:
    """Stable CSS class for a node."""
    return "pc-" + re.sub(r"[^0-9a-zA-Z_-]+", "-", node.id).strip("-").lower()


def attribute_name(key: str) -> str:
    """Markup attribute for a prop; non-standard props become data-*."""
    if key in STANDARD_ATTRIBUTES or key.startswith(("data-", "aria-")):
        return key
    return f"data-{kebab_case(key)}"


def to_json(value: Any) -> str:
    """Deterministic JSON literal."""
    return json.dumps(value, sort_keys=True, ensure_ascii=False)


def filter_props(component_type: str, props: Mapping[str, Any]) -> dict[str, Any]:
    """Drop None, empty strings and values equal to the documented default."""
    return {
        key: value
        for key, value in props.items()
        if value is not None
        and value != ""
        and not is_default_prop(component_type, key, value)
    }


def _css_value(key: str, value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        number = int(value) if float(value).is_integer() else value
        return str(number) if key in UNITLESS_STYLES or number == 0 else f"{number}px"
    return str(value)


def _length(value: float | str) -> str:
    if value == AUTO:
        return AUTO
    return _css_value("width", value)


def node_css(node: RenderNode) -> tuple[tuple[str, str], ...]:
    """CSS declarations for a node: absolute placement, then its own style.

    Style entries that are None, empty or equal to the CSS initial value are
    skipped.
    """
    declarations: dict[str, str] = {
        "position": "absolute",
        "left": _length(node.x),
        "top": _length(node.y),
        "width": _length(node.width),
        "height": _length(node.height),
    }
    for key, value in node.style.items():
        if value is None or value == "" or is_default_style(key, value):
            continue
        declarations[kebab_case(key)] = _css_value(key, value)
    return tuple(declarations.items())


def _item(value: Any) -> Item:
    if isinstance(value, Mapping):
        text = value.get("text", value.get("label", value.get("value", "")))
        attrs = tuple(
            (attribute_name(k), v)
            for k, v in sorted(value.items())
            if k not in ("text", "label") and v not in (None, "")
        )
        return Item(str(text), attrs)
    return Item(str(value))


def template_for(component_type: str) -> ElementTemplate:
    return ELEMENT_TEMPLATES.get(component_type, FALLBACK_TEMPLATE)


def resolve_element(node: RenderNode) -> Element:
    """Resolve a node to tag, attributes and content."""
    template = template_for(node.type)
    defaults = get_default_props(node.type)
    effective = {**defaults, **node.props}

    tag = template.tag
    if template.ordered_tag and effective.get("ordered") is True:
        tag = template.ordered_tag
    if template.level_prop:
        level = effective.get(template.level_prop)
        if isinstance(level, int) and not isinstance(level, bool) and 1 <= level <= 6:
            tag = f"h{level}"

    renames = dict(template.renames)
    attributes = list(template.fixed)
    for key, value in filter_props(node.type, node.props).items():
        if key in template.consumed:
            continue
        attributes.append((renames.get(key) or attribute_name(key), value))

    content = effective.get(template.content) if template.content else None
    items_value = effective.get(template.items) if template.items else None
    items = tuple(_item(v) for v in items_value) if isinstance(items_value, list) else ()
    slots = tuple(
        (slot_tag, str(effective[prop]))
        for prop, slot_tag in template.slots
        if effective.get(prop) not in (None, "")
    )
    return Element(
        node=node,
        tag=tag,
        attributes=tuple(attributes),
        content=None if content in (None, "") else str(content),
        items=items,
        item_tag=template.item_tag,
        slots=slots,
        void=template.void,
        class_name=class_name_for(node),
        css=node_css(node),
    )


def collect_diagnostics(roots: tuple[RenderNode, ...]) -> list[Diagnostic]:
    """Report component types missing from the mapping table."""
    diagnostics = []
    for root in roots:
        for node in root.walk():
            if node.type not in ELEMENT_TEMPLATES:
                logger.warning(
                    f"No element mapping for type '{node.type}' ({node.id}), using div"
                )
                diagnostics.append(
                    Diagnostic(
                        node.id,
                        "unknown_type",
                        f"Unknown component type '{node.type}' rendered as <div>",
                    )
                )
    return diagnostics


def component_names(roots: tuple[RenderNode, ...], reserved: str = "App") -> dict[str, str]:
    """Deterministic PascalCase names for root components.

    Names derive from the component type; repeats get numeric suffixes.
    """
    names: dict[str, str] = {}
    used = {reserved}
    for root in roots:
        base = pascal_case(str(root.props.get("name") or root.type))
        candidate, counter = base, 2
        while candidate in used:
            candidate = f"{base}{counter}"
            counter += 1
        used.add(candidate)
        names[root.id] = candidate
    return names


def stylesheet(elements: list[Element], indent: str = "  ") -> str:
    """CSS rules for resolved elements, one rule per element."""
    rules = []
    for element in elements:
        body = "\n".join(f"{indent}{prop}: {value};" for prop, value in element.css)
        rules.append(f".{element.class_name} {{\n{body}\n}}")
    return "\n\n".join(rules) + "\n" if rules else ""


def flatten(root: RenderNode) -> list[Element]:
    """Resolve a subtree in pre-order."""
    return [resolve_element(node) for node in root.walk()]


def package_manifest(
    name: str,
    dependencies: dict[str, str],
    dev_dependencies: dict[str, str],
    scripts: dict[str, str],
    indent: int = 2,
) -> str:
    """package.json content."""
    manifest: dict[str, Any] = {
        "name": kebab_case(pascal_case(name)) or "app",
        "version": "0.1.0",
        "private": True,
        "type": "module",
        "scripts": scripts,
        "dependencies": dependencies,
        "devDependencies": dev_dependencies,
    }
    return to_json_file(manifest, indent)


def to_json_file(data: Any, indent: int = 2) -> str:
    """Pretty JSON document with a trailing newline."""
    return json.dumps(data, indent=indent) + "\n"


def make_file(path: str, content: str, kind: FileKind) -> GeneratedFile:
    """GeneratedFile whose name is the last path segment."""
    return GeneratedFile(name=path.rsplit("/", 1)[-1], path=path, content=content, kind=kind)


# =============================================================================
# Markup dialects
# =============================================================================

APP_CLASS = "pc-app"


def app_rule(indent: str = "  ") -> str:
    """Positioning context for the page root."""
    return f".{APP_CLASS} {{\n{indent}position: relative;\n{indent}min-height: 100vh;\n}}\n"


class MarkupDialect:
    """Spells resolved elements as tag markup.

    The base class writes plain HTML; targets override attribute and text
    spelling for their template grammar.
    """

    class_attribute = "class"
    void_close = ""

    def __init__(self, options: CodeGenerationOptions):
        self.options = options
        self.indent = " " * options.indent_size

    def attribute(self, name: str, value: Any) -> str:
        """One attribute with its leading space ("" to omit)."""
        if value is True:
            return f" {name}"
        if value is False:
            return ""
        if isinstance(value, str):
            return f' {name}="{html.escape(value)}"'
        if isinstance(value, (int, float)):
            return f' {name}="{value}"'
        return f' {name}="{html.escape(to_json(value))}"'

    def text(self, value: str) -> str:
        return html.escape(value, quote=False)

    def class_hook(self, element: Element) -> str:
        if not self.options.include_styles:
            return ""
        return f' {self.class_attribute}="{element.class_name}"'

    def render_items(self, element: Element, depth: int) -> list[str]:
        pad = self.indent * depth
        lines = []
        for item in element.items:
            attrs = "".join(self.attribute(n, v) for n, v in item.attributes)
            lines.append(
                f"{pad}<{element.item_tag}{attrs}>{self.text(item.text)}</{element.item_tag}>"
            )
        return lines

    def render(self, node: RenderNode, depth: int = 0) -> list[str]:
        """Lines for a node and its subtree."""
        element = resolve_element(node)
        pad = self.indent * depth
        attrs = self.class_hook(element) + "".join(
            self.attribute(name, value) for name, value in element.attributes
        )
        opening = f"<{element.tag}{attrs}"
        if element.void:
            return [f"{pad}{opening}{self.void_close}>"]
        closing = f"</{element.tag}>"
        if element.content is not None and not (
            element.slots or element.items or node.children
        ):
            return [f"{pad}{opening}>{self.text(element.content)}{closing}"]

        inner_pad = self.indent * (depth + 1)
        inner = [f"{inner_pad}<{tag}>{self.text(text)}</{tag}>" for tag, text in element.slots]
        if element.content is not None:
            inner.append(f"{inner_pad}{self.text(element.content)}")
        inner.extend(self.render_items(element, depth + 1))
        for child in node.children:
            inner.extend(self.render(child, depth + 1))
        if not inner:
            return [f"{pad}{opening}>{closing}"]
        return [f"{pad}{opening}>", *inner, f"{pad}{closing}"]

    def render_page(self, children: list[str], depth: int = 0) -> list[str]:
        """Page wrapper around already-rendered root lines."""
        pad = self.indent * depth
        hook = f' {self.class_attribute}="{APP_CLASS}"' if self.options.include_styles else ""
        if not children:
            return [f"{pad}<div{hook}></div>"]
        return [f"{pad}<div{hook}>", *children, f"{pad}</div>"]


# =============================================================================
# Emitters
# =============================================================================


class CodeEmitter(ABC):
    """Abstract base class for code generation targets.

    Subclasses must implement:
        - name: Target identifier string
        - description: One-line summary
        - emit: Frozen tree to file list

    Example:
        >>> class MyEmitter(CodeEmitter):
        ...     name = "txt"
        ...     description = "Plain text outline"
        ...     def emit(self, roots, options):
        ...         return [GeneratedFile("out.txt", "out.txt", "...", FileKind.MARKUP)]
    """

    #: Baseline runtime size in kB before user code
    runtime_kb: float = 0.0

    @property
    @abstractmethod
    def name(self) -> str:
        """Target identifier string."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """One-line summary for listings."""
        ...

    @property
    def supports_typescript(self) -> bool:
        return True

    @property
    def requires_typescript(self) -> bool:
        return False

    def dependencies(self, options: CodeGenerationOptions) -> dict[str, str]:
        return {}

    def dev_dependencies(self, options: CodeGenerationOptions) -> dict[str, str]:
        return {}

    def scripts(self, options: CodeGenerationOptions) -> dict[str, str]:
        return {}

    @abstractmethod
    def emit(
        self, roots: tuple[RenderNode, ...], options: CodeGenerationOptions
    ) -> list[GeneratedFile]:
        """Produce the file set for a frozen tree.

        Args:
            roots: Frozen root nodes in paint order.
            options: Generation options.

        Returns:
            Files in a deterministic order.
        """
        ...

    def check_options(self, options: CodeGenerationOptions) -> list[Diagnostic]:
        """Diagnostics for options this target cannot honour."""
        if options.typescript and not self.supports_typescript:
            return [
                Diagnostic("", "typescript_ignored", f"{self.name} output has no scripts")
            ]
        if not options.typescript and self.requires_typescript:
            return [
                Diagnostic(
                    "", "typescript_required", f"{self.name} output is always TypeScript"
                )
            ]
        return []

    def render(
        self, roots: tuple[RenderNode, ...], options: CodeGenerationOptions
    ) -> CodeGenerationResult:
        """Emit files and attach manifest data, diagnostics and estimates."""
        diagnostics = self.check_options(options) + collect_diagnostics(roots)
        files = self.emit(roots, options)
        node_count = sum(1 for root in roots for _ in root.walk())
        size_kb = sum(len(f.content.encode("utf-8")) for f in files) / BYTES_PER_KB
        bundle_kb = round(self.runtime_kb + size_kb * COMPRESSION_RATIO, 1)
        score = int(max(0, min(100, 100 - node_count // 10 - bundle_kb / 10)))
        return CodeGenerationResult(
            target=self.name,
            files=files,
            dependencies=self.dependencies(options),
            dev_dependencies=self.dev_dependencies(options),
            scripts=self.scripts(options),
            diagnostics=diagnostics,
            estimated_bundle_kb=bundle_kb,
            performance_score=score,
        )


# Emitter registry - populated by target modules on import
_registry: dict[str, type[CodeEmitter]] = {}

_TARGET_MODULES = ("react", "vue", "angular", "html")


def register_emitter(emitter_cls: type[CodeEmitter]) -> type[CodeEmitter]:
    """Register an emitter class in the registry.

    Uses a temporary instance to retrieve the target name.

    Args:
        emitter_cls: The emitter class to register.

    Returns:
        The emitter class (for decorator chaining).
    """
    _registry[emitter_cls().name] = emitter_cls
    return emitter_cls


def _import_emitters() -> None:
    """Import target modules to trigger registration."""
    import importlib

    for module_name in _TARGET_MODULES:
        importlib.import_module(f"pagecraft.codegen.{module_name}")


def get_emitter(name: str) -> CodeEmitter:
    """Get an emitter instance by target name.

    Raises:
        KeyError: If no emitter with the given name is registered.

    Example:
        >>> get_emitter("vue").name
        'vue'
    """
    if name not in _registry:
        _import_emitters()
        if name not in _registry:
            available = ", ".join(sorted(_registry)) or "(none)"
            raise KeyError(f"Unknown target '{name}'. Available: {available}")
    return _registry[name]()


def list_targets() -> list[str]:
    """List all registered target names."""
    _import_emitters()
    return sorted(_registry)


def generate(
    document: Document,
    target: str | None = None,
    options: CodeGenerationOptions | None = None,
) -> CodeGenerationResult:
    """Generate a project for a target from the current document state.

    Args:
        document: Source document (read only).
        target: Target name; PAGECRAFT_DEFAULT_TARGET when None.
        options: Generation options; defaults when None.

    Raises:
        KeyError: If the target is not registered.
    """
    emitter = get_emitter(target or get_environment(EnvVar.PAGECRAFT_DEFAULT_TARGET))
    roots = freeze_document(document)
    result = emitter.render(roots, options or CodeGenerationOptions())
    logger.debug(
        f"Generated {len(result.files)} {result.target} files "
        f"({len(result.diagnostics)} diagnostics)"
    )
    return result


def generate_request(request: CodeGenerationRequest) -> CodeGenerationResult:
    """Run a `CodeGenerationRequest`."""
    return generate(request.document, request.target, request.options)


__all__ = [
    "FileKind",
    "GeneratedFile",
    "Diagnostic",
    "CodeGenerationOptions",
    "CodeGenerationRequest",
    "CodeGenerationResult",
    "ExportPackager",
    "write_result",
    "RenderNode",
    "freeze_document",
    "ElementTemplate",
    "ELEMENT_TEMPLATES",
    "ELEMENT_TAGS",
    "Item",
    "Element",
    "kebab_case",
    "pascal_case",
    "camel_case",
    "class_name_for",
    "attribute_name",
    "to_json",
    "filter_props",
    "node_css",
    "resolve_element",
    "template_for",
    "collect_diagnostics",
    "component_names",
    "stylesheet",
    "flatten",
    "package_manifest",
    "to_json_file",
    "make_file",
    "APP_CLASS",
    "app_rule",
    "MarkupDialect",
    "CodeEmitter",
    "register_emitter",
    "get_emitter",
    "list_targets",
    "generate",
    "generate_request",
]
