"""Output formatting for documents and generation results.

Generates human-readable text representations of component trees and
generated file sets for the command line.
"""

from dataclasses import dataclass

from pagecraft.codegen import CodeGenerationOptions, CodeGenerationResult, generate
from pagecraft.model import Component, Document


@dataclass
class DocumentOutput:
    """Complete output for one generation run.

    Attributes:
        text_tree: Human-readable component tree.
        summary: File listing with diagnostics.
        result: The generated file set.
    """

    text_tree: str
    summary: str
    result: CodeGenerationResult


def _number(value: float | str) -> str:
    if isinstance(value, str):
        return value
    return f"{value:g}"


def _describe(component: Component) -> str:
    """One tree line: label plus [type @x,y WxH flags]."""
    label = component.props.get("name") or component.id
    attrs = [
        component.type,
        f"@{_number(component.position.x)},{_number(component.position.y)}",
        f"{_number(component.size.width)}x{_number(component.size.height)}",
    ]
    if not component.flags.visible:
        attrs.append("hidden")
    if component.flags.locked:
        attrs.append("locked")
    return f"{label} [{' '.join(attrs)}]"


def format_document_tree(document: Document) -> str:
    """Format a document as a human-readable tree.

    Example output:
        Nested (5 components)
        ├── section [section @100,100 400x300]
        │   └── card [card @20,20 200x150]
        │       ├── title [heading @10,10 180x40]
        │       └── cta [button @10,60 120x40 locked]
        └── note [text @600,100 200x24]

    Args:
        document: Document to format.

    Returns:
        Formatted tree string.
    """
    lines = [f"{document.name} ({len(document)} components)"]
    roots = document.children_of(None)
    for i, component in enumerate(roots):
        _format_node(document, component, lines, "", i == len(roots) - 1)
    return "\n".join(lines)


def _format_node(
    document: Document,
    component: Component,
    lines: list[str],
    prefix: str,
    is_last: bool,
) -> None:
    """Recursively format a component and its children."""
    connector = "└── " if is_last else "├── "
    child_prefix = prefix + ("    " if is_last else "│   ")
    lines.append(f"{prefix}{connector}{_describe(component)}")

    children = document.children_of(component.id)
    for i, child in enumerate(children):
        _format_node(document, child, lines, child_prefix, i == len(children) - 1)


def format_generation_summary(result: CodeGenerationResult) -> str:
    """List generated files, estimates and diagnostics.

    Example output:
        react: 9 files, ~46.1 KB, score 100
          src/components/Section.jsx (412 B)
          ...
        warning unknown_type [c3]: Unknown component type 'carousel' rendered as <div>
    """
    lines = [
        f"{result.target}: {len(result.files)} files, "
        f"~{result.estimated_bundle_kb:.1f} KB, score {result.performance_score}"
    ]
    for f in result.files:
        lines.append(f"  {f.path} ({len(f.content.encode('utf-8'))} B)")
    for diagnostic in result.diagnostics:
        where = f" [{diagnostic.node_id}]" if diagnostic.node_id else ""
        lines.append(f"warning {diagnostic.code}{where}: {diagnostic.message}")
    return "\n".join(lines)


class OutputGenerator:
    """Generates tree and file summary for a document in one call."""

    def __init__(self, default_target: str | None = None):
        """Initialize generator.

        Args:
            default_target: Target used when `generate` gets none
                (PAGECRAFT_DEFAULT_TARGET when unset).
        """
        self._default_target = default_target

    def generate(
        self,
        document: Document,
        target: str | None = None,
        options: CodeGenerationOptions | None = None,
    ) -> DocumentOutput:
        """Generate output for a document.

        Raises:
            KeyError: If the target is not registered.
        """
        result = generate(document, target or self._default_target, options)
        return DocumentOutput(
            text_tree=format_document_tree(document),
            summary=format_generation_summary(result),
            result=result,
        )


__all__ = [
    "DocumentOutput",
    "OutputGenerator",
    "format_document_tree",
    "format_generation_summary",
]
