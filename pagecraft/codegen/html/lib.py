"""Static HTML target: one page plus one stylesheet, no build step."""

from pagecraft.codegen.lib import (
    CodeEmitter,
    CodeGenerationOptions,
    FileKind,
    GeneratedFile,
    MarkupDialect,
    RenderNode,
    app_rule,
    flatten,
    make_file,
    register_emitter,
    stylesheet,
)


@register_emitter
class HtmlEmitter(CodeEmitter):
    """Generates `index.html` and `styles.css`.

    Props are written as static attributes; there are no scripts, so the
    TypeScript option does not apply.
    """

    @property
    def name(self) -> str:
        """Target identifier."""
        return "html"

    @property
    def description(self) -> str:
        return "Static HTML page and stylesheet"

    @property
    def supports_typescript(self) -> bool:
        return False

    def emit(
        self, roots: tuple[RenderNode, ...], options: CodeGenerationOptions
    ) -> list[GeneratedFile]:
        dialect = MarkupDialect(options)
        ind = dialect.indent
        body = [line for root in roots for line in dialect.render(root, depth=3)]
        head = [
            f'{ind * 2}<meta charset="UTF-8" />',
            f'{ind * 2}<meta name="viewport" content="width=device-width, initial-scale=1.0" />',
            f"{ind * 2}<title>{options.app_name}</title>",
        ]
        if options.include_styles:
            head.append(f'{ind * 2}<link rel="stylesheet" href="styles.css" />')
        page = [
            "<!doctype html>",
            '<html lang="en">',
            f"{ind}<head>",
            *head,
            f"{ind}</head>",
            f"{ind}<body>",
            *dialect.render_page(body, depth=2),
            f"{ind}</body>",
            "</html>",
            "",
        ]
        files = [make_file("index.html", "\n".join(page), FileKind.MARKUP)]
        if options.include_styles:
            rules = [app_rule(ind)]
            rules += [stylesheet(flatten(root), ind) for root in roots]
            files.append(make_file("styles.css", "\n".join(rules), FileKind.STYLE))
        return files


__all__ = ["HtmlEmitter"]
