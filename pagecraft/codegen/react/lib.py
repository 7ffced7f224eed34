"""React target: Vite project with one function component per root.

Components are written as JSX (or TSX) with class hooks pointing at a
sibling stylesheet. Form controls use the uncontrolled `default*` props so
the generated markup renders without state wiring.
"""

from typing import Any

from pagecraft.codegen.lib import (
    APP_CLASS,
    CodeEmitter,
    CodeGenerationOptions,
    FileKind,
    GeneratedFile,
    MarkupDialect,
    RenderNode,
    app_rule,
    component_names,
    flatten,
    make_file,
    package_manifest,
    register_emitter,
    stylesheet,
    to_json,
    to_json_file,
)

JSX_ATTRIBUTES = {
    "autoplay": "autoPlay",
    "checked": "defaultChecked",
    "class": "className",
    "for": "htmlFor",
    "readonly": "readOnly",
    "tabindex": "tabIndex",
    "value": "defaultValue",
}

JSX_UNSAFE = frozenset('{}<>"')


class JsxDialect(MarkupDialect):
    """JSX spelling: className, camelCase props, braces for non-strings."""

    class_attribute = "className"
    void_close = " /"

    def attribute(self, name: str, value: Any) -> str:
        name = JSX_ATTRIBUTES.get(name, name)
        if value is True:
            return f" {name}"
        if isinstance(value, str) and not JSX_UNSAFE & set(value):
            return f' {name}="{value}"'
        return f" {name}={{{to_json(value)}}}"

    def text(self, value: str) -> str:
        if JSX_UNSAFE & set(value):
            return f"{{{to_json(value)}}}"
        return value

    def render_page(self, children: list[str], depth: int = 0) -> list[str]:
        pad = self.indent * depth
        hook = f' className="{APP_CLASS}"' if self.options.include_styles else ""
        if not children:
            return [f"{pad}<div{hook} />"]
        return [f"{pad}<div{hook}>", *children, f"{pad}</div>"]


@register_emitter
class ReactEmitter(CodeEmitter):
    """Generates a React 18 + Vite project.

    Output layout:
        src/components/<Name>.jsx|tsx  one per root component
        src/components/<Name>.css      when styles are enabled
        src/App.jsx|tsx, src/main.jsx|tsx, index.html
        package.json, vite.config.js|ts (+ tsconfig.json for TypeScript)
    """

    runtime_kb = 44.5

    @property
    def name(self) -> str:
        """Target identifier."""
        return "react"

    @property
    def description(self) -> str:
        return "React 18 function components (Vite)"

    def dependencies(self, options: CodeGenerationOptions) -> dict[str, str]:
        return {"react": "^18.2.0", "react-dom": "^18.2.0"}

    def dev_dependencies(self, options: CodeGenerationOptions) -> dict[str, str]:
        deps = {"@vitejs/plugin-react": "^4.2.0", "vite": "^5.0.0"}
        if options.typescript:
            deps.update(
                {
                    "@types/react": "^18.2.0",
                    "@types/react-dom": "^18.2.0",
                    "typescript": "^5.3.0",
                }
            )
        return deps

    def scripts(self, options: CodeGenerationOptions) -> dict[str, str]:
        build = "tsc && vite build" if options.typescript else "vite build"
        return {"dev": "vite", "build": build, "preview": "vite preview"}

    def emit(
        self, roots: tuple[RenderNode, ...], options: CodeGenerationOptions
    ) -> list[GeneratedFile]:
        dialect = JsxDialect(options)
        ind = dialect.indent
        ext = "tsx" if options.typescript else "jsx"
        names = component_names(roots, options.app_name)
        files = []

        for root in roots:
            name = names[root.id]
            files.append(
                make_file(
                    f"src/components/{name}.{ext}",
                    self._component(name, root, dialect, options),
                    FileKind.COMPONENT,
                )
            )
            if options.include_styles:
                files.append(
                    make_file(
                        f"src/components/{name}.css",
                        stylesheet(flatten(root), ind),
                        FileKind.STYLE,
                    )
                )

        files.append(
            make_file(f"src/App.{ext}", self._app(roots, names, dialect, options), FileKind.PAGE)
        )
        if options.include_styles:
            files.append(make_file("src/App.css", app_rule(ind), FileKind.STYLE))
        files.append(make_file(f"src/main.{ext}", self._main(options, ind), FileKind.CONFIG))
        files.append(make_file("index.html", self._index(options, ext, ind), FileKind.MARKUP))
        files.append(
            make_file(
                "package.json",
                package_manifest(
                    options.app_name,
                    self.dependencies(options),
                    self.dev_dependencies(options),
                    self.scripts(options),
                    options.indent_size,
                ),
                FileKind.MANIFEST,
            )
        )
        config_ext = "ts" if options.typescript else "js"
        files.append(
            make_file(f"vite.config.{config_ext}", self._vite_config(ind), FileKind.CONFIG)
        )
        if options.typescript:
            files.append(
                make_file("tsconfig.json", self._tsconfig(options), FileKind.CONFIG)
            )
        return files

    def _signature(self, name: str, options: CodeGenerationOptions) -> str:
        returns = ": JSX.Element" if options.typescript else ""
        return f"export default function {name}(){returns} {{"

    def _component(
        self,
        name: str,
        root: RenderNode,
        dialect: JsxDialect,
        options: CodeGenerationOptions,
    ) -> str:
        ind = dialect.indent
        lines = []
        if options.include_imports and options.include_styles:
            lines += [f"import './{name}.css';", ""]
        lines.append(self._signature(name, options))
        lines.append(f"{ind}return (")
        lines.extend(dialect.render(root, depth=2))
        lines += [f"{ind});", "}", ""]
        return "\n".join(lines)

    def _app(
        self,
        roots: tuple[RenderNode, ...],
        names: dict[str, str],
        dialect: JsxDialect,
        options: CodeGenerationOptions,
    ) -> str:
        ind = dialect.indent
        lines = []
        if options.include_imports:
            lines += [f"import {names[r.id]} from './components/{names[r.id]}';" for r in roots]
            if options.include_styles:
                lines.append("import './App.css';")
            if lines:
                lines.append("")
        lines.append(self._signature(options.app_name, options))
        lines.append(f"{ind}return (")
        children = [f"{ind * 3}<{names[r.id]} />" for r in roots]
        lines.extend(dialect.render_page(children, depth=2))
        lines += [f"{ind});", "}", ""]
        return "\n".join(lines)

    def _main(self, options: CodeGenerationOptions, ind: str) -> str:
        mount = "document.getElementById('root')" + ("!" if options.typescript else "")
        return "\n".join(
            [
                "import { StrictMode } from 'react';",
                "import { createRoot } from 'react-dom/client';",
                f"import {options.app_name} from './App';",
                "",
                f"createRoot({mount}).render(",
                f"{ind}<StrictMode>",
                f"{ind * 2}<{options.app_name} />",
                f"{ind}</StrictMode>,",
                ");",
                "",
            ]
        )

    def _index(self, options: CodeGenerationOptions, ext: str, ind: str) -> str:
        return "\n".join(
            [
                "<!doctype html>",
                '<html lang="en">',
                f"{ind}<head>",
                f'{ind * 2}<meta charset="UTF-8" />',
                f'{ind * 2}<meta name="viewport" content="width=device-width, initial-scale=1.0" />',
                f"{ind * 2}<title>{options.app_name}</title>",
                f"{ind}</head>",
                f"{ind}<body>",
                f'{ind * 2}<div id="root"></div>',
                f'{ind * 2}<script type="module" src="/src/main.{ext}"></script>',
                f"{ind}</body>",
                "</html>",
                "",
            ]
        )

    def _vite_config(self, ind: str) -> str:
        return "\n".join(
            [
                "import { defineConfig } from 'vite';",
                "import react from '@vitejs/plugin-react';",
                "",
                "export default defineConfig({",
                f"{ind}plugins: [react()],",
                "});",
                "",
            ]
        )

    def _tsconfig(self, options: CodeGenerationOptions) -> str:
        return to_json_file(
            {
                "compilerOptions": {
                    "target": "ES2020",
                    "lib": ["ES2020", "DOM", "DOM.Iterable"],
                    "module": "ESNext",
                    "moduleResolution": "bundler",
                    "jsx": "react-jsx",
                    "strict": True,
                    "noEmit": True,
                    "skipLibCheck": True,
                },
                "include": ["src"],
            },
            options.indent_size,
        )


__all__ = ["JsxDialect", "ReactEmitter"]
