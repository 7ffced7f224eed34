"""Vue target: Vite project with single-file components.

Each root component becomes an SFC with script, template and scoped style
blocks. Non-string props are passed as `:bindings`.
"""

from typing import Any

from pagecraft.codegen.lib import (
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


class VueTemplateDialect(MarkupDialect):
    """Vue template spelling: `:attr` bindings and mustache-safe text."""

    void_close = " /"

    def attribute(self, name: str, value: Any) -> str:
        if value is True or isinstance(value, str):
            return super().attribute(name, value)
        return f' :{name}="{self._expression(value)}"'

    def text(self, value: str) -> str:
        if "{{" in value or "}}" in value:
            return "{{ " + self._expression(value) + " }}"
        return super().text(value)

    @staticmethod
    def _expression(value: Any) -> str:
        return to_json(value).replace('"', "'")


@register_emitter
class VueEmitter(CodeEmitter):
    """Generates a Vue 3 + Vite project.

    Output layout:
        src/components/<Name>.vue  one SFC per root component
        src/App.vue, src/main.js|ts, index.html
        package.json, vite.config.js|ts (+ tsconfig.json for TypeScript)
    """

    runtime_kb = 34.0

    @property
    def name(self) -> str:
        """Target identifier."""
        return "vue"

    @property
    def description(self) -> str:
        return "Vue 3 single-file components (Vite)"

    def dependencies(self, options: CodeGenerationOptions) -> dict[str, str]:
        return {"vue": "^3.4.0"}

    def dev_dependencies(self, options: CodeGenerationOptions) -> dict[str, str]:
        deps = {"@vitejs/plugin-vue": "^5.0.0", "vite": "^5.0.0"}
        if options.typescript:
            deps.update({"typescript": "^5.3.0", "vue-tsc": "^1.8.0"})
        return deps

    def scripts(self, options: CodeGenerationOptions) -> dict[str, str]:
        build = "vue-tsc && vite build" if options.typescript else "vite build"
        return {"dev": "vite", "build": build, "preview": "vite preview"}

    def emit(
        self, roots: tuple[RenderNode, ...], options: CodeGenerationOptions
    ) -> list[GeneratedFile]:
        dialect = VueTemplateDialect(options)
        ind = dialect.indent
        ext = "ts" if options.typescript else "js"
        names = component_names(roots, options.app_name)

        files = [
            make_file(
                f"src/components/{names[root.id]}.vue",
                self._component(root, dialect, options),
                FileKind.COMPONENT,
            )
            for root in roots
        ]
        app = self._app(roots, names, dialect, options)
        files.append(make_file("src/App.vue", app, FileKind.PAGE))
        files.append(make_file(f"src/main.{ext}", self._main(options), FileKind.CONFIG))
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
        files.append(make_file(f"vite.config.{ext}", self._vite_config(ind), FileKind.CONFIG))
        if options.typescript:
            files.append(make_file("tsconfig.json", self._tsconfig(options), FileKind.CONFIG))
        return files

    def _script_open(self, options: CodeGenerationOptions) -> str:
        return '<script setup lang="ts">' if options.typescript else "<script setup>"

    def _component(
        self, root: RenderNode, dialect: VueTemplateDialect, options: CodeGenerationOptions
    ) -> str:
        lines = [self._script_open(options), "</script>", ""]
        lines += ["<template>", *dialect.render(root, depth=1), "</template>", ""]
        if options.include_styles:
            css = stylesheet(flatten(root), dialect.indent).rstrip("\n")
            lines += ["<style scoped>", css, "</style>", ""]
        return "\n".join(lines)

    def _app(
        self,
        roots: tuple[RenderNode, ...],
        names: dict[str, str],
        dialect: VueTemplateDialect,
        options: CodeGenerationOptions,
    ) -> str:
        lines = []
        if options.include_imports and roots:
            lines.append(self._script_open(options))
            lines += [f"import {names[r.id]} from './components/{names[r.id]}.vue';" for r in roots]
            lines += ["</script>", ""]
        children = [f"{dialect.indent * 2}<{names[r.id]} />" for r in roots]
        lines += ["<template>", *dialect.render_page(children, depth=1), "</template>", ""]
        if options.include_styles:
            lines += ["<style>", app_rule(dialect.indent).rstrip("\n"), "</style>", ""]
        return "\n".join(lines)

    def _main(self, options: CodeGenerationOptions) -> str:
        return "\n".join(
            [
                "import { createApp } from 'vue';",
                f"import {options.app_name} from './App.vue';",
                "",
                f"createApp({options.app_name}).mount('#app');",
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
                f'{ind * 2}<div id="app"></div>',
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
                "import vue from '@vitejs/plugin-vue';",
                "",
                "export default defineConfig({",
                f"{ind}plugins: [vue()],",
                "});",
                "",
            ]
        )

    def _tsconfig(self, options: CodeGenerationOptions) -> str:
        return to_json_file(
            {
                "compilerOptions": {
                    "target": "ES2020",
                    "module": "ESNext",
                    "moduleResolution": "bundler",
                    "jsx": "preserve",
                    "strict": True,
                    "noEmit": True,
                    "skipLibCheck": True,
                },
                "include": ["src/**/*.ts", "src/**/*.vue"],
            },
            options.indent_size,
        )


__all__ = ["VueTemplateDialect", "VueEmitter"]
