"""Angular target: standalone components (Angular 17).

Each root component gets a `.component.ts` class, an external template and
an optional stylesheet. Repeated plain-text entries (list items, select
options) are held as class properties and rendered with `*ngFor`.
Angular projects are always TypeScript.
"""

from typing import Any

from pagecraft.codegen.lib import (
    CodeEmitter,
    CodeGenerationOptions,
    Element,
    FileKind,
    GeneratedFile,
    MarkupDialect,
    RenderNode,
    app_rule,
    camel_case,
    component_names,
    flatten,
    kebab_case,
    make_file,
    package_manifest,
    register_emitter,
    stylesheet,
    to_json,
    to_json_file,
)

ANGULAR_VERSION = "^17.0.0"


class AngularTemplateDialect(MarkupDialect):
    """Angular template spelling.

    Collects the class properties backing `*ngFor` loops in `fields`.
    """

    def __init__(self, options: CodeGenerationOptions):
        super().__init__(options)
        self.fields: dict[str, list[str]] = {}

    def reset(self) -> None:
        self.fields = {}

    def attribute(self, name: str, value: Any) -> str:
        if value is True or isinstance(value, str):
            return super().attribute(name, value)
        return f' [attr.{name}]="{to_json(value).replace(chr(34), chr(39))}"'

    def text(self, value: str) -> str:
        if any(c in value for c in "{}@"):
            return "{{ " + to_json(value).replace('"', "'") + " }}"
        return super().text(value)

    def render_items(self, element: Element, depth: int) -> list[str]:
        if not element.items or any(item.attributes for item in element.items):
            return super().render_items(element, depth)
        field_name = camel_case(f"{element.node.id} items")
        self.fields[field_name] = [item.text for item in element.items]
        pad = self.indent * depth
        tag = element.item_tag
        return [f'{pad}<{tag} *ngFor="let item of {field_name}">{{{{ item }}}}</{tag}>']


@register_emitter
class AngularEmitter(CodeEmitter):
    """Generates an Angular 17 standalone-component project.

    Output layout:
        src/app/components/<name>/<name>.component.ts|html|css
        src/app/app.component.ts|html|css, src/main.ts, src/index.html
        package.json, angular.json, tsconfig.json
    """

    runtime_kb = 130.0

    @property
    def name(self) -> str:
        """Target identifier."""
        return "angular"

    @property
    def description(self) -> str:
        return "Angular 17 standalone components"

    @property
    def requires_typescript(self) -> bool:
        return True

    def dependencies(self, options: CodeGenerationOptions) -> dict[str, str]:
        deps = {
            f"@angular/{pkg}": ANGULAR_VERSION
            for pkg in ("common", "compiler", "core", "platform-browser")
        }
        deps.update({"rxjs": "~7.8.0", "tslib": "^2.6.0", "zone.js": "~0.14.0"})
        return deps

    def dev_dependencies(self, options: CodeGenerationOptions) -> dict[str, str]:
        return {
            "@angular-devkit/build-angular": ANGULAR_VERSION,
            "@angular/cli": ANGULAR_VERSION,
            "@angular/compiler-cli": ANGULAR_VERSION,
            "typescript": "~5.2.0",
        }

    def scripts(self, options: CodeGenerationOptions) -> dict[str, str]:
        return {"start": "ng serve", "build": "ng build"}

    def emit(
        self, roots: tuple[RenderNode, ...], options: CodeGenerationOptions
    ) -> list[GeneratedFile]:
        dialect = AngularTemplateDialect(options)
        ind = dialect.indent
        names = component_names(roots, options.app_name)
        files = []

        for root in roots:
            name = names[root.id]
            slug = kebab_case(name)
            base = f"src/app/components/{slug}/{slug}.component"
            dialect.reset()
            template = "\n".join(dialect.render(root)) + "\n"
            files.append(
                make_file(
                    f"{base}.ts",
                    self._component_class(name, slug, dialect.fields, ind, options),
                    FileKind.COMPONENT,
                )
            )
            files.append(make_file(f"{base}.html", template, FileKind.MARKUP))
            if options.include_styles:
                files.append(
                    make_file(f"{base}.css", stylesheet(flatten(root), ind), FileKind.STYLE)
                )

        files.append(
            make_file(
                "src/app/app.component.ts",
                self._app_class(roots, names, ind, options),
                FileKind.PAGE,
            )
        )
        selectors = [f"app-{kebab_case(names[r.id])}" for r in roots]
        children = [f"{ind}<{s}></{s}>" for s in selectors]
        files.append(
            make_file(
                "src/app/app.component.html",
                "\n".join(dialect.render_page(children)) + "\n",
                FileKind.MARKUP,
            )
        )
        if options.include_styles:
            files.append(make_file("src/app/app.component.css", app_rule(ind), FileKind.STYLE))
        files.append(make_file("src/main.ts", self._main(options), FileKind.CONFIG))
        files.append(make_file("src/index.html", self._index(options, ind), FileKind.MARKUP))
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
        files.append(make_file("angular.json", self._workspace(options), FileKind.CONFIG))
        files.append(make_file("tsconfig.json", self._tsconfig(options), FileKind.CONFIG))
        return files

    def _decorator(
        self,
        selector: str,
        slug: str,
        imports: list[str],
        ind: str,
        options: CodeGenerationOptions,
    ) -> list[str]:
        lines = [
            "@Component({",
            f"{ind}selector: '{selector}',",
            f"{ind}standalone: true,",
            f"{ind}imports: [{', '.join(imports)}],",
            f"{ind}templateUrl: './{slug}.component.html',",
        ]
        if options.include_styles:
            lines.append(f"{ind}styleUrls: ['./{slug}.component.css'],")
        lines.append("})")
        return lines

    def _component_class(
        self,
        name: str,
        slug: str,
        fields: dict[str, list[str]],
        ind: str,
        options: CodeGenerationOptions,
    ) -> str:
        imports = ["NgFor"] if fields else []
        lines = []
        if options.include_imports:
            lines.append("import { Component } from '@angular/core';")
            if fields:
                lines.append("import { NgFor } from '@angular/common';")
            lines.append("")
        lines += self._decorator(f"app-{slug}", slug, imports, ind, options)
        body = [f"{ind}{field} = {to_json(values)};" for field, values in fields.items()]
        if body:
            lines += [f"export class {name}Component {{", *body, "}", ""]
        else:
            lines += [f"export class {name}Component {{}}", ""]
        return "\n".join(lines)

    def _app_class(
        self,
        roots: tuple[RenderNode, ...],
        names: dict[str, str],
        ind: str,
        options: CodeGenerationOptions,
    ) -> str:
        classes = [f"{names[r.id]}Component" for r in roots]
        lines = []
        if options.include_imports:
            lines.append("import { Component } from '@angular/core';")
            for r in roots:
                slug = kebab_case(names[r.id])
                lines.append(
                    f"import {{ {names[r.id]}Component }} from "
                    f"'./components/{slug}/{slug}.component';"
                )
            lines.append("")
        lines += self._decorator("app-root", "app", classes, ind, options)
        lines += [f"export class {options.app_name}Component {{}}", ""]
        return "\n".join(lines)

    def _main(self, options: CodeGenerationOptions) -> str:
        root = f"{options.app_name}Component"
        return "\n".join(
            [
                "import { bootstrapApplication } from '@angular/platform-browser';",
                f"import {{ {root} }} from './app/app.component';",
                "",
                f"bootstrapApplication({root}).catch((err) => console.error(err));",
                "",
            ]
        )

    def _index(self, options: CodeGenerationOptions, ind: str) -> str:
        return "\n".join(
            [
                "<!doctype html>",
                '<html lang="en">',
                f"{ind}<head>",
                f'{ind * 2}<meta charset="utf-8" />',
                f"{ind * 2}<title>{options.app_name}</title>",
                f'{ind * 2}<base href="/" />',
                f"{ind}</head>",
                f"{ind}<body>",
                f"{ind * 2}<app-root></app-root>",
                f"{ind}</body>",
                "</html>",
                "",
            ]
        )

    def _workspace(self, options: CodeGenerationOptions) -> str:
        project = kebab_case(options.app_name) or "app"
        return to_json_file(
            {
                "$schema": "./node_modules/@angular/cli/lib/config/schema.json",
                "version": 1,
                "newProjectRoot": "projects",
                "projects": {
                    project: {
                        "projectType": "application",
                        "root": "",
                        "sourceRoot": "src",
                        "architect": {
                            "build": {
                                "builder": "@angular-devkit/build-angular:application",
                                "options": {
                                    "outputPath": f"dist/{project}",
                                    "index": "src/index.html",
                                    "browser": "src/main.ts",
                                    "polyfills": ["zone.js"],
                                    "tsConfig": "tsconfig.json",
                                },
                            },
                            "serve": {
                                "builder": "@angular-devkit/build-angular:dev-server",
                                "options": {"buildTarget": f"{project}:build"},
                            },
                        },
                    }
                },
            },
            options.indent_size,
        )

    def _tsconfig(self, options: CodeGenerationOptions) -> str:
        return to_json_file(
            {
                "compilerOptions": {
                    "target": "ES2022",
                    "module": "ES2022",
                    "moduleResolution": "node",
                    "strict": True,
                    "experimentalDecorators": True,
                    "useDefineForClassFields": False,
                    "skipLibCheck": True,
                },
                "files": ["src/main.ts"],
            },
            options.indent_size,
        )


__all__ = ["AngularTemplateDialect", "AngularEmitter"]
