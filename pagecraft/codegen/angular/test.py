"""Unit tests for the Angular emitter."""

import json

import pytest

from pagecraft.codegen import CodeGenerationOptions, generate

from .lib import AngularEmitter, AngularTemplateDialect


class TestAngularEmitter:
    """Tests for AngularEmitter."""

    @pytest.mark.unit
    def test_name(self):
        """Emitter has correct name."""
        assert AngularEmitter().name == "angular"

    @pytest.mark.unit
    def test_file_layout(self, nested_document):
        """Each root gets a class, template and stylesheet."""
        result = generate(nested_document, "angular", CodeGenerationOptions(typescript=True))
        assert result.paths[:3] == [
            "src/app/components/section/section.component.ts",
            "src/app/components/section/section.component.html",
            "src/app/components/section/section.component.css",
        ]
        for path in ("src/app/app.component.ts", "src/main.ts", "angular.json", "tsconfig.json"):
            assert path in result.paths
        assert not result.diagnostics

    @pytest.mark.unit
    def test_always_typescript(self, nested_document):
        """JavaScript requests still emit TypeScript, with a diagnostic."""
        result = generate(nested_document, "angular")
        assert "src/main.ts" in result.paths
        assert [d.code for d in result.diagnostics] == ["typescript_required"]

    @pytest.mark.unit
    def test_component_class(self, nested_document):
        """Standalone components use external templates."""
        result = generate(nested_document, "angular", CodeGenerationOptions(indent_size=2))
        source = result.get_file("src/app/components/section/section.component.ts").content
        assert "import { Component } from '@angular/core';" in source
        assert "selector: 'app-section'," in source
        assert "standalone: true," in source
        assert "templateUrl: './section.component.html'," in source
        assert "export class SectionComponent {}" in source

    @pytest.mark.unit
    def test_app_component(self, nested_document):
        """The root component imports and places every root."""
        result = generate(nested_document, "angular")
        source = result.get_file("src/app/app.component.ts").content
        assert "imports: [SectionComponent, TextComponent]," in source
        template = result.get_file("src/app/app.component.html").content
        assert template.index("<app-section>") < template.index("<app-text>")

    @pytest.mark.unit
    def test_ngfor_items(self, empty_document):
        """Plain list items come from a class property."""
        created = empty_document.create_component("list", props={"items": ["Fast", "Safe"]})
        result = generate(empty_document, "angular")
        source = result.get_file("src/app/components/list/list.component.ts").content
        template = result.get_file("src/app/components/list/list.component.html").content
        field = "list" + created.id.split("-", 1)[1].capitalize() + "Items"
        assert f'{field} = ["Fast", "Safe"];' in source
        assert "import { NgFor } from '@angular/common';" in source
        assert f'*ngFor="let item of {field}"' in template

    @pytest.mark.unit
    def test_dependencies(self, empty_document):
        """Angular packages share one version range."""
        result = generate(empty_document, "angular")
        manifest = json.loads(result.get_file("package.json").content)
        assert manifest["dependencies"]["@angular/core"] == "^17.0.0"
        assert "zone.js" in result.dependencies
        assert result.scripts == {"start": "ng serve", "build": "ng build"}


class TestAngularTemplateDialect:
    """Tests for Angular attribute and text spelling."""

    @pytest.fixture
    def dialect(self):
        return AngularTemplateDialect(CodeGenerationOptions(indent_size=2))

    @pytest.mark.unit
    def test_bound_attribute(self, dialect):
        assert dialect.attribute("rows", 3) == ' [attr.rows]="3"'

    @pytest.mark.unit
    def test_braces_in_text(self, dialect):
        """Braces would start an ICU expression, so they are interpolated."""
        assert dialect.text("{a}") == "{{ '{a}' }}"
