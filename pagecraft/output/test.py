"""Tests for output module."""

import pytest

from pagecraft.codegen import CodeGenerationResult, Diagnostic, FileKind, GeneratedFile
from pagecraft.model import Size

from .lib import (
    DocumentOutput,
    OutputGenerator,
    format_document_tree,
    format_generation_summary,
)


class TestFormatDocumentTree:
    """Tests for format_document_tree function."""

    @pytest.mark.unit
    def test_empty_document(self, empty_document):
        assert format_document_tree(empty_document) == "Empty (0 components)"

    @pytest.mark.unit
    def test_nested_tree(self, nested_document):
        """Connectors follow depth and sibling order."""
        assert format_document_tree(nested_document).splitlines() == [
            "Nested (5 components)",
            "├── section [section @100,100 400x300]",
            "│   └── card [card @20,20 200x150]",
            "│       ├── title [heading @10,10 180x40]",
            "│       └── cta [button @10,60 120x40]",
            "└── note [text @600,100 200x24]",
        ]

    @pytest.mark.unit
    def test_flags_and_auto_size(self, row_document):
        """Hidden and locked components are marked; auto sizes print as-is."""
        component = row_document.require("b")
        component.flags.visible = False
        component.flags.locked = True
        component.size = Size(width=12.5, height="auto")
        lines = format_document_tree(row_document).splitlines()
        assert lines[2] == "├── b [button @60,30 12.5xauto hidden locked]"

    @pytest.mark.unit
    def test_name_prop_label(self, row_document):
        """A name prop replaces the id as label."""
        row_document.require("c").props["name"] = "Checkout"
        assert format_document_tree(row_document).endswith("└── Checkout [button @250,10 50x40]")


class TestFormatGenerationSummary:
    """Tests for format_generation_summary function."""

    @pytest.mark.unit
    def test_files_and_diagnostics(self):
        result = CodeGenerationResult(
            target="html",
            files=[GeneratedFile("index.html", "index.html", "<p>é</p>", FileKind.MARKUP)],
            diagnostics=[Diagnostic("x1", "unknown_type", "Unknown component type 'x'")],
            estimated_bundle_kb=0.3,
            performance_score=99,
        )
        assert format_generation_summary(result).splitlines() == [
            "html: 1 files, ~0.3 KB, score 99",
            "  index.html (9 B)",
            "warning unknown_type [x1]: Unknown component type 'x'",
        ]

    @pytest.mark.unit
    def test_document_wide_diagnostic(self):
        result = CodeGenerationResult(
            target="html",
            diagnostics=[Diagnostic("", "typescript_ignored", "ignored")],
        )
        assert format_generation_summary(result).endswith("warning typescript_ignored: ignored")


class TestOutputGenerator:
    """Tests for OutputGenerator class."""

    @pytest.mark.unit
    def test_generate(self, nested_document):
        output = OutputGenerator().generate(nested_document, "vue")
        assert isinstance(output, DocumentOutput)
        assert output.result.target == "vue"
        assert output.text_tree.startswith("Nested (5 components)")
        assert output.summary.startswith("vue: ")

    @pytest.mark.unit
    def test_default_target(self, nested_document):
        output = OutputGenerator(default_target="html").generate(nested_document)
        assert output.result.target == "html"

    @pytest.mark.unit
    def test_unknown_target(self, nested_document):
        with pytest.raises(KeyError):
            OutputGenerator().generate(nested_document, "svelte")
