"""Tests for the pagecraft command line."""

import json

import pytest

from pagecraft.__main__ import build_parser, main
from pagecraft.persistence import write_document


@pytest.fixture
def document_file(nested_document, tmp_path):
    """The nested document written to page.json."""
    return write_document(nested_document, tmp_path / "page.json")


class TestParser:
    """Tests for argument parsing."""

    @pytest.mark.unit
    def test_generate_flags(self):
        args = build_parser().parse_args(
            ["generate", "page.json", "-t", "vue", "--typescript", "--no-styles"]
        )
        assert args.target == "vue"
        assert args.typescript
        assert args.no_styles
        assert not args.no_imports

    @pytest.mark.unit
    def test_no_command(self, capsys):
        assert main([]) == 1
        assert "usage:" in capsys.readouterr().out


class TestCommands:
    """Tests for command handlers."""

    @pytest.mark.unit
    def test_tree(self, document_file, capsys):
        assert main(["tree", str(document_file)]) == 0
        out = capsys.readouterr().out
        assert out.startswith("Nested (5 components)")
        assert "└── note [text @600,100 200x24]" in out

    @pytest.mark.unit
    def test_validate_ok(self, document_file, capsys):
        assert main(["validate", str(document_file)]) == 0
        assert "valid" in capsys.readouterr().out

    @pytest.mark.unit
    def test_validate_corrupt(self, nested_document, tmp_path, capsys):
        """Corrupt documents exit with status 1 and list the errors."""
        data = nested_document.to_dict()
        data["components"]["note"]["children"] = ["section"]
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(data))
        assert main(["validate", str(path)]) == 1
        assert "error(s)" in capsys.readouterr().out

    @pytest.mark.unit
    def test_validate_missing_file(self, tmp_path):
        assert main(["validate", str(tmp_path / "missing.json")]) == 1

    @pytest.mark.unit
    def test_generate_prints_files(self, document_file, capsys):
        assert main(["generate", str(document_file), "--target", "html"]) == 0
        out = capsys.readouterr().out
        assert "// ===== index.html =====" in out
        assert "// ===== styles.css =====" in out

    @pytest.mark.unit
    def test_generate_writes_files(self, document_file, tmp_path, capsys):
        out_dir = tmp_path / "build"
        code = main(["generate", str(document_file), "-t", "react", "--out", str(out_dir)])
        assert code == 0
        assert (out_dir / "package.json").exists()
        assert (out_dir / "src" / "App.jsx").exists()
        assert capsys.readouterr().out.startswith("react: ")

    @pytest.mark.unit
    def test_generate_unknown_target(self, document_file):
        assert main(["generate", str(document_file), "-t", "svelte"]) == 1

    @pytest.mark.unit
    def test_generate_corrupt_document(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('{"roots": ["ghost"], "components": {}}')
        assert main(["generate", str(path)]) == 1

    @pytest.mark.unit
    def test_targets(self, capsys):
        assert main(["targets"]) == 0
        names = [line.split()[0] for line in capsys.readouterr().out.splitlines()]
        assert names == ["angular", "html", "react", "vue"]

    @pytest.mark.unit
    def test_env_category(self, capsys):
        assert main(["env", "--category", "history"]) == 0
        out = capsys.readouterr().out
        assert "PAGECRAFT_HISTORY_LIMIT=50" in out
        assert "PAGECRAFT_GRID_SIZE" not in out
