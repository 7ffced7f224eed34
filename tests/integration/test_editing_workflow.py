"""Integration tests for the editing workflow.

Tests the full lifecycle of one page:
1. Build a page with the editor -> one history entry per operation
2. Group, move and undo/redo -> document state round-trips
3. Generate every target from the same state -> no document mutation
4. Save to a SQLite store and reload -> equal document
"""

import pytest

from pagecraft.codegen import list_targets
from pagecraft.collab import build_mutation
from pagecraft.editor import Editor
from pagecraft.model import Document
from pagecraft.output import format_document_tree
from pagecraft.persistence import SQLiteDocumentStore


@pytest.fixture
def editor():
    """Editor over a fresh document with snapping off."""
    editor = Editor(Document(id="landing", name="Landing"))
    editor.toggle_snap(False)
    return editor


def _build_page(editor: Editor) -> dict[str, str]:
    ids = {}
    for key, component_type, x, y, props in [
        ("hero", "hero", 0, 0, {"title": "Ship faster"}),
        ("buy", "button", 40, 320, {"text": "Buy"}),
        ("more", "button", 200, 320, {"text": "Learn more"}),
    ]:
        result = editor.add_component(component_type, x=x, y=y, props=props)
        assert result.ok
        ids[key] = result.affected[0]
    return ids


@pytest.mark.integration
def test_build_group_undo_generate_save(editor, tmp_path):
    ids = _build_page(editor)
    assert editor.history.labels == ["initial", "add", "add", "add"]

    # Group the two buttons and nudge the group
    grouped = editor.group([ids["buy"], ids["more"]])
    assert grouped.ok
    group_id = grouped.selection[0]
    assert editor.document.require(ids["buy"]).parent_id == group_id
    before_move = editor.document.to_dict()
    assert editor.move(None, 10, 10).ok

    # Undo the move, then the group; redo both
    assert editor.undo().ok
    assert editor.document.to_dict()["components"] == before_move["components"]
    assert editor.undo().ok
    assert editor.document.require(ids["buy"]).parent_id is None
    assert editor.redo().ok
    assert editor.redo().ok
    assert not editor.can_redo
    moved = editor.document.to_dict()

    # Every target generates from the same state without touching it
    for target in list_targets():
        result = editor.generate(target)
        assert result.ok, target
        assert result.output.files
    assert editor.document.to_dict() == moved

    # Persist and reload
    with SQLiteDocumentStore(tmp_path / "docs.db") as store:
        store.save(editor.document)
        reloaded = store.load("landing")
    assert reloaded.to_dict() == moved
    assert format_document_tree(reloaded) == format_document_tree(editor.document)


@pytest.mark.integration
def test_two_editors_converge(tmp_path):
    """Mutations published by one editor replay on a peer's copy."""
    source = Editor(Document(id="shared", name="Shared"))
    source.toggle_snap(False)
    ids = _build_page(source)
    peer = Editor(Document.from_dict(source.document.to_dict()))

    before = source.document.require(ids["buy"]).model_copy(deep=True)
    source.update_component(ids["buy"], props={"text": "Buy now"}, style={"color": "#fff"})
    mutation = build_mutation(before, source.document.require(ids["buy"]), "alice")

    assert peer.apply_remote(mutation).ok
    applied = peer.document.require(ids["buy"])
    assert applied.props["text"] == "Buy now"
    assert applied.style["color"] == "#fff"
    assert peer.history.labels[-1].startswith("remote:")
