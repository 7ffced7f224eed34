"""Unit tests for the document arena."""

import math

import pytest

from .lib import (
    Breakpoint,
    Component,
    CorruptDocumentError,
    Document,
    Position,
    Settings,
    Size,
    is_valid_document,
    load_document,
    validate_document,
)


class TestSettings:
    """Tests for canvas settings clamping."""

    @pytest.mark.unit
    def test_defaults(self):
        """Defaults come from configuration."""
        settings = Settings()
        assert settings.grid_size == 20
        assert settings.snap_enabled is True
        assert settings.zoom == 100.0
        assert settings.active_breakpoint == Breakpoint.DESKTOP

    @pytest.mark.unit
    def test_grid_size_clamped(self):
        """Grid size stays within 5..100."""
        assert Settings(grid_size=1).grid_size == 5
        assert Settings(grid_size=500).grid_size == 100

    @pytest.mark.unit
    def test_zoom_clamped(self):
        """Zoom stays within 25..300 percent."""
        assert Settings(zoom=10).zoom == 25
        assert Settings(zoom=1000).zoom == 300

    @pytest.mark.unit
    def test_grid_size_from_environment(self, monkeypatch):
        """PAGECRAFT_GRID_SIZE seeds new documents."""
        monkeypatch.setenv("PAGECRAFT_GRID_SIZE", "8")
        assert Settings().grid_size == 8


class TestComponentFields:
    """Tests for component value types."""

    @pytest.mark.unit
    def test_auto_size(self):
        """Size accepts the symbolic value auto."""
        size = Size(width="auto", height=20)
        assert size.width == "auto"
        assert size.height == 20

    @pytest.mark.unit
    def test_non_finite_position_rejected(self):
        """NaN and infinity are refused."""
        with pytest.raises(ValueError):
            Position(x=math.nan, y=0)
        with pytest.raises(ValueError):
            Size(width=math.inf, height=10)

    @pytest.mark.unit
    def test_accepts_type(self, component_factory):
        """Drop-zone filter honours droppable and accepts."""
        plain = component_factory("a")
        assert plain.accepts_type("button") is False

        zone = component_factory("z", accepts=["input"])
        zone.flags.droppable = True
        assert zone.accepts_type("input") is True
        assert zone.accepts_type("image") is False


class TestTreeQueries:
    """Tests for arena navigation."""

    @pytest.mark.unit
    def test_children_and_parent(self, nested_document):
        """Parent/child links resolve through ids."""
        doc = nested_document
        assert [c.id for c in doc.children_of("card")] == ["title", "cta"]
        assert doc.parent_of("cta").id == "card"
        assert doc.parent_of("section") is None
        assert [c.id for c in doc.children_of(None)] == ["section", "note"]

    @pytest.mark.unit
    def test_ancestors_and_descendants(self, nested_document):
        """Ancestors walk up, descendants walk down in pre-order."""
        doc = nested_document
        assert doc.ancestors("title") == ["card", "section"]
        assert doc.descendants("section") == ["card", "title", "cta"]
        assert doc.is_ancestor("section", "cta") is True
        assert doc.is_ancestor("cta", "section") is False

    @pytest.mark.unit
    def test_walk_is_document_order(self, nested_document):
        """walk() yields a pre-order traversal of the whole tree."""
        assert [c.id for c in nested_document.walk()] == [
            "section",
            "card",
            "title",
            "cta",
            "note",
        ]

    @pytest.mark.unit
    def test_siblings_and_index(self, nested_document):
        """Siblings exclude the component itself."""
        doc = nested_document
        assert [c.id for c in doc.siblings_of("cta")] == ["title"]
        assert doc.index_in_parent("cta") == 1

    @pytest.mark.unit
    def test_top_level(self, nested_document):
        """Descendants of listed components are dropped."""
        assert nested_document.top_level(["cta", "card", "note"]) == ["card", "note"]

    @pytest.mark.unit
    def test_origin_of(self, nested_document):
        """Origins sum ancestor offsets."""
        assert nested_document.origin_of("card") == (120.0, 120.0)
        assert nested_document.origin_of(None) == (0.0, 0.0)

    @pytest.mark.unit
    def test_require_unknown(self, empty_document):
        """require() raises KeyError for unknown ids."""
        with pytest.raises(KeyError, match="ghost"):
            empty_document.require("ghost")


class TestCreation:
    """Tests for component creation."""

    @pytest.mark.unit
    def test_create_uses_registry_defaults(self, empty_document):
        """New components take default props, size and constraints."""
        button = empty_document.create_component("button", x=40, y=60)
        assert button.props["text"] == "Button"
        assert (button.size.width, button.size.height) == (120, 40)
        assert button.constraints is not None
        assert button.constraints.min_width == 40
        assert empty_document.roots == [button.id]

    @pytest.mark.unit
    def test_create_unknown_type(self, empty_document):
        """Unknown types get generic defaults."""
        widget = empty_document.create_component("sparkline")
        assert widget.props == {}
        assert widget.constraints is None

    @pytest.mark.unit
    def test_ids_are_unique_and_not_reused(self, empty_document):
        """Deleted ids are never issued again."""
        first = empty_document.create_component("text")
        empty_document.remove_subtree(first.id)
        issued = {empty_document.new_id("text") for _ in range(50)}
        assert first.id not in issued
        assert len(issued) == 50

    @pytest.mark.unit
    def test_add_duplicate_rejected(self, row_document, component_factory):
        """add() refuses an id already in the arena."""
        with pytest.raises(ValueError, match="Duplicate"):
            row_document.add(component_factory("a"))

    @pytest.mark.unit
    def test_insert_tree_assigns_fresh_ids(self, nested_document):
        """Nested subtrees are inserted with new ids and parent links."""
        tree = {
            "id": "card",
            "type": "card",
            "position": {"x": 5, "y": 5},
            "children": [{"id": "title", "type": "heading", "props": {"text": "Hi"}}],
        }
        [new_id] = nested_document.insert_tree(tree, parent_id="section")
        assert new_id != "card"
        card = nested_document.require(new_id)
        assert card.parent_id == "section"
        [child] = nested_document.children_of(new_id)
        assert child.props["text"] == "Hi"
        assert child.parent_id == new_id

    @pytest.mark.unit
    def test_insert_tree_requires_type(self, empty_document):
        """Nodes without a type are rejected."""
        with pytest.raises(ValueError, match="type"):
            empty_document.insert_tree({"props": {}})


class TestMutation:
    """Tests for structural mutation helpers."""

    @pytest.mark.unit
    def test_touch_bumps_version(self, row_document):
        """touch() increments the version counter."""
        before = row_document.require("a").metadata.version
        row_document.touch("a")
        assert row_document.require("a").metadata.version == before + 1

    @pytest.mark.unit
    def test_reparent_keeps_absolute_position(self, nested_document):
        """Moving under a new parent translates the local offset."""
        nested_document.reparent("note", "card")
        note = nested_document.require("note")
        assert note.parent_id == "card"
        assert (note.position.x, note.position.y) == (480.0, -20.0)
        assert "note" not in nested_document.roots

    @pytest.mark.unit
    def test_reparent_into_descendant_rejected(self, nested_document):
        """A component cannot be moved inside its own subtree."""
        with pytest.raises(ValueError):
            nested_document.reparent("section", "cta")

    @pytest.mark.unit
    def test_remove_subtree_leaves_no_orphans(self, nested_document):
        """Deleting removes every descendant from the arena."""
        removed = nested_document.remove_subtree("section")
        assert removed == ["section", "card", "title", "cta"]
        assert set(nested_document.components) == {"note"}
        assert nested_document.roots == ["note"]

    @pytest.mark.unit
    def test_clone_subtree(self, nested_document):
        """Clones copy the subtree under fresh ids, detached."""
        new_root, new_ids = nested_document.clone_subtree("card")
        clone = nested_document.require(new_root)
        assert clone.parent_id is None
        assert new_root not in nested_document.roots
        assert len(new_ids) == 3
        assert not set(new_ids) & {"card", "title", "cta"}
        assert nested_document.require(clone.children[0]).props["text"] == "Pro"


class TestSnapshots:
    """Tests for snapshot and restore."""

    @pytest.mark.unit
    def test_snapshot_is_isolated(self, row_document):
        """Mutating the document does not alter a snapshot."""
        snap = row_document.snapshot()
        row_document.require("a").position.x = 999
        assert snap.components["a"].position.x == 0

    @pytest.mark.unit
    def test_restore_round_trip(self, row_document):
        """Restoring yields a deep-equal arena."""
        snap = row_document.snapshot()
        row_document.remove_subtree("b")
        row_document.restore(snap)
        assert row_document.roots == ["a", "b", "c"]
        assert row_document.components == dict(snap.components)


class TestSerialization:
    """Tests for dict/tree conversion."""

    @pytest.mark.unit
    def test_round_trip(self, nested_document):
        """to_dict() output loads back into an equal document."""
        data = nested_document.to_dict()
        loaded = Document.from_dict(data)
        assert loaded.components == nested_document.components
        assert loaded.roots == nested_document.roots

    @pytest.mark.unit
    def test_nested_form_loads(self, nested_document):
        """Nested trees are accepted and parent links are filled in."""
        loaded = load_document({"name": "n", "roots": nested_document.to_tree()})
        assert loaded.require("cta").parent_id == "card"
        assert loaded.roots == ["section", "note"]


class TestValidation:
    """Tests for document integrity checks."""

    @staticmethod
    def _arena(**components):
        return {
            "components": {
                cid: {"id": cid, "type": "container", **fields}
                for cid, fields in components.items()
            },
            "roots": ["root"],
        }

    @pytest.mark.unit
    def test_valid_document(self, nested_document):
        """A well-formed document has no errors."""
        assert validate_document(nested_document.to_dict()) == []
        assert is_valid_document(nested_document.to_dict())

    @pytest.mark.unit
    def test_dangling_child(self):
        """Child ids must exist."""
        errors = validate_document(self._arena(root={"children": ["ghost"]}))
        assert [e.error_type for e in errors] == ["dangling_reference"]

    @pytest.mark.unit
    def test_cycle(self):
        """A component listed under its own descendant is a cycle."""
        data = self._arena(root={"children": ["a"]}, a={"children": ["b"]})
        data["components"]["b"] = {"id": "b", "type": "text", "children": ["a"]}
        errors = validate_document(data)
        assert "cycle" in {e.error_type for e in errors}

    @pytest.mark.unit
    def test_duplicate_ids_in_nested_form(self):
        """The same id twice in a nested tree is reported."""
        data = {
            "roots": [
                {"id": "x", "type": "text"},
                {"id": "x", "type": "button"},
            ]
        }
        errors = validate_document(data)
        assert [e.error_type for e in errors] == ["duplicate_id"]

    @pytest.mark.unit
    def test_parent_mismatch(self):
        """Declared parent_id must match the owning list."""
        data = self._arena(
            root={"children": ["a"]}, a={"parent_id": "elsewhere"}
        )
        errors = validate_document(data)
        assert [e.error_type for e in errors] == ["parent_mismatch"]

    @pytest.mark.unit
    def test_non_finite(self):
        """Infinite coordinates are reported."""
        data = self._arena(root={"position": {"x": math.inf, "y": 0}})
        errors = validate_document(data)
        assert [e.error_type for e in errors] == ["non_finite"]

    @pytest.mark.unit
    def test_schema_error(self):
        """Field type errors are reported as schema errors."""
        data = self._arena(root={"size": {"width": "wide", "height": 10}})
        errors = validate_document(data)
        assert errors
        assert all(e.error_type == "schema" for e in errors)
        assert errors[0].node_id == "root"

    @pytest.mark.unit
    def test_load_raises(self):
        """Corrupt documents are refused at load time."""
        with pytest.raises(CorruptDocumentError) as excinfo:
            load_document(self._arena(root={"children": ["ghost"]}))
        assert excinfo.value.errors[0].error_type == "dangling_reference"

    @pytest.mark.unit
    def test_loaded_components_are_models(self, row_document):
        """Loading produces Component models."""
        loaded = load_document(row_document.to_dict())
        assert isinstance(loaded.require("a"), Component)
