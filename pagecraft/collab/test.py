"""Unit tests for remote mutations."""

import pytest

from pagecraft.transform import ErrorKind

from .lib import RemoteMutation, apply_remote_mutation, build_mutation


class TestApplyRemoteMutation:
    """Tests for apply_remote_mutation."""

    @pytest.mark.unit
    def test_props_merge_by_key(self, nested_document):
        """Props merge; later arrivals overwrite the same key."""
        first = RemoteMutation("title", {"props": {"text": "Team"}}, "u1", 1)
        second = RemoteMutation("title", {"props": {"level": 3}}, "u2", 1)
        assert apply_remote_mutation(nested_document, first).ok
        assert apply_remote_mutation(nested_document, second).ok
        assert nested_document.require("title").props == {"text": "Team", "level": 3}

    @pytest.mark.unit
    def test_last_arrival_wins(self, nested_document):
        """Arrival order decides, not the sequence number."""
        late = RemoteMutation("title", {"props": {"text": "B"}}, "u2", 1)
        early = RemoteMutation("title", {"props": {"text": "A"}}, "u1", 9)
        apply_remote_mutation(nested_document, early)
        apply_remote_mutation(nested_document, late)
        assert nested_document.require("title").props["text"] == "B"

    @pytest.mark.unit
    def test_none_removes_key(self, nested_document):
        """A None value deletes a props key."""
        apply_remote_mutation(
            nested_document, RemoteMutation("title", {"props": {"level": None}}, "u1")
        )
        assert "level" not in nested_document.require("title").props

    @pytest.mark.unit
    def test_position_replaced(self, nested_document):
        """Geometry is replaced as a whole value."""
        result = apply_remote_mutation(
            nested_document,
            RemoteMutation("cta", {"position": {"x": 1, "y": 2}}, "u1"),
        )
        assert result.label == "remote:u1 update"
        cta = nested_document.require("cta")
        assert (cta.position.x, cta.position.y) == (1, 2)
        assert cta.metadata.version == 2

    @pytest.mark.unit
    def test_flags_merge(self, nested_document):
        """Flags merge key by key."""
        apply_remote_mutation(
            nested_document, RemoteMutation("cta", {"flags": {"visible": False}}, "u1")
        )
        flags = nested_document.require("cta").flags
        assert flags.visible is False
        assert flags.draggable is True

    @pytest.mark.unit
    def test_unknown_component(self, nested_document):
        """Unknown ids are not found."""
        result = apply_remote_mutation(
            nested_document, RemoteMutation("ghost", {"props": {}}, "u1")
        )
        assert result.error.kind is ErrorKind.NOT_FOUND

    @pytest.mark.unit
    def test_unknown_field(self, nested_document):
        """Unsupported fields are rejected."""
        result = apply_remote_mutation(
            nested_document, RemoteMutation("cta", {"children": []}, "u1")
        )
        assert result.error.kind is ErrorKind.INVALID_OPERATION

    @pytest.mark.unit
    def test_invalid_value_leaves_component(self, nested_document):
        """A bad value rejects the whole event."""
        event = RemoteMutation(
            "cta",
            {"props": {"text": "X"}, "size": {"width": "huge", "height": 1}},
            "u1",
        )
        assert not apply_remote_mutation(nested_document, event).ok
        assert nested_document.require("cta").props["text"] == "Buy now"

    @pytest.mark.unit
    def test_locked_geometry_rejected(self, nested_document):
        """Locked components refuse remote moves."""
        nested_document.require("cta").flags.locked = True
        result = apply_remote_mutation(
            nested_document, RemoteMutation("cta", {"position": {"x": 0, "y": 0}}, "u1")
        )
        assert result.error.kind is ErrorKind.INVALID_OPERATION


class TestMutationSerialization:
    """Tests for event conversion."""

    @pytest.mark.unit
    def test_from_dict(self):
        """Events load from plain data."""
        event = RemoteMutation.from_dict(
            {"component_id": "c1", "changed_fields": {"style": {"color": "red"}}, "user_id": "u"}
        )
        assert event.sequence == 0
        assert RemoteMutation.from_dict(event.to_dict()) == event

    @pytest.mark.unit
    def test_build_mutation(self, nested_document):
        """Only changed fields are described."""
        before = nested_document.require("cta").model_copy(deep=True)
        after = nested_document.require("cta")
        after.props["text"] = "Go"
        after.position.x = 99
        mutation = build_mutation(before, after, "me", 4)
        assert mutation.changed_fields == {
            "props": {"text": "Go"},
            "position": {"x": 99.0, "y": 60.0},
        }

    @pytest.mark.unit
    def test_build_mutation_no_change(self, nested_document):
        """Identical components produce nothing."""
        cta = nested_document.require("cta")
        assert build_mutation(cta, cta.model_copy(deep=True), "me") is None
