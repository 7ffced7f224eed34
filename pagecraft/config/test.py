"""Tests for configuration management."""

from pathlib import Path

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    _convert,
    get_data_dir,
    get_environment,
    get_environment_info,
    get_history_limit,
    get_snap_threshold,
    list_environment_variables,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("PAGECRAFT_GRID_SIZE", raising=False)
        assert get_environment(EnvVar.PAGECRAFT_GRID_SIZE) == 20

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("PAGECRAFT_GRID_SIZE", "40")
        assert get_environment(EnvVar.PAGECRAFT_GRID_SIZE, override=8) == 8

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("PAGECRAFT_HISTORY_LIMIT", "75")
        result = get_environment(EnvVar.PAGECRAFT_HISTORY_LIMIT)
        assert result == 75
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_float_type_conversion(self, monkeypatch):
        """Float type conversion from string."""
        monkeypatch.setenv("PAGECRAFT_SNAP_THRESHOLD", "2.5")
        assert get_environment(EnvVar.PAGECRAFT_SNAP_THRESHOLD) == 2.5

    @pytest.mark.unit
    def test_invalid_int_falls_back_to_default(self, monkeypatch):
        """Unparseable integers return the default."""
        monkeypatch.setenv("PAGECRAFT_DUPLICATE_OFFSET", "lots")
        assert get_environment(EnvVar.PAGECRAFT_DUPLICATE_OFFSET) == 20

    @pytest.mark.unit
    def test_string_type(self, monkeypatch):
        """String type returns as-is."""
        monkeypatch.setenv("PAGECRAFT_DEFAULT_TARGET", "vue")
        assert get_environment(EnvVar.PAGECRAFT_DEFAULT_TARGET) == "vue"


class TestConversion:
    """Tests for raw string conversion."""

    @pytest.mark.unit
    def test_path(self):
        info = get_environment_info(EnvVar.PAGECRAFT_DATA_DIR)
        assert _convert("/tmp/x", info) == Path("/tmp/x")

    @pytest.mark.unit
    def test_numbers_are_stripped(self):
        info = get_environment_info(EnvVar.PAGECRAFT_GRID_SIZE)
        assert _convert(" 16 ", info) == 16

    @pytest.mark.unit
    def test_empty_value_means_unset(self, monkeypatch):
        """An empty variable resolves to the default."""
        monkeypatch.setenv("PAGECRAFT_DEFAULT_TARGET", "")
        assert get_environment(EnvVar.PAGECRAFT_DEFAULT_TARGET) == "react"


class TestConvenienceFunctions:
    """Tests for convenience getters."""

    @pytest.mark.unit
    def test_history_limit_never_below_one(self, monkeypatch):
        monkeypatch.setenv("PAGECRAFT_HISTORY_LIMIT", "0")
        assert get_history_limit() == 1

    @pytest.mark.unit
    def test_snap_threshold_is_float(self, monkeypatch):
        monkeypatch.delenv("PAGECRAFT_SNAP_THRESHOLD", raising=False)
        assert get_snap_threshold() == 5.0

    @pytest.mark.unit
    def test_data_dir_resolution(self, monkeypatch, tmp_path):
        monkeypatch.delenv("PAGECRAFT_DATA_DIR", raising=False)
        assert get_data_dir() == Path.cwd() / ".pagecraft"

        monkeypatch.setenv("PAGECRAFT_DATA_DIR", str(tmp_path))
        assert get_data_dir() == tmp_path
        assert get_data_dir(override="elsewhere") == Path("elsewhere")


class TestIntrospection:
    """Tests for metadata and listing."""

    @pytest.mark.unit
    def test_environment_info(self):
        info = get_environment_info(EnvVar.PAGECRAFT_HISTORY_LIMIT)
        assert isinstance(info, EnvConfig)
        assert info.name == "PAGECRAFT_HISTORY_LIMIT"
        assert info.var_type is int

    @pytest.mark.unit
    def test_list_by_category(self):
        canvas = list_environment_variables("canvas")
        assert EnvVar.PAGECRAFT_GRID_SIZE in canvas
        assert EnvVar.PAGECRAFT_HISTORY_LIMIT not in canvas
        assert len(list_environment_variables()) == len(EnvVar)

    @pytest.mark.unit
    def test_names_match_members(self):
        for var in EnvVar:
            assert var.value.name == var.name
