"""Unit tests for pagecraft logging helpers."""

import logging
from io import StringIO

import pytest

from .lib import get_logger, resolve_level, setup_logging


@pytest.fixture
def bare_root_logger():
    """Root logger without handlers, restored afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    root.handlers = []
    yield root
    root.handlers = handlers
    root.setLevel(level)


class TestLoggers:
    """Tests for logger lookup and setup."""

    @pytest.mark.unit
    def test_named_logger(self) -> None:
        assert get_logger("pagecraft.editor") is logging.getLogger("pagecraft.editor")

    @pytest.mark.unit
    def test_package_logger_by_default(self) -> None:
        assert get_logger().name == "pagecraft"

    @pytest.mark.unit
    def test_setup_writes_to_stream(self, bare_root_logger) -> None:
        """Records at or above the configured level reach the stream."""
        stream = StringIO()
        setup_logging(level="warning", stream=stream)
        get_logger("pagecraft.test").info("hidden")
        get_logger("pagecraft.test").warning("shown")
        output = stream.getvalue()
        assert "pagecraft.test - WARNING - shown" in output
        assert "hidden" not in output


class TestResolveLevel:
    """Tests for level name resolution."""

    @pytest.mark.unit
    def test_int_passthrough(self) -> None:
        assert resolve_level(logging.WARNING) == logging.WARNING

    @pytest.mark.unit
    def test_name_is_case_insensitive(self) -> None:
        assert resolve_level("debug") == logging.DEBUG

    @pytest.mark.unit
    def test_unknown_name_falls_back_to_info(self) -> None:
        assert resolve_level("chatty") == logging.INFO

    @pytest.mark.unit
    def test_none_reads_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("PAGECRAFT_LOG_LEVEL", "ERROR")
        assert resolve_level(None) == logging.ERROR
