"""Unit tests for structured logging."""

import json
import logging
import sys
from datetime import datetime
from io import StringIO

import pytest

from vsphere_clone.logging import StructuredLogger, logger
from vsphere_clone.simulator import InMemoryDriver


def make_record(msg="Test message", level=logging.INFO, exc_info=None):
    return logging.LogRecord(
        name="test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


@pytest.fixture
def captured():
    """StructuredLogger writing to a StringIO; returns (logger, read_last)."""
    stream = StringIO()
    test_logger = StructuredLogger("test_captured")
    test_logger.logger.handlers.clear()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredLogger.JsonFormatter())
    test_logger.logger.addHandler(handler)

    def read_lines():
        return [json.loads(line) for line in stream.getvalue().splitlines() if line]

    return test_logger, read_lines


class TestJsonFormatter:
    """Test JsonFormatter output."""

    def test_basic_fields(self):
        data = json.loads(StructuredLogger.JsonFormatter().format(make_record()))

        assert data["message"] == "Test message"
        assert data["level"] == "INFO"
        assert data["logger"] == "test"
        assert isinstance(datetime.fromisoformat(data["timestamp"]), datetime)

    def test_exception_included(self):
        try:
            raise ValueError("bad template")
        except ValueError:
            exc_info = sys.exc_info()

        record = make_record("Error occurred", logging.ERROR, exc_info)
        data = json.loads(StructuredLogger.JsonFormatter().format(record))

        assert "ValueError" in data["exception"]
        assert "bad template" in data["exception"]

    def test_extra_fields(self):
        record = make_record()
        record.operation_id = "op-1"
        record.vm_path = "builds/vm1"

        data = json.loads(StructuredLogger.JsonFormatter().format(record))

        assert data["operation_id"] == "op-1"
        assert data["vm_path"] == "builds/vm1"

    def test_non_json_values_are_stringified(self):
        record = make_record()
        record.driver = InMemoryDriver()
        record.error = RuntimeError("boom")

        data = json.loads(StructuredLogger.JsonFormatter().format(record))

        assert "InMemoryDriver" in data["driver"]
        assert data["error"] == "boom"


class TestStructuredLogger:
    """Test StructuredLogger methods and levels."""

    def test_default_level(self):
        assert StructuredLogger("test_default").logger.level == logging.INFO

    def test_reinitialising_does_not_duplicate_handlers(self):
        StructuredLogger("test_dupes")
        again = StructuredLogger("test_dupes")
        assert len(again.logger.handlers) == 1

    def test_kwargs_become_fields(self, captured):
        test_logger, read_lines = captured
        test_logger.info("Cloning", template="base-vm", disks=2)

        data = read_lines()[-1]
        assert data["message"] == "Cloning"
        assert data["template"] == "base-vm"
        assert data["disks"] == 2

    def test_levels(self, captured):
        test_logger, read_lines = captured
        test_logger.logger.setLevel(logging.DEBUG)

        test_logger.debug("d")
        test_logger.info("i")
        test_logger.warning("w")
        test_logger.error("e")
        test_logger.critical("c", exc_info=False)

        assert [d["level"] for d in read_lines()] == [
            "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL",
        ]

    def test_debug_filtered_at_info(self, captured):
        test_logger, read_lines = captured
        test_logger.debug("hidden")
        test_logger.info("shown")

        assert [d["message"] for d in read_lines()] == ["shown"]

    def test_error_with_exc_info(self, captured):
        test_logger, read_lines = captured
        try:
            raise RuntimeError("clone failed")
        except RuntimeError:
            test_logger.error("Clone failed", exc_info=True)

        assert "RuntimeError" in read_lines()[-1]["exception"]

    def test_writes_to_stderr_only(self, capsys):
        StructuredLogger("test_streams").info("Cloning", template="base-vm")

        out, err = capsys.readouterr()
        assert out == ""
        assert json.loads(err)["template"] == "base-vm"

    def test_does_not_propagate_to_root(self):
        assert StructuredLogger("test_propagate").logger.propagate is False

    @pytest.mark.parametrize(
        "name,expected",
        [("debug", logging.DEBUG), ("WARNING", logging.WARNING), ("bogus", logging.INFO)],
    )
    def test_set_level(self, name, expected):
        test_logger = StructuredLogger("test_set_level")
        test_logger.set_level(name)
        assert test_logger.logger.level == expected


class TestGlobalLogger:
    """Test global logger instance."""

    def test_global_logger(self):
        assert isinstance(logger, StructuredLogger)
        assert logger.logger.name == "vsphere_clone"
