"""Unit tests for pester_shim.core.logging_config."""

import io
import json
import logging

from pester_shim.cli.logging import CLILogContext
from pester_shim.core.logging_config import (
    ContextFilter,
    HumanReadableFormatter,
    StructuredFormatter,
    configure_logging,
)


def _record(name="pester_shim.core.dispatcher", msg="Failed to load Pester", **extra):
    record = logging.LogRecord(name, logging.WARNING, __file__, 1, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestContextFilter:
    def test_without_request_id(self):
        record = _record()
        assert ContextFilter().filter(record) is True
        assert record.request_id == "-"

    def test_inside_cli_context(self):
        record = _record()
        with CLILogContext(request_id="cli_abc123"):
            ContextFilter().filter(record)
        assert record.request_id == "cli_abc123"


class TestStructuredFormatter:
    def test_json_fields(self):
        record = _record(request_id="cli_abc123")
        entry = json.loads(StructuredFormatter().format(record))
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "pester_shim.core.dispatcher"
        assert entry["message"] == "Failed to load Pester"
        assert entry["request_id"] == "cli_abc123"
        assert "extra" not in entry

    def test_extra_fields(self):
        record = _record(cli_context={"command": "run"}, handle=object())
        entry = json.loads(StructuredFormatter().format(record))
        assert entry["extra"]["cli_context"] == {"command": "run"}
        assert isinstance(entry["extra"]["handle"], str)


class TestHumanReadableFormatter:
    def test_strips_package_prefix(self):
        line = HumanReadableFormatter().format(_record(request_id="cli_abc123"))
        assert line == "[WARNING] core.dispatcher: Failed to load Pester"

    def test_includes_request_id_when_asked(self):
        formatter = HumanReadableFormatter(include_request_id=True)
        line = formatter.format(_record(request_id="cli_abc123"))
        assert line.startswith("[WARNING] [cli_abc123] core.dispatcher:")


class TestConfigureLogging:
    def test_writes_to_stream(self):
        stream = io.StringIO()
        configure_logging(level="info", stream=stream)
        logging.getLogger("pester_shim.core.runners").info("Invoking Pester 5.2.0")
        logging.getLogger("pester_shim.core.runners").debug("hidden")
        assert stream.getvalue() == "[INFO] core.runners: Invoking Pester 5.2.0\n"

    def test_structured(self):
        stream = io.StringIO()
        configure_logging(format="structured", stream=stream)
        logging.getLogger("pester_shim.core.dispatcher").warning("No runner")
        entry = json.loads(stream.getvalue())
        assert entry["message"] == "No runner"

    def test_reconfiguring_replaces_handler(self):
        configure_logging(stream=io.StringIO())
        logger = configure_logging(stream=io.StringIO())
        assert len(logger.handlers) == 1
