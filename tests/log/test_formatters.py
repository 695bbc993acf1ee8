"""
Tests for OpenTelemetry-shaped log formatters.

Tests for JsonFormatter, HumanFormatter, and scoped_logger.
"""

import json
import logging
import os
from io import StringIO
from unittest.mock import patch

import pytest

from doclink._logging import (
    HumanFormatter,
    JsonFormatter,
    _get_log_format,
    _get_log_level,
    _infer_scope,
    scoped_logger,
)


def _record(level=logging.INFO, msg="Test", args=(), name="doclink.test", pathname="test.py", lineno=42):
    return logging.LogRecord(
        name=name,
        level=level,
        pathname=pathname,
        lineno=lineno,
        msg=msg,
        args=args,
        exc_info=None,
    )


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_otel_structure(self):
        """Output follows the OpenTelemetry Logging Data Model."""
        parsed = json.loads(JsonFormatter().format(_record()))

        assert set(parsed) == {"timestamp", "severityText", "body", "attributes", "resource"}

    def test_timestamp_format(self):
        """Timestamp is RFC3339 with nanoseconds."""
        ts = json.loads(JsonFormatter().format(_record()))["timestamp"]

        assert ts.endswith("Z")
        assert "T" in ts
        assert len(ts.split(".")[-1]) == 10  # 9 digits + Z

    @pytest.mark.parametrize(
        ("level", "severity"),
        [
            (logging.DEBUG, "DEBUG"),
            (logging.INFO, "INFO"),
            (logging.WARNING, "WARN"),
            (logging.ERROR, "ERROR"),
            (logging.CRITICAL, "FATAL"),
        ],
    )
    def test_severity_text_mapping(self, level, severity):
        """Python log levels map to OpenTelemetry severity text."""
        parsed = json.loads(JsonFormatter().format(_record(level=level)))
        assert parsed["severityText"] == severity

    def test_body_contains_message(self):
        """Body contains the interpolated message."""
        parsed = json.loads(JsonFormatter().format(_record(msg="Hello %s", args=("world",))))
        assert parsed["body"] == "Hello world"

    def test_scope_from_extra(self):
        """Scope comes from the record when provided."""
        record = _record()
        record.scope = "examples"

        parsed = json.loads(JsonFormatter().format(record))

        assert parsed["attributes"]["scope"] == "examples"

    def test_extra_attributes_included(self):
        """Extra attributes are included in the attributes dict."""
        record = _record()
        record.decl = "Circle"
        record.code = "DECL_FORMAT"

        attributes = json.loads(JsonFormatter().format(record))["attributes"]

        assert attributes["decl"] == "Circle"
        assert attributes["code"] == "DECL_FORMAT"

    def test_resource_contains_service_info(self):
        """Resource names the doclink service."""
        resource = json.loads(JsonFormatter().format(_record()))["resource"]

        assert resource["service.name"] == "doclink"
        assert "service.version" in resource

    @pytest.mark.parametrize("level", [logging.DEBUG, logging.ERROR])
    def test_code_location(self, level):
        """DEBUG and ERROR include the code location relative to the package."""
        record = _record(level=level, pathname="/site-packages/doclink/render/decl.py", lineno=99)

        attributes = json.loads(JsonFormatter().format(record))["attributes"]

        assert attributes["code.filepath"] == "render/decl.py"
        assert attributes["code.lineno"] == 99

    def test_no_code_location_for_warning(self):
        """WARNING does not include the code location."""
        attributes = json.loads(JsonFormatter().format(_record(level=logging.WARNING)))["attributes"]

        assert "code.filepath" not in attributes
        assert "code.lineno" not in attributes


class TestHumanFormatter:
    """Tests for HumanFormatter."""

    def test_format_basic(self):
        """HumanFormatter produces readable output."""
        output = HumanFormatter(use_colors=False).format(_record(msg="Test message"))

        assert "INFO" in output
        assert "Test message" in output

    def test_time_format(self):
        """Time is formatted as HH:MM:SS."""
        time_part = HumanFormatter(use_colors=False).format(_record()).split()[0]

        assert len(time_part) == 8
        assert time_part.count(":") == 2

    def test_scope_in_brackets(self):
        """Scope appears in square brackets."""
        record = _record()
        record.scope = "source"

        assert "[source]" in HumanFormatter(use_colors=False).format(record)

    def test_decl_in_parentheses(self):
        """The declaration name appears in parentheses."""
        record = _record(msg="Declaration not formatted", level=logging.WARNING)
        record.decl = "Circle.area"

        output = HumanFormatter(use_colors=False).format(record)

        assert "Declaration not formatted (Circle.area)" in output

    def test_colors_disabled(self):
        """Colors can be disabled."""
        output = HumanFormatter(use_colors=False).format(_record(level=logging.ERROR))
        assert "\x1b[" not in output

    def test_colors_enabled(self):
        """Colors are included when enabled."""
        output = HumanFormatter(use_colors=True).format(_record(level=logging.ERROR))
        assert "\x1b[" in output


class TestInferScope:
    """Tests for scope inference from logger names."""

    @pytest.mark.parametrize(
        ("name", "scope"),
        [
            ("doclink.comment.linkify", "comment"),
            ("doclink.source.package", "source"),
            ("doclink.render.examples", "examples"),
            ("doclink.render.decl", "render"),
            ("doclink.other", "other"),
            ("", "doclink"),
        ],
    )
    def test_infer(self, name, scope):
        """Scopes are inferred from keywords in the logger name."""
        assert _infer_scope(name) == scope


class TestScopedLogger:
    """Tests for scoped_logger."""

    @pytest.fixture
    def captured(self):
        log = scoped_logger("render")
        stream = StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(JsonFormatter())
        log.logger.addHandler(handler)
        old_level = log.logger.level
        log.logger.setLevel(logging.INFO)
        try:
            yield log, stream
        finally:
            log.logger.removeHandler(handler)
            log.logger.setLevel(old_level)

    def test_creates_logger_adapter(self):
        """scoped_logger returns a LoggerAdapter over the doclink logger."""
        log = scoped_logger("render")

        assert isinstance(log, logging.LoggerAdapter)
        assert log.logger.name == "doclink"

    def test_scope_in_extra(self, captured):
        """scoped_logger includes scope in all messages."""
        log, stream = captured

        log.info("Test message")

        assert json.loads(stream.getvalue().strip())["attributes"]["scope"] == "render"

    def test_extra_merges_with_scope(self, captured):
        """Extra attributes merge with scope."""
        log, stream = captured

        log.info("Test message", extra={"decl": "Circle"})

        attributes = json.loads(stream.getvalue().strip())["attributes"]
        assert attributes["scope"] == "render"
        assert attributes["decl"] == "Circle"


class TestEnvironmentVariables:
    """Tests for environment variable handling."""

    @pytest.mark.parametrize(
        ("value", "level"),
        [
            ("debug", logging.DEBUG),
            ("trace", logging.DEBUG),
            ("WARN", logging.WARNING),
            ("error", logging.ERROR),
            ("bogus", logging.WARNING),
        ],
    )
    def test_log_level(self, value, level):
        """DOCLINK_LOG_LEVEL selects the level, unknown names fall back to WARNING."""
        with patch.dict(os.environ, {"DOCLINK_LOG_LEVEL": value}):
            assert _get_log_level() == level

    def test_log_level_off(self):
        """DOCLINK_LOG_LEVEL=off disables logging."""
        with patch.dict(os.environ, {"DOCLINK_LOG_LEVEL": "off"}):
            assert _get_log_level() > logging.CRITICAL

    def test_log_level_default(self):
        """Without DOCLINK_LOG_LEVEL the level is WARNING."""
        with patch.dict(os.environ, {}, clear=True):
            assert _get_log_level() == logging.WARNING

    @pytest.mark.parametrize(("value", "fmt"), [("json", "json"), ("HUMAN", "human")])
    def test_log_format(self, value, fmt):
        """DOCLINK_LOG_FORMAT selects the format."""
        with patch.dict(os.environ, {"DOCLINK_LOG_FORMAT": value}):
            assert _get_log_format() == fmt
