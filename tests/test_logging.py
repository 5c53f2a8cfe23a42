# ============================================================================
# STRUCTURED LOGGING TESTS
# ============================================================================
# STATUS: Tests - Context stack, formatters, script configuration
# PURPOSE: Verify ormforge.logging output in human and JSON form
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Structured Logging Tests

Run with:
    pytest tests/test_logging.py -v
"""

import json
import logging
import sys

import pytest

from ormforge.logging import (
    ComponentType,
    ContextLogger,
    HumanFormatter,
    StructuredFormatter,
    configure_logging,
    get_current_context,
    get_logger,
    log_context,
)


def _make_record(message="Compiled posts", level=logging.INFO, **attrs):
    record = logging.LogRecord("ormforge.test", level, __file__, 42, message, (), None, func="compile")
    for key, value in attrs.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestLogContext:
    def test_nested_contexts_merge(self):
        with log_context(dialect="mysql", component="generator"):
            with log_context(table="posts", extra={"columns": 3}):
                context = get_current_context()
                assert context.to_dict() == {
                    "dialect": "mysql",
                    "component": "generator",
                    "table": "posts",
                    "columns": 3,
                }
            assert get_current_context().table is None

        assert get_current_context().to_dict() == {}

    def test_inner_value_overrides(self):
        with log_context(table="users"):
            with log_context(table="posts"):
                assert get_current_context().table == "posts"
            assert get_current_context().table == "users"

    def test_popped_on_error(self):
        with pytest.raises(RuntimeError):
            with log_context(entity="app.Post"):
                raise RuntimeError("boom")
        assert get_current_context().entity is None


class TestFormatters:
    def test_structured_formatter(self):
        with log_context(dialect="sqlite", table="posts"):
            output = StructuredFormatter().format(_make_record(extra={"columns": 4}))

        data = json.loads(output)
        assert data["level"] == "INFO"
        assert data["logger"] == "ormforge.test"
        assert data["message"] == "Compiled posts"
        assert data["context"] == {"dialect": "sqlite", "table": "posts"}
        assert data["data"] == {"columns": 4}
        assert data["source"] == {"file": "test_logging.py", "line": 42, "function": "compile"}
        assert data["timestamp"].endswith("Z")

    def test_structured_formatter_options(self):
        formatter = StructuredFormatter(include_timestamp=False, include_logger=False, include_context=False)
        with log_context(table="posts"):
            data = json.loads(formatter.format(_make_record()))
        assert "timestamp" not in data
        assert "logger" not in data
        assert "context" not in data

    def test_structured_formatter_exception(self):
        try:
            raise ValueError("bad default")
        except ValueError:
            record = _make_record(level=logging.ERROR)
            record.exc_info = sys.exc_info()

        data = json.loads(StructuredFormatter().format(record))
        assert "ValueError: bad default" in data["exception"]

    def test_human_formatter(self):
        with log_context(dialect="postgresql", entity="app.Post", table="posts", directory="src"):
            output = HumanFormatter().format(_make_record())

        assert "INFO" in output
        assert "ormforge.test [dialect=postgresql, entity=app.Post, table=posts]: Compiled posts" in output
        assert "directory" not in output

    def test_human_formatter_without_context(self):
        output = HumanFormatter().format(_make_record())
        assert output.endswith("ormforge.test: Compiled posts")


class TestContextLogger:
    def test_component_and_context_attached(self, caplog):
        logger = get_logger("ormforge.test.context", ComponentType.GRAMMAR)
        assert isinstance(logger, ContextLogger)

        with caplog.at_level(logging.INFO, logger="ormforge.test.context"):
            with log_context(table="posts"):
                logger.info("Compiling", extra={"columns": 2})

        record = caplog.records[-1]
        assert record.getMessage() == "Compiling"
        assert record.extra == {"columns": 2, "table": "posts", "component": "grammar"}

    def test_context_component_wins(self, caplog):
        logger = get_logger("ormforge.test.context", ComponentType.GRAMMAR)
        with caplog.at_level(logging.INFO, logger="ormforge.test.context"):
            with log_context(component="introspector"):
                logger.info("Reading")
        assert caplog.records[-1].extra["component"] == "introspector"

    def test_without_component(self, caplog):
        logger = get_logger("ormforge.test.plain")
        with caplog.at_level(logging.INFO, logger="ormforge.test.plain"):
            logger.info("Plain")
        assert caplog.records[-1].extra == {}


class TestConfigureLogging:
    def test_single_stderr_handler(self, restore_root_logger):
        configure_logging("debug")
        configure_logging("DEBUG")

        root = restore_root_logger
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert root.handlers[0].stream is sys.stderr
        assert isinstance(root.handlers[0].formatter, HumanFormatter)

    def test_json_output(self, restore_root_logger):
        configure_logging(logging.WARNING, json_output=True)
        assert isinstance(restore_root_logger.handlers[0].formatter, StructuredFormatter)
        assert restore_root_logger.level == logging.WARNING

    def test_log_format_env(self, restore_root_logger, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "JSON")
        configure_logging()
        assert isinstance(restore_root_logger.handlers[0].formatter, StructuredFormatter)

    def test_unknown_level_defaults_to_info(self, restore_root_logger):
        configure_logging("chatty")
        assert restore_root_logger.level == logging.INFO
