# ============================================================================
# LOGGING TESTS
# ============================================================================
# STATUS: Tests - Structured logging with context
# PURPOSE: Verify context stacking, formatters and compile-time log records
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Logging Tests

Run with:
    pytest tests/test_logging.py -v
"""

import json
import logging

from rulesql.config import CompilerDefaults
from rulesql.logging import (
    ComponentType,
    HumanFormatter,
    StructuredFormatter,
    get_current_context,
    get_logger,
    log_context,
)
from rulesql.models import rules, ColumnSpec, TableSpec
from rulesql.schema import compile_table
from services import TableService


def make_record(message="hello", extra=None):
    record = logging.LogRecord("rulesql.test", logging.INFO, __file__, 10, message, None, None)
    if extra is not None:
        record.extra = extra
    return record


class TestLogContext:
    def test_empty_by_default(self):
        assert get_current_context().to_dict() == {}

    def test_nested_contexts_merge(self):
        with log_context(table="users", extra={"a": 1}):
            with log_context(column="email", extra={"b": 2}):
                assert get_current_context().to_dict() == {
                    "table": "users",
                    "column": "email",
                    "a": 1,
                    "b": 2,
                }
            assert get_current_context().to_dict() == {"table": "users", "a": 1}
        assert get_current_context().to_dict() == {}


class TestFormatters:
    def test_structured_formatter(self):
        with log_context(table="users", operation="compile"):
            output = StructuredFormatter().format(make_record(extra={"columns": 3}))
        data = json.loads(output)
        assert data["level"] == "INFO"
        assert data["logger"] == "rulesql.test"
        assert data["message"] == "hello"
        assert data["context"] == {"table": "users", "operation": "compile"}
        assert data["data"] == {"columns": 3}
        assert data["timestamp"].endswith("Z")

    def test_human_formatter(self):
        with log_context(table="users", column="email"):
            output = HumanFormatter().format(make_record())
        assert "INFO" in output
        assert "rulesql.test [table=users, column=email]: hello" in output


class TestContextLogger:
    def test_component_attached(self, caplog):
        logger = get_logger("rulesql.test.adapter", ComponentType.LOADER)
        with caplog.at_level(logging.INFO, logger="rulesql.test.adapter"):
            with log_context(source="users.yaml"):
                logger.info("loaded", extra={"columns": 2})
                output = HumanFormatter().format(caplog.records[-1])
        assert caplog.records[-1].extra == {"component": "loader", "columns": 2}
        assert "[component=loader, source=users.yaml]: loaded {'columns': 2}" in output

    def test_table_service_logs_as_loader(self, caplog, tmp_path):
        with caplog.at_level(logging.INFO, logger="services"):
            TableService(tables_dir=str(tmp_path)).load_all()
        record = caplog.records[-1]
        assert record.getMessage() == f"Loaded 0 tables from {tmp_path}"
        assert record.extra == {"component": "loader"}


class TestCompileLogging:
    def test_compile_logs_table_summary(self, caplog):
        spec = TableSpec(name="users", columns=[ColumnSpec(name="id", rule=rules.integer())])
        with caplog.at_level(logging.DEBUG, logger="rulesql"):
            compile_table(spec, CompilerDefaults())
        messages = [record.getMessage() for record in caplog.records]
        assert "Compiled table users: 1 columns, 0 indexes" in messages
        assert "Column id: id INTEGER NOT NULL" in messages
