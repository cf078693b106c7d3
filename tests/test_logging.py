"""Tests for the structured logging system (pm_kernel/logging_config.py)."""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO

import pytest

from pm_kernel.domain.entities import RagStatus
from pm_kernel.exceptions import InvalidEnumValueError, UnknownViewError
from pm_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Each test configures logging from scratch."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def json_log():
    """
    Configure logging into a buffer; returns a reader of the JSON lines.

    The reader takes no arguments and returns every record written so far.
    """
    stream = StringIO()
    configure_logging(stream=stream)

    def _read() -> list[dict]:
        return [json.loads(line) for line in stream.getvalue().splitlines() if line]

    return _read


class TestRecordShape:

    def test_core_fields(self, json_log):
        get_logger("engines.risk").info("risks_assessed")

        (record,) = json_log()
        assert record["level"] == "INFO"
        assert record["message"] == "risks_assessed"
        assert record["logger"] == "pm_kernel.engines.risk"
        assert record["ts"].endswith("+00:00")

    def test_extras_become_fields(self, json_log):
        get_logger("test").info("capacity_aggregated", extra={"resource_count": 5})

        assert json_log()[0]["resource_count"] == 5

    def test_extras_cannot_overwrite_core_fields(self, json_log):
        with LogContext.bind(view="tasks"):
            get_logger("test").info("msg", extra={"view": "other"})

        assert json_log()[0]["view"] == "tasks"

    def test_domain_values_serialized(self, json_log):
        get_logger("test").info("values", extra={
            "cpi": Decimal("0.9866"),
            "as_of": date(2024, 8, 1),
            "rag": RagStatus.AMBER,
            "ids": frozenset({"b", "a"}),
        })

        record = json_log()[0]
        assert record["cpi"] == "0.9866"
        assert record["as_of"] == "2024-08-01"
        assert record["rag"] == "amber"
        assert record["ids"] == ["a", "b"]

    def test_debug_filtered_at_default_level(self, json_log):
        logger = get_logger("test")
        logger.debug("hidden")
        logger.info("shown")

        assert [r["message"] for r in json_log()] == ["shown"]


class TestExceptionFields:

    def test_plain_exception(self, json_log):
        try:
            raise ValueError("boom")
        except ValueError:
            get_logger("test").error("failed", exc_info=True)

        record = json_log()[0]
        assert record["exc_type"] == "ValueError"
        assert record["exc_message"] == "boom"
        assert "exc_code" not in record
        assert "Traceback" in record["traceback"]

    def test_definition_error_attributes(self, json_log):
        try:
            raise InvalidEnumValueError("status", "done", ("upcoming", "achieved"))
        except InvalidEnumValueError:
            get_logger("config").error("project_load_failed", exc_info=True)

        record = json_log()[0]
        assert record["exc_code"] == "INVALID_ENUM_VALUE"
        assert record["exc_field"] == "status"
        assert record["exc_value"] == "done"
        assert record["exc_allowed"] == ["upcoming", "achieved"]

    def test_view_error_attributes(self, json_log):
        try:
            raise UnknownViewError("gantt")
        except UnknownViewError:
            get_logger("services").warning("bad_view", exc_info=True)

        record = json_log()[0]
        assert record["exc_code"] == "UNKNOWN_VIEW"
        assert record["exc_view"] == "gantt"


class TestLogContext:

    def test_fields_stamped_on_records(self, json_log):
        with LogContext.bind(project_id="proj-001", view="risks"):
            get_logger("test").info("rendered")

        record = json_log()[0]
        assert record["project_id"] == "proj-001"
        assert record["view"] == "risks"

    def test_absent_when_unset(self, json_log):
        get_logger("test").info("bare")

        record = json_log()[0]
        assert "project_id" not in record
        assert "view" not in record

    def test_none_values_skipped(self):
        with LogContext.bind(project_id="p", view=None):
            assert LogContext.get_all() == {"project_id": "p"}

    def test_clear(self):
        with LogContext.bind(view="tasks"):
            LogContext.clear()
            assert LogContext.get_all() == {}

    def test_bind_nests_and_restores(self):
        with LogContext.bind(view="overview"):
            with LogContext.bind(view="risks", project_id="p"):
                with LogContext.bind(view="tasks"):
                    assert LogContext.get_all()["view"] == "tasks"
                assert LogContext.get_all() == {"project_id": "p", "view": "risks"}
            assert LogContext.get_all() == {"view": "overview"}
        assert LogContext.get_all() == {}

    def test_bind_ignores_unknown_fields(self):
        with LogContext.bind(correlation_id="c"):
            assert LogContext.get_all() == {}


class TestConfigureLogging:

    def test_idempotent(self):
        configure_logging(stream=StringIO())
        configure_logging(stream=StringIO())

        assert len(logging.getLogger("pm_kernel").handlers) == 1

    def test_explicit_handler_gets_formatter(self):
        handler = logging.StreamHandler(StringIO())
        configure_logging(handler=handler)

        assert isinstance(handler.formatter, StructuredFormatter)

    def test_level_name(self):
        stream = StringIO()
        configure_logging(level="debug", stream=stream)
        get_logger("deep.nested.module").debug("hierarchy_test")

        record = json.loads(stream.getvalue())
        assert record["logger"] == "pm_kernel.deep.nested.module"

    def test_unknown_level_name_falls_back_to_info(self):
        configure_logging(level="LOUD", stream=StringIO())

        assert logging.getLogger("pm_kernel").level == logging.INFO

    def test_reset_allows_reconfigure(self):
        configure_logging(stream=StringIO())
        reset_logging()
        stream = StringIO()
        configure_logging(stream=stream)
        get_logger("test").info("after_reset")

        assert json.loads(stream.getvalue())["message"] == "after_reset"
