"""Tests for structured JSON logging"""
import json
import logging

from compliance_workflow.utils.logger import (
    JsonFormatter, correlation_id_var, get_context_logger, setup_logging
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="compliance_workflow.engine", level=logging.WARNING, pathname=__file__,
        lineno=1, msg="Transition %s failed", args=("submit",), exc_info=None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_includes_workflow_fields():
    payload = json.loads(JsonFormatter().format(
        _record(workflow_id="authorization", from_state="draft", stage="on_enter", unrelated="x")
    ))

    assert payload["level"] == "WARNING"
    assert payload["message"] == "Transition submit failed"
    assert payload["workflow_id"] == "authorization"
    assert payload["from_state"] == "draft"
    assert payload["stage"] == "on_enter"
    assert "unrelated" not in payload
    assert payload["timestamp"].endswith("Z")


def test_formatter_uses_context_correlation_id():
    token = correlation_id_var.set("req-7")
    try:
        payload = json.loads(JsonFormatter().format(_record()))
    finally:
        correlation_id_var.reset(token)

    assert payload["correlation_id"] == "req-7"


def test_context_logger_binds_fields(caplog):
    adapter = get_context_logger("tests.context", workflow_id="incident")

    with caplog.at_level(logging.INFO, logger="tests.context"):
        adapter.info("triaged", extra={"event": "triage"})

    record = caplog.records[-1]
    assert record.workflow_id == "incident"
    assert record.event == "triage"


def test_setup_logging_writes_rotating_files(tmp_path):
    root = logging.getLogger()
    previous_handlers, previous_level = list(root.handlers), root.level
    try:
        setup_logging("DEBUG", str(tmp_path))
        logging.getLogger("tests.files").error("hook failed")
        for handler in root.handlers:
            handler.flush()

        assert root.level == logging.DEBUG
        assert "hook failed" in (tmp_path / "workflow.log").read_text(encoding="utf-8")
        assert "hook failed" in (tmp_path / "error.log").read_text(encoding="utf-8")
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = previous_handlers
        root.setLevel(previous_level)
