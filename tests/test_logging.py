"""JSON logging formatter tests."""

from __future__ import annotations

import json
import logging
import sys

from hmac_gate.logging import REDACTED, JsonFormatter, clear_request_id, redact, set_request_id


def _record(msg: str = "ok", exc_info=None, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test",
        level=logging.ERROR if exc_info else logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_exc_info_present_for_exception_records() -> None:
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record("failed", exc_info=sys.exc_info())

    payload = json.loads(JsonFormatter().format(record))
    assert "exc_info" in payload
    assert "ValueError: boom" in payload["exc_info"]


def test_exc_info_absent_for_info_records() -> None:
    payload = json.loads(JsonFormatter().format(_record()))
    assert "exc_info" not in payload


def test_event_and_request_id_are_included() -> None:
    token = set_request_id("req-1")
    try:
        payload = json.loads(JsonFormatter().format(_record(event="signature_rejected", context={"path": "/x"})))
    finally:
        clear_request_id(token)
    assert payload["request_id"] == "req-1"
    assert payload["event"] == "signature_rejected"
    assert payload["context"] == {"path": "/x"}


def test_signature_material_is_redacted() -> None:
    context = {"header": "x-sig", "Signature": "abc", "nested": {"secret": "k", "path": "/"}}
    payload = json.loads(JsonFormatter().format(_record(context=context)))
    assert payload["context"] == {
        "header": "x-sig",
        "Signature": REDACTED,
        "nested": {"secret": REDACTED, "path": "/"},
    }


def test_redact_leaves_non_mappings_alone() -> None:
    assert redact(["secret"]) == ["secret"]
    assert redact("secret") == "secret"
