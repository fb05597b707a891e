"""
Contract test for diagnostic event vocabulary and shape.

The logging surface must reject unknown event types to keep aggregation stable.
"""

import json

import pytest

from memcheck import PLUGIN_VERSION
from memcheck.logging import debug_event, emit_event


def test_emit_event_rejects_invalid_event_type() -> None:
    """
    Unknown event types must raise ValueError.
    """
    with pytest.raises(ValueError, match="invalid event_type"):
        emit_event("not_a_real_event")


def test_emit_event_writes_json_to_stderr(capsys) -> None:
    emit_event("probe_exit", status="OK")

    captured = capsys.readouterr()
    assert captured.out == ""

    payload = json.loads(captured.err.strip())
    assert payload["event_type"] == "probe_exit"
    assert payload["plugin_version"] == PLUGIN_VERSION
    assert "utc_now" in payload
    assert payload["status"] == "OK"


def test_long_messages_are_truncated(capsys) -> None:
    emit_event("probe_failed", message="x" * 500)

    payload = json.loads(capsys.readouterr().err.strip())
    assert payload["message"].startswith("x" * 200)
    assert payload["message"].endswith("[truncated 300 chars]")


def test_debug_event_gated_on_verbosity(capsys) -> None:
    debug_event(1, "probe_start")
    assert capsys.readouterr().err == ""

    debug_event(2, "probe_start")
    assert json.loads(capsys.readouterr().err)["event_type"] == "probe_start"
