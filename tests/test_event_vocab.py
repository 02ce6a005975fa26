"""
Contract test for event vocabulary enforcement.

The logging surface must reject unknown event types to keep aggregation stable.
"""

import json

import pytest

from droplet_monitor.logging import emit_event


def test_emit_event_rejects_invalid_event_type() -> None:
    """
    Unknown event types must raise ValueError.
    """
    with pytest.raises(ValueError, match="invalid event_type"):
        emit_event("not_a_real_event", monitor_version="0.1.0")


def test_emit_event_writes_one_json_line_to_stderr(capsys) -> None:
    """
    Events never land on stdout, which belongs to the table
    """
    emit_event(
        "collector_failed",
        monitor_version="0.1.0",
        collector="cpu",
        message="x" * 500,
    )

    captured = capsys.readouterr()
    assert captured.out == ""

    payload = json.loads(captured.err.strip())
    assert payload["event_type"] == "collector_failed"
    assert payload["monitor_version"] == "0.1.0"
    assert "utc_now" in payload
    assert payload["message"].startswith("x" * 200 + "...[truncated 300 chars]")
