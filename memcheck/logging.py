"""
memcheck.logging
AUTHOR: carter-vin

Structured JSON diagnostic events

Contract:
- One JSON object per line to stderr (stdout belongs to the status line)
- Stable event vocabulary (allowlist)
- UTC timestamps only
- Only emitted at verbosity >= DEBUG_VERBOSITY
"""

from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from typing import Any

from memcheck import PLUGIN_VERSION

DEBUG_VERBOSITY = 2

# Event types
VALID_EVENT_TYPES = {
    "probe_start",
    "meminfo_parsed",
    "estimate_computed",
    "threshold_evaluated",
    "probe_failed",
    "probe_exit",
}


def _truncate_message(value: str, *, limit: int = 200) -> str:
    """
    Cap message length to keep events compact
    """
    if len(value) <= limit:
        return value
    return value[:limit] + f"...[truncated {len(value) - limit} chars]"


# Time: current in UTC ISO 8601
def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def emit_event(event_type: str, *, plugin_version: str = PLUGIN_VERSION, **fields: Any) -> None:
    """
    Emit structured event line to stderr

    Rules:
    - event_type in VALID_EVENT_TYPES
    - event_type, plugin_version, timestamp always present
    - sort_keys + compact separators for format
    """
    if event_type not in VALID_EVENT_TYPES:
        raise ValueError(f"invalid event_type: {event_type}")

    if "message" in fields and isinstance(fields["message"], str):
        fields["message"] = _truncate_message(fields["message"])

    payload: dict[str, Any] = {
        "event_type": event_type,
        "utc_now": utc_now_iso(),
        "plugin_version": plugin_version,
        **fields,
    }

    print(
        json.dumps(
            payload,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
        ),
        file=sys.stderr,
    )


def debug_event(verbosity: int, event_type: str, **fields: Any) -> None:
    """
    Emit event only when running very verbose (-vv)
    """
    if verbosity >= DEBUG_VERBOSITY:
        emit_event(event_type, **fields)
