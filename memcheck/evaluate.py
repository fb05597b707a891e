"""
memcheck.evaluate
AUTHOR: carter-vin

Threshold evaluation with the standard monitoring-plugin range syntax

Range forms:
- "N"    alert outside 0..N
- "N:"   alert below N
- "~:N"  alert above N
- "N:M"  alert outside N..M
- "@..." alert inside the range instead
- ""     no threshold
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

DEFAULT_WARNING = "25:"
DEFAULT_CRITICAL = "10:"

_NUMBER = r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)"
_RANGE = re.compile(rf"^(?P<inside>@)?(?:(?P<start>~|{_NUMBER})?(?P<colon>:))?(?P<end>{_NUMBER})?$")


class Status(IntEnum):
    """Plugin status; the value doubles as the process exit code"""

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3


@dataclass(frozen=True)
class ThresholdRange:
    """
    Parsed range
    - start/end: bounds, +-inf when open
    - inside: alert when the value falls inside instead of outside
    - text: range as given, echoed in performance data
    """

    start: float
    end: float
    inside: bool = False
    text: str = ""

    def check(self, value: float) -> bool:
        """
        True when value breaches the range
        """
        within = self.start <= value <= self.end
        return within if self.inside else not within


def parse_range(text: Optional[str]) -> Optional[ThresholdRange]:
    """
    Parse a range string

    Returns None for an empty string, raises ValueError for malformed ones
    """
    if text is None:
        return None
    raw = text.strip()
    if not raw:
        return None

    match = _RANGE.match(raw)
    if match is None or raw in ("@", ":", "@:"):
        raise ValueError(f"invalid threshold range: {text!r}")

    start_text = match.group("start")
    end_text = match.group("end")

    # Bare "N" and ":N" both start at zero
    if start_text is None:
        start = 0.0
    elif start_text == "~":
        start = -math.inf
    else:
        start = float(start_text)

    end = math.inf if end_text is None else float(end_text)

    if start > end:
        raise ValueError(f"invalid threshold range: {text!r} (start greater than end)")

    return ThresholdRange(start=start, end=end, inside=match.group("inside") is not None, text=raw)


def check_threshold(value: float, *, warning: Optional[str], critical: Optional[str]) -> Status:
    """
    Map a value to a Status; critical wins over warning
    """
    critical_range = parse_range(critical)
    if critical_range is not None and critical_range.check(value):
        return Status.CRITICAL

    warning_range = parse_range(warning)
    if warning_range is not None and warning_range.check(value):
        return Status.WARNING

    return Status.OK
