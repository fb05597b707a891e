"""
memcheck.estimate
AUTHOR: carter-vin

Available memory estimation from a MemoryStats snapshot

Preference order (first match wins):
1) MemAvailable, the kernel's own estimate
2) MemFree + Buffers + Cached + SReclaimable
3) MemFree + Buffers + Cached
"""

from __future__ import annotations

from dataclasses import dataclass

from memcheck.collectors.memory import MeminfoError, MemoryStats
from memcheck.logging import debug_event

METHOD_MEMAVAILABLE = "MemAvailable"
METHOD_WITH_SRECLAIMABLE = "MemFree+Buffers+Cached+SReclaimable"
METHOD_CLASSIC = "MemFree+Buffers+Cached"

VALID_METHODS = {METHOD_MEMAVAILABLE, METHOD_WITH_SRECLAIMABLE, METHOD_CLASSIC}


class InvalidTotal(MeminfoError):
    def __init__(self, total_kb: int) -> None:
        super().__init__(f"invalid MemTotal value: {total_kb} kB")
        self.total_kb = total_kb


@dataclass(frozen=True)
class AvailabilityEstimate:
    """
    Estimated available memory
    - method: which formula produced available_kb (diagnostics only)
    - percent_available: truncated to one decimal place
    """

    available_kb: int
    method: str
    percent_available: float
    total_kb: int

    @property
    def available_mb(self) -> int:
        return self.available_kb // 1024


def truncated_percent(part: int, total: int) -> float:
    """
    part/total as a percentage, truncated (not rounded) to one decimal

    Capped at 100.0 for counters that overshoot the total
    """
    # Integer floor keeps 24.96 at 24.9
    tenths = min((part * 1000) // total, 1000)
    return tenths / 10


def estimate_available(stats: MemoryStats, *, verbosity: int = 0) -> AvailabilityEstimate:
    """
    Compute the AvailabilityEstimate for a parsed snapshot

    Raises InvalidTotal when MemTotal is zero
    """
    total_kb = stats["MemTotal"]
    if total_kb <= 0:
        raise InvalidTotal(total_kb)

    if "MemAvailable" in stats:
        available_kb = stats["MemAvailable"]
        method = METHOD_MEMAVAILABLE
    elif "SReclaimable" in stats:
        available_kb = stats["MemFree"] + stats["Buffers"] + stats["Cached"] + stats["SReclaimable"]
        method = METHOD_WITH_SRECLAIMABLE
    else:
        available_kb = stats["MemFree"] + stats["Buffers"] + stats["Cached"]
        method = METHOD_CLASSIC

    estimate = AvailabilityEstimate(
        available_kb=available_kb,
        method=method,
        percent_available=truncated_percent(available_kb, total_kb),
        total_kb=total_kb,
    )

    debug_event(
        verbosity,
        "estimate_computed",
        total_kb=total_kb,
        available_kb=available_kb,
        method=method,
        percent_available=estimate.percent_available,
    )
    return estimate
