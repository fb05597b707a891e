"""
memcheck.model
AUTHOR: carter-vin

Check result + plugin output line

Design goals:
- One line on stdout: "<STATUS> - <message>[ | <perfdata>]"
- Explicit structure (no string assembly scattered through the CLI)
- Percentages always rendered with one decimal
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from memcheck.estimate import AvailabilityEstimate
from memcheck.evaluate import Status

PERF_LABEL = "available_memory"


def format_percent(value: float) -> str:
    return f"{value:.1f}"


# Components
@dataclass(frozen=True)
class PerfData:
    """
    Performance data item, "label=value[uom];warn;crit;min;max"
    """

    label: str
    value: float
    uom: str = ""
    warning: str = ""
    critical: str = ""
    minimum: Optional[float] = None
    maximum: Optional[float] = None

    def to_string(self) -> str:
        def _bound(v: Optional[float]) -> str:
            if v is None:
                return ""
            return f"{v:g}"

        return (
            f"{self.label}={format_percent(self.value)}{self.uom}"
            f";{self.warning};{self.critical}"
            f";{_bound(self.minimum)};{_bound(self.maximum)}"
        )


@dataclass(frozen=True)
class CheckResult:
    """
    Final plugin result
    - status: exit code via int(status)
    - perfdata: omitted for UNKNOWN results
    """

    status: Status
    message: str
    perfdata: Optional[PerfData] = None

    def render(self) -> str:
        line = f"{self.status.name} - {self.message}"
        if self.perfdata is not None:
            line += f" | {self.perfdata.to_string()}"
        return line


def describe_estimate(estimate: AvailabilityEstimate, *, verbosity: int = 0) -> str:
    message = (
        f"{format_percent(estimate.percent_available)}% "
        f"({estimate.available_mb}MB) memory available"
    )
    if verbosity >= 1:
        message += f" (via {estimate.method})"
    return message


def build_result_from_estimate(
    estimate: AvailabilityEstimate,
    status: Status,
    *,
    warning: Optional[str],
    critical: Optional[str],
    verbosity: int = 0,
) -> CheckResult:
    """
    Assemble a CheckResult from the estimate and evaluated status
    """
    return CheckResult(
        status=status,
        message=describe_estimate(estimate, verbosity=verbosity),
        perfdata=PerfData(
            label=PERF_LABEL,
            value=estimate.percent_available,
            uom="%",
            warning=warning or "",
            critical=critical or "",
            minimum=0,
            maximum=100,
        ),
    )


def unknown_result(message: str) -> CheckResult:
    return CheckResult(status=Status.UNKNOWN, message=message)
