"""
memcheck.collectors.base
AUTHOR: carter-vin

Failure-as-data wrapper for the check pipeline
- parser/estimator raise MeminfoError subclasses
- run_collector turns them into a CollectorOutcome
- the CLI command inspects the outcome once and reports UNKNOWN
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Optional

from memcheck.logging import debug_event


@dataclass(frozen=True)
class CollectorOutcome:
    """
    Normalized step result
    - ok: false=failure, error details in error fields
    - value: step result object if ok=true
    """

    name: str
    ok: bool
    value: Optional[Any] = None
    error_type: Optional[str] = None
    error_message: Optional[str] = None


def run_collector(name: str, fn: Callable[..., Any], *args, verbosity: int = 0, **kwargs) -> CollectorOutcome:
    """
    Run one pipeline step & capture failure as data

    verbosity is forwarded to the step, which uses it for its own diagnostics
    """
    try:
        value = fn(*args, verbosity=verbosity, **kwargs)
    except Exception as e:
        # Exceptions with an empty message still need readable plugin output
        message = str(e) or type(e).__name__
        debug_event(
            verbosity,
            "probe_failed",
            step=name,
            error_type=type(e).__name__,
            message=message,
        )
        return CollectorOutcome(
            name=name,
            ok=False,
            error_type=type(e).__name__,
            error_message=message,
        )
    return CollectorOutcome(name=name, ok=True, value=value)
