"""
memcheck.main
------------
AUTHOR: carter-vin

Plugin entrypoint

Key contract:
- exactly one line on stdout, exit code = status (0 OK, 1 WARNING, 2 CRITICAL, 3 UNKNOWN)
- every failure path ends in an UNKNOWN line, never a traceback
- `check_available_memory -w 25: -c 10:` is the canonical invocation
"""

from __future__ import annotations

import signal
import sys
from pathlib import Path
from typing import Optional

import typer

from memcheck import PLUGIN_NAME, PLUGIN_VERSION
from memcheck.collectors.base import run_collector
from memcheck.collectors.memory import PROC_MEMINFO, collect_memory
from memcheck.estimate import estimate_available
from memcheck.evaluate import DEFAULT_CRITICAL, DEFAULT_WARNING, Status, check_threshold, parse_range
from memcheck.logging import debug_event
from memcheck.model import CheckResult, build_result_from_estimate, unknown_result

DEFAULT_TIMEOUT_S = 15
MEMINFO_ENV = "MEMCHECK_MEMINFO"

# typer may bundle its own click; take the usage error class it actually raises
USAGE_ERROR = next(cls for cls in typer.BadParameter.__mro__ if cls.__name__ == "UsageError")

app = typer.Typer(
    add_completion=False,
    help=f"{PLUGIN_NAME}: estimate available memory and alert on low thresholds",
)


class ProbeTimeout(RuntimeError):
    def __init__(self, timeout_s: int) -> None:
        super().__init__(f"plugin timed out after {timeout_s}s")
        self.timeout_s = timeout_s


# -----------------------------
# OPTION CALLBACKS
# -----------------------------
def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{PLUGIN_NAME} v{PLUGIN_VERSION}")
        raise typer.Exit()


def _validate_range(value: Optional[str]) -> Optional[str]:
    """
    Reject malformed ranges at parse time (usage error, not a check result)
    """
    try:
        parse_range(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    return value


# -----------------------------
# TIMEOUT
# -----------------------------
def _arm_timeout(timeout_s: int):
    """
    Arm SIGALRM and return the handler it replaced
    """
    # SIGALRM is POSIX only; without it we rely on the caller's own deadline
    if not hasattr(signal, "SIGALRM"):
        return None

    def _on_alarm(signum, frame) -> None:
        raise ProbeTimeout(timeout_s)

    previous = signal.signal(signal.SIGALRM, _on_alarm)
    signal.alarm(timeout_s)
    return previous


def _disarm_timeout(previous) -> None:
    if not hasattr(signal, "SIGALRM"):
        return
    signal.alarm(0)
    if previous is not None:
        signal.signal(signal.SIGALRM, previous)


# -----------------------------
# CHECK PIPELINE
# -----------------------------
def run_check(
    meminfo_path: Path,
    *,
    warning: Optional[str],
    critical: Optional[str],
    verbosity: int = 0,
) -> CheckResult:
    """
    Read -> parse -> estimate -> evaluate, failures reported as UNKNOWN
    """
    memory_out = run_collector("memory", collect_memory, meminfo_path, verbosity=verbosity)
    if not memory_out.ok:
        return unknown_result(memory_out.error_message)

    estimate_out = run_collector("estimate", estimate_available, memory_out.value, verbosity=verbosity)
    if not estimate_out.ok:
        return unknown_result(estimate_out.error_message)

    estimate = estimate_out.value
    status = check_threshold(estimate.percent_available, warning=warning, critical=critical)

    debug_event(
        verbosity,
        "threshold_evaluated",
        value=estimate.percent_available,
        warning=warning,
        critical=critical,
        status=status.name,
    )

    return build_result_from_estimate(
        estimate,
        status,
        warning=warning,
        critical=critical,
        verbosity=verbosity,
    )


# -----------------------------
# CLI COMMAND
# -----------------------------
@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def check(
    warning: str = typer.Option(
        DEFAULT_WARNING,
        "--warning",
        "-w",
        callback=_validate_range,
        help='Range, e.g. "25:" -> WARNING if less than 25% memory available.',
    ),
    critical: str = typer.Option(
        DEFAULT_CRITICAL,
        "--critical",
        "-c",
        callback=_validate_range,
        help='Range formatted as --warning -> CRITICAL, checked before WARNING.',
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        max=2,
        clamp=True,
        help="-v adds the estimation method, -vv also dumps diagnostics to stderr.",
    ),
    timeout: int = typer.Option(
        DEFAULT_TIMEOUT_S,
        "--timeout",
        "-t",
        min=1,
        help="Seconds before the plugin gives up with UNKNOWN.",
    ),
    meminfo: Path = typer.Option(
        PROC_MEMINFO,
        "--meminfo",
        envvar=MEMINFO_ENV,
        help="Memory statistics source in /proc/meminfo format.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Print plugin version and exit.",
    ),
) -> None:
    """
    Check available memory against warning/critical ranges
    """
    debug_event(
        verbose,
        "probe_start",
        meminfo=str(meminfo),
        warning=warning,
        critical=critical,
        timeout_s=timeout,
    )

    previous_handler = _arm_timeout(timeout)
    try:
        result = run_check(meminfo, warning=warning, critical=critical, verbosity=verbose)
    except Exception as e:
        # Last line of defense: the plugin contract beats a traceback
        debug_event(verbose, "probe_failed", error_type=type(e).__name__, message=str(e))
        result = unknown_result(str(e) or type(e).__name__)
    finally:
        _disarm_timeout(previous_handler)

    debug_event(verbose, "probe_exit", status=result.status.name)
    typer.echo(result.render())
    raise typer.Exit(code=int(result.status))


def main() -> None:
    """
    Console script entrypoint

    Usage errors exit UNKNOWN (3) instead of click's default 2
    """
    command = typer.main.get_command(app)
    try:
        code = command.main(prog_name=PLUGIN_NAME, standalone_mode=False)
    except USAGE_ERROR as e:
        typer.echo(f"{Status.UNKNOWN.name} - {e.format_message()}")
        sys.exit(int(Status.UNKNOWN))
    except typer.Abort:
        typer.echo(f"{Status.UNKNOWN.name} - aborted")
        sys.exit(int(Status.UNKNOWN))
    sys.exit(code or 0)


if __name__ == "__main__":
    main()
