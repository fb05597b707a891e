"""
Contract tests for the plugin output line

Monitoring servers parse this line; the shape must stay stable.
"""

from memcheck.estimate import METHOD_WITH_SRECLAIMABLE, AvailabilityEstimate
from memcheck.evaluate import Status
from memcheck.model import build_result_from_estimate, unknown_result

ESTIMATE = AvailabilityEstimate(
    available_kb=1600,
    method=METHOD_WITH_SRECLAIMABLE,
    percent_available=16.0,
    total_kb=10000,
)


def test_output_line_with_perfdata() -> None:
    result = build_result_from_estimate(ESTIMATE, Status.WARNING, warning="25:", critical="10:")

    assert result.render() == (
        "WARNING - 16.0% (1MB) memory available"
        " | available_memory=16.0%;25:;10:;0;100"
    )


def test_verbose_appends_method() -> None:
    result = build_result_from_estimate(
        ESTIMATE, Status.WARNING, warning="25:", critical="10:", verbosity=1
    )

    assert result.message.endswith(" (via MemFree+Buffers+Cached+SReclaimable)")
    assert " | available_memory=" in result.render()


def test_unknown_result_has_no_perfdata() -> None:
    result = unknown_result('unable to read field "MemFree" from /proc/meminfo')

    assert result.status is Status.UNKNOWN
    assert result.render() == 'UNKNOWN - unable to read field "MemFree" from /proc/meminfo'


def test_empty_thresholds_leave_perfdata_slots_blank() -> None:
    result = build_result_from_estimate(ESTIMATE, Status.OK, warning=None, critical="")

    assert result.render().endswith("available_memory=16.0%;;;0;100")
