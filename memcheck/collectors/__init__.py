"""memcheck.collectors package exports."""

from memcheck.collectors.base import CollectorOutcome, run_collector
from memcheck.collectors.memory import (
    InputUnreadable,
    MeminfoError,
    MemoryStats,
    MissingRequiredField,
    collect_memory,
    parse_meminfo,
    read_meminfo,
)

__all__ = [
    "CollectorOutcome",
    "InputUnreadable",
    "MeminfoError",
    "MemoryStats",
    "MissingRequiredField",
    "collect_memory",
    "parse_meminfo",
    "read_meminfo",
    "run_collector",
]
