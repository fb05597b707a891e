"""
memcheck.collectors.memory
AUTHOR: carter-vin

Memory collector
- Linux-first via /proc/meminfo, any conforming text file works
- one read, one parse pass
- stdlib only
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Union

from memcheck.logging import debug_event


PROC_MEMINFO = Path("/proc/meminfo")

# "MemTotal:       32765636 kB"
MEMINFO_LINE = re.compile(r"^(\S+):\s+(\d+)\skB$")

# Checked in this order so the reported field is deterministic
REQUIRED_FIELDS = ("MemTotal", "MemFree", "Buffers", "Cached")
OPTIONAL_FIELDS = ("MemAvailable", "SReclaimable")
KNOWN_FIELDS = frozenset(OPTIONAL_FIELDS + REQUIRED_FIELDS)


class MeminfoError(RuntimeError):
    """Base for every failure that ends in an UNKNOWN status"""


class MissingRequiredField(MeminfoError):
    def __init__(self, field_name: str, source: str = str(PROC_MEMINFO)) -> None:
        super().__init__(f'unable to read field "{field_name}" from {source}')
        self.field_name = field_name
        self.source = source


class InputUnreadable(MeminfoError):
    def __init__(self, path: Union[str, Path], reason: str) -> None:
        super().__init__(f"unable to read {path}: {reason}")
        self.path = str(path)
        self.reason = reason


@dataclass(frozen=True, eq=False)
class MemoryStats(Mapping[str, int]):
    """
    Read-only snapshot of the recognised meminfo counters, values in kB
    """

    counters: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "counters", MappingProxyType(dict(self.counters)))

    def __getitem__(self, key: str) -> int:
        return self.counters[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.counters)

    def __len__(self) -> int:
        return len(self.counters)

    @property
    def mem_total_kb(self) -> int:
        return self.counters["MemTotal"]


def read_meminfo(path: Union[str, Path] = PROC_MEMINFO) -> list[str]:
    """
    Read the meminfo source once and return its lines

    Raises InputUnreadable on any IO or decoding failure
    """
    try:
        contents = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        reason = e.strerror if isinstance(e, OSError) and e.strerror else str(e)
        raise InputUnreadable(path, reason) from e
    return contents.splitlines()


def parse_meminfo(
    lines: Iterable[str],
    *,
    source: str = str(PROC_MEMINFO),
    verbosity: int = 0,
) -> MemoryStats:
    """
    Parse meminfo lines into MemoryStats

    Rules:
    - lines not shaped like "<Name>: <int> kB" are ignored
    - only KNOWN_FIELDS are kept
    - a repeated field overwrites the earlier value
    - required fields are checked after the whole input is consumed
    """
    values: dict[str, int] = {}
    for line in lines:
        match = MEMINFO_LINE.match(line.rstrip("\r\n"))
        if match is None:
            continue
        name, value = match.group(1), match.group(2)
        if name in KNOWN_FIELDS:
            values[name] = int(value)

    debug_event(verbosity, "meminfo_parsed", source=source, fields=dict(sorted(values.items())))

    for name in REQUIRED_FIELDS:
        if name not in values:
            raise MissingRequiredField(name, source)

    return MemoryStats(values)


def collect_memory(path: Union[str, Path] = PROC_MEMINFO, *, verbosity: int = 0) -> MemoryStats:
    """
    Read and parse one meminfo snapshot
    """
    lines = read_meminfo(path)
    return parse_meminfo(lines, source=str(path), verbosity=verbosity)
