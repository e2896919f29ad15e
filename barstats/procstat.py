from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from .errors import SamplingError

log = logging.getLogger(__name__)

PROC_STAT_PATH = Path("/proc/stat")
DEFAULT_DELAY_SECONDS = 0.1


@dataclass(frozen=True)
class CpuTimes:
    total: int
    idle: int


def _parse_counter(raw: str, fallback: Optional[int]) -> Optional[int]:
    try:
        value = int(raw)
    except ValueError:
        log.debug("Non-numeric CPU counter: %s", raw)
        return fallback
    if value < 0:
        log.debug("Negative CPU counter: %s", raw)
        return fallback
    return value


def parse_cpu_line(line: str, *, fallback: Optional[int] = 0) -> Optional[CpuTimes]:
    """Parse the aggregate ``cpu`` line of /proc/stat.

    Only user, nice, system and idle are summed; trailing fields are ignored.
    Returns None when the line has fewer than four counters. A counter that
    does not parse is replaced by ``fallback``; pass ``fallback=None`` to
    reject the whole line instead.
    """
    fields = line.split()
    if len(fields) < 5 or fields[0] != "cpu":
        return None

    counters = []
    for raw in fields[1:5]:
        value = _parse_counter(raw, fallback)
        if value is None:
            return None
        counters.append(value)

    user, nice, system, idle = counters
    return CpuTimes(total=user + nice + system + idle, idle=idle)


def read_cpu_times(
    path: Path = PROC_STAT_PATH, *, fallback: Optional[int] = 0
) -> Optional[CpuTimes]:
    try:
        lines = Path(path).read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        log.debug("Cannot read %s: %s", path, exc)
        return None
    for line in lines:
        if line.startswith("cpu "):
            return parse_cpu_line(line, fallback=fallback)
    return None


def cpu_usage(before: CpuTimes, after: CpuTimes) -> float:
    delta_total = after.total - before.total
    delta_idle = after.idle - before.idle
    if delta_total <= 0:
        return 0.0
    return 100.0 * (delta_total - delta_idle) / delta_total


def sample_cpu_usage(
    path: Path = PROC_STAT_PATH,
    *,
    delay: float = DEFAULT_DELAY_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
    fallback: Optional[int] = 0,
) -> float:
    """Take two snapshots ``delay`` seconds apart and return the busy percentage."""
    before = read_cpu_times(path, fallback=fallback)
    if before is None:
        raise SamplingError(f"Cannot read CPU counters from {path}")
    sleep(delay)
    after = read_cpu_times(path, fallback=fallback)
    if after is None:
        raise SamplingError(f"Cannot read CPU counters from {path}")
    return cpu_usage(before, after)
