from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from typer.models import OptionInfo

from .history import HistoryStore
from .sensors import temperature_icon
from .sparkline import render
from .thresholds import Level, classify

log = logging.getLogger(__name__)

CPU_HISTORY_ENV = "BARSTATS_CPU_HISTORY"
TEMPERATURE_HISTORY_ENV = "BARSTATS_TEMPERATURE_HISTORY"
DEFAULT_CPU_HISTORY = Path("/tmp/cpu_usage_history.json")
DEFAULT_TEMPERATURE_HISTORY = Path("/tmp/temperature_history.json")

DEFAULT_CPU_COUNT = 20
DEFAULT_TEMPERATURE_COUNT = 5

# Turns (value, sparkline) into the first output line.
LineFormatter = Callable[[float, str], str]


@dataclass
class MonitorResult:
    value: float
    history: list[float]
    sparkline: str
    level: Level
    lines: list[str] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        return self.level.exit_code


def resolve_history_path(
    history_path: Optional[Path | os.PathLike | str],
    *,
    env_var: str,
    default: Path,
) -> Path:
    if isinstance(history_path, OptionInfo):
        history_path = history_path.default

    if isinstance(history_path, (str, os.PathLike)):
        return Path(history_path)

    env = os.environ.get(env_var)
    if env:
        return Path(env).expanduser()
    return default


def format_cpu_line(value: float, spark: str) -> str:
    return f"{value:.1f}% {spark}"


def format_temperature_line(value: float, spark: str) -> str:
    return f"{temperature_icon(value)} {value:.1f}°C {spark}"


def run_monitor(
    value: float,
    store: HistoryStore,
    *,
    max_len: int,
    warning: float,
    critical: float,
    formatter: LineFormatter,
) -> MonitorResult:
    """Record ``value`` in the store and build the bar output for it."""
    history = store.append(value, max_len)
    spark = render(history)
    level = classify(value, warning, critical)
    log.debug(
        "value=%.2f level=%s history=%d/%d", value, level.value, len(history), max_len
    )

    lines = [formatter(value, spark)]
    if level.color:
        lines.append(level.color)
    return MonitorResult(
        value=value, history=history, sparkline=spark, level=level, lines=lines
    )
