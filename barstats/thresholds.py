from __future__ import annotations

from enum import Enum
from typing import Optional

COLOR_WARNING = "#FFFC00"
COLOR_CRITICAL = "#FF0000"
# i3blocks treats exit code 33 as "urgent".
EXIT_CRITICAL = 33


class Level(Enum):
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def color(self) -> Optional[str]:
        if self is Level.CRITICAL:
            return COLOR_CRITICAL
        if self is Level.WARNING:
            return COLOR_WARNING
        return None

    @property
    def exit_code(self) -> int:
        return EXIT_CRITICAL if self is Level.CRITICAL else 0


def classify(value: float, warning: float, critical: float) -> Level:
    """Critical wins over warning; thresholds are inclusive."""
    if value >= critical:
        return Level.CRITICAL
    if value >= warning:
        return Level.WARNING
    return Level.NORMAL
