from __future__ import annotations

import sys
from typing import Sequence

GLYPHS = "▁▂▃▄▅▆▇█"


def render(values: Sequence[float]) -> str:
    """Map each value onto one glyph, lowest to highest, keeping input order."""
    if not values:
        return ""

    # Work on halves so max - min cannot overflow for finite extremes.
    half_min = min(values) / 2
    half_span = max(values) / 2 - half_min
    if abs(half_span) < sys.float_info.epsilon / 2:
        half_span = 0.5
    scale = len(GLYPHS) - 1

    def to_glyph(val: float) -> str:
        scaled = (val / 2 - half_min) / half_span * scale
        if scaled != scaled:  # NaN
            return GLYPHS[0]
        idx = int(round(scaled))
        return GLYPHS[min(max(idx, 0), scale)]

    return "".join(to_glyph(v) for v in values)


def render_with_bounds(values: Sequence[float], fmt: str = ".1f") -> str:
    if not values:
        return ""
    return f"{min(values):{fmt}} {render(values)} {max(values):{fmt}}"
