from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

log = logging.getLogger(__name__)


def render_history_plot(
    values: Sequence[float],
    *,
    title: str,
    unit: str,
    output: Path,
    warning: Optional[float] = None,
    critical: Optional[float] = None,
) -> None:
    import matplotlib

    # File output only; the Agg backend avoids pulling in a GUI toolkit.
    matplotlib.use("Agg", force=True)

    import matplotlib.pyplot as plt

    values = list(values)
    if not values:
        log.warning("No samples to plot")
        return

    fig, ax = plt.subplots()
    ax.plot(range(1, len(values) + 1), values, "-o", color="tab:blue")
    if warning is not None:
        ax.axhline(warning, linestyle="--", color="#FFFC00", label="Warning")
    if critical is not None:
        ax.axhline(critical, linestyle="--", color="#FF0000", label="Critical")

    ax.set_title(title)
    ax.set_xlabel("Sample (oldest first)")
    ax.set_ylabel(unit)
    if warning is not None or critical is not None:
        ax.legend()
    ax.grid(True, alpha=0.3)
    fig.tight_layout()

    output.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output)
    plt.close(fig)
    log.info("Saved graph to %s", output)
