from __future__ import annotations

import json
import logging
import subprocess
from typing import Any, Callable, Optional

from .errors import SamplingError

log = logging.getLogger(__name__)

SENSORS_COMMAND = "sensors"

# Given an optional chip name, return the parsed `sensors -j` document.
SensorSource = Callable[[Optional[str]], Any]

ICON_BANDS = (
    (25.0, "\uf2cb"),  # thermometer-empty
    (35.0, "\uf2ca"),  # thermometer-quarter
    (65.0, "\uf2c9"),  # thermometer-half
    (75.0, "\uf2c8"),  # thermometer-three-quarters
)
ICON_HOT = "\uf2c7"  # thermometer-full


def run_sensors(chip: Optional[str] = None) -> Any:
    args = [SENSORS_COMMAND, "-j"]
    if chip:
        args.append(chip)
    try:
        proc = subprocess.run(args, capture_output=True, text=True, check=False)
    except OSError as exc:
        raise SamplingError(f"Cannot run `{SENSORS_COMMAND}`: {exc}") from exc
    if proc.returncode != 0:
        log.debug("sensors stderr: %s", proc.stderr.strip())
        raise SamplingError(f"Error when running `{SENSORS_COMMAND}`")
    try:
        return json.loads(proc.stdout)
    except ValueError as exc:
        raise SamplingError(f"Invalid JSON from `{SENSORS_COMMAND}`") from exc


def _is_temperature_key(key: str) -> bool:
    return key.startswith("temp") and key.endswith("_input")


def extract_temperatures(data: Any) -> list[float]:
    """Collect every ``temp*_input`` reading from a chip/feature/field tree."""
    temps: list[float] = []
    if not isinstance(data, dict):
        return temps
    for chip in data.values():
        if not isinstance(chip, dict):
            continue
        for feature in chip.values():
            if not isinstance(feature, dict):
                continue
            for key, value in feature.items():
                if not _is_temperature_key(key):
                    continue
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    log.debug("Non-numeric reading for %s: %r", key, value)
                    continue
                temps.append(float(value))
    return temps


def sample_temperature(
    chip: Optional[str] = None, *, source: SensorSource = run_sensors
) -> float:
    temps = extract_temperatures(source(chip))
    if not temps:
        raise SamplingError("No temperature sensor available")
    return sum(temps) / len(temps)


def temperature_icon(value: float) -> str:
    for upper, icon in ICON_BANDS:
        if value < upper:
            return icon
    return ICON_HOT
