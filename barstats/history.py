from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Iterable, Sequence

log = logging.getLogger(__name__)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_max_len(max_len: int) -> None:
    if max_len < 1:
        raise ValueError("max_len must be at least 1")


def trim_history(values: Iterable[float], max_len: int) -> list[float]:
    """Keep the newest ``max_len`` values, oldest first."""
    _check_max_len(max_len)
    history = list(values)
    if len(history) > max_len:
        del history[: len(history) - max_len]
    return history


class HistoryStore:
    """Best-effort JSON persistence for one metric's rolling history.

    Reads never fail: a missing, unreadable or malformed file is an empty
    history. Writes replace the whole file and swallow I/O errors, so a run
    still prints its status line when the history cannot be stored.
    """

    def __init__(self, path: Path | os.PathLike | str) -> None:
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"HistoryStore({str(self.path)!r})"

    def load(self) -> list[float]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except (OSError, UnicodeDecodeError) as exc:
            log.debug("Cannot read history %s: %s", self.path, exc)
            return []

        try:
            data = json.loads(raw)
        except (ValueError, RecursionError):
            log.debug("Discarding malformed history in %s", self.path)
            return []

        if not isinstance(data, list) or not all(_is_number(v) for v in data):
            log.debug("Discarding non-numeric history in %s", self.path)
            return []
        try:
            return [float(v) for v in data]
        except OverflowError:
            log.debug("Discarding out-of-range history in %s", self.path)
            return []

    def save(self, values: Sequence[float]) -> None:
        payload = json.dumps([float(v) for v in values], separators=(",", ":"))
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            log.debug("Cannot write history %s: %s", self.path, exc)

    def append(self, value: float, max_len: int) -> list[float]:
        """Load, append ``value``, trim to ``max_len`` and save in one step."""
        _check_max_len(max_len)
        history = self.load()
        history.append(float(value))
        history = trim_history(history, max_len)
        self.save(history)
        return history
