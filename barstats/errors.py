from __future__ import annotations


class SamplingError(RuntimeError):
    """Raised when a metric cannot be sampled for the current run."""
