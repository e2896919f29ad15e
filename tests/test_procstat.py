from pathlib import Path

import pytest

from barstats import procstat
from barstats.errors import SamplingError
from barstats.procstat import CpuTimes


def _write(path: Path, value: str) -> None:
    path.write_text(value)


def test_read_cpu_times(tmp_path: Path):
    stat = tmp_path / "stat"
    _write(stat, "cpu  10 20 30 40\n")

    times = procstat.read_cpu_times(stat)

    assert times == CpuTimes(total=100, idle=40)


def test_read_cpu_times_ignores_per_core_and_trailing_fields(tmp_path: Path):
    stat = tmp_path / "stat"
    _write(
        stat,
        "\n".join(
            [
                "cpu0 1 1 1 1 0 0 0",
                "cpu  100 5 50 845 12 0 3 0 0 0",
                "cpu1 2 2 2 2 0 0 0",
                "intr 12345",
            ]
        ),
    )

    times = procstat.read_cpu_times(stat)

    assert times == CpuTimes(total=1000, idle=845)


def test_read_cpu_times_empty_file(tmp_path: Path):
    stat = tmp_path / "stat"
    _write(stat, "")

    assert procstat.read_cpu_times(stat) is None


def test_read_cpu_times_missing_file(tmp_path: Path):
    assert procstat.read_cpu_times(tmp_path / "nope") is None


def test_short_cpu_line_is_a_read_failure():
    assert procstat.parse_cpu_line("cpu  10 20 30") is None


def test_unparsable_counter_uses_fallback():
    assert procstat.parse_cpu_line("cpu  10 x 30 40") == CpuTimes(total=80, idle=40)
    assert procstat.parse_cpu_line("cpu  10 x 30 40", fallback=5) == CpuTimes(
        total=85, idle=40
    )


def test_strict_fallback_rejects_line():
    assert procstat.parse_cpu_line("cpu  10 x 30 40", fallback=None) is None
    assert procstat.parse_cpu_line("cpu  10 -2 30 40", fallback=None) is None


def test_cpu_usage_from_deltas():
    before = CpuTimes(total=100, idle=40)
    after = CpuTimes(total=200, idle=80)

    assert procstat.cpu_usage(before, after) == 60.0


def test_cpu_usage_zero_delta_is_zero():
    times = CpuTimes(total=100, idle=40)

    assert procstat.cpu_usage(times, times) == 0.0


def test_sample_cpu_usage_sleeps_between_snapshots(tmp_path: Path):
    stat = tmp_path / "stat"
    _write(stat, "cpu  10 20 30 40\n")
    delays = []

    def fake_sleep(seconds: float) -> None:
        delays.append(seconds)
        _write(stat, "cpu  40 30 50 80\n")  # +100 total, +40 idle

    usage = procstat.sample_cpu_usage(stat, sleep=fake_sleep)

    assert delays == [procstat.DEFAULT_DELAY_SECONDS]
    assert usage == 60.0


def test_sample_cpu_usage_raises_on_unreadable_counters(tmp_path: Path):
    with pytest.raises(SamplingError):
        procstat.sample_cpu_usage(tmp_path / "nope", sleep=lambda _: None)


def test_sample_cpu_usage_raises_when_second_snapshot_fails(tmp_path: Path):
    stat = tmp_path / "stat"
    _write(stat, "cpu  10 20 30 40\n")

    def truncate(_: float) -> None:
        _write(stat, "cpu  10 20\n")

    with pytest.raises(SamplingError):
        procstat.sample_cpu_usage(stat, sleep=truncate)


def test_read_cpu_times_invalid_utf8_is_a_read_failure(tmp_path: Path):
    stat = tmp_path / "stat"
    stat.write_bytes(b"cpu  10 20 30 40 \xff\xfe\n")

    assert procstat.read_cpu_times(stat) is None
    with pytest.raises(SamplingError):
        procstat.sample_cpu_usage(stat, sleep=lambda _: None)
