from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from .errors import SamplingError
from .history import HistoryStore
from .monitor import (
    CPU_HISTORY_ENV,
    DEFAULT_CPU_COUNT,
    DEFAULT_CPU_HISTORY,
    DEFAULT_TEMPERATURE_COUNT,
    DEFAULT_TEMPERATURE_HISTORY,
    TEMPERATURE_HISTORY_ENV,
    MonitorResult,
    format_cpu_line,
    format_temperature_line,
    resolve_history_path,
    run_monitor,
)
from .procstat import PROC_STAT_PATH, sample_cpu_usage
from .sensors import sample_temperature
from .sparkline import render_with_bounds

app = typer.Typer(
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()
err_console = Console(stderr=True)


class Metric(str, Enum):
    cpu = "cpu"
    temperature = "temperature"


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO, format="%(message)s"
    )


def _fail(exc: Exception) -> typer.Exit:
    err_console.print(str(exc), style="red", markup=False, highlight=False)
    return typer.Exit(code=1)


def _emit(result: MonitorResult) -> None:
    # The bar host reads plain lines from stdout; keep Rich out of it.
    for line in result.lines:
        typer.echo(line)
    raise typer.Exit(code=result.exit_code)


@app.command("cpu")
def cpu_command(
    warning: float = typer.Option(
        70.0, "--warning", "-w", help="Warning threshold in percent"
    ),
    critical: float = typer.Option(
        90.0, "--critical", "-c", help="Critical threshold in percent"
    ),
    count: int = typer.Option(
        DEFAULT_CPU_COUNT, "--count", "-n", min=1, help="Sparkline length"
    ),
    history_path: Optional[Path] = typer.Option(
        None, help=f"History file (or set {CPU_HISTORY_ENV})"
    ),
    stat_path: Path = typer.Option(
        PROC_STAT_PATH, "--stat-path", help="Kernel CPU counters file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """CPU usage from /proc/stat with a history sparkline."""
    configure_logging(verbose)
    try:
        usage = sample_cpu_usage(stat_path)
    except SamplingError as exc:
        raise _fail(exc)

    store = HistoryStore(
        resolve_history_path(
            history_path, env_var=CPU_HISTORY_ENV, default=DEFAULT_CPU_HISTORY
        )
    )
    result = run_monitor(
        usage,
        store,
        max_len=count,
        warning=warning,
        critical=critical,
        formatter=format_cpu_line,
    )
    _emit(result)


@app.command("temperature")
def temperature_command(
    warning: float = typer.Option(70.0, "--warning", "-w", help="Warning threshold"),
    critical: float = typer.Option(
        90.0, "--critical", "-c", help="Critical threshold"
    ),
    count: int = typer.Option(
        DEFAULT_TEMPERATURE_COUNT, "--count", "-n", min=1, help="Sparkline length"
    ),
    chip: Optional[str] = typer.Option(None, "--chip", help="Sensor chip"),
    history_path: Optional[Path] = typer.Option(
        None, help=f"History file (or set {TEMPERATURE_HISTORY_ENV})"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Average `sensors` temperature with a history sparkline."""
    configure_logging(verbose)
    try:
        avg = sample_temperature(chip)
    except SamplingError as exc:
        raise _fail(exc)

    store = HistoryStore(
        resolve_history_path(
            history_path,
            env_var=TEMPERATURE_HISTORY_ENV,
            default=DEFAULT_TEMPERATURE_HISTORY,
        )
    )
    result = run_monitor(
        avg,
        store,
        max_len=count,
        warning=warning,
        critical=critical,
        formatter=format_temperature_line,
    )
    _emit(result)


def _history_store(metric: Metric, history_path: Optional[Path]) -> HistoryStore:
    if metric is Metric.cpu:
        env_var, default = CPU_HISTORY_ENV, DEFAULT_CPU_HISTORY
    else:
        env_var, default = TEMPERATURE_HISTORY_ENV, DEFAULT_TEMPERATURE_HISTORY
    return HistoryStore(
        resolve_history_path(history_path, env_var=env_var, default=default)
    )


def _format_value(metric: Metric, value: float) -> str:
    if metric is Metric.cpu:
        return f"{value:.1f}%"
    return f"{value:.1f}°C"


def _history_table(metric: Metric, values: list[float]) -> Table:
    table = Table(
        title=f"{metric.value.title()} history",
        show_lines=False,
        box=box.SIMPLE,
        header_style="bold",
    )
    table.add_column("#", justify="right")
    table.add_column("Value", justify="right")
    for index, value in enumerate(values, start=1):
        table.add_row(str(index), _format_value(metric, value))
    return table


def _summary_table(metric: Metric, store: HistoryStore, values: list[float]) -> Table:
    summary = Table(
        title="Summary",
        show_lines=False,
        box=box.SIMPLE,
        header_style="bold",
    )
    summary.add_column("Field")
    summary.add_column("Value")
    summary.add_row("File", str(store.path))
    summary.add_row("Samples", str(len(values)))
    summary.add_row("Min", _format_value(metric, min(values)))
    summary.add_row("Avg", _format_value(metric, sum(values) / len(values)))
    summary.add_row("Max", _format_value(metric, max(values)))
    summary.add_row("Latest", _format_value(metric, values[-1]))
    summary.add_row("Trend", render_with_bounds(values))
    return summary


@app.command("history")
def history_command(
    metric: Metric = typer.Argument(..., help="Which monitor's history to show"),
    history_path: Optional[Path] = typer.Option(
        None, help="History file (defaults to the monitor's file)"
    ),
    graph_path: Optional[Path] = typer.Option(
        None, "--graph-path", help="Save a graph image of the history (png/pdf/etc)"
    ),
    warning: Optional[float] = typer.Option(
        None, "--warning", "-w", help="Warning line drawn on the graph"
    ),
    critical: Optional[float] = typer.Option(
        None, "--critical", "-c", help="Critical line drawn on the graph"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Show the stored history of a monitor."""
    configure_logging(verbose)
    store = _history_store(metric, history_path)
    values = store.load()
    if not values:
        console.print(f"No samples stored in {store.path}; run `{metric.value}` first.")
        raise typer.Exit(code=1)

    if graph_path:
        # Import matplotlib lazily only when we actually render a graph.
        from .graph import render_history_plot

        render_history_plot(
            values,
            title=f"{metric.value.title()} history",
            unit="%" if metric is Metric.cpu else "°C",
            output=graph_path,
            warning=warning,
            critical=critical,
        )

    console.print(_summary_table(metric, store, values))
    console.print(_history_table(metric, values))


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()


def main_cpu() -> None:  # pragma: no cover - thin Typer wrapper
    typer.run(cpu_command)


def main_temperature() -> None:  # pragma: no cover - thin Typer wrapper
    typer.run(temperature_command)
