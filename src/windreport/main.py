"""CLI interface for windreport.

Usage:
    windreport run reporter.yaml --deltas signalk.jsonl
    signalk-delta-stream | windreport run reporter.yaml --deltas -
    windreport validate reporter.yaml
    windreport init 1234 --api-key KEY -o reporter.yaml
    windreport paths reporter.yaml
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Annotated, TextIO

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from windreport.core.config import ReporterConfig, load_config, save_config
from windreport.core.events import Event, EventType, get_event_bus
from windreport.exceptions import ConfigurationError
from windreport.runtime import Reporter
from windreport.telemetry.delta import POLL_INTERVAL, PathResolver
from windreport.telemetry.source import JsonLinesDeltaSource

app = typer.Typer(
    name="windreport",
    help="Report vessel wind observations to the Windy.com station network.",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Send log records to the console through rich."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    root_logger.handlers.clear()
    root_logger.addHandler(RichHandler(console=console, show_path=False))

    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)


def _load_or_exit(config_path: Path) -> ReporterConfig:
    try:
        return load_config(config_path)
    except FileNotFoundError:
        console.print(f"[red]Error:[/] Config file not found: {config_path}")
        raise typer.Exit(1) from None
    except ConfigurationError as e:
        console.print(f"[red]Error:[/] Invalid configuration: {escape(str(e))}")
        raise typer.Exit(1) from None


@app.command()
def run(
    config_path: Annotated[Path, typer.Argument(help="Path to YAML configuration")],
    deltas: Annotated[
        str | None,
        typer.Option(
            "--deltas",
            "-d",
            help="File of newline-delimited Signal K deltas, or '-' for stdin",
        ),
    ] = None,
    follow: Annotated[
        bool,
        typer.Option("--follow", "-f", help="Keep reading as the file grows"),
    ] = False,
    replay_delay: Annotated[
        float,
        typer.Option("--replay-delay", help="Seconds to wait between delta lines"),
    ] = 0.0,
    flush: Annotated[
        bool,
        typer.Option("--flush", help="Submit once more when the input ends"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Run the reporter, feeding it telemetry deltas."""
    config = _load_or_exit(config_path)
    setup_logging(verbose)

    stream: TextIO | None = None
    if deltas is not None:
        if deltas == "-":
            stream = sys.stdin
        else:
            try:
                stream = Path(deltas).open()  # noqa: SIM115
            except OSError as e:
                console.print(f"[red]Error:[/] Cannot read deltas: {escape(str(e))}")
                raise typer.Exit(1) from None

    reporter = Reporter(config)

    def show_status(event: Event) -> None:
        console.print(f"[dim]{escape(event.message)}[/]")

    get_event_bus().subscribe(EventType.STATUS_UPDATE, show_status)

    source: JsonLinesDeltaSource | None = None
    if stream is not None:
        source = JsonLinesDeltaSource(
            stream,
            reporter.engine.apply,
            reporter.engine.paths,
            follow=follow,
            line_delay=replay_delay,
            idle_interval=POLL_INTERVAL,
        )

    try:
        asyncio.run(reporter.run(source, flush=flush))
    except KeyboardInterrupt:
        console.print("[yellow]Interrupted[/]")
    finally:
        if stream is not None and stream is not sys.stdin:
            stream.close()

    outcome = reporter.submitter.last_outcome
    if outcome is not None:
        console.print(f"Last submission: {outcome.value}")


@app.command()
def validate(
    config_path: Annotated[Path, typer.Argument(help="Path to YAML configuration")],
) -> None:
    """Validate a configuration file without running."""
    config = _load_or_exit(config_path)
    mode = "computed" if config.calculate_direction else "direct"
    console.print(f"[green]Valid:[/] station {config.station_id}")
    console.print(f"  Submit interval: {config.submit_interval:g} minutes")
    console.print(f"  Wind speed path: {config.wind_speed_path}")
    console.print(f"  Wind direction path: {config.wind_direction_path}")
    console.print(f"  Direction mode: {mode}")
    console.print(f"  Position source: {config.gps_source or 'any'}")


@app.command()
def init(
    station_id: Annotated[int, typer.Argument(help="Windy.com station id")],
    api_key: Annotated[
        str,
        typer.Option("--api-key", "-k", help="API key from stations.windy.com"),
    ] = "YOUR-API-KEY",
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Output file path"),
    ] = Path("windreport.yaml"),
) -> None:
    """Generate a starter YAML configuration file."""
    config = ReporterConfig(api_key=api_key, station_id=station_id)
    save_config(config, output)
    console.print(f"[green]Created:[/] {output}")
    console.print("\nEdit this file to set your station details, then run:")
    console.print(f"  windreport run {output} --deltas -")


@app.command()
def paths(
    config_path: Annotated[Path, typer.Argument(help="Path to YAML configuration")],
) -> None:
    """List the Signal K paths the reporter subscribes to."""
    config = _load_or_exit(config_path)
    reporter_paths = PathResolver.from_config(config)

    table = Table(title="Subscribed paths")
    table.add_column("Path", style="cyan")
    table.add_column("Kind")
    table.add_column("Period")
    for path in reporter_paths.subscription_paths():
        kind = reporter_paths.resolve(path)
        table.add_row(path, kind.value, f"{POLL_INTERVAL:g}s")
    console.print(table)


def main() -> int:
    """Application entry point.

    Returns:
        Exit code (0 for success).
    """
    try:
        app()
        return 0
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1


if __name__ == "__main__":
    sys.exit(main())
