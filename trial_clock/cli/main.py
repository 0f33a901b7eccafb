"""Trial Clock CLI - Mock Trial Timer."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..config import get_settings
from ..exceptions import ConfigError, ExportError, ReplayError
from ..models import BudgetKey, PhaseKind, TrialConfig
from ..utils.logging import setup_logging
from ..utils.timefmt import format_time, minutes_to_seconds

app = typer.Typer(
    name="trial-clock",
    help="Mock trial timer with shared examination budgets.",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def callback(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level", "-l",
        help="Log level (DEBUG, INFO, WARNING, ERROR)",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also write logs to this file",
    ),
):
    """Mock trial timer with shared examination budgets."""
    settings = get_settings()
    if log_level:
        settings.log_level = log_level
    if log_file:
        settings.log_file = log_file


def _resolve_config(
    config_file: Optional[Path],
    witnesses: Optional[int],
    opening: Optional[int],
    directs: Optional[int],
    crosses: Optional[int],
    closing: Optional[int],
    rebuttal: Optional[int],
) -> Optional[TrialConfig]:
    """Build a config from --config or the simple-mode flags (minutes).

    Returns None when neither was given.
    """
    if config_file is not None:
        if not config_file.exists():
            console.print(f"[red]Error: Config file not found: {config_file}[/red]")
            raise typer.Exit(1)
        try:
            return TrialConfig.load(config_file)
        except ConfigError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1)

    flags = (witnesses, opening, directs, crosses, closing, rebuttal)
    if all(flag is None for flag in flags):
        return None

    default = TrialConfig()
    return TrialConfig.simple(
        opening=minutes_to_seconds(opening) if opening is not None else default.plaintiff_opening,
        directs=minutes_to_seconds(directs) if directs is not None else default.plaintiff_direct_budget,
        crosses=minutes_to_seconds(crosses) if crosses is not None else default.plaintiff_cross_budget,
        closing=minutes_to_seconds(closing) if closing is not None else default.plaintiff_closing,
        rebuttal=minutes_to_seconds(rebuttal) if rebuttal is not None else default.max_rebuttal,
        witnesses=witnesses if witnesses is not None else default.plaintiff_witnesses,
    )


def _default_config() -> TrialConfig:
    """Config from TRIAL_CLOCK_CONFIG, falling back to the built-in defaults."""
    settings = get_settings()
    if settings.config_file is not None:
        try:
            return TrialConfig.load(settings.config_file)
        except ConfigError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1)
    return settings.trial


# Shared simple-mode options
WITNESSES = typer.Option(None, "--witnesses", "-w", help="Witnesses per side")
OPENING = typer.Option(None, "--opening", help="Opening minutes per side")
DIRECTS = typer.Option(None, "--directs", help="Direct examination minutes per side")
CROSSES = typer.Option(None, "--crosses", help="Cross examination minutes per side")
CLOSING = typer.Option(None, "--closing", help="Closing minutes per side")
REBUTTAL = typer.Option(None, "--rebuttal", help="Maximum rebuttal minutes")
CONFIG = typer.Option(None, "--config", "-c", help="Trial config YAML file")


@app.command()
def run(
    config_file: Optional[Path] = CONFIG,
    witnesses: Optional[int] = WITNESSES,
    opening: Optional[int] = OPENING,
    directs: Optional[int] = DIRECTS,
    crosses: Optional[int] = CROSSES,
    closing: Optional[int] = CLOSING,
    rebuttal: Optional[int] = REBUTTAL,
    advanced: bool = typer.Option(
        False,
        "--advanced",
        help="Open the settings screen in advanced (per-side) mode",
    ),
    show_totals: bool = typer.Option(
        False,
        "--show-totals",
        help="Show per-side total time on the timer",
    ),
):
    """
    Launch the interactive trial timer.

    Starts on the settings screen, pre-filled from --config, the
    simple-mode flags, or TRIAL_CLOCK_CONFIG.
    """
    from ..tui import run_tui

    settings = get_settings()
    config = _resolve_config(config_file, witnesses, opening, directs, crosses, closing, rebuttal)
    settings.trial = config or _default_config()
    if advanced:
        settings.display.simple_mode = False
    if show_totals:
        settings.display.show_side_totals = True

    # The TUI owns the terminal; only log to a file
    if settings.log_file:
        setup_logging(settings.log_level, settings.log_file, rich_output=False)

    run_tui(settings.trial, settings)


@app.command()
def timeline(
    config_file: Optional[Path] = CONFIG,
    witnesses: Optional[int] = WITNESSES,
    opening: Optional[int] = OPENING,
    directs: Optional[int] = DIRECTS,
    crosses: Optional[int] = CROSSES,
    closing: Optional[int] = CLOSING,
    rebuttal: Optional[int] = REBUTTAL,
):
    """
    Print the segment timeline generated for a config.
    """
    from ..engine import generate

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)

    config = _resolve_config(config_file, witnesses, opening, directs, crosses, closing, rebuttal)
    config = config or _default_config()
    segments = generate(config)

    table = Table(title=f"Trial Timeline ({len(segments)} segments)")
    table.add_column("ID", justify="right")
    table.add_column("Phase", style="cyan")
    table.add_column("Side")
    table.add_column("Allotted", justify="right")

    for segment in segments:
        if segment.is_end:
            allotted = "-"
        elif segment.duration is None:
            allotted = f"<= {format_time(config.max_rebuttal)}" if segment.kind == PhaseKind.REBUTTAL else "budget"
        else:
            allotted = format_time(segment.duration)
        label = f"[dim]{segment.label}[/dim]" if segment.conditional else segment.label
        table.add_row(str(segment.id), label, segment.side.abbreviation or "-", allotted)

    console.print(table)

    budgets = Table(title="Shared Budgets")
    budgets.add_column("Budget", style="cyan")
    budgets.add_column("Total", justify="right")
    for key in BudgetKey:
        budgets.add_row(key.display_name, format_time(config.budget_total(key)))
    console.print(budgets)


def _print_summary(summary) -> None:
    """Print a run summary as Rich tables."""
    if summary.ended:
        console.print("[bold]Trial ended.[/bold]")
    elif summary.active_label:
        console.print(f"[bold]Current phase:[/bold] {summary.active_label}")

    for side in summary.sides:
        table = Table(title=f"{side.title} (total {format_time(side.total)})")
        table.add_column("Phase", style="cyan")
        table.add_column("Elapsed", justify="right")
        for row in side.segments:
            marker = " *" if row.active else ""
            table.add_row(row.label, f"{row.formatted}{marker}")
        if not side.segments:
            table.add_row("[dim]No time recorded[/dim]", "")

        table.add_section()
        for allotment in side.allotments:
            value = allotment.formatted
            if allotment.over:
                value = f"[red]{value}[/red]"
            table.add_row(allotment.label, value)

        console.print(table)


@app.command()
def replay(
    script: Path = typer.Argument(..., help="YAML file of scripted events"),
    config_file: Optional[Path] = CONFIG,
    pdf: Optional[Path] = typer.Option(
        None,
        "--pdf",
        help="Export the summary as PDF",
    ),
    text: Optional[Path] = typer.Option(
        None,
        "--text",
        help="Export the summary as plain text",
    ),
):
    """
    Drive a trial from a scripted list of events and print the summary.

    Events: start, pause, tick: N, run: N, next, prev, redirect: yes|no,
    recross: yes|no, jump: ID, reset, edit: {kind, segment_id, budget, seconds}.
    """
    from ..engine import TrialNavigator
    from ..replay import load_script, replay as replay_events
    from ..reports import build_summary, generate_summary_pdf, write_summary_text

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)

    if not script.exists():
        console.print(f"[red]Error: File not found: {script}[/red]")
        raise typer.Exit(1)

    try:
        script_config, events = load_script(script)
    except (ConfigError, ReplayError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    config = _resolve_config(config_file, None, None, None, None, None, None)
    config = config or script_config or _default_config()

    navigator = TrialNavigator(config)
    try:
        count = replay_events(navigator, events)
    except ReplayError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"Replayed {count} events\n")
    summary = build_summary(navigator)
    _print_summary(summary)

    for path, exporter in ((pdf, generate_summary_pdf), (text, write_summary_text)):
        if path is None:
            continue
        try:
            written = exporter(summary, path)
        except ExportError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1)
        console.print(f"\nSummary saved to: {written}")


@app.command()
def version():
    """Show version information."""
    from .. import __version__

    console.print(f"Trial Clock v{__version__}")
    console.print("Mock Trial Timer")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
