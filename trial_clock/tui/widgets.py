"""Custom widgets for the Trial Clock TUI."""

from typing import Optional

from textual.app import ComposeResult
from textual.containers import Container
from textual.message import Message
from textual.widgets import DataTable, Static

from ..engine import CountdownMode, TrialNavigator
from ..models import PendingPrompt, Side
from ..reports import TrialSummary
from ..utils.timefmt import format_time


class PhaseBanner(Static):
    """Current phase label."""

    DEFAULT_CSS = """
    PhaseBanner {
        height: 3;
        content-align: center middle;
        text-style: bold;
        background: $boost;
    }
    """

    def show(self, navigator: TrialNavigator) -> None:
        """Render the banner for the navigator's current state."""
        active = navigator.active
        if active is None:
            self.update("Settings")
        elif active.is_end:
            self.update("[bold]Trial Ended[/bold]")
        elif navigator.prompt == PendingPrompt.REDIRECT:
            self.update(f"{active.label}  [yellow](awaiting redirect decision)[/yellow]")
        elif navigator.prompt == PendingPrompt.RECROSS:
            self.update(f"{active.label}  [yellow](awaiting recross decision)[/yellow]")
        else:
            side = f"  [dim]({active.side.value.capitalize()} Side)[/dim]" if active.side != Side.NONE else ""
            self.update(f"{active.label}{side}")


class ClockPanel(Static):
    """Elapsed and remaining time for the active segment."""

    DEFAULT_CSS = """
    ClockPanel {
        height: auto;
        padding: 1 2;
        border: solid $primary;
    }
    """

    def __init__(
        self,
        warning_threshold: int = 60,
        *,
        name: Optional[str] = None,
        id: Optional[str] = None,
        classes: Optional[str] = None,
    ) -> None:
        """Initialize the clock panel.

        Args:
            warning_threshold: Seconds remaining at which the clock turns red.
            name: Widget name.
            id: Widget ID.
            classes: CSS classes.
        """
        super().__init__(name=name, id=id, classes=classes)
        self.warning_threshold = warning_threshold

    def show(self, navigator: TrialNavigator) -> None:
        """Render the clock for the navigator's current state."""
        active = navigator.active
        if active is None or active.is_end:
            self.update("")
            return

        clock = navigator.remaining_and_overtime()
        if clock.remaining == 0 or clock.remaining <= self.warning_threshold:
            remaining = f"[bold red]{clock.display}[/bold red]"
        else:
            remaining = f"[bold blue]{clock.display}[/bold blue]"

        status = "[green]RUNNING[/green]" if navigator.running else "[dim]PAUSED[/dim]"
        lines = [
            f"Time Elapsed (Current Segment): [bold]{format_time(navigator.elapsed)}[/bold]   {status}",
            f"Time Remaining: {remaining}",
        ]
        if clock.overtime > 0:
            lines.append(f"[bold red]Overtime: +{format_time(clock.overtime)}[/bold red]")
        if clock.mode == CountdownMode.BUDGET and clock.budget is not None:
            lines.append(
                f"[dim]{clock.budget.display_name}: "
                f"{format_time(clock.used)} used of {format_time(clock.allotment)}[/dim]"
            )
        elif clock.mode == CountdownMode.REBUTTAL:
            lines.append(f"[dim]Rebuttal limit: {format_time(clock.allotment)}[/dim]")
        self.update("\n".join(lines))


class SideTotalsPanel(Static):
    """Total time used by each side."""

    DEFAULT_CSS = """
    SideTotalsPanel {
        height: 1;
        content-align: center middle;
    }
    """

    def show(self, navigator: TrialNavigator) -> None:
        plaintiff = format_time(navigator.total_elapsed(Side.PLAINTIFF))
        defense = format_time(navigator.total_elapsed(Side.DEFENSE))
        self.update(
            f"[green]Plaintiff Total:[/green] {plaintiff}    "
            f"[red]Defense Total:[/red] {defense}"
        )


class SummaryPanel(Container):
    """Per-segment summary with usage against each allotment.

    Selecting a row asks the app to jump to that segment.
    """

    DEFAULT_CSS = """
    SummaryPanel {
        height: 1fr;
        border: solid $primary;
    }

    SummaryPanel DataTable {
        height: 1fr;
    }

    SummaryPanel #usage {
        height: auto;
        padding: 0 1;
    }
    """

    class JumpRequested(Message):
        """Message sent when the user selects a segment row."""

        def __init__(self, segment_id: int) -> None:
            """Initialize the message.

            Args:
                segment_id: Id of the selected segment.
            """
            self.segment_id = segment_id
            super().__init__()

    def compose(self) -> ComposeResult:
        """Compose the summary panel."""
        yield DataTable(id="segment-table")
        yield Static("", id="usage")

    def on_mount(self) -> None:
        """Handle mount event."""
        table = self.query_one("#segment-table", DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_column("", key="marker", width=2)
        table.add_column("Side", key="side", width=5)
        table.add_column("Phase", key="phase", width=36)
        table.add_column("Elapsed", key="elapsed", width=8)

    def load(self, navigator: TrialNavigator) -> None:
        """Rebuild the rows for a freshly generated timeline."""
        table = self.query_one("#segment-table", DataTable)
        table.clear()
        for segment in navigator.segments:
            if segment.is_end:
                continue
            table.add_row(
                "",
                segment.side.abbreviation,
                segment.label,
                format_time(segment.actual_elapsed),
                key=str(segment.id),
            )
        self.refresh_from(navigator)

    def refresh_from(self, navigator: TrialNavigator) -> None:
        """Update elapsed cells, the active marker and the usage lines."""
        table = self.query_one("#segment-table", DataTable)
        for i, segment in enumerate(navigator.segments):
            if segment.is_end:
                continue
            active = i == navigator.index
            elapsed = navigator.elapsed if active else segment.actual_elapsed
            key = str(segment.id)
            table.update_cell(key, "marker", ">" if active else "")
            table.update_cell(key, "elapsed", format_time(elapsed))

    def show_usage(self, summary: TrialSummary) -> None:
        """Render the overall usage lines for both sides."""
        lines = []
        for side in summary.sides:
            parts = []
            for allotment in side.allotments:
                text = f"{allotment.label} {allotment.formatted}"
                parts.append(f"[red]{text}[/red]" if allotment.over else text)
            lines.append(f"[bold]{side.title}:[/bold] " + "  |  ".join(parts))
        self.query_one("#usage", Static).update("\n".join(lines))

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Handle row selection."""
        if event.row_key is not None and event.row_key.value is not None:
            self.post_message(self.JumpRequested(int(event.row_key.value)))
