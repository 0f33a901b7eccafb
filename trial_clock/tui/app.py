"""Main TUI application for Trial Clock."""

from typing import Optional

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import Footer, Header

from ..config import Settings, get_settings
from ..engine import CountdownMode, EditTarget, TrialNavigator
from ..exceptions import ExportError
from ..models import PendingPrompt, TrialConfig
from ..reports import TrialSummary, build_summary, generate_summary_pdf, write_summary_text
from ..utils.logging import get_logger
from ..utils.timefmt import format_time
from .screens import ConfirmDialog, DecisionDialog, EditTimeDialog, SettingsScreen
from .widgets import ClockPanel, PhaseBanner, SideTotalsPanel, SummaryPanel

logger = get_logger(__name__)


class TrialClockApp(App):
    """Trial Clock TUI Application.

    A terminal mock trial timer with:
    - Settings screen before the trial starts
    - Live clock for the active phase (top)
    - Per-segment summary with jump-to (bottom)
    """

    TITLE = "Trial Clock"
    SUB_TITLE = "Mock Trial Timer"

    CSS = """
    Screen {
        layout: vertical;
    }

    #timer-container {
        height: auto;
        padding: 0 1;
    }

    SummaryPanel {
        margin: 0 1;
    }

    Footer {
        dock: bottom;
    }
    """

    BINDINGS = [
        Binding("space", "toggle", "Start/Pause", show=True),
        Binding("n", "next", "Next", show=True),
        Binding("p", "previous", "Previous", show=True),
        Binding("e", "edit_elapsed", "Edit Time", show=True),
        Binding("b", "edit_remaining", "Edit Remaining", show=True),
        Binding("r", "reset_current", "Reset Current", show=True),
        Binding("R", "full_reset", "Full Reset", show=True),
        Binding("x", "export", "Export PDF", show=True),
        Binding("t", "export_text", "Export Text", show=False),
        Binding("q", "quit", "Quit", show=True),
    ]

    def __init__(
        self,
        config: Optional[TrialConfig] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        """Initialize the application.

        Args:
            config: Initial trial settings (pre-fills the settings screen).
            settings: Application settings.
        """
        super().__init__()
        self.settings = settings or get_settings()
        self.navigator = TrialNavigator(config or self.settings.trial, start=False)

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield Header()
        yield PhaseBanner(id="phase-banner")
        with Container(id="timer-container"):
            yield SideTotalsPanel(id="side-totals")
            yield ClockPanel(self.settings.display.warning_threshold, id="clock")
        yield SummaryPanel(id="summary")
        yield Footer()

    def on_mount(self) -> None:
        """Handle mount event."""
        self.set_interval(1.0, self._on_tick)
        self._show_settings()

    # ------------------------------------------------------------------
    # Settings phase
    # ------------------------------------------------------------------

    def _show_settings(self) -> None:
        self.push_screen(
            SettingsScreen(self.navigator.config, self.settings.display),
            callback=self._on_settings,
        )

    def _on_settings(self, config: Optional[TrialConfig]) -> None:
        """Start the trial with the chosen settings."""
        if config is None:
            self.exit()
            return

        self.navigator.configure(config)
        self.navigator.start_trial()
        self.query_one("#side-totals", SideTotalsPanel).display = self.settings.display.show_side_totals
        self.query_one("#summary", SummaryPanel).load(self.navigator)
        self._refresh_view()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _on_tick(self) -> None:
        if self.navigator.tick():
            self._refresh_view()

    def _refresh_view(self) -> None:
        """Re-render every widget from the navigator's state."""
        if not self.navigator.started:
            return
        self.query_one("#phase-banner", PhaseBanner).show(self.navigator)
        self.query_one("#clock", ClockPanel).show(self.navigator)
        self.query_one("#side-totals", SideTotalsPanel).show(self.navigator)
        summary_panel = self.query_one("#summary", SummaryPanel)
        summary_panel.refresh_from(self.navigator)
        summary_panel.show_usage(build_summary(self.navigator))

    def _after_navigation(self) -> None:
        """Refresh and, if the navigator is waiting on a decision, ask it."""
        self._refresh_view()
        prompt = self.navigator.prompt
        if prompt == PendingPrompt.NONE:
            return

        witness = self.navigator.active
        phase = "redirect" if prompt == PendingPrompt.REDIRECT else "recross"
        subtitle = f"After {witness.label}" if witness else ""
        self.push_screen(
            DecisionDialog(f"Will there be a {phase}?", subtitle),
            callback=self._on_decision,
        )

    def _on_decision(self, take: Optional[bool]) -> None:
        if self.navigator.prompt == PendingPrompt.REDIRECT:
            self.navigator.decide_redirect(bool(take))
        elif self.navigator.prompt == PendingPrompt.RECROSS:
            self.navigator.decide_recross(bool(take))
        self._refresh_view()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def action_toggle(self) -> None:
        """Start or pause the clock."""
        if self.navigator.toggle_run():
            self._refresh_view()

    def action_next(self) -> None:
        """Move to the next phase."""
        if self.navigator.advance():
            self._after_navigation()

    def action_previous(self) -> None:
        """Move to the previous phase."""
        if self.navigator.retreat():
            self._after_navigation()

    def on_summary_panel_jump_requested(self, event: SummaryPanel.JumpRequested) -> None:
        """Handle a segment row selection."""
        if self.navigator.jump_to(event.segment_id):
            self._refresh_view()

    def action_edit_elapsed(self) -> None:
        """Edit the active segment's elapsed time."""
        active = self.navigator.active
        if active is None or active.is_end:
            return

        self.navigator.pause()
        self._refresh_view()
        self.push_screen(
            EditTimeDialog(f"Edit {active.label}", self.navigator.elapsed, "Elapsed time"),
            callback=lambda seconds: self._apply_edit(EditTarget.segment_elapsed(active.id), seconds),
        )

    def action_edit_remaining(self) -> None:
        """Edit the remaining time of the active budget or fixed phase."""
        active = self.navigator.active
        if active is None or active.is_end:
            return

        self.navigator.pause()
        self._refresh_view()
        clock = self.navigator.remaining_and_overtime()
        if clock.mode == CountdownMode.BUDGET:
            target = EditTarget.budget_remaining(clock.budget)
            subtitle = (
                f"{clock.budget.display_name}\n"
                f"Used before this segment: {format_time(clock.used_before_active)} "
                f"of {format_time(clock.allotment)}"
            )
        elif clock.mode in (CountdownMode.FIXED, CountdownMode.REBUTTAL):
            target = EditTarget.fixed_remaining(active.id)
            subtitle = f"Allotted: {format_time(clock.allotment)}"
        else:
            return

        self.push_screen(
            EditTimeDialog("Edit Remaining Time", clock.remaining, subtitle),
            callback=lambda seconds: self._apply_edit(target, seconds),
        )

    def _apply_edit(self, target: EditTarget, seconds: Optional[int]) -> None:
        if seconds is None:
            return
        result = self.navigator.apply_edit(target, seconds)
        if not result.applied:
            self.notify(result.message, severity="warning")
        self._refresh_view()

    def action_reset_current(self) -> None:
        """Reset the active phase's time after confirmation."""
        if not self.navigator.started:
            return
        self.navigator.pause()
        self.push_screen(
            ConfirmDialog(
                "Reset Current Phase",
                "Reset the time for the current phase to 00:00?",
            ),
            callback=self._on_confirm_reset_current,
        )

    def _on_confirm_reset_current(self, confirmed: Optional[bool]) -> None:
        if confirmed:
            self.navigator.reset_current()
        self._refresh_view()

    def action_full_reset(self) -> None:
        """Discard the run and return to settings after confirmation."""
        if not self.navigator.started:
            return
        self.navigator.pause()
        self.push_screen(
            ConfirmDialog(
                "Full Trial Reset",
                "Discard all recorded times and return to settings?",
            ),
            callback=self._on_confirm_full_reset,
        )

    def _on_confirm_full_reset(self, confirmed: Optional[bool]) -> None:
        if not confirmed:
            self._refresh_view()
            return
        self.navigator.full_reset()
        self._show_settings()

    def action_export(self) -> None:
        """Export the summary as PDF."""
        self._export_snapshot(pdf=True)

    def action_export_text(self) -> None:
        """Export the summary as plain text."""
        self._export_snapshot(pdf=False)

    def _export_snapshot(self, pdf: bool) -> None:
        if not self.navigator.started:
            return
        self.notify("Exporting summary...")
        self._run_export(build_summary(self.navigator), pdf)

    @work(exclusive=True, thread=True)
    def _run_export(self, summary: TrialSummary, pdf: bool) -> None:
        """Write the summary in a background thread.

        Args:
            summary: Snapshot taken on the main thread.
            pdf: PDF if True, plain text otherwise.
        """
        export = self.settings.export
        try:
            if pdf:
                path = generate_summary_pdf(summary, export.output_dir / export.pdf_filename)
            else:
                path = write_summary_text(summary, export.output_dir / export.text_filename)
        except ExportError as e:
            logger.error(f"Export failed: {e}")
            self.call_from_thread(self.notify, str(e), severity="error")
            return

        self.call_from_thread(self.notify, f"Summary saved to {path}")

    def action_quit(self) -> None:
        """Quit the application."""
        self.exit()


def run_tui(
    config: Optional[TrialConfig] = None,
    settings: Optional[Settings] = None,
) -> None:
    """Run the Trial Clock TUI.

    Args:
        config: Initial trial settings.
        settings: Application settings.
    """
    app = TrialClockApp(config=config, settings=settings)
    app.run()
