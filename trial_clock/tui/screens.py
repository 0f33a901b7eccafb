"""Screens and dialogs for the Trial Clock TUI."""

from typing import Optional

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Center, Container, Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen, Screen
from textual.widgets import Button, Footer, Header, Input, Label, Static, Switch

from ..config import DisplayConfig
from ..models import TrialConfig
from ..utils.timefmt import coerce_seconds, minutes_to_seconds

# (input id, label, config field, value is in minutes)
SIMPLE_FIELDS = [
    ("opening", "Opening Statements (minutes per side)", "plaintiff_opening", True),
    ("directs", "Direct/Redirect Budget (minutes per side)", "plaintiff_direct_budget", True),
    ("crosses", "Cross/Recross Budget (minutes per side)", "plaintiff_cross_budget", True),
    ("closing", "Closing Arguments (minutes per side)", "plaintiff_closing", True),
    ("rebuttal", "Maximum Rebuttal (minutes)", "max_rebuttal", True),
    ("witnesses", "Witnesses per side", "plaintiff_witnesses", False),
]

ADVANCED_FIELDS = [
    ("plaintiff_opening", "Plaintiff Opening (minutes)", True),
    ("defense_opening", "Defense Opening (minutes)", True),
    ("plaintiff_witnesses", "Plaintiff Witnesses", False),
    ("defense_witnesses", "Defense Witnesses", False),
    ("plaintiff_direct_budget", "P. Direct/Redirect Budget (minutes)", True),
    ("defense_cross_budget", "D. Cross/Recross of P. Witnesses (minutes)", True),
    ("defense_direct_budget", "D. Direct/Redirect Budget (minutes)", True),
    ("plaintiff_cross_budget", "P. Cross/Recross of D. Witnesses (minutes)", True),
    ("plaintiff_closing", "Plaintiff Closing (minutes)", True),
    ("defense_closing", "Defense Closing (minutes)", True),
    ("max_rebuttal", "Maximum Rebuttal (minutes)", True),
]


def _display_value(config: TrialConfig, field_name: str, in_minutes: bool) -> str:
    value = getattr(config, field_name)
    return str(value // 60 if in_minutes else value)


def _read_value(raw: str, in_minutes: bool) -> int:
    return minutes_to_seconds(raw) if in_minutes else coerce_seconds(raw)


class SettingsScreen(Screen[TrialConfig]):
    """Screen for configuring a trial before it starts.

    Dismisses with the chosen TrialConfig. The show-totals switch is
    written straight into the DisplayConfig it was given.
    """

    BINDINGS = [
        Binding("escape", "quit", "Quit"),
        Binding("ctrl+s", "start", "Start Trial"),
    ]

    DEFAULT_CSS = """
    SettingsScreen {
        align: center middle;
    }

    SettingsScreen > VerticalScroll {
        width: 80;
        height: 90%;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }

    SettingsScreen .dialog-title {
        text-align: center;
        width: 100%;
        margin-bottom: 1;
    }

    SettingsScreen .switch-row {
        height: auto;
        margin-bottom: 1;
    }

    SettingsScreen .switch-row Label {
        padding: 1 1 0 0;
    }

    SettingsScreen Input {
        margin-bottom: 1;
    }

    SettingsScreen .button-row {
        width: 100%;
        height: auto;
        margin-top: 1;
    }

    SettingsScreen Button {
        margin: 0 1;
    }
    """

    def __init__(
        self,
        config: TrialConfig,
        display: DisplayConfig,
        *,
        name: Optional[str] = None,
        id: Optional[str] = None,
        classes: Optional[str] = None,
    ) -> None:
        """Initialize the settings screen.

        Args:
            config: Values to pre-fill.
            display: Display settings (simple/advanced mode, side totals).
            name: Screen name.
            id: Screen ID.
            classes: CSS classes.
        """
        super().__init__(name=name, id=id, classes=classes)
        self.config = config
        self.display_config = display

    def compose(self) -> ComposeResult:
        """Compose the screen."""
        yield Header()
        with VerticalScroll():
            yield Static("[bold]Mock Trial Timer Settings[/bold]", classes="dialog-title")

            with Horizontal(classes="switch-row"):
                yield Label("Advanced (per-side) settings")
                yield Switch(value=not self.display_config.simple_mode, id="advanced-switch")

            with Vertical(id="simple-fields"):
                for input_id, label, field_name, in_minutes in SIMPLE_FIELDS:
                    yield Label(label)
                    yield Input(
                        value=_display_value(self.config, field_name, in_minutes),
                        type="integer",
                        id=f"simple-{input_id}",
                    )

            with Vertical(id="advanced-fields"):
                for field_name, label, in_minutes in ADVANCED_FIELDS:
                    yield Label(label)
                    yield Input(
                        value=_display_value(self.config, field_name, in_minutes),
                        type="integer",
                        id=f"advanced-{field_name}",
                    )

            with Horizontal(classes="switch-row"):
                yield Label("Show total time per side")
                yield Switch(value=self.display_config.show_side_totals, id="totals-switch")

            with Center(classes="button-row"):
                yield Button("Start Trial", id="start-button", variant="primary")
                yield Button("Quit", id="quit-button")
        yield Footer()

    def on_mount(self) -> None:
        """Show the fields for the current mode."""
        self._show_mode(self.display_config.simple_mode)

    def _show_mode(self, simple: bool) -> None:
        self.query_one("#simple-fields").display = simple
        self.query_one("#advanced-fields").display = not simple

    def on_switch_changed(self, event: Switch.Changed) -> None:
        """Handle the mode and totals switches."""
        if event.switch.id == "advanced-switch":
            self.display_config.simple_mode = not event.value
            self._show_mode(not event.value)
        elif event.switch.id == "totals-switch":
            self.display_config.show_side_totals = event.value

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        if event.button.id == "start-button":
            self.action_start()
        elif event.button.id == "quit-button":
            self.action_quit()

    def build_config(self) -> TrialConfig:
        """Read the form into a TrialConfig. Malformed entries become 0."""
        if self.display_config.simple_mode:
            values = {
                input_id: _read_value(self.query_one(f"#simple-{input_id}", Input).value, in_minutes)
                for input_id, _, _, in_minutes in SIMPLE_FIELDS
            }
            return TrialConfig.simple(**values)

        return TrialConfig.from_dict({
            field_name: _read_value(self.query_one(f"#advanced-{field_name}", Input).value, in_minutes)
            for field_name, _, in_minutes in ADVANCED_FIELDS
        })

    def action_start(self) -> None:
        """Start the trial with the entered settings."""
        self.dismiss(self.build_config())

    def action_quit(self) -> None:
        """Quit the application."""
        self.app.exit()


class TimerDialog(ModalScreen):
    """Shared layout for the small modal dialogs."""

    DEFAULT_CSS = """
    TimerDialog {
        align: center middle;
    }

    TimerDialog > Container {
        width: 60;
        height: auto;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }

    TimerDialog .dialog-title {
        text-align: center;
        text-style: bold;
        width: 100%;
        margin-bottom: 1;
    }

    TimerDialog .dialog-subtitle {
        text-align: center;
        color: $text-muted;
        width: 100%;
        margin-bottom: 1;
    }

    TimerDialog .button-row {
        width: 100%;
        height: auto;
        align: center middle;
        margin-top: 1;
    }

    TimerDialog Button {
        margin: 0 1;
    }
    """


class DecisionDialog(TimerDialog):
    """Yes/no prompt for an optional redirect or recross.

    Returns True to take the phase, False to skip it. There is no cancel:
    the trial cannot continue until the question is answered.
    """

    BINDINGS = [
        Binding("y", "answer(True)", "Yes"),
        Binding("n", "answer(False)", "No"),
    ]

    def __init__(self, question: str, subtitle: str = "", name: Optional[str] = None) -> None:
        super().__init__(name=name)
        self.question = question
        self.subtitle = subtitle

    def compose(self) -> ComposeResult:
        """Compose the dialog layout."""
        with Container():
            yield Static(self.question, classes="dialog-title")
            if self.subtitle:
                yield Static(self.subtitle, classes="dialog-subtitle")
            with Center(classes="button-row"):
                yield Button("Yes", id="yes-button", variant="primary")
                yield Button("No", id="no-button")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        self.dismiss(event.button.id == "yes-button")

    def action_answer(self, take: bool) -> None:
        self.dismiss(take)


class EditTimeDialog(TimerDialog):
    """Dialog for entering a time as minutes and seconds.

    Returns the total seconds, or None if cancelled.
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
    ]

    DEFAULT_CSS = """
    EditTimeDialog .time-row {
        height: auto;
    }

    EditTimeDialog .time-row Input {
        width: 1fr;
    }

    EditTimeDialog .time-row Label {
        padding: 1 1 0 1;
    }
    """

    def __init__(
        self,
        title: str,
        initial_seconds: int = 0,
        subtitle: str = "",
        name: Optional[str] = None,
    ) -> None:
        """Initialize the edit dialog.

        Args:
            title: What is being edited.
            initial_seconds: Value to pre-fill.
            subtitle: Optional explanation shown under the title.
            name: Widget name.
        """
        super().__init__(name=name)
        self.title_text = title
        self.subtitle = subtitle
        self.initial_seconds = max(0, initial_seconds)

    def compose(self) -> ComposeResult:
        """Compose the dialog layout."""
        minutes, seconds = divmod(self.initial_seconds, 60)
        with Container():
            yield Static(self.title_text, classes="dialog-title")
            if self.subtitle:
                yield Static(self.subtitle, classes="dialog-subtitle")
            with Horizontal(classes="time-row"):
                yield Input(value=str(minutes), type="integer", id="minutes-input")
                yield Label("min")
                yield Input(value=str(seconds), type="integer", id="seconds-input")
                yield Label("sec")
            with Center(classes="button-row"):
                yield Button("Save", id="save-button", variant="primary")
                yield Button("Cancel", id="cancel-button")

    def on_mount(self) -> None:
        """Focus the minutes input on mount."""
        self.query_one("#minutes-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle Enter key in either input."""
        self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        if event.button.id == "save-button":
            self._submit()
        elif event.button.id == "cancel-button":
            self.dismiss(None)

    def _submit(self) -> None:
        minutes = coerce_seconds(self.query_one("#minutes-input", Input).value)
        seconds = coerce_seconds(self.query_one("#seconds-input", Input).value)
        self.dismiss(minutes * 60 + seconds)

    def action_cancel(self) -> None:
        """Cancel the edit."""
        self.dismiss(None)


class ConfirmDialog(TimerDialog):
    """Confirmation prompt for destructive actions.

    Returns True if confirmed.
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
    ]

    def __init__(self, title: str, message: str, name: Optional[str] = None) -> None:
        super().__init__(name=name)
        self.title_text = title
        self.message = message

    def compose(self) -> ComposeResult:
        """Compose the dialog layout."""
        with Container():
            yield Static(self.title_text, classes="dialog-title")
            yield Static(self.message, classes="dialog-subtitle")
            with Center(classes="button-row"):
                yield Button("Confirm", id="confirm-button", variant="error")
                yield Button("Cancel", id="cancel-button")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        self.dismiss(event.button.id == "confirm-button")

    def action_cancel(self) -> None:
        self.dismiss(False)
