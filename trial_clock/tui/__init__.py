"""Terminal user interface for Trial Clock."""

from .app import TrialClockApp, run_tui

__all__ = ["TrialClockApp", "run_tui"]
