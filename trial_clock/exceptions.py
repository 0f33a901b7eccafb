"""Exceptions for Trial Clock.

The timing engine itself never raises for user input; these cover the
collaborators around it (config files, report export, replay scripts).
"""


class TrialClockError(Exception):
    """Base exception for Trial Clock."""

    pass


class ConfigError(TrialClockError):
    """Raised when a trial config file cannot be read or parsed."""

    def __init__(self, message: str = "Invalid trial configuration."):
        super().__init__(message)


class ExportError(TrialClockError):
    """Raised when a summary export fails."""

    def __init__(self, message: str = "Failed to export trial summary."):
        super().__init__(message)


class ReplayError(TrialClockError):
    """Raised when a replay script contains an unknown or malformed event."""

    def __init__(self, message: str = "Invalid replay event."):
        super().__init__(message)
