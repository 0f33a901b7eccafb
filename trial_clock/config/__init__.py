"""Settings for Trial Clock."""

from .settings import (
    DisplayConfig,
    ExportConfig,
    Settings,
    configure,
    get_settings,
)

__all__ = [
    "DisplayConfig",
    "ExportConfig",
    "Settings",
    "configure",
    "get_settings",
]
