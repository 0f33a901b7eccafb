"""Configuration settings for Trial Clock."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..models import TrialConfig


@dataclass
class DisplayConfig:
    """Configuration for the timer display."""

    show_side_totals: bool = False
    simple_mode: bool = True  # Settings screen edits both sides at once
    warning_threshold: int = 60  # Seconds remaining before the clock turns red


@dataclass
class ExportConfig:
    """Configuration for summary export."""

    output_dir: Path = field(default_factory=lambda: Path("."))
    pdf_filename: str = "Mock_Trial_Summary.pdf"
    text_filename: str = "Mock_Trial_Summary.txt"


@dataclass
class Settings:
    """Main settings container."""

    trial: TrialConfig = field(default_factory=TrialConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    export: ExportConfig = field(default_factory=ExportConfig)

    # Config file supplying the trial record at start
    config_file: Optional[Path] = None

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables."""
        settings = cls()

        if config_file := os.getenv("TRIAL_CLOCK_CONFIG"):
            settings.config_file = Path(config_file)

        if os.getenv("TRIAL_CLOCK_SHOW_TOTALS", "").lower() == "true":
            settings.display.show_side_totals = True

        if os.getenv("TRIAL_CLOCK_ADVANCED", "").lower() == "true":
            settings.display.simple_mode = False

        if output_dir := os.getenv("TRIAL_CLOCK_EXPORT_DIR"):
            settings.export.output_dir = Path(output_dir)

        if log_level := os.getenv("LOG_LEVEL"):
            settings.log_level = log_level

        if log_file := os.getenv("TRIAL_CLOCK_LOG_FILE"):
            settings.log_file = Path(log_file)

        return settings


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def configure(settings: Optional[Settings]) -> None:
    """Set (or clear, with None) the global settings instance."""
    global _settings
    _settings = settings
