"""Utility modules for Trial Clock.

Provides common utilities:
- Logging configuration
- Time formatting and input coercion
"""

from .logging import (
    console,
    get_logger,
    setup_logging,
)
from .timefmt import (
    coerce_seconds,
    format_time,
    minutes_to_seconds,
    parse_time,
)


__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "console",
    # Time
    "coerce_seconds",
    "format_time",
    "minutes_to_seconds",
    "parse_time",
]
