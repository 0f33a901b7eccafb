"""Time formatting and input coercion helpers."""

from typing import Any


def coerce_seconds(value: Any) -> int:
    """
    Coerce arbitrary user input to a non-negative integer second count.

    Malformed values (None, non-numeric strings, NaN) become 0 rather
    than raising, and negative values clamp to 0.

    Args:
        value: Raw input value

    Returns:
        Non-negative integer seconds
    """
    if isinstance(value, bool):
        return int(value)
    try:
        seconds = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, seconds)


def minutes_to_seconds(value: Any) -> int:
    """Convert a minutes value (as typed in a settings form) to seconds."""
    return coerce_seconds(value) * 60


def format_time(total_seconds: int) -> str:
    """
    Format seconds as MM:SS.

    Minutes are not wrapped into hours, so 75 minutes renders as "75:00".
    """
    total_seconds = max(0, int(total_seconds))
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes:02d}:{seconds:02d}"


def parse_time(text: str) -> int:
    """
    Parse "MM:SS" or a bare seconds count into seconds.

    Unparseable input yields 0.
    """
    text = (text or "").strip()
    if ":" in text:
        minutes, _, seconds = text.partition(":")
        return coerce_seconds(minutes) * 60 + min(59, coerce_seconds(seconds))
    return coerce_seconds(text)
