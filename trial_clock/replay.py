"""Replay scripted events against a navigator.

A replay script is YAML: either a list of events or a mapping with an
optional ``config`` record and an ``events`` list. Each event is a bare
word or a single-key mapping:

    config:
      simple: {opening: 60, directs: 300, crosses: 300, closing: 60, witnesses: 1}
    events:
      - run: 60          # start the clock, deliver 60 ticks, pause
      - next
      - redirect: no
      - jump: 4
      - edit: {kind: budget, seconds: "02:00"}
"""

from pathlib import Path
from typing import Any, Optional, Union

import yaml

from .engine import EditTarget, TrialNavigator
from .exceptions import ReplayError
from .models import TrialConfig
from .utils.logging import get_logger
from .utils.timefmt import coerce_seconds, parse_time

logger = get_logger(__name__)

Event = Union[str, dict[str, Any]]


def load_script(path: Path) -> tuple[Optional[TrialConfig], list[Event]]:
    """
    Load a replay script.

    Returns:
        Tuple of (config from the script or None, events)

    Raises:
        ReplayError: If the file is unreadable or malformed
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ReplayError(f"Cannot read replay script {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ReplayError(f"Malformed replay script {path}: {e}") from e

    if data is None:
        return None, []
    if isinstance(data, list):
        return None, data
    if not isinstance(data, dict):
        raise ReplayError("Replay script must be a list of events or a mapping")

    config = None
    if "config" in data:
        raw = data["config"] or {}
        if not isinstance(raw, dict):
            raise ReplayError("'config' must be a mapping")
        config = TrialConfig.from_record(raw)

    events = data.get("events") or []
    if not isinstance(events, list):
        raise ReplayError("'events' must be a list")
    return config, events


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("yes", "y", "true", "1"):
        return True
    if text in ("no", "n", "false", "0"):
        return False
    raise ReplayError(f"Expected yes/no, got {value!r}")


def apply_event(navigator: TrialNavigator, event: Event) -> None:
    """Apply one scripted event."""
    if isinstance(event, str):
        name, arg = event.strip().lower(), None
    elif isinstance(event, dict) and len(event) == 1:
        name, arg = next(iter(event.items()))
        name = str(name).lower()
    else:
        raise ReplayError(f"Unrecognized event: {event!r}")

    if name == "start":
        if not navigator.running:
            navigator.toggle_run()
    elif name == "pause":
        navigator.pause()
    elif name == "toggle":
        navigator.toggle_run()
    elif name == "tick":
        for _ in range(coerce_seconds(1 if arg is None else arg)):
            navigator.tick()
    elif name == "run":
        if not navigator.running:
            navigator.toggle_run()
        for _ in range(coerce_seconds(arg)):
            navigator.tick()
        navigator.pause()
    elif name in ("next", "advance"):
        navigator.advance()
    elif name in ("prev", "previous", "retreat"):
        navigator.retreat()
    elif name == "redirect":
        navigator.decide_redirect(_as_bool(arg))
    elif name == "recross":
        navigator.decide_recross(_as_bool(arg))
    elif name == "jump":
        if isinstance(arg, int) and not isinstance(arg, bool):
            navigator.jump_to(arg)
        else:
            logger.debug(f"Jump ignored: invalid segment id {arg!r}")
    elif name == "reset":
        navigator.reset_current()
    elif name == "edit":
        if not isinstance(arg, dict) or "kind" not in arg:
            raise ReplayError(f"Edit needs a mapping with 'kind': {arg!r}")
        try:
            target = EditTarget.from_dict(arg)
        except ValueError as e:
            raise ReplayError(f"Invalid edit target {arg!r}: {e}") from e
        seconds = arg.get("seconds", 0)
        if isinstance(seconds, str):
            seconds = parse_time(seconds)
        navigator.apply_edit(target, seconds)
    else:
        raise ReplayError(f"Unknown event: {name}")


def replay(navigator: TrialNavigator, events: list[Event]) -> int:
    """
    Apply events in order.

    Returns:
        Number of events applied
    """
    for count, event in enumerate(events, 1):
        logger.debug(f"Replay event {count}: {event!r}")
        apply_event(navigator, event)
    return len(events)
