"""Run state model."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .segment import Segment


class PendingPrompt(str, Enum):
    """Conditional-phase question awaiting an answer."""

    NONE = "none"
    REDIRECT = "redirect"
    RECROSS = "recross"


@dataclass
class RunState:
    """Mutable session state for one trial run.

    The live ``elapsed`` counter is kept apart from the active segment's
    ``actual_elapsed`` until a navigation transition commits it.
    """

    segments: list[Segment] = field(default_factory=list)
    index: int = 0
    elapsed: int = 0
    running: bool = False
    prompt: PendingPrompt = PendingPrompt.NONE
    prompt_origin: Optional[int] = None

    @property
    def started(self) -> bool:
        """Check if a timeline has been generated for this run."""
        return bool(self.segments)

    @property
    def active(self) -> Optional[Segment]:
        """The active segment, or None before the trial starts."""
        if 0 <= self.index < len(self.segments):
            return self.segments[self.index]
        return None

    @property
    def has_prompt(self) -> bool:
        """Check if a conditional prompt is pending."""
        return self.prompt != PendingPrompt.NONE

    @property
    def at_end(self) -> bool:
        """Check if the cursor sits on the end marker."""
        active = self.active
        return active is not None and active.is_end

    def find_index(self, segment_id: int) -> Optional[int]:
        """Get the position of a segment by id."""
        for i, segment in enumerate(self.segments):
            if segment.id == segment_id:
                return i
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "segments": [s.to_dict() for s in self.segments],
            "index": self.index,
            "elapsed": self.elapsed,
            "running": self.running,
            "prompt": self.prompt.value,
            "prompt_origin": self.prompt_origin,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RunState":
        """Create from dictionary."""
        return cls(
            segments=[Segment.from_dict(s) for s in data.get("segments", [])],
            index=data.get("index", 0),
            elapsed=data.get("elapsed", 0),
            running=data.get("running", False),
            prompt=PendingPrompt(data.get("prompt", "none")),
            prompt_origin=data.get("prompt_origin"),
        )
