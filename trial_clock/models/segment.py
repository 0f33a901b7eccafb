"""Segment data models."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class Side(str, Enum):
    """Party performing a segment."""

    PLAINTIFF = "plaintiff"
    DEFENSE = "defense"
    NONE = "none"

    @property
    def opposite(self) -> "Side":
        """The other party (NONE has no opposite)."""
        if self == Side.PLAINTIFF:
            return Side.DEFENSE
        if self == Side.DEFENSE:
            return Side.PLAINTIFF
        return Side.NONE

    @property
    def abbreviation(self) -> str:
        """Single-letter form used in labels."""
        return {"plaintiff": "P", "defense": "D"}.get(self.value, "")


class PhaseKind(str, Enum):
    """Kind of trial phase."""

    OPENING = "opening"
    DIRECT = "direct"
    CROSS = "cross"
    REDIRECT = "redirect"
    RECROSS = "recross"
    CLOSING = "closing"
    REBUTTAL = "rebuttal"
    END = "end"


EXAMINATION_KINDS = frozenset({
    PhaseKind.DIRECT,
    PhaseKind.CROSS,
    PhaseKind.REDIRECT,
    PhaseKind.RECROSS,
})

FIXED_KINDS = frozenset({
    PhaseKind.OPENING,
    PhaseKind.CLOSING,
    PhaseKind.REBUTTAL,
})


class BranchDecision(str, Enum):
    """Whether a conditional segment (redirect/recross) was taken."""

    UNDECIDED = "undecided"
    TAKEN = "taken"
    SKIPPED = "skipped"


@dataclass
class Segment:
    """One atomic timed phase of the proceeding."""

    id: int
    kind: PhaseKind
    side: Side
    label: str
    duration: Optional[int] = None  # None = unbounded (examinations, rebuttal)
    witness_index: Optional[int] = None
    witness_side: Optional[Side] = None  # Whose witness is on the stand
    conditional: bool = False
    actual_elapsed: int = 0
    decision: BranchDecision = BranchDecision.UNDECIDED

    @property
    def is_bounded(self) -> bool:
        """Check if the segment has a finite nominal duration."""
        return self.duration is not None

    @property
    def is_examination(self) -> bool:
        """Check if this is a witness examination segment."""
        return self.kind in EXAMINATION_KINDS

    @property
    def is_end(self) -> bool:
        """Check if this is the end-of-trial marker."""
        return self.kind == PhaseKind.END

    @property
    def is_skippable(self) -> bool:
        """Check if navigation may pass over this segment.

        Only conditional segments that were never explicitly taken and hold
        no recorded time qualify. A taken segment with zero elapsed is a
        genuine zero-second redirect/recross and stays navigable.
        """
        return (
            self.conditional
            and self.decision != BranchDecision.TAKEN
            and self.actual_elapsed == 0
        )

    @property
    def short_label(self) -> str:
        """Abbreviated label for summary listings."""
        return self.label.replace("Plaintiff", "P.").replace("Defense", "D.")

    def same_witness(self, other: Optional["Segment"]) -> bool:
        """Check if both segments belong to the same witness slot."""
        if other is None or self.witness_index is None:
            return False
        return (
            self.witness_index == other.witness_index
            and self.witness_side == other.witness_side
        )

    def matches(self, other: Optional["Segment"]) -> bool:
        """Check if both segments share performing side and witness slot."""
        return other is not None and self.side == other.side and self.same_witness(other)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "kind": self.kind.value,
            "side": self.side.value,
            "label": self.label,
            "duration": self.duration,
            "witness_index": self.witness_index,
            "witness_side": self.witness_side.value if self.witness_side else None,
            "conditional": self.conditional,
            "actual_elapsed": self.actual_elapsed,
            "decision": self.decision.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Segment":
        """Create from dictionary."""
        witness_side = data.get("witness_side")
        return cls(
            id=data["id"],
            kind=PhaseKind(data["kind"]),
            side=Side(data.get("side", "none")),
            label=data.get("label", ""),
            duration=data.get("duration"),
            witness_index=data.get("witness_index"),
            witness_side=Side(witness_side) if witness_side else None,
            conditional=data.get("conditional", False),
            actual_elapsed=data.get("actual_elapsed", 0),
            decision=BranchDecision(data.get("decision", "undecided")),
        )
