"""Budget accounting and remaining/overtime computation.

Everything here is a pure function of the segment list, the config, the
active index and the live elapsed counter. Nothing is cached, so derived
values can never drift from the recorded segment times.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..models import FIXED_KINDS, BudgetKey, PhaseKind, Segment, Side, TrialConfig
from ..utils.timefmt import format_time


class CountdownMode(str, Enum):
    """How the active segment's allotment is determined."""

    FIXED = "fixed"  # Opening / closing duration
    REBUTTAL = "rebuttal"  # Dynamic rebuttal cap
    BUDGET = "budget"  # Shared examination budget
    NONE = "none"  # End marker or no active segment


@dataclass
class BudgetUsage:
    """Usage of one shared examination budget."""

    key: BudgetKey
    total: int
    used: int
    used_before_active: int

    @property
    def remaining(self) -> int:
        return max(0, self.total - self.used)

    @property
    def overtime(self) -> int:
        return max(0, self.used - self.total)


@dataclass
class Countdown:
    """Remaining/overtime display values for the active segment."""

    mode: CountdownMode
    allotment: int = 0
    used: int = 0
    budget: Optional[BudgetKey] = None
    used_before_active: int = 0

    @property
    def remaining(self) -> int:
        return max(0, self.allotment - self.used)

    @property
    def overtime(self) -> int:
        return max(0, self.used - self.allotment)

    @property
    def is_stop(self) -> bool:
        """Allotment exhausted exactly: show STOP instead of 00:00."""
        return self.mode != CountdownMode.NONE and self.remaining == 0 and self.overtime == 0

    @property
    def display(self) -> str:
        """Remaining-time text for the clock."""
        if self.mode != CountdownMode.NONE and self.remaining == 0:
            return "STOP"
        return format_time(self.remaining)


_BUDGET_RULES = {
    # key: (examining side, witness side, kinds)
    BudgetKey.PLAINTIFF_DIRECT: (Side.PLAINTIFF, Side.PLAINTIFF, (PhaseKind.DIRECT, PhaseKind.REDIRECT)),
    BudgetKey.DEFENSE_CROSS: (Side.DEFENSE, Side.PLAINTIFF, (PhaseKind.CROSS, PhaseKind.RECROSS)),
    BudgetKey.DEFENSE_DIRECT: (Side.DEFENSE, Side.DEFENSE, (PhaseKind.DIRECT, PhaseKind.REDIRECT)),
    BudgetKey.PLAINTIFF_CROSS: (Side.PLAINTIFF, Side.DEFENSE, (PhaseKind.CROSS, PhaseKind.RECROSS)),
}


def budget_for(segment: Optional[Segment]) -> Optional[BudgetKey]:
    """Get the shared budget a segment draws from, if any."""
    if segment is None or not segment.is_examination:
        return None
    for key, (side, witness_side, kinds) in _BUDGET_RULES.items():
        if segment.side == side and segment.witness_side == witness_side and segment.kind in kinds:
            return key
    return None


def contributes_to(segment: Segment, key: BudgetKey) -> bool:
    """Check if a segment's time counts against a budget."""
    return budget_for(segment) == key


def budget_usage(
    segments: list[Segment],
    config: TrialConfig,
    index: int,
    elapsed: int,
    key: BudgetKey,
) -> BudgetUsage:
    """
    Compute usage of a shared budget.

    ``used`` counts every other segment's committed time plus the live
    counter for the active segment (its stored value is superseded by the
    live one). ``used_before_active`` excludes the active segment entirely
    and counts only segments positioned before it.

    Args:
        segments: Segment list
        config: Trial configuration
        index: Active segment index
        elapsed: Live elapsed counter for the active segment
        key: Budget to compute

    Returns:
        BudgetUsage for the budget
    """
    used = 0
    used_before = 0
    for i, segment in enumerate(segments):
        if not contributes_to(segment, key):
            continue
        if i == index:
            used += elapsed
            continue
        used += segment.actual_elapsed
        if i < index:
            used_before += segment.actual_elapsed

    return BudgetUsage(
        key=key,
        total=config.budget_total(key),
        used=used,
        used_before_active=used_before,
    )


def fixed_phase_usage(segments: list[Segment], kind: PhaseKind, side: Side) -> int:
    """Committed time for a fixed phase (opening/closing/rebuttal) of one side."""
    return sum(
        s.actual_elapsed for s in segments
        if s.kind == kind and s.side == side
    )


def fixed_phase_allotment(config: TrialConfig, kind: PhaseKind, side: Side) -> int:
    """Configured allotment for a fixed phase; rebuttal reports its absolute cap."""
    if kind not in FIXED_KINDS:
        return 0
    if kind == PhaseKind.OPENING:
        return config.plaintiff_opening if side == Side.PLAINTIFF else config.defense_opening
    if kind == PhaseKind.CLOSING:
        return config.plaintiff_closing if side == Side.PLAINTIFF else config.defense_closing
    if kind == PhaseKind.REBUTTAL and side == Side.PLAINTIFF:
        return config.max_rebuttal
    return 0


def rebuttal_cap(segments: list[Segment], config: TrialConfig) -> int:
    """
    Effective rebuttal allotment.

    Rebuttal may use neither more than the configured cap nor more than
    the unused part of the plaintiff's closing time.
    """
    closing_used = next(
        (s.actual_elapsed for s in segments
         if s.kind == PhaseKind.CLOSING and s.side == Side.PLAINTIFF),
        0,
    )
    return max(0, min(config.max_rebuttal, config.plaintiff_closing - closing_used))


def countdown(
    segments: list[Segment],
    config: TrialConfig,
    index: int,
    elapsed: int,
) -> Countdown:
    """Compute remaining and overtime for the active segment."""
    active = segments[index] if 0 <= index < len(segments) else None
    if active is None or active.is_end:
        return Countdown(mode=CountdownMode.NONE)

    if active.is_bounded:
        return Countdown(mode=CountdownMode.FIXED, allotment=active.duration, used=elapsed)

    if active.kind == PhaseKind.REBUTTAL:
        return Countdown(
            mode=CountdownMode.REBUTTAL,
            allotment=rebuttal_cap(segments, config),
            used=elapsed,
        )

    key = budget_for(active)
    assert key is not None, f"examination segment {active.id} maps to no budget"
    usage = budget_usage(segments, config, index, elapsed, key)
    return Countdown(
        mode=CountdownMode.BUDGET,
        allotment=usage.total,
        used=usage.used_before_active + elapsed,
        budget=key,
        used_before_active=usage.used_before_active,
    )


def total_elapsed(segments: list[Segment], index: int, elapsed: int, side: Side) -> int:
    """Total time performed by one side, using the live counter for the active segment."""
    total = 0
    for i, segment in enumerate(segments):
        if segment.side != side:
            continue
        total += elapsed if i == index else segment.actual_elapsed
    return total
