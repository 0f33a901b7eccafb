"""Retroactive time editing and reconciliation.

Three kinds of edit are supported:

- segment: overwrite one segment's recorded elapsed time
- budget: set the remaining time of the active segment's shared budget,
  redistributing recorded usage backward when needed
- fixed: set the remaining time of an opening/closing/rebuttal segment

Configured totals are never changed; only recorded usage moves.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..models import FIXED_KINDS, BranchDecision, BudgetKey, PhaseKind, RunState, Segment, TrialConfig
from ..utils.logging import get_logger
from ..utils.timefmt import coerce_seconds
from .budgets import budget_for, budget_usage, rebuttal_cap

logger = get_logger(__name__)


class EditKind(str, Enum):
    """What an edit targets."""

    SEGMENT = "segment"
    BUDGET = "budget"
    FIXED = "fixed"


@dataclass
class EditTarget:
    """Target of a time edit."""

    kind: EditKind
    segment_id: Optional[int] = None
    budget: Optional[BudgetKey] = None

    @classmethod
    def segment_elapsed(cls, segment_id: int) -> "EditTarget":
        """Edit a segment's recorded elapsed time."""
        return cls(kind=EditKind.SEGMENT, segment_id=segment_id)

    @classmethod
    def budget_remaining(cls, budget: Optional[BudgetKey] = None) -> "EditTarget":
        """Edit the active segment's budget remaining (optionally naming the budget)."""
        return cls(kind=EditKind.BUDGET, budget=budget)

    @classmethod
    def fixed_remaining(cls, segment_id: Optional[int] = None) -> "EditTarget":
        """Edit a fixed-duration segment's remaining time (active segment by default)."""
        return cls(kind=EditKind.FIXED, segment_id=segment_id)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EditTarget":
        """Create from dictionary (as used in replay scripts)."""
        budget = data.get("budget")
        return cls(
            kind=EditKind(data["kind"]),
            segment_id=data.get("segment_id"),
            budget=BudgetKey(budget) if budget else None,
        )


@dataclass
class EditResult:
    """Outcome of an edit."""

    applied: bool
    elapsed: int
    message: str = ""
    adjusted: list[int] = field(default_factory=list)  # Ids whose recorded time changed


def apply_edit(
    state: RunState,
    config: TrialConfig,
    target: EditTarget,
    seconds: Any,
) -> EditResult:
    """
    Apply a time edit to the run state in place.

    Any running tick is paused first. Invalid targets are no-ops.

    Args:
        state: Run state to mutate
        config: Trial configuration
        target: What to edit
        seconds: Elapsed seconds (segment edits) or desired remaining seconds

    Returns:
        EditResult describing the change
    """
    state.running = False
    value = coerce_seconds(seconds)

    if not state.started:
        return EditResult(applied=False, elapsed=state.elapsed, message="Trial not started")

    if target.kind == EditKind.SEGMENT:
        return _edit_segment_elapsed(state, target.segment_id, value)
    if target.kind == EditKind.BUDGET:
        return _edit_budget_remaining(state, config, target.budget, value)
    return _edit_fixed_remaining(state, config, target.segment_id, value)


def _rejected(state: RunState, message: str) -> EditResult:
    logger.debug(f"Edit ignored: {message}")
    return EditResult(applied=False, elapsed=state.elapsed, message=message)


def _edit_segment_elapsed(state: RunState, segment_id: Optional[int], value: int) -> EditResult:
    index = state.find_index(segment_id) if segment_id is not None else None
    if index is None:
        return _rejected(state, f"Unknown segment: {segment_id}")

    segment = state.segments[index]
    if segment.is_end:
        return _rejected(state, "The end marker has no time to edit")

    segment.actual_elapsed = value
    if segment.conditional and value > 0:
        segment.decision = BranchDecision.TAKEN
    if index == state.index:
        state.elapsed = value

    logger.debug(f"Set {segment.label} elapsed to {value}s")
    return EditResult(applied=True, elapsed=state.elapsed, adjusted=[segment.id])


def _edit_budget_remaining(
    state: RunState,
    config: TrialConfig,
    budget: Optional[BudgetKey],
    desired_remaining: int,
) -> EditResult:
    active = state.active
    key = budget_for(active)
    if key is None:
        return _rejected(state, "Active segment does not draw from a shared budget")
    if budget is not None and budget != key:
        return _rejected(state, f"Active segment draws from {key.value}, not {budget.value}")

    total = config.budget_total(key)
    desired_remaining = min(desired_remaining, total)
    used_before = budget_usage(state.segments, config, state.index, state.elapsed, key).used_before_active

    desired_used = total - desired_remaining
    needed = desired_used - used_before
    adjusted: list[int] = []

    if needed >= 0:
        new_elapsed = min(needed, max(0, total - used_before))
    else:
        # Prior segments already overshoot: give time back, nearest first
        new_elapsed = 0
        excess = -needed
        for i in range(state.index - 1, -1, -1):
            if excess <= 0:
                break
            segment = state.segments[i]
            if budget_for(segment) != key or segment.actual_elapsed <= 0:
                continue
            deduct = min(excess, segment.actual_elapsed)
            segment.actual_elapsed -= deduct
            excess -= deduct
            adjusted.append(segment.id)

    state.elapsed = new_elapsed
    active.actual_elapsed = new_elapsed
    if active.conditional and new_elapsed > 0:
        active.decision = BranchDecision.TAKEN
    adjusted.insert(0, active.id)

    logger.debug(
        f"Set {key.value} remaining to {desired_remaining}s: "
        f"active elapsed {new_elapsed}s, adjusted {len(adjusted) - 1} prior segment(s)"
    )
    return EditResult(applied=True, elapsed=new_elapsed, adjusted=adjusted)


def _effective_allotment(segments: list[Segment], config: TrialConfig, segment: Segment) -> Optional[int]:
    if segment.kind not in FIXED_KINDS:
        return None
    if segment.kind == PhaseKind.REBUTTAL:
        return rebuttal_cap(segments, config)
    return segment.duration or 0


def _edit_fixed_remaining(
    state: RunState,
    config: TrialConfig,
    segment_id: Optional[int],
    desired_remaining: int,
) -> EditResult:
    index = state.index if segment_id is None else state.find_index(segment_id)
    if index is None:
        return _rejected(state, f"Unknown segment: {segment_id}")

    segment = state.segments[index]
    allotment = _effective_allotment(state.segments, config, segment)
    if allotment is None:
        return _rejected(state, f"{segment.label} has no fixed allotment")

    final_elapsed = max(0, min(allotment - desired_remaining, allotment))
    segment.actual_elapsed = final_elapsed
    if index == state.index:
        state.elapsed = final_elapsed

    logger.debug(f"Set {segment.label} remaining to {desired_remaining}s (elapsed {final_elapsed}s)")
    return EditResult(applied=True, elapsed=state.elapsed, adjusted=[segment.id])
