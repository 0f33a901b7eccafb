"""Navigation state machine for a trial run.

TrialNavigator owns the RunState and is the only thing that mutates it.
Every public method is a transition that is total over the reachable
states: when a transition does not apply (no trial started, a prompt is
pending, the cursor sits on the end marker) it is a no-op that returns
False rather than raising.

States:
    idle-at(i)                  cursor on segment i, clock running or paused
    awaiting-redirect-decision  after a cross whose redirect follows
    awaiting-recross-decision   after a redirect whose recross follows
"""

from typing import Any, Optional

from ..models import (
    BranchDecision,
    BudgetKey,
    PendingPrompt,
    PhaseKind,
    RunState,
    Segment,
    Side,
    TrialConfig,
)
from ..utils.logging import get_logger
from .budgets import (
    BudgetUsage,
    Countdown,
    budget_usage,
    countdown,
    fixed_phase_allotment,
    fixed_phase_usage,
    total_elapsed,
)
from .editor import EditResult, EditTarget, apply_edit
from .timeline import generate, validate_timeline

logger = get_logger(__name__)


class TrialNavigator:
    """Drives one trial run through its segment timeline."""

    def __init__(self, config: Optional[TrialConfig] = None, start: bool = True):
        """
        Initialize the navigator.

        Args:
            config: Trial configuration (defaults to TrialConfig())
            start: Generate the timeline immediately; otherwise stay in the
                settings phase until start_trial() is called
        """
        self.config = (config or TrialConfig()).normalized()
        self.state = RunState()
        if start:
            self.start_trial()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def started(self) -> bool:
        """Check if a timeline is loaded (False while in the settings phase)."""
        return self.state.started

    def configure(self, config: TrialConfig) -> bool:
        """Replace the config. Only allowed in the settings phase."""
        if self.started:
            logger.debug("Config is fixed while a trial is running")
            return False
        self.config = config.normalized()
        return True

    def start_trial(self) -> None:
        """Generate the timeline and place the cursor on the first segment, paused."""
        self.state = RunState(segments=generate(self.config))
        logger.info(f"Trial started with {len(self.state.segments)} segments")

    def full_reset(self) -> None:
        """Discard the timeline and all run state, returning to the settings phase."""
        self.state = RunState()
        logger.info("Trial reset; returned to settings")

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def segments(self) -> list[Segment]:
        return self.state.segments

    @property
    def active(self) -> Optional[Segment]:
        return self.state.active

    @property
    def index(self) -> int:
        return self.state.index

    @property
    def elapsed(self) -> int:
        return self.state.elapsed

    @property
    def running(self) -> bool:
        return self.state.running

    @property
    def prompt(self) -> PendingPrompt:
        return self.state.prompt

    @property
    def at_end(self) -> bool:
        return self.state.at_end

    def _idle(self) -> bool:
        """True in an idle-at(i) state of a started trial."""
        return self.started and not self.state.has_prompt

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------

    def tick(self) -> bool:
        """Count one second on the active segment. Ignored unless running."""
        if not self.state.running or not self._idle() or self.at_end:
            return False
        self.state.elapsed += 1
        return True

    def toggle_run(self) -> bool:
        """Start or pause the clock. No-op during a prompt or at the end marker."""
        if not self._idle() or self.at_end:
            return False
        self.state.running = not self.state.running
        logger.debug(f"Clock {'running' if self.state.running else 'paused'} on {self.active.label}")
        return True

    def pause(self) -> None:
        """Stop the clock. Always safe."""
        self.state.running = False

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _commit(self) -> None:
        """Write the live counter into the active segment."""
        active = self.active
        if active is not None and not active.is_end:
            active.actual_elapsed = self.state.elapsed

    def _land(self, index: int) -> None:
        """Move the cursor and resume the target segment's recorded time."""
        last = len(self.segments) - 1
        index = max(0, min(index, last))
        self.state.index = index
        self.state.elapsed = self.segments[index].actual_elapsed
        logger.debug(f"Now at [{index}] {self.segments[index].label} ({self.state.elapsed}s)")

    def _ask(self, prompt: PendingPrompt) -> None:
        self.state.prompt = prompt
        self.state.prompt_origin = self.state.index
        logger.debug(f"Awaiting {prompt.value} decision after {self.active.label}")

    def _clear_prompt(self) -> int:
        origin = self.state.prompt_origin
        assert origin is not None, "prompt pending without an originating segment"
        self.state.prompt = PendingPrompt.NONE
        self.state.prompt_origin = None
        return origin

    def advance(self) -> bool:
        """
        Move to the next segment.

        Commits the live counter first. Leaving a cross that is followed by
        its witness's redirect (or a redirect followed by its recross) opens
        a decision prompt instead of moving. Otherwise conditional segments
        of the same side and witness that were never taken are passed over.
        Advancing from the end marker stays there.
        """
        if not self._idle():
            return False
        self.state.running = False
        if self.at_end:
            return False

        self._commit()
        current = self.active
        following = self.segments[self.state.index + 1]

        if (
            current.kind == PhaseKind.CROSS
            and following.kind == PhaseKind.REDIRECT
            and following.same_witness(current)
        ):
            self._ask(PendingPrompt.REDIRECT)
        elif (
            current.kind == PhaseKind.REDIRECT
            and following.kind == PhaseKind.RECROSS
            and following.same_witness(current)
        ):
            self._ask(PendingPrompt.RECROSS)
        else:
            last = len(self.segments) - 1
            target = self.state.index + 1
            while target < last and self.segments[target].is_skippable and self.segments[target].matches(current):
                target += 1
            self._land(target)

        self._check_invariants()
        return True

    def retreat(self) -> bool:
        """
        Move to the previous segment.

        Commits the live counter first, then steps back past untaken
        conditional segments belonging to the same side and witness as the
        segment being left. At the first segment the committed time is kept
        and only the live counter restarts.
        """
        if not self._idle():
            return False
        self.state.running = False
        self._commit()

        if self.state.index == 0:
            self.state.elapsed = 0
            return True

        leaving = self.active
        target = self.state.index - 1
        while target > 0 and self.segments[target].is_skippable and self.segments[target].matches(leaving):
            target -= 1
        self._land(target)

        self._check_invariants()
        return True

    def decide_redirect(self, take: bool) -> bool:
        """Answer the redirect prompt."""
        if self.state.prompt != PendingPrompt.REDIRECT:
            return False
        self._resolve(self._clear_prompt(), take)
        return True

    def decide_recross(self, take: bool) -> bool:
        """Answer the recross prompt."""
        if self.state.prompt != PendingPrompt.RECROSS:
            return False
        self._resolve(self._clear_prompt(), take)
        return True

    def _resolve(self, origin: int, take: bool) -> None:
        """Land after a decision made while leaving segment ``origin``."""
        self.state.running = False
        source = self.segments[origin]

        if take:
            target = origin + 1
            self.segments[target].decision = BranchDecision.TAKEN
            logger.debug(f"{self.segments[target].label} taken")
        else:
            # Skip every remaining conditional phase of this witness
            last = len(self.segments) - 1
            target = origin + 1
            while (
                target < last
                and self.segments[target].conditional
                and self.segments[target].same_witness(source)
            ):
                skipped = self.segments[target]
                skipped.decision = BranchDecision.SKIPPED
                skipped.actual_elapsed = 0
                logger.debug(f"{skipped.label} skipped")
                target += 1

        self._land(target)
        self._check_invariants()

    def jump_to(self, segment_id: int) -> bool:
        """Jump directly to a segment by id. Unknown ids are ignored."""
        if not self._idle():
            return False
        target = self.state.find_index(segment_id)
        if target is None:
            logger.debug(f"Jump ignored: unknown segment id {segment_id}")
            return False

        self.state.running = False
        self._commit()
        self._land(target)
        self._check_invariants()
        return True

    def reset_current(self) -> bool:
        """Zero the active segment's time without moving."""
        if not self.started:
            return False
        self.state.running = False
        self.state.elapsed = 0
        if not self.active.is_end:
            self.active.actual_elapsed = 0
        logger.debug(f"Reset {self.active.label}")
        return True

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def apply_edit(self, target: EditTarget, seconds: Any) -> EditResult:
        """Apply a retroactive time edit (pauses the clock)."""
        result = apply_edit(self.state, self.config, target, seconds)
        if result.applied:
            self._check_invariants()
        return result

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def remaining_and_overtime(self) -> Countdown:
        """Remaining/overtime for the active segment."""
        return countdown(self.segments, self.config, self.state.index, self.state.elapsed)

    def budget_usage(self, key: BudgetKey) -> BudgetUsage:
        """Usage of one shared examination budget."""
        return budget_usage(self.segments, self.config, self.state.index, self.state.elapsed, key)

    def budget_usages(self) -> dict[BudgetKey, BudgetUsage]:
        """Usage of every shared examination budget."""
        return {key: self.budget_usage(key) for key in BudgetKey}

    def fixed_phase_usage(self, kind: PhaseKind, side: Side) -> int:
        """Committed time for a fixed phase of one side."""
        return fixed_phase_usage(self.segments, kind, side)

    def fixed_phase_allotment(self, kind: PhaseKind, side: Side) -> int:
        """Configured allotment for a fixed phase of one side."""
        return fixed_phase_allotment(self.config, kind, side)

    def total_elapsed(self, side: Side) -> int:
        """Total time used by one side across the trial."""
        return total_elapsed(self.segments, self.state.index, self.state.elapsed, side)

    def recorded_total(self) -> int:
        """Sum of committed time across every segment."""
        return sum(s.actual_elapsed for s in self.segments)

    def snapshot(self) -> dict[str, Any]:
        """Read-only view of the run for a rendering collaborator."""
        clock = self.remaining_and_overtime()
        return {
            "state": self.state.to_dict(),
            "config": self.config.to_dict(),
            "active": self.active.to_dict() if self.active else None,
            "countdown": {
                "mode": clock.mode.value,
                "allotment": clock.allotment,
                "used": clock.used,
                "remaining": clock.remaining,
                "overtime": clock.overtime,
                "stop": clock.is_stop,
                "display": clock.display,
                "budget": clock.budget.value if clock.budget else None,
            },
            "budgets": {
                key.value: {"total": u.total, "used": u.used, "remaining": u.remaining}
                for key, u in self.budget_usages().items()
            } if self.started else {},
            "totals": {
                side.value: self.total_elapsed(side)
                for side in (Side.PLAINTIFF, Side.DEFENSE)
            },
        }

    def _check_invariants(self) -> None:
        validate_timeline(self.segments)
        assert 0 <= self.state.index < len(self.segments), "cursor out of range"
        assert (self.state.prompt == PendingPrompt.NONE) == (self.state.prompt_origin is None), \
            "prompt and prompt origin out of sync"
        assert not (self.state.has_prompt and self.state.running), "clock running during a prompt"
