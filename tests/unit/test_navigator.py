"""Unit tests for the navigation state machine."""

import pytest

from trial_clock.engine import TrialNavigator
from trial_clock.models import BranchDecision, PendingPrompt, PhaseKind, Segment, Side


def run_for(navigator: TrialNavigator, seconds: int) -> None:
    """Start the clock if needed and deliver ``seconds`` ticks."""
    if not navigator.running:
        navigator.toggle_run()
    for _ in range(seconds):
        navigator.tick()


def to_cross_prompt(navigator: TrialNavigator) -> None:
    """Walk from the start to the redirect prompt after P witness 1's cross."""
    navigator.jump_to(3)
    navigator.advance()


class TestLifecycle:
    """Tests for starting and resetting."""

    def test_starts_paused_at_first_segment(self, navigator):
        """A new trial sits on the first segment, paused."""
        assert navigator.started
        assert navigator.index == 0
        assert navigator.elapsed == 0
        assert not navigator.running
        assert navigator.prompt == PendingPrompt.NONE

    def test_settings_phase(self, small_config):
        """With start=False the navigator waits in the settings phase."""
        navigator = TrialNavigator(small_config, start=False)

        assert not navigator.started
        assert not navigator.advance()
        assert not navigator.tick()

    def test_configure_only_before_start(self, navigator, default_config):
        """Config is fixed while a trial runs."""
        assert not navigator.configure(default_config)

        navigator.full_reset()
        assert navigator.configure(default_config)
        navigator.start_trial()
        assert len(navigator.segments) == 30

    def test_full_reset_discards_run(self, navigator):
        """Full reset drops segments and all run state but keeps config."""
        run_for(navigator, 30)
        navigator.advance()

        navigator.full_reset()

        assert not navigator.started
        assert navigator.segments == []
        assert navigator.elapsed == 0
        assert navigator.config.plaintiff_opening == 60


class TestClock:
    """Tests for tick and toggle."""

    def test_tick_only_while_running(self, navigator):
        """Ticks are ignored while paused."""
        navigator.tick()
        assert navigator.elapsed == 0

        navigator.toggle_run()
        navigator.tick()
        navigator.tick()
        assert navigator.elapsed == 2

    def test_tick_does_not_commit(self, navigator):
        """Ticks touch only the live counter."""
        run_for(navigator, 5)

        assert navigator.segments[0].actual_elapsed == 0

    def test_toggle(self, navigator):
        """Toggle flips the running flag."""
        navigator.toggle_run()
        assert navigator.running

        navigator.toggle_run()
        assert not navigator.running

    def test_toggle_noop_during_prompt(self, navigator):
        """The clock cannot start while a decision is pending."""
        to_cross_prompt(navigator)

        assert not navigator.toggle_run()
        assert not navigator.running

    def test_toggle_noop_at_end(self, navigator):
        """The clock cannot start on the end marker."""
        navigator.jump_to(13)

        assert not navigator.toggle_run()

    def test_overtime_never_pauses(self, navigator):
        """Running past the allotment keeps counting."""
        run_for(navigator, 90)

        assert navigator.running
        clock = navigator.remaining_and_overtime()
        assert clock.overtime == 30


class TestAdvance:
    """Tests for moving forward."""

    def test_commits_and_moves(self, navigator):
        """Advance commits the live counter and loads the next segment."""
        run_for(navigator, 42)

        assert navigator.advance()

        assert navigator.segments[0].actual_elapsed == 42
        assert navigator.index == 1
        assert navigator.elapsed == 0
        assert not navigator.running

    def test_cross_opens_redirect_prompt(self, navigator):
        """Leaving a cross asks about the redirect instead of moving."""
        navigator.jump_to(3)
        run_for(navigator, 10)

        navigator.advance()

        assert navigator.prompt == PendingPrompt.REDIRECT
        assert navigator.index == 3
        assert navigator.segments[3].actual_elapsed == 10
        assert not navigator.running

    def test_navigation_blocked_during_prompt(self, navigator):
        """Advance, retreat and jump are no-ops while a prompt is pending."""
        to_cross_prompt(navigator)

        assert not navigator.advance()
        assert not navigator.retreat()
        assert not navigator.jump_to(0)
        assert navigator.index == 3

    def test_ticks_during_prompt_ignored(self, navigator):
        """No counter moves while a prompt is pending."""
        to_cross_prompt(navigator)
        navigator.state.running = True  # even a stray running flag must not count

        assert not navigator.tick()
        assert navigator.elapsed == 0

    def test_advance_at_end_stays(self, navigator):
        """Advancing from the end marker clamps there."""
        navigator.jump_to(13)

        assert not navigator.advance()
        assert navigator.index == 13
        assert navigator.at_end


class TestDecisions:
    """Tests for the redirect and recross prompts."""

    def test_redirect_yes(self, navigator):
        """Taking the redirect lands on it and marks it taken."""
        to_cross_prompt(navigator)

        assert navigator.decide_redirect(True)

        assert navigator.prompt == PendingPrompt.NONE
        assert navigator.index == 4
        assert navigator.segments[4].decision == BranchDecision.TAKEN

    def test_redirect_no_skips_both(self, navigator):
        """Declining the redirect skips the redirect and the recross."""
        navigator.segments[4].actual_elapsed = 15  # stale time from an earlier visit
        to_cross_prompt(navigator)

        navigator.decide_redirect(False)

        assert navigator.segments[4].actual_elapsed == 0
        assert navigator.segments[5].actual_elapsed == 0
        assert navigator.segments[4].decision == BranchDecision.SKIPPED
        assert navigator.segments[5].decision == BranchDecision.SKIPPED
        assert navigator.index == 6
        assert navigator.active.label == "D Witness 1 - Direct"

    def test_redirect_then_recross_prompt(self, navigator):
        """Leaving a taken redirect asks about the recross."""
        to_cross_prompt(navigator)
        navigator.decide_redirect(True)
        run_for(navigator, 20)

        navigator.advance()

        assert navigator.prompt == PendingPrompt.RECROSS
        assert navigator.segments[4].actual_elapsed == 20

    def test_recross_no(self, navigator):
        """Declining the recross skips only the recross."""
        to_cross_prompt(navigator)
        navigator.decide_redirect(True)
        run_for(navigator, 20)
        navigator.advance()

        navigator.decide_recross(False)

        assert navigator.index == 6
        assert navigator.segments[4].actual_elapsed == 20
        assert navigator.segments[5].decision == BranchDecision.SKIPPED

    def test_recross_yes(self, navigator):
        """Taking the recross lands on it."""
        to_cross_prompt(navigator)
        navigator.decide_redirect(True)
        navigator.advance()

        navigator.decide_recross(True)

        assert navigator.index == 5
        assert navigator.segments[5].decision == BranchDecision.TAKEN

    def test_wrong_decision_ignored(self, navigator):
        """Answering the wrong prompt does nothing."""
        to_cross_prompt(navigator)

        assert not navigator.decide_recross(True)
        assert navigator.prompt == PendingPrompt.REDIRECT

    def test_zero_second_redirect_stays_navigable(self, navigator):
        """A taken redirect with no recorded time is not skippable."""
        to_cross_prompt(navigator)
        navigator.decide_redirect(True)

        assert not navigator.segments[4].is_skippable


class TestRetreat:
    """Tests for moving backward."""

    def test_resume_prior_value(self, navigator):
        """Returning to a visited segment restores its time."""
        run_for(navigator, 30)
        navigator.advance()
        run_for(navigator, 10)

        navigator.retreat()
        assert navigator.index == 0
        assert navigator.elapsed == 30
        assert navigator.segments[1].actual_elapsed == 10

        navigator.advance()
        assert navigator.index == 1
        assert navigator.elapsed == 10

    def test_retreat_at_first_segment_restarts_counter(self, navigator):
        """Retreat at index 0 commits, then zeroes only the live counter."""
        run_for(navigator, 30)

        assert navigator.retreat()

        assert navigator.index == 0
        assert navigator.elapsed == 0
        assert navigator.segments[0].actual_elapsed == 30
        assert navigator.fixed_phase_usage(PhaseKind.OPENING, Side.PLAINTIFF) == 30
        assert not navigator.running

    def test_first_segment_recount_overwrites(self, navigator):
        """Time counted after the restart replaces the committed value."""
        run_for(navigator, 30)
        navigator.retreat()
        run_for(navigator, 8)

        navigator.advance()

        assert navigator.segments[0].actual_elapsed == 8


class TestJumpAndReset:
    """Tests for jump-to and reset-current."""

    def test_jump_commits_and_loads(self, navigator):
        """Jumping commits the current segment and resumes the target."""
        navigator.segments[7].actual_elapsed = 33
        run_for(navigator, 12)

        assert navigator.jump_to(7)

        assert navigator.segments[0].actual_elapsed == 12
        assert navigator.index == 7
        assert navigator.elapsed == 33
        assert not navigator.running

    def test_jump_unknown_id(self, navigator):
        """Unknown ids are ignored."""
        run_for(navigator, 5)

        assert not navigator.jump_to(999)
        assert navigator.index == 0
        assert navigator.elapsed == 5

    def test_reset_current(self, navigator):
        """Reset zeroes the active segment without moving."""
        navigator.jump_to(2)
        run_for(navigator, 25)
        navigator.advance()
        navigator.retreat()

        assert navigator.reset_current()

        assert navigator.index == 2
        assert navigator.elapsed == 0
        assert navigator.segments[2].actual_elapsed == 0


class TestConservation:
    """Tests for tick accounting across navigation."""

    def test_ticks_equal_recorded_total(self, navigator):
        """Every tick delivered while running ends up recorded exactly once."""
        delivered = 0
        for seconds, move in [
            (10, navigator.advance),
            (20, navigator.advance),
            (5, navigator.retreat),
            (7, navigator.advance),
            (3, navigator.advance),
        ]:
            run_for(navigator, seconds)
            delivered += seconds
            move()

        navigator.advance()  # cross -> redirect prompt
        for _ in range(10):
            navigator.tick()

        assert navigator.recorded_total() == delivered


class TestScenario:
    """End-to-end run of the one-witness-per-side trial."""

    def test_full_trial(self, navigator):
        """Each phase uses its allotment, both prompts answered no."""
        run_for(navigator, 60)  # P opening
        navigator.advance()
        run_for(navigator, 60)  # D opening
        navigator.advance()
        run_for(navigator, 300)  # P direct of P witness
        navigator.advance()
        run_for(navigator, 300)  # D cross of P witness
        navigator.advance()
        assert navigator.prompt == PendingPrompt.REDIRECT
        navigator.decide_redirect(False)

        run_for(navigator, 300)  # D direct of D witness
        navigator.advance()
        run_for(navigator, 300)  # P cross of D witness
        navigator.advance()
        assert navigator.prompt == PendingPrompt.REDIRECT
        navigator.decide_redirect(False)

        assert navigator.active.label == "Plaintiff Closing"
        run_for(navigator, 60)
        navigator.advance()
        run_for(navigator, 60)  # D closing
        navigator.advance()

        # Closing used in full: no rebuttal time left
        clock = navigator.remaining_and_overtime()
        assert clock.allotment == 0
        assert clock.display == "STOP"
        navigator.advance()

        assert navigator.at_end
        plaintiff = navigator.total_elapsed(Side.PLAINTIFF)
        defense = navigator.total_elapsed(Side.DEFENSE)
        assert plaintiff == 60 + 300 + 300 + 60
        assert defense == 60 + 300 + 300 + 60
        assert plaintiff + defense == navigator.recorded_total()
        assert all(
            s.actual_elapsed == 0 for s in navigator.segments if s.conditional
        )

    def test_snapshot(self, navigator):
        """The snapshot carries everything a renderer needs."""
        run_for(navigator, 15)

        snapshot = navigator.snapshot()

        assert snapshot["state"]["index"] == 0
        assert snapshot["countdown"]["remaining"] == 45
        assert snapshot["countdown"]["display"] == "00:45"
        assert snapshot["totals"]["plaintiff"] == 15
        assert snapshot["budgets"]["plaintiff_direct"]["remaining"] == 300


def make_segment(segment_id, kind, side=Side.PLAINTIFF, witness_index=0, witness_side=Side.PLAINTIFF, **kwargs) -> Segment:
    """Build a segment for a hand-made timeline."""
    if kind in (PhaseKind.OPENING, PhaseKind.CLOSING, PhaseKind.END):
        witness_index, witness_side = None, None
        kwargs.setdefault("duration", 0 if kind == PhaseKind.END else 60)
    if kind in (PhaseKind.REDIRECT, PhaseKind.RECROSS):
        kwargs.setdefault("conditional", True)
    return Segment(
        id=segment_id,
        kind=kind,
        side=Side.NONE if kind == PhaseKind.END else side,
        label=f"{kind.value} {segment_id}",
        witness_index=witness_index,
        witness_side=witness_side,
        **kwargs,
    )


def load_timeline(navigator: TrialNavigator, segments: list, index: int) -> None:
    """Replace the navigator's timeline and place the cursor."""
    navigator.state.segments = segments
    navigator.state.index = index
    navigator.state.elapsed = segments[index].actual_elapsed


class TestSkipScans:
    """Tests for passing over untaken conditional segments."""

    def test_advance_skips_matching_conditionals(self, navigator):
        """Untaken conditionals of the same side and witness are passed over."""
        load_timeline(navigator, [
            make_segment(0, PhaseKind.DIRECT),
            make_segment(1, PhaseKind.REDIRECT),
            make_segment(2, PhaseKind.REDIRECT),
            make_segment(3, PhaseKind.CLOSING),
            make_segment(4, PhaseKind.END),
        ], 0)

        assert navigator.advance()

        assert navigator.index == 3
        assert navigator.prompt == PendingPrompt.NONE

    def test_advance_skip_stops_at_end_marker(self, navigator):
        """Exhausting the timeline lands on the end marker."""
        load_timeline(navigator, [
            make_segment(0, PhaseKind.DIRECT),
            make_segment(1, PhaseKind.REDIRECT),
            make_segment(2, PhaseKind.END),
        ], 0)

        navigator.advance()

        assert navigator.at_end

    def test_advance_stops_at_side_mismatch(self, navigator):
        """A skippable conditional of the other side stops the scan."""
        load_timeline(navigator, [
            make_segment(0, PhaseKind.DIRECT),
            make_segment(1, PhaseKind.REDIRECT),
            make_segment(2, PhaseKind.RECROSS, side=Side.DEFENSE),
            make_segment(3, PhaseKind.CLOSING),
            make_segment(4, PhaseKind.END),
        ], 0)

        navigator.advance()

        assert navigator.index == 2

    @pytest.mark.parametrize("witness_index, witness_side", [
        (1, Side.PLAINTIFF),
        (0, Side.DEFENSE),
    ])
    def test_advance_stops_at_witness_mismatch(self, navigator, witness_index, witness_side):
        """Another witness slot, or the other side's witness, stops the scan."""
        load_timeline(navigator, [
            make_segment(0, PhaseKind.DIRECT),
            make_segment(1, PhaseKind.REDIRECT, witness_index=witness_index, witness_side=witness_side),
            make_segment(2, PhaseKind.CLOSING),
            make_segment(3, PhaseKind.END),
        ], 0)

        navigator.advance()

        assert navigator.index == 1

    def test_advance_keeps_taken_zero_second_conditional(self, navigator):
        """A taken conditional with no time is landed on, not skipped."""
        load_timeline(navigator, [
            make_segment(0, PhaseKind.DIRECT),
            make_segment(1, PhaseKind.REDIRECT, decision=BranchDecision.TAKEN),
            make_segment(2, PhaseKind.CLOSING),
            make_segment(3, PhaseKind.END),
        ], 0)

        navigator.advance()

        assert navigator.index == 1
        assert navigator.elapsed == 0

    def test_advance_keeps_conditional_with_time(self, navigator):
        """A conditional holding recorded time is landed on and resumed."""
        load_timeline(navigator, [
            make_segment(0, PhaseKind.DIRECT),
            make_segment(1, PhaseKind.REDIRECT, actual_elapsed=5),
            make_segment(2, PhaseKind.CLOSING),
            make_segment(3, PhaseKind.END),
        ], 0)

        navigator.advance()

        assert navigator.index == 1
        assert navigator.elapsed == 5

    def test_retreat_skips_matching_conditionals(self, navigator):
        """Stepping back passes untaken conditionals of the segment being left."""
        load_timeline(navigator, [
            make_segment(0, PhaseKind.OPENING),
            make_segment(1, PhaseKind.DIRECT),
            make_segment(2, PhaseKind.REDIRECT),
            make_segment(3, PhaseKind.REDIRECT),
            make_segment(4, PhaseKind.DIRECT),
            make_segment(5, PhaseKind.END),
        ], 4)

        assert navigator.retreat()

        assert navigator.index == 1

    def test_retreat_skip_stops_at_first_segment(self, navigator):
        """The backward scan never passes index 0."""
        load_timeline(navigator, [
            make_segment(0, PhaseKind.REDIRECT),
            make_segment(1, PhaseKind.REDIRECT),
            make_segment(2, PhaseKind.DIRECT),
            make_segment(3, PhaseKind.END),
        ], 2)

        navigator.retreat()

        assert navigator.index == 0

    def test_retreat_stops_at_witness_mismatch(self, navigator):
        """A conditional of another witness stops the backward scan."""
        load_timeline(navigator, [
            make_segment(0, PhaseKind.OPENING),
            make_segment(1, PhaseKind.REDIRECT, witness_index=1),
            make_segment(2, PhaseKind.DIRECT),
            make_segment(3, PhaseKind.END),
        ], 2)

        navigator.retreat()

        assert navigator.index == 1

    def test_retreat_stops_at_side_mismatch(self, navigator):
        """A conditional performed by the other side stops the backward scan."""
        load_timeline(navigator, [
            make_segment(0, PhaseKind.OPENING),
            make_segment(1, PhaseKind.REDIRECT),
            make_segment(2, PhaseKind.RECROSS, side=Side.DEFENSE),
            make_segment(3, PhaseKind.DIRECT),
            make_segment(4, PhaseKind.END),
        ], 3)

        navigator.retreat()

        assert navigator.index == 2

    def test_retreat_keeps_taken_zero_second_conditional(self, navigator):
        """A taken conditional with no time is landed on when stepping back."""
        load_timeline(navigator, [
            make_segment(0, PhaseKind.OPENING),
            make_segment(1, PhaseKind.REDIRECT),
            make_segment(2, PhaseKind.REDIRECT, decision=BranchDecision.TAKEN),
            make_segment(3, PhaseKind.DIRECT),
            make_segment(4, PhaseKind.END),
        ], 3)

        navigator.retreat()

        assert navigator.index == 2
