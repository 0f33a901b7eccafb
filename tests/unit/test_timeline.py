"""Unit tests for timeline generation."""

import pytest

from trial_clock.engine import expected_length, generate
from trial_clock.models import PhaseKind, Side, TrialConfig


class TestTimelineShape:
    """Tests for segment count and ordering."""

    @pytest.mark.parametrize("plaintiff, defense", [(0, 0), (1, 1), (3, 3), (2, 5)])
    def test_length_formula(self, plaintiff, defense):
        """Timeline has 2 + 4p + 4d + 2 + 1 + 1 segments."""
        config = TrialConfig(plaintiff_witnesses=plaintiff, defense_witnesses=defense)

        segments = generate(config)

        assert len(segments) == 2 + 4 * plaintiff + 4 * defense + 2 + 1 + 1
        assert len(segments) == expected_length(config)

    def test_single_end_marker_last(self, default_config):
        """Exactly one end marker, and it is last."""
        segments = generate(default_config)

        assert segments[-1].kind == PhaseKind.END
        assert sum(1 for s in segments if s.is_end) == 1
        assert segments[-1].duration == 0
        assert segments[-1].side == Side.NONE

    def test_ids_follow_position(self, default_config):
        """Ids are assigned 0, 1, 2, ... in order."""
        segments = generate(default_config)

        assert [s.id for s in segments] == list(range(len(segments)))

    def test_order(self, small_config):
        """Openings, witness quadruples, closings, rebuttal, end."""
        kinds = [s.kind for s in generate(small_config)]

        assert kinds == [
            PhaseKind.OPENING, PhaseKind.OPENING,
            PhaseKind.DIRECT, PhaseKind.CROSS, PhaseKind.REDIRECT, PhaseKind.RECROSS,
            PhaseKind.DIRECT, PhaseKind.CROSS, PhaseKind.REDIRECT, PhaseKind.RECROSS,
            PhaseKind.CLOSING, PhaseKind.CLOSING,
            PhaseKind.REBUTTAL,
            PhaseKind.END,
        ]

    def test_zero_witnesses(self):
        """A side with no witnesses contributes no quadruples."""
        segments = generate(TrialConfig(plaintiff_witnesses=0, defense_witnesses=0))

        assert [s.label for s in segments] == [
            "Plaintiff Opening",
            "Defense Opening",
            "Plaintiff Closing",
            "Defense Closing",
            "Rebuttal",
            "Trial Ended",
        ]


class TestWitnessQuadruple:
    """Tests for the sides performing each examination."""

    def test_plaintiff_witness_sides(self, small_config):
        """Plaintiff witness: P direct, D cross, P redirect, D recross."""
        segments = generate(small_config)
        direct, cross, redirect, recross = segments[2:6]

        assert [s.side for s in (direct, cross, redirect, recross)] == [
            Side.PLAINTIFF, Side.DEFENSE, Side.PLAINTIFF, Side.DEFENSE,
        ]
        assert all(s.witness_side == Side.PLAINTIFF for s in (direct, cross, redirect, recross))
        assert all(s.witness_index == 0 for s in (direct, cross, redirect, recross))

    def test_defense_witness_sides(self, small_config):
        """Defense witness: sides are swapped."""
        segments = generate(small_config)
        direct, cross, redirect, recross = segments[6:10]

        assert [s.side for s in (direct, cross, redirect, recross)] == [
            Side.DEFENSE, Side.PLAINTIFF, Side.DEFENSE, Side.PLAINTIFF,
        ]
        assert all(s.witness_side == Side.DEFENSE for s in (direct, cross, redirect, recross))

    def test_only_redirect_and_recross_conditional(self, small_config):
        """Conditional flag is set on redirect/recross only."""
        segments = generate(small_config)

        conditional = {s.kind for s in segments if s.conditional}
        assert conditional == {PhaseKind.REDIRECT, PhaseKind.RECROSS}

    def test_labels(self, small_config):
        """Witness labels name the calling side, witness number and phase."""
        segments = generate(small_config)

        assert segments[2].label == "P Witness 1 - Direct"
        assert segments[5].label == "P Witness 1 - Recross"
        assert segments[7].label == "D Witness 1 - Cross"


class TestFixedPhases:
    """Tests for openings, closings and rebuttal."""

    def test_durations_from_config(self):
        """Openings and closings carry their configured durations."""
        config = TrialConfig(plaintiff_opening=100, defense_opening=200, plaintiff_closing=300, defense_closing=400)
        segments = generate(config)

        assert segments[0].duration == 100
        assert segments[1].duration == 200
        assert segments[-4].duration == 300
        assert segments[-3].duration == 400

    def test_rebuttal_unbounded_plaintiff(self, small_config):
        """Rebuttal is a plaintiff phase with no fixed duration and no conditional flag."""
        rebuttal = generate(small_config)[-2]

        assert rebuttal.kind == PhaseKind.REBUTTAL
        assert rebuttal.side == Side.PLAINTIFF
        assert rebuttal.duration is None
        assert not rebuttal.conditional

    def test_examinations_unbounded(self, small_config):
        """Examination segments draw from budgets, not fixed durations."""
        segments = generate(small_config)

        assert all(s.duration is None for s in segments if s.is_examination)


class TestDeterminism:
    """Tests for idempotence and input coercion."""

    def test_idempotent(self, default_config):
        """Generating twice yields equal lists."""
        assert generate(default_config) == generate(default_config)

    def test_does_not_share_segments(self, default_config):
        """Each call returns fresh segment objects."""
        first = generate(default_config)
        second = generate(default_config)
        first[0].actual_elapsed = 42

        assert second[0].actual_elapsed == 0

    def test_negative_witness_count_coerced(self):
        """Negative witness counts are treated as zero."""
        segments = generate(TrialConfig(plaintiff_witnesses=-2, defense_witnesses=1))

        assert len(segments) == 2 + 0 + 4 + 2 + 1 + 1
