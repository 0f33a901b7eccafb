"""Timeline generation.

Expands a TrialConfig into the fixed, ordered list of trial segments:

    openings -> plaintiff witnesses -> defense witnesses -> closings
    -> rebuttal -> end marker

Each witness contributes a quadruple: direct (calling side), cross
(opposing side), redirect (calling side, conditional) and recross
(opposing side, conditional). Nothing else may reorder segments.
"""

from ..models import PhaseKind, Segment, Side, TrialConfig
from ..utils.logging import get_logger

logger = get_logger(__name__)

WITNESS_PHASES = (
    (PhaseKind.DIRECT, False, False),  # (kind, examined by opposite side, conditional)
    (PhaseKind.CROSS, True, False),
    (PhaseKind.REDIRECT, False, True),
    (PhaseKind.RECROSS, True, True),
)


def generate(config: TrialConfig) -> list[Segment]:
    """
    Generate the full segment sequence for a trial.

    Deterministic and side-effect free: the same config always yields an
    equal list with ids assigned 0, 1, 2, ... in order.

    Args:
        config: Trial configuration (coerced to non-negative ints)

    Returns:
        Ordered list of segments ending with exactly one END marker
    """
    config = config.normalized()
    segments: list[Segment] = []

    def add(**kwargs) -> None:
        segments.append(Segment(id=len(segments), **kwargs))

    add(kind=PhaseKind.OPENING, side=Side.PLAINTIFF, label="Plaintiff Opening",
        duration=config.plaintiff_opening)
    add(kind=PhaseKind.OPENING, side=Side.DEFENSE, label="Defense Opening",
        duration=config.defense_opening)

    for calling_side in (Side.PLAINTIFF, Side.DEFENSE):
        for i in range(config.witness_count(calling_side)):
            for kind, by_opponent, conditional in WITNESS_PHASES:
                add(
                    kind=kind,
                    side=calling_side.opposite if by_opponent else calling_side,
                    label=f"{calling_side.abbreviation} Witness {i + 1} - {kind.value.capitalize()}",
                    witness_index=i,
                    witness_side=calling_side,
                    conditional=conditional,
                )

    add(kind=PhaseKind.CLOSING, side=Side.PLAINTIFF, label="Plaintiff Closing",
        duration=config.plaintiff_closing)
    add(kind=PhaseKind.CLOSING, side=Side.DEFENSE, label="Defense Closing",
        duration=config.defense_closing)
    # Rebuttal's ceiling is dynamic (see budgets.rebuttal_cap)
    add(kind=PhaseKind.REBUTTAL, side=Side.PLAINTIFF, label="Rebuttal")
    add(kind=PhaseKind.END, side=Side.NONE, label="Trial Ended", duration=0)

    validate_timeline(segments)
    logger.debug(
        f"Generated {len(segments)} segments "
        f"({config.plaintiff_witnesses} P / {config.defense_witnesses} D witnesses)"
    )
    return segments


def expected_length(config: TrialConfig) -> int:
    """Number of segments generate() produces for a config."""
    config = config.normalized()
    return 2 + 4 * config.plaintiff_witnesses + 4 * config.defense_witnesses + 2 + 1 + 1


def validate_timeline(segments: list[Segment]) -> None:
    """Assert the structural invariants of a generated timeline."""
    assert segments, "timeline is empty"
    assert segments[-1].is_end, "timeline must end with the end marker"
    assert sum(1 for s in segments if s.is_end) == 1, "exactly one end marker"
    assert segments[-1].duration == 0 and not segments[-1].conditional
    assert [s.id for s in segments] == sorted(s.id for s in segments), "ids out of order"
