"""Trial summary snapshot.

Builds an immutable, read-only view of a run for the summary panel and
the exporters. Exporters receive only this snapshot, never the navigator,
so an export can never mutate run state.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..engine import TrialNavigator
from ..exceptions import ExportError
from ..models import BudgetKey, PhaseKind, Side
from ..utils.logging import get_logger
from ..utils.timefmt import format_time

logger = get_logger(__name__)


@dataclass(frozen=True)
class SegmentRow:
    """One timed segment in a side's column."""

    segment_id: int
    label: str
    elapsed: int
    active: bool = False

    @property
    def formatted(self) -> str:
        return format_time(self.elapsed)


@dataclass(frozen=True)
class AllotmentRow:
    """Usage against one allotment ("used / allotted")."""

    label: str
    used: int
    allotted: int

    @property
    def over(self) -> bool:
        return self.used > self.allotted

    @property
    def formatted(self) -> str:
        return f"{format_time(self.used)} / {format_time(self.allotted)}"


@dataclass(frozen=True)
class SideSummary:
    """Everything recorded for one side."""

    side: Side
    segments: tuple[SegmentRow, ...] = ()
    allotments: tuple[AllotmentRow, ...] = ()
    total: int = 0

    @property
    def title(self) -> str:
        return self.side.value.capitalize()


@dataclass(frozen=True)
class TrialSummary:
    """Read-only summary of a trial run."""

    plaintiff: SideSummary
    defense: SideSummary
    active_label: Optional[str] = None
    ended: bool = False
    generated_at: datetime = field(default_factory=datetime.now)

    @property
    def sides(self) -> tuple[SideSummary, SideSummary]:
        return (self.plaintiff, self.defense)


_SIDE_BUDGETS = {
    Side.PLAINTIFF: (BudgetKey.PLAINTIFF_DIRECT, BudgetKey.PLAINTIFF_CROSS),
    Side.DEFENSE: (BudgetKey.DEFENSE_DIRECT, BudgetKey.DEFENSE_CROSS),
}


def _side_summary(navigator: TrialNavigator, side: Side, include_untimed: bool) -> SideSummary:
    rows = []
    for i, segment in enumerate(navigator.segments):
        if segment.side != side or segment.is_end:
            continue
        active = i == navigator.index
        elapsed = navigator.elapsed if active else segment.actual_elapsed
        if elapsed > 0 or include_untimed:
            rows.append(SegmentRow(
                segment_id=segment.id,
                label=segment.short_label,
                elapsed=elapsed,
                active=active,
            ))

    direct_key, cross_key = _SIDE_BUDGETS[side]
    direct = navigator.budget_usage(direct_key)
    cross = navigator.budget_usage(cross_key)

    allotments = [
        AllotmentRow(
            "Opening",
            navigator.fixed_phase_usage(PhaseKind.OPENING, side),
            navigator.fixed_phase_allotment(PhaseKind.OPENING, side),
        ),
        AllotmentRow("Directs", direct.used, direct.total),
        AllotmentRow("Crosses", cross.used, cross.total),
        AllotmentRow(
            "Closing",
            navigator.fixed_phase_usage(PhaseKind.CLOSING, side),
            navigator.fixed_phase_allotment(PhaseKind.CLOSING, side),
        ),
    ]
    if side == Side.PLAINTIFF:
        allotments.append(AllotmentRow(
            "Rebuttal",
            navigator.fixed_phase_usage(PhaseKind.REBUTTAL, side),
            navigator.fixed_phase_allotment(PhaseKind.REBUTTAL, side),
        ))

    return SideSummary(
        side=side,
        segments=tuple(rows),
        allotments=tuple(allotments),
        total=navigator.total_elapsed(side),
    )


def build_summary(navigator: TrialNavigator, include_untimed: bool = False) -> TrialSummary:
    """
    Build a summary snapshot of the run.

    Args:
        navigator: Navigator owning the run
        include_untimed: Also list segments with no recorded time

    Returns:
        TrialSummary snapshot
    """
    active = navigator.active
    return TrialSummary(
        plaintiff=_side_summary(navigator, Side.PLAINTIFF, include_untimed),
        defense=_side_summary(navigator, Side.DEFENSE, include_untimed),
        active_label=active.label if active else None,
        ended=navigator.at_end,
    )


def format_summary_text(summary: TrialSummary) -> str:
    """Render a summary as plain text."""
    lines = [
        "MOCK TRIAL SUMMARY",
        f"Generated: {summary.generated_at.strftime('%Y-%m-%d %H:%M:%S')}",
    ]
    if summary.active_label:
        lines.append(f"Current phase: {summary.active_label}")
    lines.append("")

    for side in summary.sides:
        lines.append(f"{side.title} (total {format_time(side.total)})")
        if side.segments:
            for row in side.segments:
                marker = " *" if row.active else ""
                lines.append(f"  {row.label:<32} {row.formatted}{marker}")
        else:
            lines.append("  No time recorded.")
        lines.append("  Overall usage:")
        for allotment in side.allotments:
            flag = "  OVER" if allotment.over else ""
            lines.append(f"    {allotment.label + ':':<12} {allotment.formatted}{flag}")
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"


def write_summary_text(summary: TrialSummary, output_path: Path) -> Path:
    """
    Export a summary as a plain text file.

    Raises:
        ExportError: If the file cannot be written
    """
    output_path = Path(output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(format_summary_text(summary), encoding="utf-8")
    except OSError as e:
        raise ExportError(f"Could not write {output_path}: {e}") from e

    logger.info(f"Exported summary text to {output_path}")
    return output_path
