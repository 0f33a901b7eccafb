"""Data models for Trial Clock."""

from .segment import (
    BranchDecision,
    EXAMINATION_KINDS,
    FIXED_KINDS,
    PhaseKind,
    Segment,
    Side,
)
from .state import (
    PendingPrompt,
    RunState,
)
from .trial_config import (
    BUDGET_NAMES,
    BudgetKey,
    TrialConfig,
)

__all__ = [
    # Segment
    "BranchDecision",
    "EXAMINATION_KINDS",
    "FIXED_KINDS",
    "PhaseKind",
    "Segment",
    "Side",
    # Run state
    "PendingPrompt",
    "RunState",
    # Config
    "BUDGET_NAMES",
    "BudgetKey",
    "TrialConfig",
]
