"""Trial timeline and budget engine.

Provides:
- Timeline generation from a trial config
- Shared-budget and fixed-phase accounting
- The navigation state machine that owns a run
- Retroactive time editing with reconciliation
"""

from .budgets import (
    BudgetUsage,
    Countdown,
    CountdownMode,
    budget_for,
    budget_usage,
    contributes_to,
    countdown,
    fixed_phase_allotment,
    fixed_phase_usage,
    rebuttal_cap,
    total_elapsed,
)
from .editor import (
    EditKind,
    EditResult,
    EditTarget,
    apply_edit,
)
from .navigator import TrialNavigator
from .timeline import (
    expected_length,
    generate,
    validate_timeline,
)

__all__ = [
    # Timeline
    "generate",
    "expected_length",
    "validate_timeline",
    # Budgets
    "BudgetUsage",
    "Countdown",
    "CountdownMode",
    "budget_for",
    "budget_usage",
    "contributes_to",
    "countdown",
    "fixed_phase_allotment",
    "fixed_phase_usage",
    "rebuttal_cap",
    "total_elapsed",
    # Editing
    "EditKind",
    "EditResult",
    "EditTarget",
    "apply_edit",
    # Navigation
    "TrialNavigator",
]
