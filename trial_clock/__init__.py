"""Trial Clock - Mock Trial Timer."""

__version__ = "0.1.0"

from .engine import EditTarget, TrialNavigator, generate
from .models import BudgetKey, PhaseKind, Segment, Side, TrialConfig

__all__ = [
    "__version__",
    "BudgetKey",
    "EditTarget",
    "PhaseKind",
    "Segment",
    "Side",
    "TrialConfig",
    "TrialNavigator",
    "generate",
]
