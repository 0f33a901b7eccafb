"""Trial configuration model."""

from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import yaml

from ..exceptions import ConfigError
from ..utils.timefmt import coerce_seconds


class BudgetKey(str, Enum):
    """Shared examination budgets.

    Each budget is consumed by one side's examinations of one side's
    witnesses, across every witness on that side.
    """

    PLAINTIFF_DIRECT = "plaintiff_direct"  # P direct + redirect, P witnesses
    DEFENSE_CROSS = "defense_cross"  # D cross + recross, P witnesses
    DEFENSE_DIRECT = "defense_direct"  # D direct + redirect, D witnesses
    PLAINTIFF_CROSS = "plaintiff_cross"  # P cross + recross, D witnesses

    @property
    def display_name(self) -> str:
        """Readable budget name."""
        return BUDGET_NAMES[self]


BUDGET_NAMES = {
    BudgetKey.PLAINTIFF_DIRECT: "P. Total Direct/Redirect Budget",
    BudgetKey.DEFENSE_CROSS: "D. Total Cross/Recross (P. Wits) Budget",
    BudgetKey.DEFENSE_DIRECT: "D. Total Direct/Redirect Budget",
    BudgetKey.PLAINTIFF_CROSS: "P. Total Cross/Recross (D. Wits) Budget",
}


# Keys accepted by TrialConfig.simple
SIMPLE_KEYS = ("opening", "directs", "crosses", "closing", "rebuttal", "witnesses")


@dataclass
class TrialConfig:
    """Configured durations (seconds) and witness counts for one run."""

    plaintiff_opening: int = 5 * 60
    defense_opening: int = 5 * 60
    plaintiff_closing: int = 7 * 60
    defense_closing: int = 7 * 60
    max_rebuttal: int = 3 * 60
    plaintiff_witnesses: int = 3
    defense_witnesses: int = 3
    plaintiff_direct_budget: int = 25 * 60
    defense_cross_budget: int = 18 * 60
    defense_direct_budget: int = 25 * 60
    plaintiff_cross_budget: int = 18 * 60

    @classmethod
    def simple(
        cls,
        opening: int = 5 * 60,
        directs: int = 25 * 60,
        crosses: int = 18 * 60,
        closing: int = 7 * 60,
        rebuttal: int = 3 * 60,
        witnesses: int = 3,
    ) -> "TrialConfig":
        """
        Build a symmetric config where both sides share every setting.

        Args:
            opening: Opening duration per side
            directs: Direct/redirect budget per side
            crosses: Cross/recross budget per side
            closing: Closing duration per side
            rebuttal: Rebuttal cap
            witnesses: Witness count per side

        Returns:
            Normalized TrialConfig
        """
        return cls(
            plaintiff_opening=opening,
            defense_opening=opening,
            plaintiff_closing=closing,
            defense_closing=closing,
            max_rebuttal=rebuttal,
            plaintiff_witnesses=witnesses,
            defense_witnesses=witnesses,
            plaintiff_direct_budget=directs,
            defense_cross_budget=crosses,
            defense_direct_budget=directs,
            plaintiff_cross_budget=crosses,
        ).normalized()

    def normalized(self) -> "TrialConfig":
        """Return a copy with every field coerced to a non-negative int."""
        return TrialConfig(**{
            f.name: coerce_seconds(getattr(self, f.name)) for f in fields(self)
        })

    def budget_total(self, key: BudgetKey) -> int:
        """Configured total for a shared budget."""
        return {
            BudgetKey.PLAINTIFF_DIRECT: self.plaintiff_direct_budget,
            BudgetKey.DEFENSE_CROSS: self.defense_cross_budget,
            BudgetKey.DEFENSE_DIRECT: self.defense_direct_budget,
            BudgetKey.PLAINTIFF_CROSS: self.plaintiff_cross_budget,
        }[key]

    def witness_count(self, side: str) -> int:
        """Number of witnesses called by a side."""
        if side == "plaintiff":
            return self.plaintiff_witnesses
        if side == "defense":
            return self.defense_witnesses
        return 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for YAML/JSON serialization."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "TrialConfig":
        """Create from dictionary, ignoring unknown keys.

        Missing keys keep their defaults; malformed values coerce to 0.
        """
        data = data or {}
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known}).normalized()

    @classmethod
    def from_record(cls, data: dict[str, Any]) -> "TrialConfig":
        """Create from a config mapping, expanding a ``simple`` entry.

        Unknown keys, including unknown ``simple`` keys, are ignored.
        """
        if isinstance(data.get("simple"), dict):
            simple = data["simple"]
            return cls.simple(**{k: v for k, v in simple.items() if k in SIMPLE_KEYS})
        return cls.from_dict(data)

    @classmethod
    def load(cls, path: Path) -> "TrialConfig":
        """
        Load a config record from a YAML file.

        A top-level ``simple`` mapping is expanded via ``TrialConfig.simple``.

        Raises:
            ConfigError: If the file is missing or not a YAML mapping
        """
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Malformed config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

        return cls.from_record(data)
