"""Shared pytest fixtures for Trial Clock tests."""

from pathlib import Path

import pytest

from trial_clock.config import configure
from trial_clock.engine import TrialNavigator
from trial_clock.models import TrialConfig


@pytest.fixture(autouse=True)
def reset_settings():
    """Give every test a fresh global settings instance."""
    configure(None)
    yield
    configure(None)


@pytest.fixture
def default_config() -> TrialConfig:
    """Built-in defaults: 3 witnesses per side."""
    return TrialConfig()


@pytest.fixture
def small_config() -> TrialConfig:
    """One witness per side, every fixed phase 60s, every budget 300s.

    Timeline:
        0 P Opening         1 D Opening
        2 P W1 Direct (P)   3 P W1 Cross (D)   4 P W1 Redirect (P)*  5 P W1 Recross (D)*
        6 D W1 Direct (D)   7 D W1 Cross (P)   8 D W1 Redirect (D)*  9 D W1 Recross (P)*
        10 P Closing        11 D Closing       12 Rebuttal           13 End
    """
    return TrialConfig.simple(
        opening=60,
        directs=300,
        crosses=300,
        closing=60,
        rebuttal=60,
        witnesses=1,
    )


@pytest.fixture
def navigator(small_config: TrialConfig) -> TrialNavigator:
    """Started navigator over the small config."""
    return TrialNavigator(small_config)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """YAML config file using the simple form."""
    path = tmp_path / "trial.yaml"
    path.write_text(
        "simple:\n"
        "  opening: 60\n"
        "  directs: 300\n"
        "  crosses: 300\n"
        "  closing: 60\n"
        "  rebuttal: 60\n"
        "  witnesses: 1\n"
    )
    return path

