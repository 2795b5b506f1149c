"""
Shared fixtures for bracket layout tests.
"""
import sys
from pathlib import Path

import matplotlib
matplotlib.use("Agg")

import pytest

# Add src/ to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fixture_config import FixtureConfig, SpacingInput
from bracket_layout import BracketLayout
from shelf_units import to_inches

SCENARIO_SPACING = 28.96875


@pytest.fixture
def config():
    """Default fixture configuration (30in shelf, M4 hardware)."""
    return FixtureConfig()


@pytest.fixture
def geometry(config):
    return config.geometry()


@pytest.fixture
def spacing():
    """The reference 28-31/32in parallel spacing with a 1mm nut gap."""
    return SpacingInput(front=SCENARIO_SPACING, nut_clearance=to_inches(1.0))


@pytest.fixture
def layout(geometry, spacing):
    return BracketLayout(geometry, spacing)


@pytest.fixture
def tapered_layout(geometry):
    """Pipes wider apart at the back than at the front."""
    return BracketLayout(geometry, SpacingInput(front=SCENARIO_SPACING, back=29.5,
                                                nut_clearance=to_inches(1.0)))
