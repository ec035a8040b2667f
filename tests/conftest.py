"""
conftest.py - Shared pytest fixtures for the RebarCalc test suite.

All tests are pure unit tests of the calculation engine. No files are
written apart from pytest's tmp_path.
"""

import pytest

from rebarcalc.models.types import MemberType, Direction
from rebarcalc.profiles.registry import ProfileRegistry, new_project_config
from rebarcalc.structural.members import Member, BarDescription, EdgeValues


# ---------------------------------------------------------------------------
# Profiles and configurations
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def registry():
    """Registry loaded from the packaged code_profiles.yaml."""
    return ProfileRegistry()


@pytest.fixture(scope="session")
def is_profile(registry):
    """IS 456: cover 25, hook 9d, bends 1d/2d/3d."""
    return registry.require("IS456")


@pytest.fixture(scope="session")
def bs_profile(registry):
    """BS 8110: cover 25, hook 8d, bends 0.5d/1.5d/2.5d, BS 4449 weights."""
    return registry.require("BS8110")


@pytest.fixture
def is_config(is_profile):
    return new_project_config("Test Project", is_profile)


@pytest.fixture
def bs_config(bs_profile):
    return new_project_config("Test Project", bs_profile)


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------

@pytest.fixture
def slab():
    """
    Slab 3050 x 4000, depth 125, cover 20 -> rise r = 85.

    Edge beams: left/right 230, top/bottom 300.
    Top extensions: left/right 700, top/bottom 900.
    """
    return Member(
        id="S1",
        member_type=MemberType.SLAB,
        span_x=3050,
        span_y=4000,
        depth=125,
        cover=20,
        edge_widths=EdgeValues(left=230, right=230, top=300, bottom=300),
        extensions=EdgeValues(left=700, right=700, top=900, bottom=900),
    )


@pytest.fixture
def plain_slab():
    """Slab 3050 x 4000 without edge beams or extensions."""
    return Member(id="S2", member_type=MemberType.SLAB, span_x=3050, span_y=4000,
                  depth=125, cover=20)


@pytest.fixture
def beam():
    """Beam 5000 long, 230 wide, 450 deep, cover 25."""
    return Member(id="B1", member_type=MemberType.BEAM, span_x=5000, span_y=230,
                  depth=450, cover=25)


@pytest.fixture
def column():
    """Column 300 x 450, height 3000, cover 40."""
    return Member(id="C1", member_type=MemberType.COLUMN, span_x=300, span_y=450,
                  depth=3000, cover=40)


@pytest.fixture
def footing():
    """Footing 2000 x 1500, depth 500, cover 50."""
    return Member(id="F1", member_type=MemberType.FOOTING, span_x=2000, span_y=1500,
                  depth=500, cover=50)


@pytest.fixture
def make_bar():
    """Factory for bar descriptions with sensible defaults."""
    def _make(bar_type, diameter=10, direction=Direction.NONE, spacing=150, **kwargs):
        return BarDescription(
            id=kwargs.pop("id", "bar-1"),
            bar_type=bar_type,
            diameter=diameter,
            direction=direction,
            spacing=spacing,
            **kwargs,
        )
    return _make
