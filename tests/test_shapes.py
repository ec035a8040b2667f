"""
test_shapes.py - Canonical shape catalog and step breakdowns.

Tests cover:
  - closed-form cut length of each shape under IS 456 and BS 8110
  - missing required dimensions
  - breakdown step sums against the direct formula
"""

import math
import random

import pytest

from rebarcalc.errors import ConfigurationError, MissingDimensionError
from rebarcalc.shapes.catalog import (
    ShapeCode,
    SHAPE_DEFINITIONS,
    get_shape,
    shape_length,
    total_bend_deduction,
    hook_length,
)
from rebarcalc.shapes.breakdown import (
    StepOperation,
    build_breakdown,
    verify_breakdown,
)


class TestShapeDefinitions:
    """Static catalog data."""

    def test_six_shapes(self):
        assert [s.value for s in SHAPE_DEFINITIONS] == ["S1", "S2", "S3", "S4", "S5", "S6"]

    @pytest.mark.parametrize("code,required,angles,hooks", [
        ("S1", ("A",), (), 0),
        ("S2", ("A", "B"), (90, 90), 0),
        ("S3", ("A", "B"), (90, 90, 90, 90, 135, 135), 2),
        ("S4", ("A", "B", "C"), (45, 45), 0),
        ("S5", ("A", "B"), (90,), 0),
        ("S6", ("A",), (180,), 1),
    ])
    def test_definition(self, code, required, angles, hooks):
        shape = get_shape(code)
        assert shape.required_dimensions == required
        assert shape.bend_angles == angles
        assert shape.hook_count == hooks

    def test_unknown_shape_code(self):
        with pytest.raises(ConfigurationError):
            get_shape("S9")


class TestShapeLength:
    """Closed-form formulas."""

    def test_straight(self, is_profile):
        assert shape_length("S1", {"A": 3000}, is_profile, 12) == 3000

    def test_u_shape_scenario(self, is_profile):
        """2000 + 2 x 300 - 2 x (2 x 16) = 2536."""
        assert shape_length("S2", {"A": 2000, "B": 300}, is_profile, 16) == pytest.approx(2536)

    def test_stirrup_scenario(self, is_profile):
        """2(200+300) + 2 x 9 x 10 - 4 x 2 x 10 - 2 x 3 x 10 = 1040."""
        assert shape_length("S3", {"A": 200, "B": 300}, is_profile, 10) == pytest.approx(1040)

    def test_cranked(self, is_profile):
        """1000 + sqrt(300^2 + 400^2) + 400 - 2 x 1 x 12."""
        expected = 1000 + 500 + 400 - 24
        assert shape_length("S4", {"A": 1000, "B": 300, "C": 400}, is_profile, 12) == pytest.approx(expected)

    def test_l_shape(self, is_profile):
        assert shape_length("S5", {"A": 1500, "B": 400}, is_profile, 20) == pytest.approx(1500 + 400 - 40)

    def test_hooked_uses_90_degree_multiplier(self, is_profile):
        """1200 + 9 x 16 - 2 x 16."""
        assert shape_length("S6", {"A": 1200}, is_profile, 16) == pytest.approx(1200 + 144 - 32)

    def test_bs8110_u_shape(self, bs_profile):
        """m90 = 1.5: 2000 + 600 - 2 x 1.5 x 16 = 2552."""
        assert shape_length("S2", {"A": 2000, "B": 300}, bs_profile, 16) == pytest.approx(2552)

    def test_bs8110_stirrup(self, bs_profile):
        """1000 + 2 x 8 x 10 - 4 x 1.5 x 10 - 2 x 2.5 x 10 = 1050."""
        assert shape_length("S3", {"A": 200, "B": 300}, bs_profile, 10) == pytest.approx(1050)

    def test_extra_dimensions_ignored(self, is_profile):
        assert shape_length("S1", {"A": 3000, "B": 999}, is_profile, 12) == 3000

    @pytest.mark.parametrize("code,dims,missing", [
        ("S1", {}, "A"),
        ("S2", {"A": 2000}, "B"),
        ("S3", {"B": 300}, "A"),
        ("S4", {"A": 1000, "B": 300}, "C"),
        ("S5", {"A": 1000, "B": None}, "B"),
    ])
    def test_missing_dimension_raises(self, is_profile, code, dims, missing):
        with pytest.raises(MissingDimensionError) as exc:
            shape_length(code, dims, is_profile, 12)
        assert exc.value.dimension == missing
        assert exc.value.shape_code == code

    def test_total_bend_deduction_stirrup(self, is_profile):
        shape = get_shape(ShapeCode.STIRRUP)
        assert total_bend_deduction(shape, 10, is_profile) == pytest.approx(4 * 20 + 2 * 30)

    def test_hook_length(self, is_profile, bs_profile):
        assert hook_length(10, is_profile) == 90
        assert hook_length(10, bs_profile) == 80


class TestBreakdown:
    """Step breakdowns reproduce the formula."""

    def test_stirrup_steps(self, is_profile):
        breakdown = build_breakdown("S3", {"A": 200, "B": 300}, is_profile, 10)
        assert breakdown.steps[0].operation == StepOperation.CONSTANT
        assert breakdown.steps[0].value == 1000
        assert breakdown.hook_total == pytest.approx(180)
        assert breakdown.deduction_total == pytest.approx(140)
        assert breakdown.step_total == pytest.approx(1040)
        assert breakdown.final_length == pytest.approx(1040)

    def test_cranked_has_sqrt_step(self, is_profile):
        breakdown = build_breakdown("S4", {"A": 1000, "B": 300, "C": 400}, is_profile, 12)
        sqrt_steps = [s for s in breakdown.steps if s.operation == StepOperation.SQRT]
        assert len(sqrt_steps) == 1
        assert sqrt_steps[0].value == pytest.approx(500)

    def test_hooked_flags(self, is_profile):
        breakdown = build_breakdown("S6", {"A": 1200}, is_profile, 16)
        assert [s.is_hook for s in breakdown.steps] == [False, True, False]
        assert [s.is_deduction for s in breakdown.steps] == [False, False, True]

    def test_missing_dimension_raises(self, is_profile):
        with pytest.raises(MissingDimensionError):
            build_breakdown("S2", {"A": 2000}, is_profile, 12)

    def test_format_text_ends_with_cut_length(self, is_profile):
        text = build_breakdown("S2", {"A": 2000, "B": 300}, is_profile, 16).format_text()
        assert text.splitlines()[-1].strip().startswith("= ")
        assert "2536.0" in text

    def test_to_dict(self, is_profile):
        data = build_breakdown("S5", {"A": 1500, "B": 400}, is_profile, 20).to_dict()
        assert data["shape_code"] == "S5"
        assert data["final_length"] == pytest.approx(1860)
        assert len(data["steps"]) == 3

    @pytest.mark.parametrize("profile_fixture", ["is_profile", "bs_profile"])
    def test_step_sum_matches_formula_for_random_bars(self, request, profile_fixture):
        """Breakdown equivalence over a seeded sample of shapes and dimensions."""
        profile = request.getfixturevalue(profile_fixture)
        rng = random.Random(456)
        diameters = [6, 8, 10, 12, 16, 20, 25, 32]
        for _ in range(300):
            code = rng.choice(list(ShapeCode))
            dims = {name: rng.uniform(50, 12000) for name in ("A", "B", "C", "D")}
            d = rng.choice(diameters)
            breakdown = build_breakdown(code, dims, profile, d)
            direct = shape_length(code, dims, profile, d)
            assert verify_breakdown(breakdown)
            assert math.isclose(breakdown.step_total, direct, abs_tol=0.1)
