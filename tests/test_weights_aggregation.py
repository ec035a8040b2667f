"""
test_weights_aggregation.py - Unit weights, totals and summary groupings.
"""

import math
import random

import pytest

from rebarcalc.errors import AggregationError
from rebarcalc.materials.aggregator import (
    GroupSummary,
    GrandTotal,
    check_conservation,
    filter_by_member_type,
    partition_by_member_type,
    summarize,
)
from rebarcalc.materials.weights import bar_weight, total_length_m, unit_weight
from rebarcalc.models.types import MemberType, SHAPE_MEMBER_TYPES, VALID_DIAMETERS
from rebarcalc.schedule.engine import ShapeBar, calculate_shape_bar
from rebarcalc.shapes.catalog import ShapeCode


def _random_shape_bars(seed, count, config):
    rng = random.Random(seed)
    bars = []
    for i in range(count):
        code = rng.choice(list(ShapeCode))
        dims = {name: rng.uniform(200, 8000) for name in ("A", "B", "C")}
        bar = ShapeBar(
            id=f"R{i}",
            member_type=rng.choice(SHAPE_MEMBER_TYPES),
            shape_code=code,
            diameter=rng.choice(VALID_DIAMETERS),
            dimensions=dims,
            quantity=rng.randint(1, 60),
        )
        bars.append(calculate_shape_bar(bar, config))
    return bars


class TestUnitWeight:

    def test_d12(self):
        assert unit_weight(12) == pytest.approx(0.888, abs=1e-3)

    @pytest.mark.parametrize("diameter", VALID_DIAMETERS)
    def test_formula(self, diameter):
        assert unit_weight(diameter) == pytest.approx(diameter ** 2 / 162)

    def test_profile_table_overrides(self, bs_profile):
        assert unit_weight(16, bs_profile.unit_weights) == pytest.approx(1.579)

    def test_table_falls_back_for_missing_diameter(self):
        assert unit_weight(40, {12: 0.888}) == pytest.approx(1600 / 162)

    def test_weight_of_length(self):
        """weight(d, L) = d^2/162 x L/1000."""
        rng = random.Random(7)
        for _ in range(200):
            d = rng.choice(VALID_DIAMETERS)
            length = rng.uniform(0, 20000)
            weight = bar_weight(d, length)
            assert weight >= 0
            assert weight == pytest.approx(d * d / 162 * length / 1000)

    def test_total_length(self):
        assert total_length_m(3000, 10) == 30


class TestStraightBarScenario:

    def test_straight_3000_d12_qty10(self, is_config):
        bar = ShapeBar(id="B1", member_type=MemberType.BEAM, shape_code=ShapeCode.STRAIGHT,
                       diameter=12, dimensions={"A": 3000}, quantity=10)
        result = calculate_shape_bar(bar, is_config)
        assert result.cut_length == 3000
        assert result.unit_weight == pytest.approx(0.888, abs=1e-3)
        assert result.total_length_mm == pytest.approx(30000)
        assert result.total_weight == pytest.approx(30 * 144 / 162)

    def test_ten_metres_d12(self, is_config):
        bar = ShapeBar(id="B2", member_type=MemberType.BEAM, shape_code=ShapeCode.STRAIGHT,
                       diameter=12, dimensions={"A": 1000}, quantity=10)
        assert calculate_shape_bar(bar, is_config).total_weight == pytest.approx(8.88, abs=0.01)


class TestSummaries:

    def test_conservation_random_sets(self, is_config):
        for seed in range(10):
            bars = _random_shape_bars(seed, 80, is_config)
            summary = summarize(bars)
            total = summary.grand_total.total_weight_kg
            for groups in (summary.by_diameter, summary.by_shape, summary.by_member_type):
                group_sum = math.fsum(g.total_weight_kg for g in groups.values())
                assert abs(group_sum - total) <= 0.001

    def test_grand_total(self, is_config):
        bars = _random_shape_bars(1, 20, is_config)
        total = summarize(bars).grand_total
        assert total.entry_count == 20
        assert total.total_bars == sum(b.total_bars for b in bars)
        assert total.total_weight_mt == pytest.approx(total.total_weight_kg / 1000)

    def test_group_keys(self, is_config):
        bars = _random_shape_bars(2, 50, is_config)
        summary = summarize(bars)
        assert set(summary.by_diameter) == {b.diameter for b in bars}
        assert set(summary.by_shape) == {b.shape_key for b in bars}
        assert set(summary.by_member_type) == {b.member_type.value for b in bars}

    def test_empty(self):
        summary = summarize([])
        assert summary.grand_total.total_weight_kg == 0
        assert summary.by_diameter == {}

    def test_to_dict(self, is_config):
        data = summarize(_random_shape_bars(3, 5, is_config)).to_dict()
        assert set(data) == {"by_diameter", "by_shape", "by_member_type", "grand_total"}

    def test_conservation_failure_raises(self):
        groups = {12: GroupSummary(key="12", total_weight_kg=10.0)}
        with pytest.raises(AggregationError):
            check_conservation(groups, GrandTotal(total_weight_kg=10.5), "diameter")


class TestMemberTypePartition:

    def test_partition_disjoint_and_exhaustive(self, is_config):
        bars = _random_shape_bars(11, 60, is_config)
        parts = [filter_by_member_type(bars, mt) for mt in SHAPE_MEMBER_TYPES]

        ids = [id(b) for part in parts for b in part]
        assert len(ids) == len(set(ids))
        assert set(ids) == {id(b) for b in bars}
        assert sum(len(p) for p in parts) == len(bars)

    def test_partition_helper_has_every_type(self, is_config):
        bars = _random_shape_bars(12, 10, is_config)
        parts = partition_by_member_type(bars)
        assert set(parts) == set(MemberType)
        assert parts[MemberType.FOOTING] == []
