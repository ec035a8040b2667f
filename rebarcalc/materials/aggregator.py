"""
Steel Aggregation
Groups calculated bars by diameter, shape and member type, and checks that
every grouping adds up to the grand total.
"""

import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import List, Dict, Any, Callable, Iterable, Optional

from ..errors import AggregationError
from ..models.types import MemberType

logger = logging.getLogger(__name__)

CONSERVATION_TOLERANCE = 0.001


@dataclass
class GroupSummary:
    """Totals for one group of bars."""
    key: str
    entry_count: int = 0
    total_bars: int = 0
    total_length_m: float = 0.0
    total_weight_kg: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'key': self.key,
            'entry_count': self.entry_count,
            'total_bars': self.total_bars,
            'total_length_m': round(self.total_length_m, 3),
            'total_weight_kg': round(self.total_weight_kg, 3),
        }


@dataclass
class GrandTotal:
    total_length_m: float = 0.0
    total_weight_kg: float = 0.0
    total_bars: int = 0
    entry_count: int = 0

    @property
    def total_weight_mt(self) -> float:
        return self.total_weight_kg / 1000.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_length_m': round(self.total_length_m, 3),
            'total_weight_kg': round(self.total_weight_kg, 3),
            'total_weight_mt': round(self.total_weight_mt, 4),
            'total_bars': self.total_bars,
            'entry_count': self.entry_count,
        }


@dataclass
class ScheduleSummary:
    """Summary groupings of a schedule."""
    by_diameter: Dict[int, GroupSummary] = field(default_factory=dict)
    by_shape: Dict[str, GroupSummary] = field(default_factory=dict)
    by_member_type: Dict[str, GroupSummary] = field(default_factory=dict)
    grand_total: GrandTotal = field(default_factory=GrandTotal)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'by_diameter': {str(k): v.to_dict() for k, v in self.by_diameter.items()},
            'by_shape': {k: v.to_dict() for k, v in self.by_shape.items()},
            'by_member_type': {k: v.to_dict() for k, v in self.by_member_type.items()},
            'grand_total': self.grand_total.to_dict(),
        }


def _key_value(value) -> Any:
    return value.value if hasattr(value, 'value') else value


def group_bars(bars: Iterable, key: Callable[[Any], Any]) -> Dict[Any, GroupSummary]:
    """
    Group calculated bars and total each group.

    Args:
        bars: Calculated bars (diameter, shape_key, member_type, total_bars,
            total_length_m and total_weight attributes)
        key: Grouping key function

    Returns:
        Mapping of key to GroupSummary, sorted by key
    """
    grouped = defaultdict(list)
    for bar in bars:
        grouped[key(bar)].append(bar)

    summaries = {}
    for group_key in sorted(grouped, key=str):
        items = grouped[group_key]
        summaries[group_key] = GroupSummary(
            key=str(group_key),
            entry_count=len(items),
            total_bars=sum(b.total_bars for b in items),
            total_length_m=math.fsum(b.total_length_m for b in items),
            total_weight_kg=math.fsum(b.total_weight for b in items),
        )
    return summaries


def grand_total(bars: Iterable) -> GrandTotal:
    items = list(bars)
    return GrandTotal(
        total_length_m=math.fsum(b.total_length_m for b in items),
        total_weight_kg=math.fsum(b.total_weight for b in items),
        total_bars=sum(b.total_bars for b in items),
        entry_count=len(items),
    )


def check_conservation(groups: Dict[Any, GroupSummary], total: GrandTotal,
                       name: str, tolerance: float = CONSERVATION_TOLERANCE) -> None:
    """Raise AggregationError when a grouping does not add up to the total."""
    group_sum = math.fsum(g.total_weight_kg for g in groups.values())
    if abs(group_sum - total.total_weight_kg) > tolerance:
        logger.warning(f"{name} summary {group_sum:.4f} kg != total {total.total_weight_kg:.4f} kg")
        raise AggregationError(
            f"Summary by {name} totals {group_sum:.4f} kg, grand total is {total.total_weight_kg:.4f} kg"
        )


def summarize(bars: List) -> ScheduleSummary:
    """
    Build the three summary groupings and the grand total.

    Raises:
        AggregationError: if a grouping does not conserve the total weight
    """
    summary = ScheduleSummary(
        by_diameter=group_bars(bars, lambda b: int(b.diameter)),
        by_shape=group_bars(bars, lambda b: b.shape_key),
        by_member_type=group_bars(bars, lambda b: _key_value(b.member_type)),
        grand_total=grand_total(bars),
    )

    check_conservation(summary.by_diameter, summary.grand_total, "diameter")
    check_conservation(summary.by_shape, summary.grand_total, "shape")
    check_conservation(summary.by_member_type, summary.grand_total, "member type")

    logger.info(
        f"Aggregated {summary.grand_total.entry_count} entries: "
        f"{summary.grand_total.total_weight_kg:.2f} kg"
    )
    return summary


def filter_by_member_type(bars: Iterable, member_type: MemberType) -> List:
    member_type = MemberType(member_type)
    return [b for b in bars if MemberType(b.member_type) == member_type]


def partition_by_member_type(bars: Iterable,
                             member_types: Optional[Iterable[MemberType]] = None) -> Dict[MemberType, List]:
    """Split bars into one list per member type (every type present as a key)."""
    items = list(bars)
    types = list(member_types) if member_types is not None else list(MemberType)
    return {mt: filter_by_member_type(items, mt) for mt in types}
