"""
Bar-Count Resolver
Number of bars of a component bar entry: the distribution span divided by
spacing (rounded up), or a discrete count when spacing is zero.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Any

from ..errors import InvalidSpacingError
from ..models.types import Direction
from .classifier import PatternCategory, BarClassification
from .members import Member, BarDescription

logger = logging.getLogger(__name__)

MIN_COLUMN_BARS = 4
MIN_DOWELS = 4
# Footing plan area served by one dowel (mm2)
DOWEL_AREA_PER_BAR = 10000.0


class CountMethod:
    SPACING = "spacing"
    DISCRETE = "discrete"
    MANUAL = "manual"
    AREA = "area"


@dataclass(frozen=True)
class BarCountResult:
    """Bar counts of one entry."""
    count_span: float
    total_members: int
    bars_per_member: int
    total_bars: int
    method: str = CountMethod.SPACING

    def to_dict(self) -> Dict[str, Any]:
        return {
            'count_span': self.count_span,
            'total_members': self.total_members,
            'bars_per_member': self.bars_per_member,
            'total_bars': self.total_bars,
            'method': self.method,
        }


def ceil_divide(span: float, spacing: float) -> int:
    """ceil(span / spacing). Spacing must be positive."""
    if spacing <= 0:
        raise InvalidSpacingError(spacing)
    return int(math.ceil(span / spacing))


def count_span(member: Member, classification: BarClassification, axis: Direction) -> float:
    """
    Span over which bars of a pattern are distributed.

    Args:
        member: Owning member
        classification: Classified label
        axis: Principal axis of the bar

    Returns:
        Span in mm
    """
    pattern = classification.pattern

    if pattern in (PatternCategory.FULL_SPAN, PatternCategory.U_SHAPE):
        return member.span(axis)
    if pattern == PatternCategory.COMBINED:
        # counted over the perpendicular span
        return member.span(axis.perpendicular())
    if pattern == PatternCategory.DISTRIBUTION:
        extension_sum = sum(member.extensions.pair(axis))
        return extension_sum or member.span(axis.perpendicular())
    if pattern in (PatternCategory.EXTRA_TOP, PatternCategory.EXTRA_BOTTOM):
        spans = [s for s in (member.span_x, member.span_y) if s]
        return min(spans) if spans else 0.0
    if pattern == PatternCategory.CHAIR:
        return max(member.span_x, member.span_y)

    if pattern in (PatternCategory.BEAM_TOP, PatternCategory.BEAM_BOTTOM, PatternCategory.BEAM_EXTRA):
        return member.beam_width
    if pattern == PatternCategory.BEAM_SIDE_FACE:
        return member.effective_depth
    if pattern == PatternCategory.BEAM_STIRRUP:
        return member.span_x

    if pattern == PatternCategory.COLUMN_MAIN:
        return 2 * (member.span_x + member.span_y)
    if pattern == PatternCategory.COLUMN_TIE:
        return member.effective_depth

    if pattern == PatternCategory.FOOTING_MAIN:
        return member.span_y
    if pattern == PatternCategory.FOOTING_DISTRIBUTION:
        return member.span_x

    return member.span(axis.perpendicular())


def resolve_bar_count(member: Member, bar: BarDescription,
                      classification: BarClassification, axis: Direction) -> BarCountResult:
    """
    Resolve member and bar counts for a component bar.

    Raises:
        InvalidSpacingError: negative spacing, or zero spacing without a quantity
    """
    pattern = classification.pattern
    bars_per_member = bar.bars_per_member or 1

    # 0 means no override
    if bar.manual_bar_count:
        manual = int(bar.manual_bar_count)
        return BarCountResult(0.0, manual, bars_per_member, manual, CountMethod.MANUAL)

    if bar.spacing < 0:
        raise InvalidSpacingError(bar.spacing, f"bar {bar.id}")

    if pattern == PatternCategory.FOOTING_DOWEL:
        area = member.span_x * member.span_y
        members = max(MIN_DOWELS, int(math.ceil(area / DOWEL_AREA_PER_BAR)))
        return BarCountResult(area, members, bars_per_member, members * bars_per_member, CountMethod.AREA)

    if bar.spacing == 0:
        if not bar.quantity:
            raise InvalidSpacingError(bar.spacing, f"bar {bar.id} has no quantity")
        members = int(bar.quantity)
        return BarCountResult(0.0, members, bars_per_member, members * bars_per_member, CountMethod.DISCRETE)

    span = count_span(member, classification, axis)
    if pattern in (PatternCategory.EXTRA_TOP, PatternCategory.EXTRA_BOTTOM):
        members = ceil_divide(span, 2 * bar.spacing)
    else:
        members = ceil_divide(span, bar.spacing)

    if pattern == PatternCategory.COLUMN_MAIN:
        members = max(MIN_COLUMN_BARS, members)

    logger.debug(f"{member.id}/{bar.id}: ceil({span}/{bar.spacing}) -> {members}")
    return BarCountResult(span, members, bars_per_member, members * bars_per_member)
