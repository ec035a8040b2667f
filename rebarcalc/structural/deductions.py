"""
Deduction & Cut-Length Calculator
Bend-count inference, bend deductions and cut lengths for component bars.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Tuple, Optional, Any

from ..models.types import MemberType, Direction
from .classifier import PatternCategory, BarLayer, BarClassification
from .members import Segments

logger = logging.getLogger(__name__)

# Component bars deduct 2 x diameter per bend
COMPONENT_BEND_MULTIPLIER = 2

# Round-up step for the perpendicular bottom main bar (mm)
ROUND_UP_STEP_MM = 5

MAX_INFERRED_BENDS = 4

BEND_COUNT_TABLE: Dict[Tuple[MemberType, PatternCategory], int] = {
    (MemberType.SLAB, PatternCategory.U_SHAPE): 4,
    (MemberType.SLAB, PatternCategory.FULL_SPAN): 0,
    (MemberType.SLAB, PatternCategory.DISTRIBUTION): 2,
    (MemberType.SLAB, PatternCategory.COMBINED): 6,
    (MemberType.SLAB, PatternCategory.EXTRA_TOP): 2,
    (MemberType.SLAB, PatternCategory.EXTRA_BOTTOM): 2,
    (MemberType.SLAB, PatternCategory.CHAIR): 2,
    (MemberType.BEAM, PatternCategory.BEAM_STIRRUP): 6,
    (MemberType.BEAM, PatternCategory.BEAM_SIDE_FACE): 0,
    (MemberType.BEAM, PatternCategory.BEAM_EXTRA): 0,
    (MemberType.COLUMN, PatternCategory.COLUMN_TIE): 6,
    (MemberType.COLUMN, PatternCategory.COLUMN_MAIN): 0,
    (MemberType.FOOTING, PatternCategory.FOOTING_MAIN): 2,
    (MemberType.FOOTING, PatternCategory.FOOTING_DISTRIBUTION): 2,
    (MemberType.FOOTING, PatternCategory.FOOTING_DOWEL): 1,
}

# Beam top/bottom bars are bent only when they carry extra segments
BENT_WHEN_SEGMENTED = {PatternCategory.BEAM_TOP, PatternCategory.BEAM_BOTTOM}
SEGMENTED_BEND_COUNT = 2


class CutLengthRule:
    PLAIN = "plain"
    DOUBLED = "doubled"
    ROUND_UP_ADDITIVE = "round_up_additive"


@dataclass(frozen=True)
class CutLengthResult:
    """Measurement total, deductions and cut length of one bar."""
    total_measurement: float
    bend_count: int
    deduction_amount: float
    cut_length: float
    rule: str = CutLengthRule.PLAIN

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_measurement': self.total_measurement,
            'bend_count': self.bend_count,
            'deduction_amount': self.deduction_amount,
            'cut_length': self.cut_length,
            'rule': self.rule,
        }


def count_bent_segments(segments: Segments) -> int:
    """Number of non-zero segments among b..f, capped at 4."""
    return min(sum(1 for s in segments.bent_segments if s), MAX_INFERRED_BENDS)


def infer_bend_count(pattern: PatternCategory, member_type: MemberType,
                     segments: Segments, manual: Optional[int] = None) -> int:
    """
    Bend count for a component bar.

    Args:
        pattern: Pattern category
        member_type: Owning member type
        segments: Resolved measurement segments
        manual: Manual override, used as-is when given

    Returns:
        Number of bends to deduct
    """
    if manual is not None:
        return int(manual)
    if pattern in BENT_WHEN_SEGMENTED:
        return SEGMENTED_BEND_COUNT if any(segments.bent_segments) else 0
    count = BEND_COUNT_TABLE.get((MemberType(member_type), pattern))
    if count is None:
        count = count_bent_segments(segments)
    return count


def deduction_amount(bend_count: int, diameter: float) -> float:
    """bendCount x 2 x diameter."""
    return bend_count * COMPONENT_BEND_MULTIPLIER * float(diameter)


def round_up_to_multiple(value: float, step: int = ROUND_UP_STEP_MM) -> float:
    return float(math.ceil(value / step) * step)


def is_perpendicular_bottom_main(classification: BarClassification,
                                 member_type: MemberType, axis: Direction) -> bool:
    """Bottom-layer U-shaped slab main bar running in Y."""
    return (MemberType(member_type) == MemberType.SLAB
            and classification.pattern == PatternCategory.U_SHAPE
            and classification.layer == BarLayer.BOTTOM
            and axis == Direction.Y)


def uses_doubled_total(classification: BarClassification, segments: Segments) -> bool:
    """U-shape/combined bars outside the top layer with b, c and d present."""
    return (classification.pattern in (PatternCategory.U_SHAPE, PatternCategory.COMBINED)
            and classification.layer != BarLayer.TOP
            and bool(segments.b and segments.c and segments.d))


def calculate_cut_length(segments: Segments, classification: BarClassification,
                         member_type: MemberType, axis: Direction, diameter: float,
                         manual_bend_count: Optional[int] = None) -> CutLengthResult:
    """
    Combine measurement segments and bend deductions into a cut length.

    The bottom-layer Y-direction U-shaped slab main bar is the one case where
    the deduction is added and the result rounded up to the next 5 mm; the
    sixth segment and lap are excluded from its total.

    Args:
        segments: Resolved segments
        classification: Classified bar-type label
        member_type: Owning member type
        axis: Principal axis of the bar
        diameter: Bar diameter (mm)
        manual_bend_count: Optional bend-count override

    Returns:
        CutLengthResult
    """
    bends = infer_bend_count(classification.pattern, member_type, segments, manual_bend_count)
    deduction = deduction_amount(bends, diameter)

    if is_perpendicular_bottom_main(classification, member_type, axis):
        total = segments.a + segments.b + segments.c + segments.d + segments.e
        cut = round_up_to_multiple(total + deduction)
        rule = CutLengthRule.ROUND_UP_ADDITIVE
    elif uses_doubled_total(classification, segments):
        total = segments.doubled_total()
        cut = total - deduction
        rule = CutLengthRule.DOUBLED
    else:
        total = segments.plain_total()
        cut = total - deduction
        rule = CutLengthRule.PLAIN

    logger.debug(f"total={total:.1f} bends={bends} deduction={deduction:.1f} cut={cut:.1f} ({rule})")
    return CutLengthResult(
        total_measurement=total,
        bend_count=bends,
        deduction_amount=deduction,
        cut_length=cut,
        rule=rule,
    )
