"""
Schedule Engine
Computes bar bending schedule entries for canonical-shape bars and for
component bars attached to members, then aggregates them.

Every result is a pure function of (member, bar, configuration): nothing is
cached and no module-level configuration is read.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any, Mapping

from ..models.types import MemberType, Direction
from ..shapes.catalog import ShapeCode, get_shape, shape_length, total_bend_deduction
from ..shapes.breakdown import FormulaBreakdown, build_breakdown
from ..structural.members import Member, BarDescription, Segments
from ..structural.classifier import BarClassification, classify_bar_type
from ..structural.measurements import resolve_axis, resolve_measurements
from ..structural.deductions import calculate_cut_length
from ..structural.bar_count import resolve_bar_count
from ..materials.weights import unit_weight, total_length_m
from ..materials.aggregator import ScheduleSummary, summarize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShapeBar:
    """A bar entered directly as a canonical shape."""
    id: str
    member_type: MemberType
    shape_code: ShapeCode
    diameter: int
    dimensions: Mapping[str, Optional[float]]
    quantity: int = 1
    spacing: float = 0.0
    remarks: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'member_type': MemberType(self.member_type).value,
            'shape_code': ShapeCode(self.shape_code).value,
            'diameter': self.diameter,
            'dimensions': dict(self.dimensions),
            'quantity': self.quantity,
            'spacing': self.spacing,
            'remarks': self.remarks,
        }


@dataclass
class CalculatedBar:
    """Derived schedule entry. Recomputed whenever its inputs change."""
    id: str
    member_type: MemberType
    diameter: int
    shape_key: str
    shape_name: str
    cut_length: float
    total_bars: int
    unit_weight: float
    total_length_m: float
    total_weight: float
    total_measurement: float = 0.0
    bend_count: int = 0
    deduction_amount: float = 0.0
    bars_per_member: int = 1
    total_members: int = 0
    member_id: Optional[str] = None
    bar_type: str = ""
    direction: Optional[Direction] = None
    segments: Optional[Segments] = None
    dimensions: Dict[str, float] = field(default_factory=dict)
    cut_rule: str = ""
    low_confidence: bool = False

    @property
    def total_length_mm(self) -> float:
        return self.total_length_m * 1000.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'member_id': self.member_id,
            'member_type': MemberType(self.member_type).value,
            'bar_type': self.bar_type,
            'direction': self.direction.value if self.direction else None,
            'diameter': self.diameter,
            'shape_key': self.shape_key,
            'shape_name': self.shape_name,
            'segments': self.segments.to_dict() if self.segments else None,
            'dimensions': self.dimensions,
            'total_measurement': self.total_measurement,
            'bend_count': self.bend_count,
            'deduction_amount': self.deduction_amount,
            'cut_length': self.cut_length,
            'cut_rule': self.cut_rule,
            'bars_per_member': self.bars_per_member,
            'total_members': self.total_members,
            'total_bars': self.total_bars,
            'total_length_m': self.total_length_m,
            'unit_weight': self.unit_weight,
            'total_weight': self.total_weight,
            'low_confidence': self.low_confidence,
        }


def calculate_shape_bar(bar: ShapeBar, config) -> CalculatedBar:
    """
    Calculate a canonical-shape bar.

    Args:
        bar: Shape bar
        config: Profile or project configuration (multipliers, unit weights)

    Returns:
        CalculatedBar

    Raises:
        MissingDimensionError: if a required dimension is absent
    """
    shape = get_shape(bar.shape_code)
    cut = shape_length(shape.code, bar.dimensions, config, bar.diameter)
    weight_per_m = unit_weight(bar.diameter, getattr(config, 'unit_weights', None))
    length_m = total_length_m(cut, bar.quantity)

    return CalculatedBar(
        id=bar.id,
        member_type=MemberType(bar.member_type),
        diameter=bar.diameter,
        shape_key=shape.code.value,
        shape_name=shape.name,
        cut_length=cut,
        total_bars=bar.quantity,
        unit_weight=weight_per_m,
        total_length_m=length_m,
        total_weight=length_m * weight_per_m,
        bend_count=shape.bend_count,
        deduction_amount=total_bend_deduction(shape, bar.diameter, config),
        total_members=bar.quantity,
        dimensions={k: float(v) for k, v in bar.dimensions.items() if v is not None},
        cut_rule="formula",
    )


def shape_bar_breakdown(bar: ShapeBar, config) -> FormulaBreakdown:
    """Step breakdown of a canonical-shape bar."""
    return build_breakdown(bar.shape_code, bar.dimensions, config, bar.diameter)


def calculate_component_bar(member: Member, bar: BarDescription, config,
                            classification: Optional[BarClassification] = None) -> CalculatedBar:
    """
    Calculate a bar attached to a member.

    Flow: classify label -> resolve segments -> cut length -> bar count -> weight.

    Args:
        member: Owning member
        bar: Bar description
        config: Applied project configuration
        classification: Pre-computed classification (classified here if None)

    Returns:
        CalculatedBar

    Raises:
        InvalidSpacingError: for negative spacing, or zero spacing without quantity
    """
    classification = classification or classify_bar_type(bar.bar_type, member.member_type)
    axis = resolve_axis(bar, classification)
    segments = resolve_measurements(member, bar, classification, config)
    cut = calculate_cut_length(segments, classification, member.member_type, axis,
                               bar.diameter, bar.manual_bend_count)
    counts = resolve_bar_count(member, bar, classification, axis)

    weight_per_m = unit_weight(bar.diameter, getattr(config, 'unit_weights', None))
    length_m = total_length_m(cut.cut_length, counts.total_bars)

    return CalculatedBar(
        id=bar.id,
        member_id=member.id,
        member_type=member.member_type,
        bar_type=classification.normalized,
        direction=axis,
        diameter=bar.diameter,
        shape_key=classification.pattern.value,
        shape_name=classification.pattern.name.replace('_', ' ').title(),
        segments=segments,
        total_measurement=cut.total_measurement,
        bend_count=cut.bend_count,
        deduction_amount=cut.deduction_amount,
        cut_length=cut.cut_length,
        cut_rule=cut.rule,
        bars_per_member=counts.bars_per_member,
        total_members=counts.total_members,
        total_bars=counts.total_bars,
        unit_weight=weight_per_m,
        total_length_m=length_m,
        total_weight=length_m * weight_per_m,
        low_confidence=classification.is_generic,
    )


@dataclass
class MemberBars:
    """A member with its bar descriptions."""
    member: Member
    bars: List[BarDescription] = field(default_factory=list)


@dataclass
class Schedule:
    """Computed schedule: one result per bar plus summaries and QC issues."""
    results: List[CalculatedBar]
    summary: ScheduleSummary
    issues: List[Any] = field(default_factory=list)

    def find(self, bar_id: str) -> Optional[CalculatedBar]:
        for result in self.results:
            if result.id == bar_id:
                return result
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'results': [r.to_dict() for r in self.results],
            'summary': self.summary.to_dict(),
            'issues': [i.to_dict() for i in self.issues],
        }


def build_schedule(config, shape_bars: Optional[List[ShapeBar]] = None,
                   members: Optional[List[MemberBars]] = None) -> Schedule:
    """
    Compute a full schedule.

    Args:
        config: Applied project configuration
        shape_bars: Canonical-shape bars
        members: Members with their component bars

    Returns:
        Schedule with per-bar results and summary groupings
    """
    results: List[CalculatedBar] = []

    for bar in shape_bars or []:
        results.append(calculate_shape_bar(bar, config))

    for entry in members or []:
        for bar in entry.bars:
            results.append(calculate_component_bar(entry.member, bar, config))

    low = sum(1 for r in results if r.low_confidence)
    if low:
        logger.warning(f"{low} bars used the generic measurement")

    logger.info(f"Calculated {len(results)} bars")
    return Schedule(results=results, summary=summarize(results))
