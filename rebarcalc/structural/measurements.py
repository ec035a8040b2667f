"""
Measurement Resolver
Derives the measurement segments (a..f) of a component bar from its pattern,
principal direction and the geometry of the owning member.

Slab notation: cover c, depth t, rise r = max(0, t - 2c).
All cover and beam-width subtractions are clamped at zero: beams narrower
than twice the cover are valid input and must not produce negative lengths.
"""

import logging
from typing import Optional

from ..models.types import MemberType, Direction
from .anchorage import development_length, lap_length
from .classifier import PatternCategory, BarClassification
from .members import Member, BarDescription, Segments

logger = logging.getLogger(__name__)

# Fixed foot length of a slab distribution bar (mm)
DISTRIBUTION_FOOT_LENGTH_MM = 95.0

# Vertical-rise multiple in the third segment of a U-shaped slab bar
U_BAR_RISE_MULTIPLE = 4

# Anchorage multiples of bar diameter
SLAB_ANCHORAGE_MULTIPLE = 12
CHAIR_LEG_MULTIPLE = 5
STIRRUP_HOOK_MULTIPLE = 10
FOOTING_LEG_MULTIPLE = 10
DOWEL_LENGTH_MULTIPLE = 40
BEAM_TOP_SPAN_FRACTION = 0.3


def _clamp(value: float) -> float:
    return max(0.0, value)


def resolve_axis(bar: BarDescription, classification: Optional[BarClassification] = None) -> Direction:
    """
    Principal axis of a bar.

    BOTH/NONE take the direction marker of the label, or X without one.
    """
    if bar.direction.is_axis:
        return bar.direction
    if classification is not None and classification.direction_marker is not None:
        return classification.direction_marker
    return Direction.X


def _grade(member: Member, config):
    return member.concrete_grade or getattr(config, 'concrete_grade', None)


def _rise(member: Member, cover: float) -> float:
    return _clamp(member.effective_depth - 2 * cover)


def _closed_link(width: float, depth: float, cover: float, d: float) -> float:
    """Stirrup/tie length: 2(W-2c) + 2(t-2c) + two 10d hooks."""
    return (2 * _clamp(width - 2 * cover)
            + 2 * _clamp(depth - 2 * cover)
            + 2 * STIRRUP_HOOK_MULTIPLE * d)


def _slab_segments(pattern: PatternCategory, member: Member, axis: Direction,
                   d: float, cover: float, grade) -> Segments:
    span = member.span(axis)
    rise = _rise(member, cover)

    if pattern == PatternCategory.FULL_SPAN:
        start, end = member.edge_widths.pair(axis)
        if not (start or end):
            return Segments(a=span)
        return Segments(a=span, b=_clamp(start - cover), c=_clamp(end - cover), d=rise, e=rise)

    if pattern == PatternCategory.DISTRIBUTION:
        # Distribution bars run across the perpendicular span and are
        # bounded by the edges of that run
        cross = axis.perpendicular()
        cross_span = member.span(cross)
        start, end = member.edge_widths.pair(cross)
        if not (start or end):
            anchorage = SLAB_ANCHORAGE_MULTIPLE * d
            return Segments(a=cross_span, b=anchorage, c=anchorage)
        return Segments(
            a=cross_span,
            b=_clamp(start - cover),
            c=_clamp(end - cover),
            d=DISTRIBUTION_FOOT_LENGTH_MM,
            e=DISTRIBUTION_FOOT_LENGTH_MM,
        )

    if pattern in (PatternCategory.U_SHAPE, PatternCategory.COMBINED):
        start, _end = member.edge_widths.pair(axis)
        ext_start, ext_end = member.extensions.pair(axis)
        if member.edge_widths.is_empty or member.extensions.is_empty:
            return Segments(a=span)
        return Segments(
            a=span,
            b=2 * _clamp(start - cover),
            c=U_BAR_RISE_MULTIPLE * rise,
            d=rise,
            e=rise,
            f=ext_start + ext_end,
        )

    if pattern == PatternCategory.EXTRA_TOP:
        return Segments(a=2 * SLAB_ANCHORAGE_MULTIPLE * d)

    if pattern == PatternCategory.EXTRA_BOTTOM:
        return Segments(a=2 * development_length(d, grade))

    if pattern == PatternCategory.CHAIR:
        leg = CHAIR_LEG_MULTIPLE * d
        return Segments(a=rise, b=leg, c=leg)

    return Segments(a=span)


def _beam_segments(pattern: PatternCategory, member: Member, d: float,
                   cover: float, grade) -> Segments:
    span = member.span_x
    ld = development_length(d, grade)

    if pattern == PatternCategory.BEAM_TOP:
        return Segments(a=BEAM_TOP_SPAN_FRACTION * span + max(SLAB_ANCHORAGE_MULTIPLE * d, ld))
    if pattern in (PatternCategory.BEAM_BOTTOM, PatternCategory.BEAM_EXTRA):
        return Segments(a=span + 2 * ld)
    if pattern == PatternCategory.BEAM_SIDE_FACE:
        return Segments(a=member.effective_depth + 2 * SLAB_ANCHORAGE_MULTIPLE * d)
    if pattern == PatternCategory.BEAM_STIRRUP:
        return Segments(a=_closed_link(member.beam_width, member.effective_depth, cover, d))
    return Segments(a=span)


def _column_segments(pattern: PatternCategory, member: Member, d: float,
                     cover: float, grade) -> Segments:
    height = member.effective_depth
    if pattern == PatternCategory.COLUMN_MAIN:
        return Segments(a=height + 2 * lap_length(d, grade))
    if pattern == PatternCategory.COLUMN_TIE:
        return Segments(a=_closed_link(member.span_x, member.span_y, cover, d))
    return Segments(a=member.span_x)


def _footing_segments(pattern: PatternCategory, member: Member, axis: Direction,
                      d: float, grade) -> Segments:
    span = member.span(axis)
    if pattern == PatternCategory.FOOTING_MAIN:
        return Segments(a=span + 2 * development_length(d, grade))
    if pattern == PatternCategory.FOOTING_DISTRIBUTION:
        leg = FOOTING_LEG_MULTIPLE * d
        return Segments(a=span, b=leg, c=leg)
    if pattern == PatternCategory.FOOTING_DOWEL:
        return Segments(a=DOWEL_LENGTH_MULTIPLE * d)
    return Segments(a=span)


def resolve_measurements(member: Member, bar: BarDescription,
                         classification: BarClassification, config) -> Segments:
    """
    Resolve the measurement segments of a component bar.

    User-entered segments with a > 0 take precedence over the resolved ones.

    Args:
        member: Owning member
        bar: Bar description
        classification: Classified bar-type label
        config: Applied project configuration (default cover, concrete grade)

    Returns:
        Segments including the bar's lap length
    """
    if bar.segments is not None and bar.segments.a > 0:
        lap = bar.segments.lap or bar.lap
        return bar.segments.with_lap(lap)

    axis = resolve_axis(bar, classification)
    d = float(bar.diameter)
    cover = member.effective_cover(config)
    grade = _grade(member, config)
    pattern = classification.pattern

    if pattern == PatternCategory.GENERIC:
        segments = Segments(a=member.span(axis))
    elif member.member_type == MemberType.SLAB:
        segments = _slab_segments(pattern, member, axis, d, cover, grade)
    elif member.member_type == MemberType.BEAM:
        segments = _beam_segments(pattern, member, d, cover, grade)
    elif member.member_type == MemberType.COLUMN:
        segments = _column_segments(pattern, member, d, cover, grade)
    else:
        segments = _footing_segments(pattern, member, axis, d, grade)

    logger.debug(f"{member.id}/{bar.id} {pattern.value} {axis.value}: {segments}")
    return segments.with_lap(bar.lap)
