"""
Member and Bar Description Records
Structural members (beam, column, slab, footing) and the reinforcement
entries attached to them.
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, Optional, Any

from ..models.types import MemberType, Direction, ConcreteGrade, FootingType, parse_direction

# Defaults used when a member omits its depth/height (mm)
DEFAULT_SLAB_DEPTH = 125.0
DEFAULT_BEAM_DEPTH = 450.0
DEFAULT_COLUMN_HEIGHT = 3000.0
DEFAULT_FOOTING_DEPTH = 450.0
DEFAULT_BEAM_WIDTH = 300.0


@dataclass(frozen=True)
class EdgeValues:
    """Per-edge values: edge-beam widths or top-bar extensions (mm)."""
    left: float = 0.0
    right: float = 0.0
    top: float = 0.0
    bottom: float = 0.0

    def pair(self, direction: Direction):
        """Edge pair bounding a bar in the given direction.

        X bars run between the left and right edges, Y bars between top
        and bottom.
        """
        if direction == Direction.Y:
            return self.top, self.bottom
        return self.left, self.right

    @property
    def is_empty(self) -> bool:
        return not any((self.left, self.right, self.top, self.bottom))

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'EdgeValues':
        data = data or {}
        return cls(
            left=float(data.get('left') or 0),
            right=float(data.get('right') or 0),
            top=float(data.get('top') or 0),
            bottom=float(data.get('bottom') or 0),
        )


@dataclass(frozen=True)
class Segments:
    """Measurement segments a..f plus lap length (mm). Unused segments are 0."""
    a: float = 0.0
    b: float = 0.0
    c: float = 0.0
    d: float = 0.0
    e: float = 0.0
    f: float = 0.0
    lap: float = 0.0

    @property
    def bent_segments(self):
        return (self.b, self.c, self.d, self.e, self.f)

    def plain_total(self) -> float:
        return self.a + self.b + self.c + self.d + self.e + self.f + self.lap

    def doubled_total(self) -> float:
        return self.a + 2 * self.b + 2 * self.c + 2 * self.d + self.e + self.f + self.lap

    def with_lap(self, lap: float) -> 'Segments':
        return Segments(self.a, self.b, self.c, self.d, self.e, self.f, lap)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Segments':
        data = data or {}
        return cls(**{k: float(data.get(k) or 0) for k in ('a', 'b', 'c', 'd', 'e', 'f', 'lap')})


@dataclass(frozen=True)
class Member:
    """One structural element instance."""
    id: str
    member_type: MemberType
    span_x: float
    span_y: float = 0.0
    depth: Optional[float] = None
    cover: Optional[float] = None
    edge_widths: EdgeValues = field(default_factory=EdgeValues)
    extensions: EdgeValues = field(default_factory=EdgeValues)
    concrete_grade: Optional[ConcreteGrade] = None
    footing_type: Optional[FootingType] = None
    name: str = ""

    def span(self, direction: Direction) -> float:
        """Span along a direction. Non-axis directions fall back to X."""
        return self.span_y if direction == Direction.Y else self.span_x

    @property
    def effective_depth(self) -> float:
        if self.depth:
            return float(self.depth)
        if self.member_type == MemberType.SLAB:
            return DEFAULT_SLAB_DEPTH
        if self.member_type == MemberType.COLUMN:
            return DEFAULT_COLUMN_HEIGHT
        if self.member_type == MemberType.FOOTING:
            return DEFAULT_FOOTING_DEPTH
        return DEFAULT_BEAM_DEPTH

    @property
    def beam_width(self) -> float:
        return self.span_y or DEFAULT_BEAM_WIDTH

    def effective_cover(self, config) -> float:
        """Member cover, or the configuration's default cover."""
        if self.cover is not None:
            return float(self.cover)
        return float(config.default_cover)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'member_type': self.member_type.value,
            'span_x': self.span_x,
            'span_y': self.span_y,
            'depth': self.depth,
            'cover': self.cover,
            'edge_widths': self.edge_widths.to_dict(),
            'extensions': self.extensions.to_dict(),
            'concrete_grade': self.concrete_grade.value if self.concrete_grade else None,
            'footing_type': self.footing_type.value if self.footing_type else None,
        }


@dataclass(frozen=True)
class BarDescription:
    """A reinforcement entry attached to a member."""
    id: str
    bar_type: str
    diameter: int
    direction: Direction = Direction.NONE
    spacing: float = 0.0
    quantity: Optional[int] = None
    segments: Optional[Segments] = None
    lap: float = 0.0
    manual_bend_count: Optional[int] = None
    manual_bar_count: Optional[int] = None
    bars_per_member: int = 1
    remarks: str = ""

    def __post_init__(self):
        if not isinstance(self.direction, Direction):
            object.__setattr__(self, 'direction', parse_direction(self.direction))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'bar_type': self.bar_type,
            'diameter': self.diameter,
            'direction': self.direction.value,
            'spacing': self.spacing,
            'quantity': self.quantity,
            'segments': self.segments.to_dict() if self.segments else None,
            'lap': self.lap,
            'manual_bend_count': self.manual_bend_count,
            'manual_bar_count': self.manual_bar_count,
            'bars_per_member': self.bars_per_member,
            'remarks': self.remarks,
        }
