"""
Schedule Input Schema
Pydantic models for the plain-data records exchanged with persistence,
bulk import and export collaborators.

The schema enforces:
- the enumerated diameter set
- non-negative spacing and dimensions
- positive quantities
- shape-specific required dimensions
and converts validated records into the engine's dataclasses.
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from .types import (
    MemberType,
    Direction,
    CodeStandard,
    ConcreteGrade,
    FootingType,
    VALID_DIAMETERS,
    SHAPE_MEMBER_TYPES,
    DEFAULT_CONCRETE_GRADE,
    parse_direction,
)
from ..shapes.catalog import ShapeCode, SHAPE_DEFINITIONS, DIMENSION_NAMES
from ..structural.members import EdgeValues, Segments, Member, BarDescription
from ..profiles.models import BendDeductions, ProjectConfig
from ..schedule.engine import ShapeBar


def _check_diameter(v: int) -> int:
    if v not in VALID_DIAMETERS:
        raise ValueError(f"Diameter must be one of: {', '.join(str(d) for d in VALID_DIAMETERS)} mm")
    return v


# =============================================================================
# MEMBER GEOMETRY
# =============================================================================

class EdgeValuesInput(BaseModel):
    """Per-edge widths or extensions (mm)."""
    left: float = Field(default=0.0, ge=0)
    right: float = Field(default=0.0, ge=0)
    top: float = Field(default=0.0, ge=0)
    bottom: float = Field(default=0.0, ge=0)

    def to_edges(self) -> EdgeValues:
        return EdgeValues(left=self.left, right=self.right, top=self.top, bottom=self.bottom)


class SegmentsInput(BaseModel):
    """User-entered measurement segments (mm)."""
    a: float = Field(default=0.0, ge=0)
    b: float = Field(default=0.0, ge=0)
    c: float = Field(default=0.0, ge=0)
    d: float = Field(default=0.0, ge=0)
    e: float = Field(default=0.0, ge=0)
    f: float = Field(default=0.0, ge=0)
    lap: float = Field(default=0.0, ge=0)

    def to_segments(self) -> Segments:
        return Segments(a=self.a, b=self.b, c=self.c, d=self.d, e=self.e, f=self.f, lap=self.lap)


class MemberInput(BaseModel):
    """A structural member."""
    id: str = Field(min_length=1)
    name: str = ""
    member_type: MemberType
    span_x: float = Field(ge=0, description="Principal span / beam length / column width (mm)")
    span_y: float = Field(default=0.0, ge=0)
    depth: Optional[float] = Field(default=None, gt=0, description="Depth, or column height (mm)")
    cover: Optional[float] = Field(default=None, ge=0)
    edge_widths: EdgeValuesInput = Field(default_factory=EdgeValuesInput)
    extensions: EdgeValuesInput = Field(default_factory=EdgeValuesInput)
    concrete_grade: Optional[ConcreteGrade] = None
    footing_type: Optional[FootingType] = None

    @model_validator(mode='after')
    def check_footing_type(self):
        if self.footing_type is not None and self.member_type != MemberType.FOOTING:
            raise ValueError('footing_type applies to footings only')
        return self

    def to_member(self) -> Member:
        return Member(
            id=self.id,
            name=self.name,
            member_type=self.member_type,
            span_x=self.span_x,
            span_y=self.span_y,
            depth=self.depth,
            cover=self.cover,
            edge_widths=self.edge_widths.to_edges(),
            extensions=self.extensions.to_edges(),
            concrete_grade=self.concrete_grade,
            footing_type=self.footing_type,
        )


# =============================================================================
# BARS
# =============================================================================

class ComponentBarInput(BaseModel):
    """A bar description attached to a member."""
    id: str = Field(min_length=1)
    bar_type: str = Field(min_length=1, description="e.g. 'Bottom Bar (X-X)', 'Stirrups'")
    diameter: int
    direction: Direction = Direction.NONE
    spacing: float = Field(default=0.0, ge=0, description="0 means a discrete count")
    quantity: Optional[int] = Field(default=None, gt=0)
    segments: Optional[SegmentsInput] = None
    lap: float = Field(default=0.0, ge=0)
    manual_bend_count: Optional[int] = Field(default=None, ge=0)
    manual_bar_count: Optional[int] = Field(default=None, gt=0)
    bars_per_member: int = Field(default=1, ge=1)
    remarks: str = ""

    @field_validator('diameter')
    @classmethod
    def validate_diameter(cls, v):
        return _check_diameter(v)

    @field_validator('direction', mode='before')
    @classmethod
    def parse_direction_tag(cls, v):
        return parse_direction(v)

    @model_validator(mode='after')
    def check_count_source(self):
        if self.spacing == 0 and self.quantity is None and self.manual_bar_count is None:
            raise ValueError('quantity is required when spacing is 0')
        return self

    def to_bar(self) -> BarDescription:
        return BarDescription(
            id=self.id,
            bar_type=self.bar_type,
            diameter=self.diameter,
            direction=self.direction,
            spacing=self.spacing,
            quantity=self.quantity,
            segments=self.segments.to_segments() if self.segments else None,
            lap=self.lap,
            manual_bend_count=self.manual_bend_count,
            manual_bar_count=self.manual_bar_count,
            bars_per_member=self.bars_per_member,
            remarks=self.remarks,
        )


class MemberEntry(BaseModel):
    """A member with its bars."""
    member: MemberInput
    bars: List[ComponentBarInput] = Field(default_factory=list)


class ShapeBarInput(BaseModel):
    """A bar entered as a canonical shape."""
    id: str = Field(min_length=1)
    member_type: MemberType
    shape_code: ShapeCode
    diameter: int
    dimensions: Dict[str, float] = Field(default_factory=dict)
    quantity: int = Field(default=1, gt=0)
    spacing: float = Field(default=0.0, ge=0)
    remarks: str = ""

    @field_validator('diameter')
    @classmethod
    def validate_diameter(cls, v):
        return _check_diameter(v)

    @field_validator('member_type')
    @classmethod
    def validate_member_type(cls, v):
        if v not in SHAPE_MEMBER_TYPES:
            raise ValueError('Member type must be BEAM, COLUMN or SLAB')
        return v

    @field_validator('dimensions', mode='before')
    @classmethod
    def normalize_dimension_names(cls, v):
        if isinstance(v, dict):
            return {str(k).upper(): val for k, val in v.items() if val is not None}
        return v

    @model_validator(mode='after')
    def check_dimensions(self):
        for name, value in self.dimensions.items():
            if name not in DIMENSION_NAMES:
                raise ValueError(f'Unknown dimension {name}')
            if value <= 0:
                raise ValueError(f'Dimension {name} must be a positive number')
        shape = SHAPE_DEFINITIONS[self.shape_code]
        for name in shape.required_dimensions:
            if name not in self.dimensions:
                raise ValueError(f'Dimension {name} is required for shape {self.shape_code.value}')
        return self

    def to_shape_bar(self) -> ShapeBar:
        return ShapeBar(
            id=self.id,
            member_type=self.member_type,
            shape_code=self.shape_code,
            diameter=self.diameter,
            dimensions=dict(self.dimensions),
            quantity=self.quantity,
            spacing=self.spacing,
            remarks=self.remarks,
        )


# =============================================================================
# PROJECT CONFIGURATION
# =============================================================================

class BendDeductionsInput(BaseModel):
    deg45: float = Field(default=1.0, ge=0)
    deg90: float = Field(default=2.0, ge=0)
    deg135: float = Field(default=3.0, ge=0)


class ProjectConfigInput(BaseModel):
    """Applied project parameters."""
    name: str = Field(min_length=1)
    id: str = ""
    code_standard: CodeStandard = CodeStandard.IS
    code_profile_id: Optional[str] = None
    default_cover: float = Field(default=25.0, gt=0)
    hook_multiplier: float = Field(default=9.0, gt=0)
    bend_deductions: BendDeductionsInput = Field(default_factory=BendDeductionsInput)
    unit_weights: Optional[Dict[int, float]] = None
    concrete_grade: ConcreteGrade = DEFAULT_CONCRETE_GRADE

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Project name is required')
        return v.strip()

    @field_validator('unit_weights')
    @classmethod
    def validate_unit_weights(cls, v):
        if v:
            for dia, weight in v.items():
                if weight <= 0:
                    raise ValueError(f'Unit weight for {dia} mm must be positive')
        return v

    def to_config(self) -> ProjectConfig:
        return ProjectConfig(
            id=self.id,
            name=self.name,
            code_standard=self.code_standard,
            code_profile_id=self.code_profile_id,
            default_cover=self.default_cover,
            hook_multiplier=self.hook_multiplier,
            bend_deductions=BendDeductions(**self.bend_deductions.model_dump()),
            unit_weights=dict(self.unit_weights) if self.unit_weights else None,
            concrete_grade=self.concrete_grade,
        )


class ScheduleRequest(BaseModel):
    """
    A whole schedule to compute.

    Either `project` carries explicit parameters, or `profile` names the
    code profile applied to a fresh configuration.
    """
    project_name: str = "Untitled"
    profile: str = "IS456"
    project: Optional[ProjectConfigInput] = None
    concrete_grade: ConcreteGrade = DEFAULT_CONCRETE_GRADE
    shape_bars: List[ShapeBarInput] = Field(default_factory=list)
    members: List[MemberEntry] = Field(default_factory=list)

    @model_validator(mode='after')
    def check_unique_ids(self):
        ids = [b.id for b in self.shape_bars]
        ids += [b.id for entry in self.members for b in entry.bars]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate bar ids: {', '.join(duplicates)}")
        return self
