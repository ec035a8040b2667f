"""
Code Profile Data Model
Bend-deduction, hook and cover parameters for a design standard, plus the
project configuration that a profile is applied to.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, List, Optional, Any

from ..models.types import MemberType, CodeStandard, ConcreteGrade, DEFAULT_CONCRETE_GRADE


@dataclass(frozen=True)
class BendDeductions:
    """Bend-deduction multipliers (times bar diameter) per angle class."""
    deg45: float = 1.0
    deg90: float = 2.0
    deg135: float = 3.0

    def for_angle(self, angle: int) -> float:
        """Multiplier for a bend angle. 180 and other angles use the 90 value."""
        if angle == 45:
            return self.deg45
        if angle == 135:
            return self.deg135
        return self.deg90

    def to_dict(self) -> Dict[str, float]:
        return {'deg45': self.deg45, 'deg90': self.deg90, 'deg135': self.deg135}


@dataclass(frozen=True)
class MemberDefaults:
    """Per-member-type default cover, spacing and diameters."""
    default_cover: float
    default_spacing: float
    common_diameters: tuple = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'default_cover': self.default_cover,
            'default_spacing': self.default_spacing,
            'common_diameters': list(self.common_diameters),
        }


@dataclass(frozen=True)
class DevelopmentLengthFactors:
    """Multipliers on the basic development length."""
    straight: float = 1.0
    hooked: float = 0.7
    compression: float = 0.8

    def to_dict(self) -> Dict[str, float]:
        return {'straight': self.straight, 'hooked': self.hooked, 'compression': self.compression}


@dataclass(frozen=True)
class CodeProfile:
    """
    A named parameter set for one design standard.

    Profiles are reference data. Editing a project's parameters never
    changes the profile it was applied from.
    """
    id: str
    name: str
    description: str = ""
    standard: str = ""
    editable: bool = False
    default_cover: float = 25.0
    hook_multiplier: float = 9.0
    bend_deductions: BendDeductions = field(default_factory=BendDeductions)
    member_defaults: Dict[MemberType, MemberDefaults] = field(default_factory=dict)
    minimum_cover: Dict[MemberType, float] = field(default_factory=dict)
    maximum_spacing: Dict[MemberType, float] = field(default_factory=dict)
    development_length_factors: DevelopmentLengthFactors = field(default_factory=DevelopmentLengthFactors)
    unit_weights: Optional[Dict[int, float]] = None

    @property
    def code_standard(self) -> CodeStandard:
        """Legacy IS/BS/CUSTOM tag for this profile."""
        if self.id.startswith('IS'):
            return CodeStandard.IS
        if self.id.startswith('BS'):
            return CodeStandard.BS
        return CodeStandard.CUSTOM

    def defaults_for(self, member_type: MemberType) -> Optional[MemberDefaults]:
        return self.member_defaults.get(MemberType(member_type))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'standard': self.standard,
            'editable': self.editable,
            'default_cover': self.default_cover,
            'hook_multiplier': self.hook_multiplier,
            'bend_deductions': self.bend_deductions.to_dict(),
            'member_defaults': {m.value: d.to_dict() for m, d in self.member_defaults.items()},
            'minimum_cover': {m.value: v for m, v in self.minimum_cover.items()},
            'maximum_spacing': {m.value: v for m, v in self.maximum_spacing.items()},
            'development_length_factors': self.development_length_factors.to_dict(),
            'unit_weights': dict(self.unit_weights) if self.unit_weights else None,
        }


@dataclass(frozen=True)
class ProjectConfig:
    """
    Applied calculation parameters of a project.

    `code_profile_id` is set while the parameters match the profile they
    were applied from, and cleared once any of them is edited away.
    """
    name: str
    id: str = ""
    code_standard: CodeStandard = CodeStandard.IS
    code_profile_id: Optional[str] = None
    default_cover: float = 25.0
    hook_multiplier: float = 9.0
    bend_deductions: BendDeductions = field(default_factory=BendDeductions)
    unit_weights: Optional[Dict[int, float]] = None
    concrete_grade: ConcreteGrade = DEFAULT_CONCRETE_GRADE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_detached(self) -> bool:
        return self.code_profile_id is None

    def with_changes(self, **changes) -> 'ProjectConfig':
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'code_standard': self.code_standard.value,
            'code_profile_id': self.code_profile_id,
            'default_cover': self.default_cover,
            'hook_multiplier': self.hook_multiplier,
            'bend_deductions': self.bend_deductions.to_dict(),
            'unit_weights': dict(self.unit_weights) if self.unit_weights else None,
            'concrete_grade': self.concrete_grade.value,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


# Parameters copied from a profile into a project configuration
APPLIED_PARAMETERS: List[str] = [
    'default_cover',
    'hook_multiplier',
    'bend_deductions',
    'unit_weights',
]
