"""
Shared types and boundary schema.
"""

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
