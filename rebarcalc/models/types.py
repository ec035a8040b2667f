"""
Shared enumerations and constants for the schedule engine.
"""

from enum import Enum
from typing import Optional


class MemberType(str, Enum):
    """Structural member category."""
    BEAM = "BEAM"
    COLUMN = "COLUMN"
    SLAB = "SLAB"
    FOOTING = "FOOTING"


class Direction(str, Enum):
    """Principal direction of a bar."""
    X = "X"
    Y = "Y"
    BOTH = "BOTH"
    NONE = "NONE"

    @property
    def is_axis(self) -> bool:
        return self in (Direction.X, Direction.Y)

    def perpendicular(self) -> "Direction":
        if self == Direction.X:
            return Direction.Y
        if self == Direction.Y:
            return Direction.X
        return self


class CodeStandard(str, Enum):
    """Legacy code standard tag stored on a project."""
    IS = "IS"
    BS = "BS"
    CUSTOM = "CUSTOM"


class ConcreteGrade(str, Enum):
    """Concrete grades with tabulated development lengths."""
    M20 = "M20"
    M25 = "M25"
    M30 = "M30"
    M35 = "M35"
    M40 = "M40"


class FootingType(str, Enum):
    """Footing sub-types (pile variants only for footings)."""
    ISOLATED = "ISOLATED"
    COMBINED = "COMBINED"
    PILE_CYLINDER = "PILE_CYLINDER"
    PILE_CUBOID = "PILE_CUBOID"


# Standard bar sizes (mm)
VALID_DIAMETERS = (6, 8, 10, 12, 16, 20, 25, 32)

# Member types that canonical-shape bars attach to
SHAPE_MEMBER_TYPES = (MemberType.BEAM, MemberType.COLUMN, MemberType.SLAB)

DEFAULT_CONCRETE_GRADE = ConcreteGrade.M30


def parse_direction(value: Optional[str]) -> Direction:
    """Parse a direction tag ("X", "x-x", "Y-Y", "both"...)."""
    if value is None:
        return Direction.NONE
    if isinstance(value, Direction):
        return value
    text = str(value).strip().upper().replace(" ", "")
    if text in ("X", "X-X", "XX"):
        return Direction.X
    if text in ("Y", "Y-Y", "YY"):
        return Direction.Y
    if text in ("BOTH", "B/W", "BW"):
        return Direction.BOTH
    return Direction.NONE
