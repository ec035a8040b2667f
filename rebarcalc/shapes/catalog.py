"""
Shape Catalog
Canonical bar shapes with their required dimensions, bend angles, hooks and
closed-form cut-length formulas.

Formulas (diameter d, hook multiplier h, bend multipliers m45/m90/m135):
- S1 Straight:  A
- S2 U-Shape:   A + 2B - 2*m90*d
- S3 Stirrup:   2(A+B) + 2*h*d - 4*m90*d - 2*m135*d
- S4 Cranked:   A + sqrt(B^2 + C^2) + C - 2*m45*d
- S5 L-Shape:   A + B - m90*d
- S6 Hooked:    A + h*d - m90*d
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple, Optional, Mapping

from ..errors import ConfigurationError, MissingDimensionError

logger = logging.getLogger(__name__)


class ShapeCode(str, Enum):
    """Canonical shape codes."""
    STRAIGHT = "S1"
    U_SHAPE = "S2"
    STIRRUP = "S3"
    CRANKED = "S4"
    L_SHAPE = "S5"
    HOOKED = "S6"


DIMENSION_NAMES = ('A', 'B', 'C', 'D')


@dataclass(frozen=True)
class ShapeDefinition:
    """Static description of a canonical shape."""
    code: ShapeCode
    name: str
    description: str
    required_dimensions: Tuple[str, ...]
    bend_angles: Tuple[int, ...]
    hook_count: int = 0

    @property
    def has_hook(self) -> bool:
        return self.hook_count > 0

    @property
    def bend_count(self) -> int:
        return len(self.bend_angles)


SHAPE_DEFINITIONS: Dict[ShapeCode, ShapeDefinition] = {
    ShapeCode.STRAIGHT: ShapeDefinition(
        ShapeCode.STRAIGHT, "Straight", "Straight bar",
        ('A',), ()),
    ShapeCode.U_SHAPE: ShapeDefinition(
        ShapeCode.U_SHAPE, "U-Shape", "U-bar with two 90 degree bends",
        ('A', 'B'), (90, 90)),
    ShapeCode.STIRRUP: ShapeDefinition(
        ShapeCode.STIRRUP, "Stirrup", "Closed stirrup with 135 degree hooks",
        ('A', 'B'), (90, 90, 90, 90, 135, 135), hook_count=2),
    ShapeCode.CRANKED: ShapeDefinition(
        ShapeCode.CRANKED, "Cranked", "Cranked bar with two 45 degree bends",
        ('A', 'B', 'C'), (45, 45)),
    ShapeCode.L_SHAPE: ShapeDefinition(
        ShapeCode.L_SHAPE, "L-Shape", "L-bar with one 90 degree bend",
        ('A', 'B'), (90,)),
    ShapeCode.HOOKED: ShapeDefinition(
        ShapeCode.HOOKED, "Hooked", "Straight bar with one 180 degree hook",
        ('A',), (180,), hook_count=1),
}


def get_shape(shape_code) -> ShapeDefinition:
    """Look up a shape definition by code ("S1".."S6")."""
    try:
        return SHAPE_DEFINITIONS[ShapeCode(shape_code)]
    except ValueError:
        raise ConfigurationError(f"Unknown shape code: {shape_code}")


def bend_deduction(angle: int, diameter: float, params) -> float:
    """Deduction for one bend: multiplier(angle) * d."""
    return params.bend_deductions.for_angle(angle) * diameter


def total_bend_deduction(shape: ShapeDefinition, diameter: float, params) -> float:
    """Sum of bend deductions over a shape's bend angles."""
    return sum(bend_deduction(angle, diameter, params) for angle in shape.bend_angles)


def hook_length(diameter: float, params) -> float:
    """Length added by one hook: h * d."""
    return params.hook_multiplier * diameter


def require_dimensions(shape: ShapeDefinition,
                       dimensions: Mapping[str, Optional[float]]) -> Dict[str, float]:
    """
    Return the required dimensions of a shape as floats.

    Raises:
        MissingDimensionError: if a required dimension is absent
    """
    values = {}
    for name in shape.required_dimensions:
        value = dimensions.get(name)
        if value is None:
            raise MissingDimensionError(shape.code.value, name)
        values[name] = float(value)
    return values


def shape_length(shape_code, dimensions: Mapping[str, Optional[float]],
                 params, diameter: float) -> float:
    """
    Compute the cut length of a canonical-shape bar.

    Args:
        shape_code: Shape code (S1..S6)
        dimensions: Mapping of dimension name (A..D) to mm
        params: Profile or project configuration supplying multipliers
        diameter: Bar diameter (mm)

    Returns:
        Cut length in mm
    """
    shape = get_shape(shape_code)
    dims = require_dimensions(shape, dimensions)
    d = float(diameter)
    m = params.bend_deductions

    if shape.code == ShapeCode.STRAIGHT:
        length = dims['A']
    elif shape.code == ShapeCode.U_SHAPE:
        length = dims['A'] + 2 * dims['B'] - 2 * m.deg90 * d
    elif shape.code == ShapeCode.STIRRUP:
        length = (2 * (dims['A'] + dims['B'])
                  + 2 * hook_length(d, params)
                  - 4 * m.deg90 * d
                  - 2 * m.deg135 * d)
    elif shape.code == ShapeCode.CRANKED:
        diagonal = math.sqrt(dims['B'] ** 2 + dims['C'] ** 2)
        length = dims['A'] + diagonal + dims['C'] - 2 * m.deg45 * d
    elif shape.code == ShapeCode.L_SHAPE:
        length = dims['A'] + dims['B'] - m.deg90 * d
    else:
        # 180 degree hook deduction uses the 90 degree multiplier
        length = dims['A'] + hook_length(d, params) - m.deg90 * d

    logger.debug(f"{shape.code.value} d={diameter}: {length:.1f} mm")
    return length
