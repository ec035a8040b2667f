"""
Cut-Length Breakdown
Re-expresses a canonical-shape formula as ordered arithmetic steps for
audit display. The signed sum of the steps reproduces the formula result.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Any, Mapping, Optional

from .catalog import (
    ShapeCode,
    get_shape,
    require_dimensions,
    shape_length,
    hook_length,
)

logger = logging.getLogger(__name__)

BREAKDOWN_TOLERANCE_MM = 0.1


class StepOperation(str, Enum):
    CONSTANT = "constant"
    ADD = "add"
    SUBTRACT = "subtract"
    SQRT = "sqrt"


@dataclass
class BreakdownStep:
    """One labelled term of a cut-length formula."""
    description: str
    operation: StepOperation
    value: float
    formula: str = ""
    is_deduction: bool = False
    is_hook: bool = False

    @property
    def signed_value(self) -> float:
        if self.operation == StepOperation.SUBTRACT:
            return -self.value
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            'description': self.description,
            'operation': self.operation.value,
            'value': round(self.value, 3),
            'formula': self.formula,
            'is_deduction': self.is_deduction,
            'is_hook': self.is_hook,
        }


@dataclass
class FormulaBreakdown:
    """Step list for one canonical-shape bar."""
    shape_code: ShapeCode
    shape_name: str
    diameter: float
    dimensions: Dict[str, float]
    steps: List[BreakdownStep] = field(default_factory=list)
    final_length: float = 0.0

    @property
    def step_total(self) -> float:
        return math.fsum(step.signed_value for step in self.steps)

    @property
    def deduction_total(self) -> float:
        return math.fsum(s.value for s in self.steps if s.is_deduction)

    @property
    def hook_total(self) -> float:
        return math.fsum(s.value for s in self.steps if s.is_hook)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'shape_code': self.shape_code.value,
            'shape_name': self.shape_name,
            'diameter': self.diameter,
            'dimensions': self.dimensions,
            'steps': [s.to_dict() for s in self.steps],
            'final_length': round(self.final_length, 3),
        }

    def format_text(self) -> str:
        """Plain-text rendering, one step per line."""
        lines = [f"{self.shape_code.value} {self.shape_name} (d={self.diameter:g} mm)"]
        for step in self.steps:
            sign = '-' if step.operation == StepOperation.SUBTRACT else '+'
            if step.operation == StepOperation.CONSTANT:
                sign = ' '
            lines.append(f"  {sign} {step.value:10.1f}  {step.description}"
                         + (f"  [{step.formula}]" if step.formula else ""))
        lines.append(f"  = {self.final_length:10.1f}  Cut length")
        return "\n".join(lines)


def _bend_step(count: int, multiplier: float, angle: int, d: float) -> BreakdownStep:
    return BreakdownStep(
        description=f"{count} x {angle} degree bend deduction",
        operation=StepOperation.SUBTRACT,
        value=count * multiplier * d,
        formula=f"{count} x {multiplier:g} x {d:g}",
        is_deduction=True,
    )


def _hook_step(count: int, params, d: float) -> BreakdownStep:
    return BreakdownStep(
        description=f"{count} x hook allowance",
        operation=StepOperation.ADD,
        value=count * hook_length(d, params),
        formula=f"{count} x {params.hook_multiplier:g} x {d:g}",
        is_hook=True,
    )


def build_breakdown(shape_code, dimensions: Mapping[str, Optional[float]],
                    params, diameter: float) -> FormulaBreakdown:
    """
    Build the step breakdown of a canonical-shape bar.

    Args:
        shape_code: Shape code (S1..S6)
        dimensions: Mapping of dimension name to mm
        params: Profile or project configuration supplying multipliers
        diameter: Bar diameter (mm)

    Returns:
        FormulaBreakdown whose steps sum to the shape length
    """
    shape = get_shape(shape_code)
    dims = require_dimensions(shape, dimensions)
    d = float(diameter)
    m = params.bend_deductions
    steps: List[BreakdownStep] = []

    if shape.code == ShapeCode.STRAIGHT:
        steps.append(BreakdownStep("Length A", StepOperation.CONSTANT, dims['A'], "A"))

    elif shape.code == ShapeCode.U_SHAPE:
        steps.append(BreakdownStep("Length A", StepOperation.CONSTANT, dims['A'], "A"))
        steps.append(BreakdownStep("Two legs B", StepOperation.ADD, 2 * dims['B'], "2 x B"))
        steps.append(_bend_step(2, m.deg90, 90, d))

    elif shape.code == ShapeCode.STIRRUP:
        steps.append(BreakdownStep("Perimeter", StepOperation.CONSTANT,
                                   2 * (dims['A'] + dims['B']), "2 x (A + B)"))
        steps.append(_hook_step(2, params, d))
        steps.append(_bend_step(4, m.deg90, 90, d))
        steps.append(_bend_step(2, m.deg135, 135, d))

    elif shape.code == ShapeCode.CRANKED:
        steps.append(BreakdownStep("Length A", StepOperation.CONSTANT, dims['A'], "A"))
        steps.append(BreakdownStep("Diagonal", StepOperation.SQRT,
                                   math.sqrt(dims['B'] ** 2 + dims['C'] ** 2), "sqrt(B^2 + C^2)"))
        steps.append(BreakdownStep("Length C", StepOperation.ADD, dims['C'], "C"))
        steps.append(_bend_step(2, m.deg45, 45, d))

    elif shape.code == ShapeCode.L_SHAPE:
        steps.append(BreakdownStep("Length A", StepOperation.CONSTANT, dims['A'], "A"))
        steps.append(BreakdownStep("Leg B", StepOperation.ADD, dims['B'], "B"))
        steps.append(_bend_step(1, m.deg90, 90, d))

    else:
        steps.append(BreakdownStep("Length A", StepOperation.CONSTANT, dims['A'], "A"))
        steps.append(_hook_step(1, params, d))
        # 180 degree bend is deducted at the 90 degree rate
        steps.append(_bend_step(1, m.deg90, 180, d))

    breakdown = FormulaBreakdown(
        shape_code=shape.code,
        shape_name=shape.name,
        diameter=d,
        dimensions=dims,
        steps=steps,
        final_length=shape_length(shape.code, dims, params, d),
    )

    if abs(breakdown.step_total - breakdown.final_length) > BREAKDOWN_TOLERANCE_MM:
        logger.warning(
            f"Breakdown of {shape.code.value} sums to {breakdown.step_total:.3f}, "
            f"formula gives {breakdown.final_length:.3f}"
        )
    return breakdown


def verify_breakdown(breakdown: FormulaBreakdown,
                     tolerance: float = BREAKDOWN_TOLERANCE_MM) -> bool:
    """True when the signed step sum matches the formula result."""
    return abs(breakdown.step_total - breakdown.final_length) <= tolerance
