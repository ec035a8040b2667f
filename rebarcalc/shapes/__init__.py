"""
Canonical Bar Shapes

Modules:
- catalog: shape definitions and cut-length formulas
- breakdown: step-by-step formula breakdown for audit display
"""

from .catalog import (
    ShapeCode,
    ShapeDefinition,
    SHAPE_DEFINITIONS,
    DIMENSION_NAMES,
    get_shape,
    bend_deduction,
    total_bend_deduction,
    hook_length,
    require_dimensions,
    shape_length,
)

from .breakdown import (
    StepOperation,
    BreakdownStep,
    FormulaBreakdown,
    BREAKDOWN_TOLERANCE_MM,
    build_breakdown,
    verify_breakdown,
)
