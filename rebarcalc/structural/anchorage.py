"""
Development and Lap Lengths
Tension development length (Ld) per bar diameter and concrete grade for
Fe 500 bars, and the lap length derived from it.
"""

import math
from typing import Dict, Optional

from ..models.types import ConcreteGrade, DEFAULT_CONCRETE_GRADE

# Ld (mm) for M30 concrete
DEVELOPMENT_LENGTH_M30 = {
    8: 400,
    10: 500,
    12: 699,
    14: 798,
    16: 998,
    20: 1247,
    25: 1995,
    32: 2555,
}

# Design bond stress (N/mm2) per grade, deformed bars in tension
BOND_STRESS = {
    ConcreteGrade.M20: 1.92,
    ConcreteGrade.M25: 2.24,
    ConcreteGrade.M30: 2.40,
    ConcreteGrade.M35: 2.72,
    ConcreteGrade.M40: 3.04,
}

# Ld is inversely proportional to bond stress
DEVELOPMENT_LENGTH_TABLES: Dict[ConcreteGrade, Dict[int, int]] = {
    grade: {
        dia: int(round(ld * BOND_STRESS[ConcreteGrade.M30] / tau))
        for dia, ld in DEVELOPMENT_LENGTH_M30.items()
    }
    for grade, tau in BOND_STRESS.items()
}

FALLBACK_LD_MULTIPLIER = 50
LAP_FACTOR = 1.3


def development_length(diameter: float, grade: Optional[ConcreteGrade] = None) -> float:
    """
    Development length for a bar.

    Args:
        diameter: Bar diameter (mm)
        grade: Concrete grade (default M30)

    Returns:
        Ld in mm, 50 x diameter for untabulated diameters
    """
    table = DEVELOPMENT_LENGTH_TABLES[ConcreteGrade(grade or DEFAULT_CONCRETE_GRADE)]
    value = table.get(int(diameter)) if float(diameter).is_integer() else None
    if value is None:
        return FALLBACK_LD_MULTIPLIER * float(diameter)
    return float(value)


def lap_length(diameter: float, grade: Optional[ConcreteGrade] = None) -> float:
    """Lap splice length: ceil(1.3 x Ld)."""
    return float(math.ceil(LAP_FACTOR * development_length(diameter, grade)))
