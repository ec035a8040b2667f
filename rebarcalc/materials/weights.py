"""
Steel Unit Weights
Unit weight of reinforcement bars and per-bar length/weight totals.
"""

from typing import Dict, Optional

# Steel density approximation: d^2 / 162 kg/m (d in mm)
UNIT_WEIGHT_DIVISOR = 162.0


def unit_weight(diameter: float, unit_weights: Optional[Dict[int, float]] = None) -> float:
    """
    Unit weight of a bar in kg/m.

    Args:
        diameter: Bar diameter (mm)
        unit_weights: Optional per-diameter table supplied by a profile

    Returns:
        Table value when the diameter is listed, else d^2/162
    """
    if unit_weights:
        value = unit_weights.get(int(diameter))
        if value is not None:
            return float(value)
    return float(diameter) ** 2 / UNIT_WEIGHT_DIVISOR


def total_length_m(cut_length_mm: float, total_bars: int) -> float:
    """Total bar length in metres."""
    return cut_length_mm * total_bars / 1000.0


def bar_weight(diameter: float, length_mm: float,
               unit_weights: Optional[Dict[int, float]] = None) -> float:
    """Weight (kg) of a length of bar."""
    return unit_weight(diameter, unit_weights) * length_mm / 1000.0
