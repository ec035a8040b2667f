"""
Engine exceptions.

Configuration errors are raised to the caller and never defaulted.
Degenerate geometry and unknown bar labels are handled where they occur
and do not appear here.
"""

from typing import List, Optional


class RebarCalcError(Exception):
    """Base class for all engine errors."""


class ConfigurationError(RebarCalcError):
    """Input or profile configuration that cannot be computed."""


class MissingDimensionError(ConfigurationError):
    """A canonical shape is missing one of its required dimensions."""

    def __init__(self, shape_code: str, dimension: str):
        self.shape_code = shape_code
        self.dimension = dimension
        super().__init__(f"Dimension {dimension} is required for shape {shape_code}")


class UnknownProfileError(ConfigurationError):
    """No code profile is registered under the requested id."""

    def __init__(self, profile_id: str):
        self.profile_id = profile_id
        super().__init__(f"Unknown code profile: {profile_id}")


class ProfileValidationError(ConfigurationError):
    """A code profile has out-of-range parameters."""

    def __init__(self, profile_id: str, errors: List[str], warnings: Optional[List[str]] = None):
        self.profile_id = profile_id
        self.errors = list(errors)
        self.warnings = list(warnings or [])
        super().__init__(f"Invalid profile {profile_id}: {', '.join(self.errors)}")


class InvalidSpacingError(RebarCalcError, ValueError):
    """Spacing is zero or negative where a spacing-driven count is needed."""

    def __init__(self, spacing: float, context: str = ""):
        self.spacing = spacing
        message = f"Spacing must be positive, got {spacing}"
        if context:
            message = f"{message} ({context})"
        super().__init__(message)


class AggregationError(RebarCalcError):
    """Summary groupings do not add up to the grand total."""
