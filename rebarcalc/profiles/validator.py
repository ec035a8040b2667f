"""
Code Profile Validation
Range checks on profile parameters. Errors block use of a profile,
warnings are reported but do not.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Dict, Any

from ..models.types import MemberType, VALID_DIAMETERS
from .models import CodeProfile

logger = logging.getLogger(__name__)


COVER_RANGE = (10, 100)
HOOK_MULTIPLIER_RANGE = (4, 15)
BEND_MULTIPLIER_RANGE = (0, 5)

MINIMUM_COVER_RANGES = {
    MemberType.BEAM: (15, 75),
    MemberType.COLUMN: (20, 100),
    MemberType.SLAB: (10, 50),
    MemberType.FOOTING: (25, 100),
}

MAXIMUM_SPACING_RANGE = (100, 500)

DEVELOPMENT_FACTOR_RANGES = {
    'straight': (0.5, 2.0),
    'hooked': (0.3, 1.5),
    'compression': (0.5, 1.5),
}


@dataclass
class ProfileValidationResult:
    """Itemized outcome of validating a profile."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {'is_valid': self.is_valid, 'errors': self.errors, 'warnings': self.warnings}


def _in_range(value: float, bounds) -> bool:
    low, high = bounds
    return low <= value <= high


def validate_profile(profile: CodeProfile) -> ProfileValidationResult:
    """
    Validate a code profile.

    Args:
        profile: Profile to check

    Returns:
        ProfileValidationResult with errors and warnings
    """
    result = ProfileValidationResult()

    if not _in_range(profile.default_cover, COVER_RANGE):
        result.errors.append(
            f"Default cover must be between {COVER_RANGE[0]} and {COVER_RANGE[1]} mm"
        )

    if not _in_range(profile.hook_multiplier, HOOK_MULTIPLIER_RANGE):
        result.errors.append(
            f"Hook multiplier must be between {HOOK_MULTIPLIER_RANGE[0]} and {HOOK_MULTIPLIER_RANGE[1]}"
        )

    for angle, value in (('45', profile.bend_deductions.deg45),
                         ('90', profile.bend_deductions.deg90),
                         ('135', profile.bend_deductions.deg135)):
        if not _in_range(value, BEND_MULTIPLIER_RANGE):
            result.errors.append(
                f"{angle} degree bend multiplier must be between "
                f"{BEND_MULTIPLIER_RANGE[0]} and {BEND_MULTIPLIER_RANGE[1]}"
            )

    for member_type, defaults in profile.member_defaults.items():
        label = member_type.value.lower()
        minimum = profile.minimum_cover.get(member_type)
        if minimum is not None and defaults.default_cover < minimum:
            result.errors.append(
                f"Default cover for {label} ({defaults.default_cover} mm) is below "
                f"the minimum cover ({minimum} mm)"
            )

        maximum = profile.maximum_spacing.get(member_type)
        if maximum is not None and defaults.default_spacing > maximum:
            result.warnings.append(
                f"Default spacing for {label} ({defaults.default_spacing} mm) exceeds "
                f"the maximum spacing ({maximum} mm)"
            )

        if not defaults.common_diameters:
            result.errors.append(f"At least one common diameter is required for {label}")
        for diameter in defaults.common_diameters:
            if diameter not in VALID_DIAMETERS:
                result.errors.append(f"Invalid diameter {diameter} mm for {label}")

    for member_type, value in profile.minimum_cover.items():
        bounds = MINIMUM_COVER_RANGES.get(member_type)
        if bounds and not _in_range(value, bounds):
            result.errors.append(
                f"Minimum cover for {member_type.value.lower()} must be between "
                f"{bounds[0]} and {bounds[1]} mm"
            )

    for member_type, value in profile.maximum_spacing.items():
        if not _in_range(value, MAXIMUM_SPACING_RANGE):
            result.warnings.append(
                f"Maximum spacing for {member_type.value.lower()} ({value} mm) is outside "
                f"the usual {MAXIMUM_SPACING_RANGE[0]}-{MAXIMUM_SPACING_RANGE[1]} mm range"
            )

    factors = profile.development_length_factors
    for name, bounds in DEVELOPMENT_FACTOR_RANGES.items():
        value = getattr(factors, name)
        if not _in_range(value, bounds):
            result.errors.append(
                f"{name.capitalize()} development length factor must be between "
                f"{bounds[0]} and {bounds[1]}"
            )

    if profile.unit_weights:
        for diameter, weight in profile.unit_weights.items():
            if weight <= 0:
                result.errors.append(f"Unit weight for {diameter} mm must be positive")

    if result.errors:
        logger.debug(f"Profile {profile.id}: {len(result.errors)} errors")

    return result
