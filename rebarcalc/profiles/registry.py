"""
Code Profile Registry
Loads the built-in code profiles from rules/code_profiles.yaml and applies
them to project configurations.
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Dict, Optional, Any

import yaml

from ..errors import ConfigurationError, UnknownProfileError, ProfileValidationError
from ..models.types import MemberType
from .models import (
    BendDeductions,
    MemberDefaults,
    DevelopmentLengthFactors,
    CodeProfile,
    ProjectConfig,
    APPLIED_PARAMETERS,
)
from .validator import validate_profile

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_ID = "IS456"


def _member_map(raw: Optional[Dict[str, Any]], convert) -> Dict[MemberType, Any]:
    return {MemberType(key.upper()): convert(value) for key, value in (raw or {}).items()}


def _required(data: Dict[str, Any], key: str, profile_id: str) -> float:
    """Numeric profile parameter that has no fallback."""
    if data.get(key) is None:
        raise ConfigurationError(f"Code profile {profile_id} is missing required parameter '{key}'")
    try:
        return float(data[key])
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"Code profile {profile_id} parameter '{key}' must be a number, got {data[key]!r}"
        ) from e


def profile_from_dict(profile_id: str, data: Dict[str, Any]) -> CodeProfile:
    """
    Build a CodeProfile from its YAML mapping.

    Cover, hook multiplier and the three bend multipliers are required.

    Raises:
        ConfigurationError: if a required parameter is missing or not numeric
    """
    if not isinstance(data, dict):
        raise ConfigurationError(f"Code profile {profile_id} must be a mapping")
    bends = data.get('bend_deductions')
    if not isinstance(bends, dict):
        raise ConfigurationError(f"Code profile {profile_id} is missing required parameter 'bend_deductions'")
    factors = data.get('development_length_factors') or {}
    weights = data.get('unit_weights')

    return CodeProfile(
        id=profile_id,
        name=data.get('name', profile_id),
        description=data.get('description', ''),
        standard=data.get('standard', ''),
        editable=bool(data.get('editable', False)),
        default_cover=_required(data, 'default_cover', profile_id),
        hook_multiplier=_required(data, 'hook_multiplier', profile_id),
        bend_deductions=BendDeductions(
            deg45=_required(bends, 'deg45', profile_id),
            deg90=_required(bends, 'deg90', profile_id),
            deg135=_required(bends, 'deg135', profile_id),
        ),
        member_defaults=_member_map(
            data.get('member_defaults'),
            lambda d: MemberDefaults(
                default_cover=float(d['default_cover']),
                default_spacing=float(d['default_spacing']),
                common_diameters=tuple(int(x) for x in d.get('common_diameters', [])),
            ),
        ),
        minimum_cover=_member_map(data.get('minimum_cover'), float),
        maximum_spacing=_member_map(data.get('maximum_spacing'), float),
        development_length_factors=DevelopmentLengthFactors(
            straight=float(factors.get('straight', 1.0)),
            hooked=float(factors.get('hooked', 0.7)),
            compression=float(factors.get('compression', 0.8)),
        ),
        unit_weights={int(k): float(v) for k, v in weights.items()} if weights else None,
    )


class ProfileRegistry:
    """
    Lookup of code profiles by id.

    The registry is reference data: profiles are frozen and a project only
    ever receives copies of their parameters.
    """

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize registry from a profiles YAML file."""
        self.config_path = Path(config_path) if config_path else self._default_path()
        self._profiles: Dict[str, CodeProfile] = self._load_profiles(self.config_path)

    @staticmethod
    def _default_path() -> Path:
        return Path(__file__).parent.parent / "rules" / "code_profiles.yaml"

    def _load_profiles(self, path: Path) -> Dict[str, CodeProfile]:
        """Load profiles from YAML."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot load code profiles from {path}: {e}") from e

        profiles = {}
        for profile_id, raw in (data.get('profiles') or {}).items():
            profiles[profile_id] = profile_from_dict(profile_id, raw)

        logger.debug(f"Loaded {len(profiles)} code profiles from {path}")
        return profiles

    def get(self, profile_id: str) -> Optional[CodeProfile]:
        """Return the profile, or None for unknown ids."""
        return self._profiles.get(profile_id)

    def require(self, profile_id: str) -> CodeProfile:
        """
        Return a profile that is fit for use.

        Raises:
            UnknownProfileError: if no profile has this id
            ProfileValidationError: if the profile has out-of-range parameters
        """
        profile = self.get(profile_id)
        if profile is None:
            raise UnknownProfileError(profile_id)
        result = validate_profile(profile)
        if not result.is_valid:
            raise ProfileValidationError(profile_id, result.errors, result.warnings)
        for warning in result.warnings:
            logger.warning(f"Profile {profile_id}: {warning}")
        return profile

    def all(self) -> List[CodeProfile]:
        return list(self._profiles.values())

    def ids(self) -> List[str]:
        return list(self._profiles.keys())

    @property
    def default(self) -> CodeProfile:
        return self.require(DEFAULT_PROFILE_ID)

    def __contains__(self, profile_id: str) -> bool:
        return profile_id in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)


def apply_profile(config: ProjectConfig, profile: CodeProfile) -> ProjectConfig:
    """
    Copy a profile's parameters into a project configuration.

    Timestamps are left alone, so applying the same profile twice gives
    an identical configuration.

    Args:
        config: Current project configuration
        profile: Profile to apply

    Returns:
        New ProjectConfig attached to the profile
    """
    return replace(
        config,
        code_standard=profile.code_standard,
        code_profile_id=profile.id,
        default_cover=profile.default_cover,
        hook_multiplier=profile.hook_multiplier,
        bend_deductions=profile.bend_deductions,
        unit_weights=dict(profile.unit_weights) if profile.unit_weights else None,
    )


def new_project_config(name: str, profile: CodeProfile, **kwargs) -> ProjectConfig:
    """Create a project configuration initialised from a profile."""
    return apply_profile(ProjectConfig(name=name, **kwargs), profile)


def update_parameters(config: ProjectConfig, **changes) -> ProjectConfig:
    """
    Edit applied parameters of a project.

    Changing any profile-derived parameter to a different value detaches the
    configuration from its profile.
    """
    if isinstance(changes.get('bend_deductions'), dict):
        merged = {**config.bend_deductions.to_dict(), **changes['bend_deductions']}
        changes['bend_deductions'] = BendDeductions(**merged)
    detach = any(
        key in APPLIED_PARAMETERS and getattr(config, key) != value
        for key, value in changes.items()
    )
    if detach and config.code_profile_id is not None:
        logger.info(f"Project {config.name} detached from profile {config.code_profile_id}")
        changes['code_profile_id'] = None
    return replace(config, **changes)


def create_custom_profile(base: CodeProfile, profile_id: str = "CUSTOM",
                          name: Optional[str] = None, **overrides) -> CodeProfile:
    """
    Derive an editable profile from an existing one.

    Args:
        base: Profile to start from
        profile_id: Id of the new profile
        name: Display name (defaults to "<base name> (Custom)")
        **overrides: CodeProfile fields to replace

    Returns:
        The validated custom profile

    Raises:
        ProfileValidationError: if the derived profile has errors
    """
    if 'bend_deductions' in overrides and isinstance(overrides['bend_deductions'], dict):
        merged = {**base.bend_deductions.to_dict(), **overrides['bend_deductions']}
        overrides['bend_deductions'] = BendDeductions(**merged)
    if 'development_length_factors' in overrides and isinstance(overrides['development_length_factors'], dict):
        merged = {**base.development_length_factors.to_dict(), **overrides['development_length_factors']}
        overrides['development_length_factors'] = DevelopmentLengthFactors(**merged)

    profile = replace(
        base,
        id=profile_id,
        name=name or f"{base.name} (Custom)",
        editable=True,
        **overrides,
    )

    result = validate_profile(profile)
    if not result.is_valid:
        raise ProfileValidationError(profile_id, result.errors, result.warnings)
    for warning in result.warnings:
        logger.warning(f"Profile {profile_id}: {warning}")
    return profile
