"""
Code Profiles

Modules:
- models: profile and project configuration records
- validator: range checks on profile parameters
- registry: YAML-backed profile lookup and application
"""

from .models import (
    BendDeductions,
    MemberDefaults,
    DevelopmentLengthFactors,
    CodeProfile,
    ProjectConfig,
)

from .validator import (
    ProfileValidationResult,
    validate_profile,
)

from .registry import (
    DEFAULT_PROFILE_ID,
    ProfileRegistry,
    profile_from_dict,
    apply_profile,
    new_project_config,
    update_parameters,
    create_custom_profile,
)

__all__ = [
    'BendDeductions',
    'MemberDefaults',
    'DevelopmentLengthFactors',
    'CodeProfile',
    'ProjectConfig',
    'ProfileValidationResult',
    'validate_profile',
    'DEFAULT_PROFILE_ID',
    'ProfileRegistry',
    'profile_from_dict',
    'apply_profile',
    'new_project_config',
    'update_parameters',
    'create_custom_profile',
]
