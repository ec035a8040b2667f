"""
Schedule Request Loader
Reads schedule requests from YAML/JSON files and runs them through the engine.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional, Tuple

import yaml

from .errors import ConfigurationError
from .models.schedule_schema import ScheduleRequest
from .profiles.models import ProjectConfig
from .profiles.registry import ProfileRegistry, new_project_config
from .schedule.engine import Schedule, MemberBars, build_schedule
from .schedule.verification import verify_schedule

logger = logging.getLogger(__name__)


def load_request_data(path: Path) -> Dict[str, Any]:
    """Load raw request data from a .json, .yaml or .yml file."""
    path = Path(path)
    try:
        with open(path) as f:
            if path.suffix.lower() == '.json':
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read schedule request {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Schedule request {path} must be a mapping")
    return data


def resolve_config(request: ScheduleRequest,
                   registry: Optional[ProfileRegistry] = None) -> ProjectConfig:
    """
    Applied configuration for a request.

    Explicit project parameters win; otherwise the named profile is applied
    to a fresh configuration.

    Raises:
        UnknownProfileError: if the named profile does not exist
    """
    if request.project is not None:
        return request.project.to_config()
    registry = registry or ProfileRegistry()
    profile = registry.require(request.profile)
    return new_project_config(request.project_name, profile,
                              concrete_grade=request.concrete_grade)


def compute_schedule(request: ScheduleRequest,
                     registry: Optional[ProfileRegistry] = None) -> Tuple[ProjectConfig, Schedule]:
    """Compute the schedule of a validated request, with QC issues attached."""
    config = resolve_config(request, registry)
    members = [
        MemberBars(member=entry.member.to_member(), bars=[b.to_bar() for b in entry.bars])
        for entry in request.members
    ]
    shape_bars = [b.to_shape_bar() for b in request.shape_bars]

    logger.info(f"Computing schedule '{config.name}' with profile {config.code_profile_id or 'custom'}")
    schedule = build_schedule(config, shape_bars=shape_bars, members=members)
    schedule.issues = verify_schedule(schedule, config, shape_bars=shape_bars, members=members)
    return config, schedule
