"""
Input Validation
Shared field-level validation used by interactive entry and bulk import.
Returns itemized FieldError lists and never raises on bad input.
"""

import logging
from dataclasses import dataclass
from typing import List, Dict, Any, Type

from pydantic import BaseModel, ValidationError

from .models.schedule_schema import (
    ShapeBarInput,
    ComponentBarInput,
    MemberInput,
    ProjectConfigInput,
    ScheduleRequest,
)

logger = logging.getLogger(__name__)

_VALUE_ERROR_PREFIX = "Value error, "


@dataclass
class FieldError:
    """A validation failure on one input field."""
    field: str
    message: str
    value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {'field': self.field, 'message': self.message, 'value': self.value}

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


def errors_from_validation(exc: ValidationError, prefix: str = "") -> List[FieldError]:
    """Convert a pydantic ValidationError into FieldErrors."""
    errors = []
    for item in exc.errors():
        location = ".".join(str(part) for part in item.get('loc', ())) or "__root__"
        message = item.get('msg', '')
        if message.startswith(_VALUE_ERROR_PREFIX):
            message = message[len(_VALUE_ERROR_PREFIX):]
        errors.append(FieldError(
            field=location,
            message=f"{prefix}{message}",
            value=item.get('input') if item.get('type') != 'missing' else None,
        ))
    return errors


def _validate(model: Type[BaseModel], data: Dict[str, Any], prefix: str = "") -> List[FieldError]:
    try:
        model.model_validate(data)
    except ValidationError as e:
        return errors_from_validation(e, prefix)
    return []


def validate_bar_entry(data: Dict[str, Any]) -> List[FieldError]:
    """
    Validate one canonical-shape bar entry.

    Checks the member type, shape code, diameter set, positive quantity,
    non-negative spacing and the shape's required dimensions.
    """
    return _validate(ShapeBarInput, data)


def validate_component_bar(data: Dict[str, Any]) -> List[FieldError]:
    """Validate one component bar description."""
    return _validate(ComponentBarInput, data)


def validate_member(data: Dict[str, Any]) -> List[FieldError]:
    return _validate(MemberInput, data)


def validate_project_config(data: Dict[str, Any]) -> List[FieldError]:
    """Validate applied project parameters."""
    return _validate(ProjectConfigInput, data)


def validate_bar_entries(entries: List[Dict[str, Any]]) -> List[FieldError]:
    """
    Validate a batch of canonical-shape bar entries.

    Messages are prefixed with "Entry n: " (1-based) so an import can
    report and skip failing rows.
    """
    errors = []
    for index, entry in enumerate(entries, start=1):
        errors.extend(_validate(ShapeBarInput, entry, prefix=f"Entry {index}: "))
    if errors:
        logger.debug(f"{len(errors)} validation errors in {len(entries)} entries")
    return errors


def validate_schedule_request(data: Dict[str, Any]) -> List[FieldError]:
    """Validate a whole schedule request."""
    return _validate(ScheduleRequest, data)
