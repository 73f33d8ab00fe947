"""Request payload validation for resident and sectoral endpoints."""
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from apps.api.utils.age import parse_birthdate
from apps.api.utils.constants import (
    EDUCATION_LEVELS,
    EDUCATION_STATUSES,
    EMPLOYMENT_STATUSES,
    MAX_PLAUSIBLE_AGE,
    SEX_CHOICES,
)
from apps.api.utils.time import local_today


class ValidationError(Exception):
    """Raised when request data fails validation."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        data = {'error': self.message}
        if self.field:
            data['field'] = self.field
        return data


def validate_required_fields(data: Dict[str, Any], required: Iterable[str]):
    missing: List[str] = [f for f in required if data.get(f) in (None, '')]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}", missing[0])


def validate_name(value: Any, field: str, required: bool = True) -> Optional[str]:
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise ValidationError(f'{field} is required', field)
        return None
    if not isinstance(value, str):
        raise ValidationError(f'{field} must be a string', field)
    value = value.strip()
    if len(value) > 100:
        raise ValidationError(f'{field} must be at most 100 characters', field)
    return value


def validate_birthdate(value: Any, today: Optional[date] = None) -> date:
    """Birthdate must parse, be in the past and within a plausible lifespan."""
    born = parse_birthdate(value)
    if born is None:
        raise ValidationError('birthdate must be in YYYY-MM-DD format', 'birthdate')
    today = today or local_today()
    if born > today:
        raise ValidationError('birthdate cannot be in the future', 'birthdate')
    if today.year - born.year > MAX_PLAUSIBLE_AGE:
        raise ValidationError('birthdate is outside a plausible lifespan', 'birthdate')
    return born


def validate_choice(value: Any, field: str, choices: Iterable[str]) -> Optional[str]:
    """Normalize an optional enum value; None/blank clears the field."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if not isinstance(value, str):
        raise ValidationError(f'{field} must be a string', field)
    normalized = value.strip().lower()
    if normalized not in choices:
        raise ValidationError(
            f"Invalid {field}. Must be one of: {', '.join(choices)}", field
        )
    return normalized


def validate_ethnicity(value: Any) -> Optional[str]:
    # Free-form codes; the IP allow-list decides what counts as indigenous
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if not isinstance(value, str) or len(value.strip()) > 50:
        raise ValidationError('ethnicity must be a string of at most 50 characters', 'ethnicity')
    return value.strip().lower()


def validate_resident_payload(data: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
    """
    Validate and normalize a resident create/update payload.

    Args:
        data: Raw JSON body
        partial: If True, only fields present in data are validated (PATCH)

    Returns:
        Dict of cleaned column values
    """
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')

    if not partial:
        validate_required_fields(data, ('first_name', 'last_name', 'birthdate'))

    cleaned: Dict[str, Any] = {}

    for field in ('first_name', 'last_name'):
        if field in data:
            cleaned[field] = validate_name(data.get(field), field)
    if 'middle_name' in data:
        cleaned['middle_name'] = validate_name(data.get('middle_name'), 'middle_name', required=False)
    if 'birthdate' in data:
        cleaned['birthdate'] = validate_birthdate(data.get('birthdate'))
    if 'sex' in data:
        cleaned['sex'] = validate_choice(data.get('sex'), 'sex', SEX_CHOICES)
    if 'education_attainment' in data:
        cleaned['education_attainment'] = validate_choice(
            data.get('education_attainment'), 'education_attainment', EDUCATION_LEVELS
        )
    if 'education_status' in data:
        cleaned['education_status'] = validate_choice(
            data.get('education_status'), 'education_status', EDUCATION_STATUSES
        )
    if 'employment_status' in data:
        cleaned['employment_status'] = validate_choice(
            data.get('employment_status'), 'employment_status', EMPLOYMENT_STATUSES
        )
    if 'ethnicity' in data:
        cleaned['ethnicity'] = validate_ethnicity(data.get('ethnicity'))
    if 'barangay_code' in data:
        code = data.get('barangay_code')
        if code is not None and (not isinstance(code, str) or not code.strip().isdigit()):
            raise ValidationError('barangay_code must be a numeric PSGC code', 'barangay_code')
        cleaned['barangay_code'] = code.strip() if code else None

    return cleaned
