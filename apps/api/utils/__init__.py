"""Utility functions for the API."""

from .validators import (
    validate_required_fields,
    validate_name,
    validate_birthdate,
    validate_choice,
    validate_resident_payload,
    ValidationError,
)

from .age import (
    INVALID_AGE,
    calculate_age,
    age_in_range,
    is_valid_age,
)

from .sectoral_rules import (
    is_out_of_school_children,
    is_out_of_school_youth,
    is_senior_citizen,
    is_employed,
    is_unemployed,
    is_indigenous_people,
    evaluate_sectoral_flags,
)

from .sectoral_sync import (
    build_resident_context,
    synchronize,
)

__all__ = [
    'validate_required_fields',
    'validate_name',
    'validate_birthdate',
    'validate_choice',
    'validate_resident_payload',
    'ValidationError',
    'INVALID_AGE',
    'calculate_age',
    'age_in_range',
    'is_valid_age',
    'is_out_of_school_children',
    'is_out_of_school_youth',
    'is_senior_citizen',
    'is_employed',
    'is_unemployed',
    'is_indigenous_people',
    'evaluate_sectoral_flags',
    'build_resident_context',
    'synchronize',
]
