"""
Sectoral eligibility rules.

Every predicate is pure and total: it takes only the fields it needs and
returns a bool. Missing or unrecognised categorical values never satisfy a
condition, so bad data fails closed instead of inflating sectoral counts.

This module is the only place the OSC/OSY/senior/labor-force/IP rules are
written down. Request handlers, session hooks and the reconciliation job all
reach them through ``evaluate_sectoral_flags``.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from apps.api.utils.age import age_in_range, calculate_age, is_valid_age
from apps.api.utils.constants import (
    BASIC_EDUCATION_LEVELS,
    EDUCATION_STATUS_UNDER_GRADUATE,
    EMPLOYED_STATUSES,
    INDIGENOUS_ETHNICITIES,
    OSC_AGE_RANGE,
    OSY_AGE_RANGE,
    POST_SECONDARY_LEVELS,
    SENIOR_CITIZEN_AGE,
    UNEMPLOYED_STATUSES,
)


def _normalize(value: Any) -> Optional[str]:
    """Lower-cased, stripped string or None for blanks and non-strings."""
    if not isinstance(value, str):
        return None
    value = value.strip().lower()
    return value or None


def is_out_of_school_children(age, education_attainment, education_status) -> bool:
    """Ages 6-14 still under-graduate at an elementary or high school level."""
    if not age_in_range(age, *OSC_AGE_RANGE):
        return False
    return (
        _normalize(education_attainment) in BASIC_EDUCATION_LEVELS
        and _normalize(education_status) == EDUCATION_STATUS_UNDER_GRADUATE
    )


def _has_not_completed_post_secondary(education_attainment, education_status) -> bool:
    level = _normalize(education_attainment)
    if level is None or level == 'none' or level in BASIC_EDUCATION_LEVELS:
        return True
    if level in POST_SECONDARY_LEVELS:
        return _normalize(education_status) == EDUCATION_STATUS_UNDER_GRADUATE
    return False


def is_out_of_school_youth(age, education_attainment, education_status, employment_status) -> bool:
    """
    Ages 15-24, not employed, and without a completed post-secondary level.

    All three conditions must hold.
    """
    if not age_in_range(age, *OSY_AGE_RANGE):
        return False
    if is_employed(employment_status):
        return False
    return _has_not_completed_post_secondary(education_attainment, education_status)


def is_senior_citizen(age) -> bool:
    return is_valid_age(age) and age >= SENIOR_CITIZEN_AGE


def is_employed(employment_status) -> bool:
    return _normalize(employment_status) in EMPLOYED_STATUSES


def is_unemployed(employment_status) -> bool:
    return _normalize(employment_status) in UNEMPLOYED_STATUSES


def is_indigenous_people(ethnicity) -> bool:
    return _normalize(ethnicity) in INDIGENOUS_ETHNICITIES


def resolve_age(context: Mapping[str, Any], today=None) -> int:
    """Use a precomputed ``age`` from the context, else derive it from ``birthdate``."""
    age = context.get('age')
    if age is not None:
        return age
    return calculate_age(context.get('birthdate'), today)


def evaluate_sectoral_flags(context: Mapping[str, Any], today=None) -> Dict[str, bool]:
    """
    Evaluate every auto-calculated sectoral flag for a resident context.

    Args:
        context: Mapping with birthdate (or age), education_attainment,
            education_status, employment_status and ethnicity
        today: Reference date for the age calculation (defaults to today)

    Returns:
        Dict keyed by the auto sectoral field names
    """
    age = resolve_age(context, today)
    attainment = context.get('education_attainment')
    education_status = context.get('education_status')
    employment_status = context.get('employment_status')

    return {
        'is_out_of_school_children': is_out_of_school_children(age, attainment, education_status),
        'is_out_of_school_youth': is_out_of_school_youth(
            age, attainment, education_status, employment_status
        ),
        'is_senior_citizen': is_senior_citizen(age),
        'is_labor_force_employed': is_employed(employment_status),
        'is_unemployed': is_unemployed(employment_status),
        'is_indigenous_people': is_indigenous_people(context.get('ethnicity')),
    }
