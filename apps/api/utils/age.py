"""Age calculation for sectoral classification.

Ages are whole calendar years. Anything that cannot be turned into a
plausible age yields ``INVALID_AGE`` instead of raising, and every age band
check treats it as outside the band.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union

from apps.api.utils.constants import MAX_PLAUSIBLE_AGE
from apps.api.utils.time import local_today

INVALID_AGE = -1

DateLike = Union[date, datetime, str, None]


def parse_birthdate(value: DateLike) -> Optional[date]:
    """Coerce a date, datetime or ISO ``YYYY-MM-DD`` string to a date."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        # Only a time part may follow the date
        rest = raw[10:]
        if rest and not (rest[0] in 'Tt' or rest[0].isspace()):
            return None
        try:
            return datetime.strptime(raw[:10], '%Y-%m-%d').date()
        except ValueError:
            return None
    return None


def calculate_age(birthdate: DateLike, reference_date: Optional[date] = None) -> int:
    """
    Age in completed years on ``reference_date`` (default: today, barangay time).

    Returns INVALID_AGE for a missing or unparseable birthdate, a birthdate
    after the reference date, or an age beyond MAX_PLAUSIBLE_AGE.
    """
    born = parse_birthdate(birthdate)
    if born is None:
        return INVALID_AGE

    today = parse_birthdate(reference_date) if reference_date is not None else local_today()
    if today is None or born > today:
        return INVALID_AGE

    age = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        age -= 1

    if age > MAX_PLAUSIBLE_AGE:
        return INVALID_AGE
    return age


def is_valid_age(age) -> bool:
    return isinstance(age, int) and not isinstance(age, bool) and 0 <= age <= MAX_PLAUSIBLE_AGE


def age_in_range(age, low: int, high: int) -> bool:
    """Inclusive band membership; invalid ages are never in a band."""
    return is_valid_age(age) and low <= age <= high
