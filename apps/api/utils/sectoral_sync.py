"""
Sectoral record synchronizer.

Merges freshly evaluated auto flags into an existing sectoral record while
keeping operator-maintained fields, and decides whether anything changed.
Works on plain dicts so it can be used with or without a database session.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from apps.api.utils.constants import (
    MANUAL_SECTORAL_FIELDS,
    SECTORAL_SOURCE_ATTRIBUTES,
    SYNCHRONIZED_FIELDS,
)
from apps.api.utils.sectoral_rules import evaluate_sectoral_flags
from apps.api.utils.time import utc_now


def build_resident_context(resident) -> Dict[str, Any]:
    """Extract the classification inputs from a Resident model or mapping."""
    if isinstance(resident, Mapping):
        return {name: resident.get(name) for name in SECTORAL_SOURCE_ATTRIBUTES}
    return {name: getattr(resident, name, None) for name in SECTORAL_SOURCE_ATTRIBUTES}


def changed_fields(before: Mapping[str, Any], after: Mapping[str, Any]) -> List[str]:
    """Synchronized fields whose value differs between two records."""
    return [
        name for name in SYNCHRONIZED_FIELDS
        if bool(before.get(name)) != bool(after.get(name)) or before.get(name) is None
    ]


def synchronize(
    current_record: Optional[Mapping[str, Any]],
    context: Mapping[str, Any],
    today=None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Produce the updated sectoral record for a resident.

    Auto fields are always overwritten from ``context``. A resident who is no
    longer a senior citizen cannot stay a registered one, so that manual flag
    is forced off; it is never switched on here. Other manual fields are kept
    as-is (missing ones default to False). ``updated_at`` only moves when a
    synchronized field actually changed, which keeps repeated calls
    idempotent.

    Args:
        current_record: Existing sectoral values (or None for a new row)
        context: Resident classification inputs (see build_resident_context)
        today: Reference date for age calculation
        now: Timestamp to stamp on change (defaults to utc_now())

    Returns:
        A new dict; ``current_record`` is not mutated
    """
    before = dict(current_record or {})
    record = dict(before)

    for name in MANUAL_SECTORAL_FIELDS:
        record[name] = bool(record.get(name))

    record.update(evaluate_sectoral_flags(context, today))

    if not record['is_senior_citizen']:
        record['is_registered_senior_citizen'] = False

    if changed_fields(before, record):
        record['updated_at'] = now or utc_now()

    return record


def apply_to_model(info, record: Mapping[str, Any]) -> List[str]:
    """
    Copy synchronized values onto a ResidentSectoralInfo row.

    Attributes are only assigned when they differ so an unchanged row is not
    flushed as an UPDATE.

    Returns:
        Names of the fields that changed
    """
    changed = []
    for name in SYNCHRONIZED_FIELDS:
        value = bool(record.get(name))
        if getattr(info, name, None) is not value:
            setattr(info, name, value)
            changed.append(name)
    for name in MANUAL_SECTORAL_FIELDS:
        if getattr(info, name, None) is None:
            setattr(info, name, False)
    if changed and record.get('updated_at'):
        info.updated_at = record['updated_at']
    return changed
