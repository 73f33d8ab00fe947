"""
Session hooks that keep resident_sectoral_info in step with residents.

Two entry points, both going through ``synchronize``:

- on_resident_changed: a resident was inserted, or one of its
  classification attributes changed. Upserts the sectoral row.
- before_sectoral_write: a sectoral row is about to be inserted/updated
  directly (e.g. an operator editing manual flags). Auto fields are
  re-derived from the resident, whatever the operator sent.

``register_sectoral_hooks`` installs a ``before_flush`` listener that routes
pending objects to the right entry point, so the derived row is written in
the same flush and transaction as the change that caused it.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import event, inspect
from sqlalchemy.orm import Session

from apps.api.models.resident import Resident
from apps.api.models.sectoral import ResidentSectoralInfo
from apps.api.utils.constants import SECTORAL_SOURCE_ATTRIBUTES
from apps.api.utils.sectoral_sync import apply_to_model, build_resident_context, synchronize

logger = logging.getLogger(__name__)


def _source_attributes_changed(resident: Resident) -> bool:
    attrs = inspect(resident).attrs
    return any(attrs[name].history.has_changes() for name in SECTORAL_SOURCE_ATTRIBUTES)


def on_resident_changed(session: Session, resident: Resident, today=None) -> ResidentSectoralInfo:
    """
    Recompute (or create) the sectoral row for a changed resident.

    Args:
        session: Session the resident belongs to
        resident: Resident whose classification inputs changed
        today: Reference date for age calculation

    Returns:
        The synchronized ResidentSectoralInfo (pending if newly created)
    """
    info = resident.sectoral_info
    if info is None:
        info = ResidentSectoralInfo()
        resident.sectoral_info = info
        session.add(info)

    record = synchronize(info.to_record(), build_resident_context(resident), today=today)
    changed = apply_to_model(info, record)
    if changed:
        logger.debug("Sectoral flags for resident %s changed: %s", resident.id, ', '.join(changed))
    return info


def before_sectoral_write(
    session: Session, info: ResidentSectoralInfo, today=None
) -> Optional[ResidentSectoralInfo]:
    """
    Re-derive auto fields on a sectoral row that is about to be written.

    A row whose resident cannot be found is left untouched and logged.
    """
    # Pending rows may only carry resident_id; relationships don't load on pending
    if info.resident_id is not None:
        resident = session.get(Resident, info.resident_id)
    else:
        resident = info.resident
    if resident is None:
        logger.warning(
            "Skipping sectoral recompute: resident %s not found", info.resident_id
        )
        return None

    record = synchronize(info.to_record(), build_resident_context(resident), today=today)
    changed = apply_to_model(info, record)
    if changed:
        logger.info(
            "Overrode sectoral fields for resident %s: %s", resident.id, ', '.join(changed)
        )
    return info


def _before_flush(session, flush_context, instances):
    handled = set()

    for obj in list(session.new) + list(session.dirty):
        if not isinstance(obj, Resident) or obj in session.deleted:
            continue
        if obj in session.new or _source_attributes_changed(obj):
            handled.add(id(on_resident_changed(session, obj)))

    for obj in list(session.new) + list(session.dirty):
        if not isinstance(obj, ResidentSectoralInfo) or obj in session.deleted:
            continue
        if id(obj) in handled:
            continue
        if obj in session.new or session.is_modified(obj, include_collections=False):
            before_sectoral_write(session, obj)


def register_sectoral_hooks():
    """Install the before_flush listener once per process."""
    if not event.contains(Session, 'before_flush', _before_flush):
        event.listen(Session, 'before_flush', _before_flush)
