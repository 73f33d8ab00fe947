"""
Batch reconciliation of resident sectoral flags.

Recomputes every resident's sectoral row with the same synchronizer the
session hooks use, inserting missing rows and correcting drifted ones.
Residents are processed in id order, one bounded batch per transaction.
Each batch locks its resident rows; a sectoral row changed by another writer
since it was read fails the version check and the batch is redone one
resident at a time from fresh state.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from apps.api import db
from apps.api.models.resident import Resident
from apps.api.models.sectoral import ResidentSectoralInfo
from apps.api.utils.sectoral_sync import apply_to_model, build_resident_context, synchronize

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 500

INSERTED = 'inserted'
UPDATED = 'updated'
UNCHANGED = 'unchanged'
FAILED = 'failed'

Outcome = Tuple[str, str, Optional[str]]


def reconcile_resident(resident: Resident) -> str:
    """
    Bring one resident's sectoral row in line with the rules.

    Returns:
        'inserted', 'updated' or 'unchanged'
    """
    context = build_resident_context(resident)
    info = resident.sectoral_info

    if info is None:
        info = ResidentSectoralInfo()
        apply_to_model(info, synchronize(None, context))
        resident.sectoral_info = info
        db.session.add(info)
        return INSERTED

    if apply_to_model(info, synchronize(info.to_record(), context)):
        return UPDATED
    return UNCHANGED


def _reconcile_batch(residents: List[Resident]) -> List[Outcome]:
    outcomes = []
    for resident in residents:
        try:
            outcomes.append((resident.id, reconcile_resident(resident), None))
        except Exception as exc:
            logger.error("Sectoral reconcile failed for resident %s: %s", resident.id, exc)
            outcomes.append((resident.id, FAILED, str(exc)[:200]))
    return outcomes


def _reconcile_individually(resident_ids: List[str]) -> List[Outcome]:
    """Retry a failed batch one resident per transaction."""
    outcomes = []
    for resident_id in resident_ids:
        try:
            resident = db.session.get(Resident, resident_id, with_for_update=True)
            if resident is None:
                logger.warning("Resident %s disappeared during reconcile; skipping", resident_id)
                continue
            outcome = reconcile_resident(resident)
            db.session.commit()
            outcomes.append((resident_id, outcome, None))
        except Exception as exc:
            db.session.rollback()
            logger.error("Sectoral reconcile failed for resident %s: %s", resident_id, exc)
            outcomes.append((resident_id, FAILED, str(exc)[:200]))
    return outcomes


def _tally(result: Dict[str, Any], outcomes: List[Outcome]):
    for resident_id, outcome, error in outcomes:
        result['processed_count'] += 1
        if outcome == INSERTED:
            result['inserted_count'] += 1
        elif outcome == UPDATED:
            result['updated_count'] += 1
        elif outcome == FAILED:
            result['failed_count'] += 1
            result['failures'].append({'resident_id': resident_id, 'error': error})


def reconcile_all(batch_size: Optional[int] = None) -> Dict[str, Any]:
    """
    Recompute sectoral flags for every resident.

    Safe to re-run: rows already in line are not touched, and manual fields
    are never modified (apart from the registered-senior reset).

    Args:
        batch_size: Residents per transaction (defaults to
            SECTORAL_RECONCILE_BATCH_SIZE)

    Returns:
        Dict with updated_count, inserted_count, processed_count,
        failed_count and per-resident failures
    """
    if batch_size is None:
        batch_size = current_app.config.get('SECTORAL_RECONCILE_BATCH_SIZE', DEFAULT_BATCH_SIZE)
    batch_size = max(int(batch_size), 1)

    result = {
        'updated_count': 0,
        'inserted_count': 0,
        'processed_count': 0,
        'failed_count': 0,
        'failures': [],
    }

    last_id = None
    while True:
        query = (
            Resident.query.options(selectinload(Resident.sectoral_info))
            .order_by(Resident.id)
            .with_for_update()
        )
        if last_id is not None:
            query = query.filter(Resident.id > last_id)
        batch = query.limit(batch_size).all()
        if not batch:
            break

        resident_ids = [r.id for r in batch]
        last_id = resident_ids[-1]

        outcomes = _reconcile_batch(batch)
        try:
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.warning(
                "Reconcile batch ending at %s failed to commit (%s); retrying individually",
                last_id,
                exc,
            )
            outcomes = _reconcile_individually(resident_ids)

        _tally(result, outcomes)

    logger.info(
        "Sectoral reconcile finished: %s processed, %s inserted, %s updated, %s failed",
        result['processed_count'],
        result['inserted_count'],
        result['updated_count'],
        result['failed_count'],
    )
    return result
