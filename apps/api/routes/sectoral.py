"""
Citizenly - Sectoral Information Routes

- Staff: view and edit a resident's sectoral flags
- Reports: per-flag population counts

Only manual flags are editable in effect. Auto flags sent by a client are
written through and then re-derived by the sectoral hooks before the row is
persisted, so the rules always win. The resident row is locked for the
write so the flags are derived from its committed state.
"""
from flask import Blueprint, request, jsonify, current_app

from apps.api import db
from apps.api.models.resident import Resident
from apps.api.models.sectoral import ResidentSectoralInfo
from apps.api.utils.auth import staff_required, get_current_actor
from apps.api.utils.constants import SECTORAL_FIELDS
from apps.api.utils.db_retry import with_db_retry

sectoral_bp = Blueprint('sectoral', __name__, url_prefix='/api')


def _parse_flags(data):
    """Return (flags, error) for the sectoral fields present in data."""
    if not isinstance(data, dict):
        return None, 'Request body must be a JSON object'
    flags = {}
    for name in SECTORAL_FIELDS:
        if name not in data:
            continue
        value = data[name]
        if not isinstance(value, bool):
            return None, f'{name} must be a boolean'
        flags[name] = value
    if not flags:
        return None, 'No sectoral fields provided'
    return flags, None


@sectoral_bp.route('/residents/<string:resident_id>/sectoral', methods=['GET'])
@staff_required
@with_db_retry(max_retries=3, initial_delay=0.5)
def get_sectoral_info(resident_id):
    resident = db.session.get(Resident, resident_id)
    if not resident:
        return jsonify({'error': 'Resident not found'}), 404
    if not resident.sectoral_info:
        return jsonify({'error': 'Sectoral information not found'}), 404
    return jsonify(resident.sectoral_info.to_dict()), 200


@sectoral_bp.route('/residents/<string:resident_id>/sectoral', methods=['PUT', 'PATCH'])
@staff_required
@with_db_retry(max_retries=2, initial_delay=0.5)
def update_sectoral_info(resident_id):
    """Operator edit of sectoral flags."""
    resident = db.session.get(Resident, resident_id, with_for_update=True)
    if not resident:
        return jsonify({'error': 'Resident not found'}), 404

    flags, error = _parse_flags(request.get_json(silent=True))
    if error:
        return jsonify({'error': error}), 400

    info = resident.sectoral_info
    if info is None:
        info = ResidentSectoralInfo(resident=resident)
        db.session.add(info)

    for name, value in flags.items():
        setattr(info, name, value)
    db.session.commit()

    # Auto fields and the registered-senior reset can overrule the request
    ignored = sorted(name for name in flags if getattr(info, name) != flags[name])
    if ignored:
        current_app.logger.info(
            "Sectoral fields for resident %s not taken from %s: %s",
            resident_id, get_current_actor(), ', '.join(ignored)
        )

    payload = info.to_dict()
    payload['ignored_fields'] = ignored
    return jsonify(payload), 200


@sectoral_bp.route('/sectoral/summary', methods=['GET'])
@staff_required
@with_db_retry(max_retries=3, initial_delay=0.5)
def sectoral_summary():
    """Count active residents per sectoral flag (optionally per barangay)."""
    base = (
        db.session.query(ResidentSectoralInfo)
        .join(Resident, Resident.id == ResidentSectoralInfo.resident_id)
        .filter(Resident.is_active.is_(True))
    )
    barangay_code = (request.args.get('barangay_code') or '').strip()
    if barangay_code:
        base = base.filter(Resident.barangay_code == barangay_code)

    counts = {
        name: base.filter(getattr(ResidentSectoralInfo, name).is_(True)).count()
        for name in SECTORAL_FIELDS
    }

    return jsonify({
        'barangay_code': barangay_code or None,
        'total_residents': base.count(),
        'counts': counts,
    }), 200
