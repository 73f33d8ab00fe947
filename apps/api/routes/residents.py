"""
Citizenly - Resident Routes

Thin CRUD over the residents table. Sectoral flags are never accepted here;
they are derived by the session hooks in the same transaction as the write.
"""
from flask import Blueprint, request, jsonify, current_app

from apps.api import db
from apps.api.models.resident import Resident
from apps.api.utils.auth import staff_required, get_current_actor
from apps.api.utils.db_retry import with_db_retry
from apps.api.utils.validators import ValidationError, validate_resident_payload

residents_bp = Blueprint('residents', __name__, url_prefix='/api/residents')


@residents_bp.route('', methods=['GET'])
@staff_required
@with_db_retry(max_retries=3, initial_delay=0.5)
def list_residents():
    """List residents, optionally filtered by barangay."""
    page = request.args.get('page', 1, type=int)
    per_page = min(request.args.get('per_page', 20, type=int), 100)
    if page < 1:
        page = 1
    if per_page < 1:
        per_page = 20

    query = Resident.query.filter(Resident.is_active.is_(True))
    barangay_code = (request.args.get('barangay_code') or '').strip()
    if barangay_code:
        query = query.filter(Resident.barangay_code == barangay_code)

    total = query.count()
    residents = (
        query.order_by(Resident.last_name.asc(), Resident.first_name.asc())
        .offset((page - 1) * per_page)
        .limit(per_page)
        .all()
    )

    return jsonify({
        'count': len(residents),
        'total': total,
        'page': page,
        'per_page': per_page,
        'residents': [r.to_dict() for r in residents],
    }), 200


@residents_bp.route('', methods=['POST'])
@staff_required
@with_db_retry(max_retries=2, initial_delay=0.5)
def create_resident():
    """Register a resident; their sectoral row is created alongside."""
    try:
        cleaned = validate_resident_payload(request.get_json(silent=True))
    except ValidationError as e:
        return jsonify(e.to_dict()), 400

    resident = Resident(**cleaned)
    db.session.add(resident)
    db.session.commit()

    current_app.logger.info("Resident %s created by %s", resident.id, get_current_actor())
    return jsonify(resident.to_dict(include_sectoral=True)), 201


@residents_bp.route('/<string:resident_id>', methods=['GET'])
@staff_required
@with_db_retry(max_retries=3, initial_delay=0.5)
def get_resident(resident_id):
    resident = db.session.get(Resident, resident_id)
    if not resident:
        return jsonify({'error': 'Resident not found'}), 404
    return jsonify(resident.to_dict(include_sectoral=True)), 200


@residents_bp.route('/<string:resident_id>', methods=['PATCH', 'PUT'])
@staff_required
@with_db_retry(max_retries=2, initial_delay=0.5)
def update_resident(resident_id):
    """Update resident attributes; derived sectoral flags follow."""
    resident = db.session.get(Resident, resident_id, with_for_update=True)
    if not resident:
        return jsonify({'error': 'Resident not found'}), 404

    try:
        cleaned = validate_resident_payload(
            request.get_json(silent=True), partial=(request.method == 'PATCH')
        )
    except ValidationError as e:
        return jsonify(e.to_dict()), 400

    for field, value in cleaned.items():
        setattr(resident, field, value)
    db.session.commit()

    current_app.logger.info(
        "Resident %s updated by %s (%s)", resident.id, get_current_actor(), ', '.join(sorted(cleaned))
    )
    return jsonify(resident.to_dict(include_sectoral=True)), 200
