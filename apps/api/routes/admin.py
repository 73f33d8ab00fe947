"""
Citizenly - Admin Routes

Maintenance operations for super admins.
"""
from flask import Blueprint, request, jsonify, current_app

from apps.api import limiter
from apps.api.utils.auth import superadmin_required, get_current_actor
from apps.api.utils.db_retry import with_db_retry
from apps.api.utils.sectoral_reconcile import reconcile_all

admin_bp = Blueprint('admin', __name__, url_prefix='/api/admin')


def _reconcile_limit():
    return current_app.config.get('RECONCILE_RATE_LIMIT', '5 per hour')


@admin_bp.route('/sectoral/reconcile', methods=['POST'])
@superadmin_required
@limiter.limit(_reconcile_limit)
@with_db_retry(max_retries=1, initial_delay=1.0)
def reconcile_sectoral():
    """
    Recompute sectoral flags for all residents.

    Optional JSON body: {"batch_size": int}
    """
    data = request.get_json(silent=True) or {}
    batch_size = data.get('batch_size')
    if batch_size is not None and (not isinstance(batch_size, int) or isinstance(batch_size, bool) or batch_size < 1):
        return jsonify({'error': 'batch_size must be a positive integer'}), 400

    current_app.logger.info("Sectoral reconcile requested by %s", get_current_actor())
    result = reconcile_all(batch_size=batch_size)
    return jsonify(result), 200
