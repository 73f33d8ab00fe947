"""Role checks on JWTs issued by the hosted auth provider."""
import functools

from flask import jsonify
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

from apps.api.utils.constants import STAFF_ROLES, SUPERADMIN_ROLE


def get_current_role():
    claims = get_jwt() or {}
    return claims.get('role')


def get_current_actor():
    """Identity string of the caller, for audit logging."""
    identity = get_jwt_identity()
    if isinstance(identity, dict):
        return str(identity.get('id'))
    return str(identity) if identity is not None else None


def roles_required(*roles):
    """Require a valid JWT whose ``role`` claim is one of ``roles``."""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            if get_current_role() not in roles:
                return jsonify({'error': 'Forbidden - insufficient role'}), 403
            return func(*args, **kwargs)
        return wrapper
    return decorator


staff_required = roles_required(*STAFF_ROLES)
superadmin_required = roles_required(SUPERADMIN_ROLE)
