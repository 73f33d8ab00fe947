"""API Routes - Import all blueprints here."""

from .residents import residents_bp
from .sectoral import sectoral_bp
from .admin import admin_bp

__all__ = [
    'residents_bp',
    'sectoral_bp',
    'admin_bp',
]
