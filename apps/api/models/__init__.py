"""
Citizenly - Database Models
Import all models here for Flask-Migrate to detect them
"""
from apps.api import db

Base = db.Model

from .resident import Resident
from .sectoral import ResidentSectoralInfo

__all__ = [
    'Resident',
    'ResidentSectoralInfo',
]
