"""Resident model - the source of truth for sectoral classification."""
import uuid

from sqlalchemy import Index

from apps.api import db
from apps.api.utils.time import utc_now


def _new_resident_id() -> str:
    return str(uuid.uuid4())


class Resident(db.Model):
    __tablename__ = 'residents'

    # Primary Key (UUID, matches Supabase auth-era ids)
    id = db.Column(db.String(36), primary_key=True, default=_new_resident_id)

    # PSGC barangay code (e.g. 037112001); tenancy boundary for reports
    barangay_code = db.Column(db.String(20), nullable=True)

    # Personal Information
    first_name = db.Column(db.String(100), nullable=False)
    middle_name = db.Column(db.String(100), nullable=True)
    last_name = db.Column(db.String(100), nullable=False)
    sex = db.Column(db.String(10), nullable=True)
    birthdate = db.Column(db.Date, nullable=False)

    # Classification inputs
    education_attainment = db.Column(db.String(30), nullable=True)  # elementary, high_school, college, ...
    education_status = db.Column(db.String(20), nullable=True)  # graduate | under_graduate
    employment_status = db.Column(db.String(30), nullable=True)
    ethnicity = db.Column(db.String(50), nullable=True)

    # Status
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    # Timestamps
    created_at = db.Column(db.DateTime, default=utc_now)
    updated_at = db.Column(db.DateTime, default=utc_now, onupdate=utc_now)

    # Optimistic concurrency: a write from a stale copy raises StaleDataError
    version_id = db.Column(db.Integer, nullable=False, server_default='1')

    # Relationships
    sectoral_info = db.relationship(
        'ResidentSectoralInfo',
        back_populates='resident',
        uselist=False,
        cascade='all, delete-orphan',
    )

    __table_args__ = (
        Index('idx_residents_barangay', 'barangay_code'),
        Index('idx_residents_birthdate', 'birthdate'),
    )

    __mapper_args__ = {'version_id_col': version_id}

    def __repr__(self):
        return f'<Resident {self.id} {self.last_name}, {self.first_name}>'

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.middle_name, self.last_name]
        return ' '.join(p for p in parts if p)

    def to_dict(self, include_sectoral=False):
        """Convert resident to dictionary."""
        data = {
            'id': self.id,
            'barangay_code': self.barangay_code,
            'first_name': self.first_name,
            'middle_name': self.middle_name,
            'last_name': self.last_name,
            'full_name': self.full_name,
            'sex': self.sex,
            'birthdate': self.birthdate.isoformat() if self.birthdate else None,
            'education_attainment': self.education_attainment,
            'education_status': self.education_status,
            'employment_status': self.employment_status,
            'ethnicity': self.ethnicity,
            'is_active': self.is_active,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

        if include_sectoral:
            data['sectoral_info'] = self.sectoral_info.to_dict() if self.sectoral_info else None

        return data
