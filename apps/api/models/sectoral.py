"""Resident sectoral information (1:1 with residents).

Auto fields are derived by the sectoral rules on every write; manual fields
are maintained by barangay staff.
"""
from apps.api import db
from apps.api.utils.constants import SECTORAL_FIELDS
from apps.api.utils.time import utc_now


class ResidentSectoralInfo(db.Model):
    __tablename__ = 'resident_sectoral_info'

    # Primary Key
    id = db.Column(db.Integer, primary_key=True)

    resident_id = db.Column(
        db.String(36),
        db.ForeignKey('residents.id', ondelete='CASCADE'),
        nullable=False,
        unique=True,
    )

    # Auto-calculated
    is_out_of_school_children = db.Column(db.Boolean, default=False, nullable=False)
    is_out_of_school_youth = db.Column(db.Boolean, default=False, nullable=False)
    is_senior_citizen = db.Column(db.Boolean, default=False, nullable=False)
    is_labor_force_employed = db.Column(db.Boolean, default=False, nullable=False)
    is_unemployed = db.Column(db.Boolean, default=False, nullable=False)
    is_indigenous_people = db.Column(db.Boolean, default=False, nullable=False)

    # Manual (operator-maintained)
    is_registered_senior_citizen = db.Column(db.Boolean, default=False, nullable=False)
    is_person_with_disability = db.Column(db.Boolean, default=False, nullable=False)
    is_overseas_filipino_worker = db.Column(db.Boolean, default=False, nullable=False)
    is_solo_parent = db.Column(db.Boolean, default=False, nullable=False)
    is_migrant = db.Column(db.Boolean, default=False, nullable=False)

    # Timestamps
    created_at = db.Column(db.DateTime, default=utc_now)
    updated_at = db.Column(db.DateTime, default=utc_now, onupdate=utc_now)

    # Optimistic concurrency: a write from a stale copy raises StaleDataError
    version_id = db.Column(db.Integer, nullable=False, server_default='1')

    # Relationships
    resident = db.relationship('Resident', back_populates='sectoral_info')

    __mapper_args__ = {'version_id_col': version_id}

    def __repr__(self):
        return f'<ResidentSectoralInfo resident={self.resident_id}>'

    def to_record(self):
        """Plain sectoral values for the synchronizer."""
        record = {name: getattr(self, name) for name in SECTORAL_FIELDS}
        record['updated_at'] = self.updated_at
        return record

    def to_dict(self):
        """Convert sectoral info to dictionary."""
        data = {
            'id': self.id,
            'resident_id': self.resident_id,
        }
        data.update({name: bool(getattr(self, name)) for name in SECTORAL_FIELDS})
        data['created_at'] = self.created_at.isoformat() if self.created_at else None
        data['updated_at'] = self.updated_at.isoformat() if self.updated_at else None
        return data
