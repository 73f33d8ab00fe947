"""
Batch reconciliation: backfill, drift correction, idempotence and
per-resident failure reporting.
"""
from datetime import timedelta

from apps.api.app import create_app
from apps.api.config import Config
from apps.api import db
from apps.api.models.resident import Resident
from apps.api.models.sectoral import ResidentSectoralInfo
from apps.api.utils import sectoral_reconcile
from apps.api.utils.constants import AUTO_SECTORAL_FIELDS
from apps.api.utils.sectoral_reconcile import reconcile_all
from apps.api.utils.sectoral_sync import build_resident_context, synchronize
from apps.api.utils.time import local_today


class ReconcileTestConfig(Config):
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    SQLALCHEMY_ECHO = False
    TESTING = True
    JWT_SECRET_KEY = 'test-secret'
    RATELIMIT_ENABLED = False
    SECTORAL_RECONCILE_BATCH_SIZE = 30


EDUCATION = [
    ('elementary', 'under_graduate'),
    ('high_school', 'graduate'),
    ('high_school', 'under_graduate'),
    ('college', 'graduate'),
    ('college', 'under_graduate'),
    (None, None),
]
EMPLOYMENT = ['employed', 'unemployed', 'student', None, 'looking_for_work', 'retired', 'self_employed']
ETHNICITY = ['tagalog', 'aeta', None, 'ifugao', 'ilocano']


def _seed_residents_without_sectoral(count):
    """Bulk insert residents through Core so no sectoral rows are created."""
    today = local_today()
    rows = []
    for i in range(count):
        attainment, status = EDUCATION[i % len(EDUCATION)]
        rows.append({
            'id': f'00000000-0000-4000-8000-{i:012d}',
            'first_name': f'Resident{i}',
            'last_name': 'Dela Cruz',
            'birthdate': today - timedelta(days=int(((i % 80) + 0.5) * 365.25)),
            'education_attainment': attainment,
            'education_status': status,
            'employment_status': EMPLOYMENT[i % len(EMPLOYMENT)],
            'ethnicity': ETHNICITY[i % len(ETHNICITY)],
            'is_active': True,
        })
    db.session.execute(Resident.__table__.insert(), rows)
    db.session.commit()
    return [row['id'] for row in rows]


def test_reconcile_backfills_every_resident_and_is_idempotent():
    app = create_app(ReconcileTestConfig)
    with app.app_context():
        db.create_all()
        _seed_residents_without_sectoral(100)
        assert ResidentSectoralInfo.query.count() == 0

        result = reconcile_all()
        assert result['inserted_count'] == 100
        assert result['updated_count'] == 0
        assert result['processed_count'] == 100
        assert result['failed_count'] == 0
        assert ResidentSectoralInfo.query.count() == 100

        for resident in Resident.query.all():
            expected = synchronize(None, build_resident_context(resident))
            info = resident.sectoral_info
            for name in AUTO_SECTORAL_FIELDS:
                assert getattr(info, name) is expected[name], (resident.id, name)
            assert info.is_person_with_disability is False
            assert info.is_registered_senior_citizen is False

        again = reconcile_all()
        assert again['inserted_count'] == 0
        assert again['updated_count'] == 0
        assert again['processed_count'] == 100


def test_reconcile_corrects_drift_without_touching_manual_fields():
    app = create_app(ReconcileTestConfig)
    with app.app_context():
        db.create_all()
        resident_ids = _seed_residents_without_sectoral(10)
        reconcile_all()

        # Simulate drift written behind the ORM's back
        drifted = resident_ids[:4]
        table = ResidentSectoralInfo.__table__
        db.session.execute(
            table.update()
            .where(table.c.resident_id.in_(drifted))
            .values(
                is_out_of_school_youth=table.c.is_out_of_school_youth == False,  # noqa: E712
                is_person_with_disability=True,
            )
        )
        db.session.commit()

        result = reconcile_all(batch_size=3)
        assert result['updated_count'] == 4
        assert result['inserted_count'] == 0

        for resident_id in drifted:
            info = ResidentSectoralInfo.query.filter_by(resident_id=resident_id).one()
            resident = db.session.get(Resident, resident_id)
            expected = synchronize(None, build_resident_context(resident))
            assert info.is_out_of_school_youth is expected['is_out_of_school_youth']
            assert info.is_person_with_disability is True


def test_reconcile_resets_registered_senior_for_non_seniors():
    app = create_app(ReconcileTestConfig)
    with app.app_context():
        db.create_all()
        resident_ids = _seed_residents_without_sectoral(3)
        reconcile_all()

        # Resident 1 is one year old: a registered-senior flag is stale data
        table = ResidentSectoralInfo.__table__
        db.session.execute(
            table.update()
            .where(table.c.resident_id == resident_ids[1])
            .values(is_registered_senior_citizen=True)
        )
        db.session.commit()

        result = reconcile_all()
        assert result['updated_count'] == 1
        info = ResidentSectoralInfo.query.filter_by(resident_id=resident_ids[1]).one()
        assert info.is_registered_senior_citizen is False


def test_reconcile_reports_failures_per_resident(monkeypatch):
    app = create_app(ReconcileTestConfig)
    with app.app_context():
        db.create_all()
        resident_ids = _seed_residents_without_sectoral(5)
        broken_id = resident_ids[2]

        real_reconcile_resident = sectoral_reconcile.reconcile_resident

        def flaky_reconcile_resident(resident):
            if resident.id == broken_id:
                raise ValueError('corrupt resident row')
            return real_reconcile_resident(resident)

        monkeypatch.setattr(sectoral_reconcile, 'reconcile_resident', flaky_reconcile_resident)

        result = reconcile_all(batch_size=2)
        assert result['processed_count'] == 5
        assert result['inserted_count'] == 4
        assert result['failed_count'] == 1
        assert result['failures'][0]['resident_id'] == broken_id
        assert 'corrupt resident row' in result['failures'][0]['error']
        assert ResidentSectoralInfo.query.count() == 4
