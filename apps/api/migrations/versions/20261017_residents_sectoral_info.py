"""Create residents and resident_sectoral_info tables.

Revision ID: 20261017_residents_sectoral
Revises:
Create Date: 2026-10-17

Sectoral auto flags are maintained by the application (session hooks and
the reconcile job), not by database triggers. Both tables carry a version_id
counter used for optimistic concurrency checks.
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261017_residents_sectoral'
down_revision = None
branch_labels = None
depends_on = None


SECTORAL_FLAG_COLUMNS = (
    'is_out_of_school_children',
    'is_out_of_school_youth',
    'is_senior_citizen',
    'is_labor_force_employed',
    'is_unemployed',
    'is_indigenous_people',
    'is_registered_senior_citizen',
    'is_person_with_disability',
    'is_overseas_filipino_worker',
    'is_solo_parent',
    'is_migrant',
)


def upgrade():
    op.create_table(
        'residents',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('barangay_code', sa.String(20), nullable=True),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('middle_name', sa.String(100), nullable=True),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('sex', sa.String(10), nullable=True),
        sa.Column('birthdate', sa.Date(), nullable=False),
        sa.Column('education_attainment', sa.String(30), nullable=True),
        sa.Column('education_status', sa.String(20), nullable=True),
        sa.Column('employment_status', sa.String(30), nullable=True),
        sa.Column('ethnicity', sa.String(50), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.Column('version_id', sa.Integer(), nullable=False, server_default='1'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_residents_barangay', 'residents', ['barangay_code'])
    op.create_index('idx_residents_birthdate', 'residents', ['birthdate'])

    op.create_table(
        'resident_sectoral_info',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('resident_id', sa.String(36), nullable=False),
        *[
            sa.Column(name, sa.Boolean(), nullable=False, server_default=sa.false())
            for name in SECTORAL_FLAG_COLUMNS
        ],
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.Column('version_id', sa.Integer(), nullable=False, server_default='1'),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['resident_id'], ['residents.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('resident_id', name='uq_resident_sectoral_info_resident'),
    )


def downgrade():
    op.drop_table('resident_sectoral_info')
    op.drop_index('idx_residents_birthdate', table_name='residents')
    op.drop_index('idx_residents_barangay', table_name='residents')
    op.drop_table('residents')
