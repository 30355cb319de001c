"""create initial schema with users, journal entries, saved rivers, flow alerts and licenses

Revision ID: 3f2a9c1d7b40
Revises: 
Create Date: 2026-10-19 09:12:44.518203+00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        *_timestamps(),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=200), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_superuser', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('api_key', sa.String(length=64), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_api_key'), 'users', ['api_key'], unique=True)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)

    op.create_table(
        'journal_entries',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        *_timestamps(),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False, comment='Date fished'),
        sa.Column('start_time', sa.String(length=5), nullable=True, comment='HH:MM'),
        sa.Column('end_time', sa.String(length=5), nullable=True, comment='HH:MM'),
        sa.Column('angler', sa.String(length=200), nullable=True),
        sa.Column('species', sa.String(length=100), nullable=True),
        sa.Column('length', sa.Float(), nullable=True, comment='Inches'),
        sa.Column('weight', sa.Float(), nullable=True, comment='Pounds'),
        sa.Column('city_state', sa.String(length=200), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('site_number', sa.String(length=20), nullable=True, comment='USGS gauge site number'),
        sa.Column('river_name', sa.String(length=200), nullable=True),
        sa.Column('water_flow', sa.String(length=100), nullable=True),
        sa.Column('cached_flow_data', sa.Text(), nullable=True),
        sa.Column('weather_temp', sa.Float(), nullable=True, comment='Fahrenheit'),
        sa.Column('barometric_pressure', sa.Float(), nullable=True, comment='inHg'),
        sa.Column('wind_speed', sa.Float(), nullable=True, comment='mph'),
        sa.Column('wind_direction', sa.String(length=4), nullable=True),
        sa.Column('moon_phase', sa.Text(), nullable=True),
        sa.Column('flies_used', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_journal_entries_id'), 'journal_entries', ['id'], unique=False)
    op.create_index(op.f('ix_journal_entries_user_id'), 'journal_entries', ['user_id'], unique=False)
    op.create_index('idx_journal_user_date', 'journal_entries', ['user_id', 'date'], unique=False)

    op.create_table(
        'saved_rivers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        *_timestamps(),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('site_number', sa.String(length=20), nullable=False),
        sa.Column('river_name', sa.String(length=200), nullable=False),
        sa.Column('location', sa.String(length=200), nullable=True),
        sa.Column('current_flow_cfs', sa.Float(), nullable=True),
        sa.Column('flow_status', sa.String(length=20), nullable=False, comment='Active, No Data or Error'),
        sa.Column('last_updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'site_number', name='uq_saved_river_user_site')
    )
    op.create_index(op.f('ix_saved_rivers_id'), 'saved_rivers', ['id'], unique=False)
    op.create_index(op.f('ix_saved_rivers_user_id'), 'saved_rivers', ['user_id'], unique=False)
    op.create_index(op.f('ix_saved_rivers_site_number'), 'saved_rivers', ['site_number'], unique=False)

    op.create_table(
        'flow_alerts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        *_timestamps(),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('site_number', sa.String(length=20), nullable=False),
        sa.Column('kind', sa.String(length=10), nullable=False),
        sa.Column('threshold_cfs', sa.Float(), nullable=False),
        sa.Column('enabled', sa.Boolean(), nullable=False),
        sa.Column('last_triggered_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("kind IN ('high', 'low', 'flood')", name='ck_flow_alert_kind'),
        sa.CheckConstraint('threshold_cfs >= 0', name='ck_flow_alert_threshold'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'site_number', 'kind', name='uq_flow_alert_user_site_kind')
    )
    op.create_index(op.f('ix_flow_alerts_id'), 'flow_alerts', ['id'], unique=False)
    op.create_index(op.f('ix_flow_alerts_user_id'), 'flow_alerts', ['user_id'], unique=False)
    op.create_index(op.f('ix_flow_alerts_site_number'), 'flow_alerts', ['site_number'], unique=False)

    op.create_table(
        'fishing_licenses',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        *_timestamps(),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('state', sa.String(length=50), nullable=False),
        sa.Column('license_type', sa.String(length=100), nullable=False),
        sa.Column('license_number', sa.String(length=100), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('notifications', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_fishing_licenses_id'), 'fishing_licenses', ['id'], unique=False)
    op.create_index(op.f('ix_fishing_licenses_user_id'), 'fishing_licenses', ['user_id'], unique=False)
    op.create_index(op.f('ix_fishing_licenses_end_date'), 'fishing_licenses', ['end_date'], unique=False)


def downgrade() -> None:
    op.drop_table('fishing_licenses')
    op.drop_table('flow_alerts')
    op.drop_table('saved_rivers')
    op.drop_table('journal_entries')
    op.drop_index(op.f('ix_users_id'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_index(op.f('ix_users_api_key'), table_name='users')
    op.drop_table('users')
