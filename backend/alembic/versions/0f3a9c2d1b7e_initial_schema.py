"""users, notifications and reports

Revision ID: 0f3a9c2d1b7e
Revises:
Create Date: 2024-11-01 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = '0f3a9c2d1b7e'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('external_identity_id', sa.String(), nullable=False),
        sa.Column('first_name', sa.String(), nullable=False, server_default=''),
        sa.Column('last_name', sa.String(), nullable=False, server_default=''),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('phone_number', sa.String(), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('last_updated', sa.DateTime(timezone=True), nullable=True),
        sa.Column('show_location', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('show_city', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('avatar', sa.String(), nullable=True),
        sa.Column('blocked', postgresql.ARRAY(sa.String()), nullable=False, server_default='{}'),
        sa.Column('blocked_by', postgresql.ARRAY(sa.String()), nullable=False, server_default='{}'),
        sa.Column('expo_push_token', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_users_external_identity_id', 'users', ['external_identity_id'], unique=True)
    op.create_index('ix_users_phone_number', 'users', ['phone_number'])
    op.create_index('ix_users_last_updated', 'users', ['last_updated'])

    op.create_table(
        'notifications',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('content', sa.String(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('nonce', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('user_id', 'nonce', name='uq_notifications_user_nonce'),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])

    report_status = postgresql.ENUM('pending', name='reportstatus')
    op.create_table(
        'reports',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('reporter_id', sa.String(), nullable=False),
        sa.Column('reported_id', sa.String(), nullable=False),
        sa.Column('explanation', sa.Text(), nullable=False),
        sa.Column('status', report_status, nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_reports_reporter_id', 'reports', ['reporter_id'])
    op.create_index('ix_reports_reported_id', 'reports', ['reported_id'])


def downgrade() -> None:
    op.drop_table('reports')
    postgresql.ENUM(name='reportstatus').drop(op.get_bind(), checkfirst=True)
    op.drop_table('notifications')
    op.drop_table('users')
