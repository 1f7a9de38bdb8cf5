"""Create digital pass tables

Revision ID: 0001_digital_passes
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_digital_passes'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'restaurants',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('digital_wallet', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'users',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('restaurant_id', sa.String(length=64), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=False)

    pass_status_enum = sa.Enum('active', 'suspended', 'revoked', name='passstatus')

    op.create_table(
        'digital_passes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('pass_id', sa.String(length=64), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=True),
        sa.Column('restaurant_id', sa.String(length=64), nullable=False),
        sa.Column('points', sa.Integer(), nullable=False),
        sa.Column('visits', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('status', pass_status_enum, nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        sa.Column('last_used_at', sa.DateTime(), nullable=True),
        sa.Column('last_visit_at', sa.DateTime(), nullable=True),
        sa.Column('holder_name', sa.String(length=200), nullable=True),
        sa.Column('holder_phone', sa.String(length=30), nullable=True),
        sa.Column('holder_birthday', sa.String(length=20), nullable=True),
        sa.Column('wallet_serial_number', sa.String(length=100), nullable=True),
        sa.Column('wallet_download_url', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('points >= 0', name='check_pass_points_non_negative'),
        sa.CheckConstraint('visits >= 0', name='check_pass_visits_non_negative'),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id']),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_digital_passes_id'), 'digital_passes', ['id'], unique=False)
    op.create_index(op.f('ix_digital_passes_pass_id'), 'digital_passes', ['pass_id'], unique=True)
    op.create_index(op.f('ix_digital_passes_user_id'), 'digital_passes', ['user_id'], unique=False)
    op.create_index(op.f('ix_digital_passes_restaurant_id'), 'digital_passes', ['restaurant_id'], unique=False)
    op.create_index(
        'idx_digital_pass_validation',
        'digital_passes',
        ['pass_id', 'restaurant_id', 'is_active', 'status'],
        unique=False
    )


def downgrade():
    op.drop_index('idx_digital_pass_validation', table_name='digital_passes')
    op.drop_index(op.f('ix_digital_passes_restaurant_id'), table_name='digital_passes')
    op.drop_index(op.f('ix_digital_passes_user_id'), table_name='digital_passes')
    op.drop_index(op.f('ix_digital_passes_pass_id'), table_name='digital_passes')
    op.drop_index(op.f('ix_digital_passes_id'), table_name='digital_passes')
    op.drop_table('digital_passes')
    sa.Enum(name='passstatus').drop(op.get_bind(), checkfirst=True)

    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
    op.drop_table('restaurants')
