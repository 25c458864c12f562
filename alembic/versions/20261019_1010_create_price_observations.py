"""create price_observations table

Revision ID: 20261019_1010_create_price_observations
Revises: 20261019_1000_create_trips
Create Date: 2026-10-19 10:10:00
"""
from alembic import op
import sqlalchemy as sa

revision = '20261019_1010_create_price_observations'
down_revision = '20261019_1000_create_trips'
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        'price_observations',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('trip_id', sa.String(32), sa.ForeignKey('trips.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('recorded_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.UniqueConstraint('trip_id', 'position', name='uq_price_observations_trip_position'),
    )

def downgrade() -> None:
    op.drop_table('price_observations')
