"""create trips table

Revision ID: 20261019_1000_create_trips
Revises:
Create Date: 2026-10-19 10:00:00
"""
from alembic import op
import sqlalchemy as sa

revision = '20261019_1000_create_trips'
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        'trips',
        sa.Column('id', sa.String(32), primary_key=True),
        sa.Column('destination', sa.String(255), nullable=False),
        sa.Column('hotel', sa.String(255), nullable=True),
        sa.Column('provider', sa.String(8), nullable=False, index=True),
        sa.Column('departure_date', sa.Date(), nullable=False),
        sa.Column('return_date', sa.Date(), nullable=False),
        sa.Column('adults', sa.Integer(), nullable=False, server_default='2'),
        sa.Column('children', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('current_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('url', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, index=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

def downgrade() -> None:
    op.drop_table('trips')
