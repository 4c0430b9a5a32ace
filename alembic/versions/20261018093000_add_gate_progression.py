"""add gate progression

Revision ID: 20261018093000
Revises: 20261018090000
Create Date: 2026-10-18 09:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261018093000'
down_revision: Union[str, Sequence[str], None] = '20261018090000'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Gate numbers on artworks, frontier on users, journey_records table."""
    op.add_column('artworks', sa.Column('gate_number', sa.Integer(), nullable=True))
    op.add_column('artworks', sa.Column('unlock_requirement', sa.Integer(), nullable=True))
    op.create_index(op.f('ix_artworks_gate_number'), 'artworks', ['gate_number'], unique=False)

    # Existing accounts start at the first gate
    op.add_column(
        'users',
        sa.Column('highest_gate_unlocked', sa.Integer(), nullable=False, server_default='1'),
    )

    op.create_table(
        'journey_records',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('gate_number', sa.Integer(), nullable=False),
        sa.Column('unlocked_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'gate_number', name='uq_journey_user_gate'),
    )
    op.create_index(op.f('ix_journey_records_id'), 'journey_records', ['id'], unique=False)
    op.create_index(op.f('ix_journey_records_user_id'), 'journey_records', ['user_id'], unique=False)


def downgrade() -> None:
    """Remove gate progression."""
    op.drop_index(op.f('ix_journey_records_user_id'), table_name='journey_records')
    op.drop_index(op.f('ix_journey_records_id'), table_name='journey_records')
    op.drop_table('journey_records')
    op.drop_column('users', 'highest_gate_unlocked')
    op.drop_index(op.f('ix_artworks_gate_number'), table_name='artworks')
    op.drop_column('artworks', 'unlock_requirement')
    op.drop_column('artworks', 'gate_number')
