"""add otp_attempts to users and claim_token to advice_sessions

Revision ID: 0002_otp_attempts_and_claim_token
Revises: 0001_initial_schema
Create Date: 2026-10-19 09:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0002_otp_attempts_and_claim_token'
down_revision: Union[str, None] = '0001_initial_schema'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        'users',
        sa.Column('otp_attempts', sa.Integer(), nullable=False, server_default='0'),
    )
    op.add_column(
        'advice_sessions',
        sa.Column('claim_token', sa.String(64), nullable=True),
    )


def downgrade() -> None:
    op.drop_column('advice_sessions', 'claim_token')
    op.drop_column('users', 'otp_attempts')
