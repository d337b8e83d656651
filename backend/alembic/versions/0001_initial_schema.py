"""initial schema: users, advice sessions, chat requests and messages

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_role = sa.Enum('customer', 'coach', name='userrole')
advice_language = sa.Enum('en', 'hi', 'mr', name='language')
chat_status = sa.Enum('pending', 'accepted', 'declined', 'closed', name='chatstatus')

ACTIVE_PAIR = sa.text("status IN ('pending', 'accepted')")


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('role', user_role, nullable=False),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(32), nullable=True),
        sa.Column('full_name', sa.String(255), nullable=True),
        sa.Column('hashed_password', sa.String(255), nullable=True),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('city', sa.String(128), nullable=True),
        sa.Column('country', sa.String(128), nullable=True),
        sa.Column('gender', sa.String(32), nullable=True),
        sa.Column('otp_hash', sa.String(255), nullable=True),
        sa.Column('otp_expires_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('email', name='uq_users_email'),
        sa.UniqueConstraint('phone', name='uq_users_phone'),
    )
    op.create_index('ix_users_id', 'users', ['id'])

    op.create_table(
        'advice_sessions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('prompt_key', sa.String(64), nullable=False),
        sa.Column('form_data', sa.JSON(), nullable=False),
        sa.Column('language', advice_language, nullable=False),
        sa.Column('generated_advice', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_advice_sessions_id', 'advice_sessions', ['id'])
    op.create_index('ix_advice_sessions_user_id', 'advice_sessions', ['user_id'])

    op.create_table(
        'chat_requests',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('coach_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', chat_status, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_chat_requests_id', 'chat_requests', ['id'])
    op.create_index('ix_chat_requests_customer_id', 'chat_requests', ['customer_id'])
    op.create_index('ix_chat_requests_coach_id', 'chat_requests', ['coach_id'])
    # Closes the read-then-insert race in create_chat_request.
    op.create_index(
        'uq_chat_requests_active_pair',
        'chat_requests',
        ['customer_id', 'coach_id'],
        unique=True,
        postgresql_where=ACTIVE_PAIR,
        sqlite_where=ACTIVE_PAIR,
    )

    op.create_table(
        'chat_messages',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('chat_request_id', sa.Integer(), sa.ForeignKey('chat_requests.id', ondelete='CASCADE'), nullable=False),
        sa.Column('sender_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_chat_messages_id', 'chat_messages', ['id'])
    op.create_index('ix_chat_messages_chat_request_id', 'chat_messages', ['chat_request_id'])


def downgrade() -> None:
    op.drop_table('chat_messages')
    op.drop_table('chat_requests')
    op.drop_table('advice_sessions')
    op.drop_table('users')
    bind = op.get_bind()
    chat_status.drop(bind, checkfirst=True)
    advice_language.drop(bind, checkfirst=True)
    user_role.drop(bind, checkfirst=True)
