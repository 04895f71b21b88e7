"""Create users and chat schema

Revision ID: 3f9c1a7d2b6e
Revises:
Create Date: 2026-10-19 15:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from models.base import UUID

# revision identifiers, used by Alembic.
revision: str = '3f9c1a7d2b6e'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

message_role = postgresql.ENUM('user', 'assistant', name='message_role', create_type=False)


def upgrade() -> None:
    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        message_role.create(bind, checkfirst=True)
        role_type = message_role
    else:
        role_type = sa.Enum('user', 'assistant', name='message_role')

    op.create_table(
        'users',
        sa.Column('id', UUID(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    # Create chat_conversations table
    op.create_table(
        'chat_conversations',
        sa.Column('id', UUID(), nullable=False),
        sa.Column('user_id', UUID(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_chat_conversations_user_position', 'chat_conversations', ['user_id', 'position'])

    # Create chat_messages table
    op.create_table(
        'chat_messages',
        sa.Column('id', UUID(), nullable=False),
        sa.Column('conversation_id', UUID(), nullable=False),
        sa.Column('role', role_type, nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['conversation_id'], ['chat_conversations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_chat_messages_conversation_position', 'chat_messages', ['conversation_id', 'position'])

    # Deprecated single-thread history
    op.create_table(
        'legacy_chat_messages',
        sa.Column('id', UUID(), nullable=False),
        sa.Column('user_id', UUID(), nullable=False),
        sa.Column('role', role_type, nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_legacy_chat_messages_user_position', 'legacy_chat_messages', ['user_id', 'position'])


def downgrade() -> None:
    op.drop_index('idx_legacy_chat_messages_user_position', table_name='legacy_chat_messages')
    op.drop_table('legacy_chat_messages')
    op.drop_index('idx_chat_messages_conversation_position', table_name='chat_messages')
    op.drop_table('chat_messages')
    op.drop_index('idx_chat_conversations_user_position', table_name='chat_conversations')
    op.drop_table('chat_conversations')
    op.drop_table('users')

    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        message_role.drop(bind, checkfirst=True)
