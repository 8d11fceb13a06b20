"""create user, friendship, challenge and guess tables

Revision ID: 5c2a9e41b7d0
Revises:
Create Date: 2026-03-02 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2a9e41b7d0'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('avatar_url', sa.String(length=512), nullable=True),
        sa.Column('total_score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_banned', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('email_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index('ix_user_username', 'user', ['username'], unique=True)

    op.create_table(
        'friendship',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('initiator_id', sa.Integer(), nullable=False),
        sa.Column('receiver_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['initiator_id'], ['user.id']),
        sa.ForeignKeyConstraint(['receiver_id'], ['user.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('initiator_id', 'receiver_id', name='uq_friendship_pair'),
    )
    op.create_index('ix_friendship_initiator_id', 'friendship', ['initiator_id'])
    op.create_index('ix_friendship_receiver_id', 'friendship', ['receiver_id'])

    op.create_table(
        'challenge',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('sender_id', sa.Integer(), nullable=False),
        sa.Column('receiver_id', sa.Integer(), nullable=False),
        sa.Column('photo_url', sa.String(length=1024), nullable=False),
        sa.Column('finger_count', sa.Integer(), nullable=False),
        sa.Column('which_fingers', sa.Text(), nullable=False),
        sa.Column('seen', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('finger_count BETWEEN 1 AND 5', name='ck_challenge_finger_count'),
        sa.ForeignKeyConstraint(['sender_id'], ['user.id']),
        sa.ForeignKeyConstraint(['receiver_id'], ['user.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_challenge_sender_id', 'challenge', ['sender_id'])
    op.create_index('ix_challenge_receiver_id', 'challenge', ['receiver_id'])

    op.create_table(
        'guess',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('challenge_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('finger_count_guess', sa.Integer(), nullable=False),
        sa.Column('which_fingers_guess', sa.Text(), nullable=False),
        sa.Column('is_count_correct', sa.Boolean(), nullable=False),
        sa.Column('is_fingers_correct', sa.Boolean(), nullable=False),
        sa.Column('points', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['challenge_id'], ['challenge.id']),
        sa.ForeignKeyConstraint(['user_id'], ['user.id']),
        sa.PrimaryKeyConstraint('id'),
        # One guess per challenge: this is what stops double scoring
        sa.UniqueConstraint('challenge_id'),
    )
    op.create_index('ix_guess_user_id', 'guess', ['user_id'])
    op.create_index('ix_guess_created_at', 'guess', ['created_at'])


def downgrade():
    op.drop_index('ix_guess_created_at', table_name='guess')
    op.drop_index('ix_guess_user_id', table_name='guess')
    op.drop_table('guess')
    op.drop_index('ix_challenge_receiver_id', table_name='challenge')
    op.drop_index('ix_challenge_sender_id', table_name='challenge')
    op.drop_table('challenge')
    op.drop_index('ix_friendship_receiver_id', table_name='friendship')
    op.drop_index('ix_friendship_initiator_id', table_name='friendship')
    op.drop_table('friendship')
    op.drop_index('ix_user_username', table_name='user')
    op.drop_table('user')
