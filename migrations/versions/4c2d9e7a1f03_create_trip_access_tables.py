"""create_trip_access_tables

Revision ID: 4c2d9e7a1f03
Revises:
Create Date: 2026-03-09 14:21:45.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c2d9e7a1f03'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create user_profiles, access_grants, invitations and invitation_resources tables."""
    op.create_table('user_profiles',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('display_name', sa.String(length=100), nullable=True),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    op.create_table('access_grants',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('resource_id', sa.UUID(), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('granted_at', sa.DateTime(), nullable=False),
        sa.Column('granted_by_user_id', sa.UUID(), nullable=True),
        sa.CheckConstraint("role IN ('editor', 'viewer')", name='ck_access_grants_role'),
        sa.ForeignKeyConstraint(['user_id'], ['user_profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['granted_by_user_id'], ['user_profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'resource_id', name='uq_access_grants_user_resource'),
    )
    op.create_index(op.f('ix_access_grants_user_id'), 'access_grants', ['user_id'], unique=False)
    op.create_index(op.f('ix_access_grants_resource_id'), 'access_grants', ['resource_id'], unique=False)

    op.create_table('invitations',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('code', sa.String(length=64), nullable=False),
        sa.Column('created_by_user_id', sa.UUID(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('used_at', sa.DateTime(), nullable=True),
        sa.Column('used_by_user_id', sa.UUID(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint("role IN ('editor', 'viewer')", name='ck_invitations_role'),
        sa.ForeignKeyConstraint(['created_by_user_id'], ['user_profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['used_by_user_id'], ['user_profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code'),
    )
    op.create_index(op.f('ix_invitations_created_by_user_id'), 'invitations', ['created_by_user_id'], unique=False)
    op.create_index(op.f('ix_invitations_email'), 'invitations', ['email'], unique=False)
    # Pending lookups filter on used_at IS NULL
    op.create_index(
        'ix_invitations_pending', 'invitations', ['expires_at'],
        unique=False, postgresql_where=sa.text('used_at IS NULL'),
    )

    op.create_table('invitation_resources',
        sa.Column('invitation_id', sa.UUID(), nullable=False),
        sa.Column('resource_id', sa.UUID(), nullable=False),
        sa.ForeignKeyConstraint(['invitation_id'], ['invitations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('invitation_id', 'resource_id'),
    )
    op.create_index(op.f('ix_invitation_resources_resource_id'), 'invitation_resources', ['resource_id'], unique=False)


def downgrade() -> None:
    """Drop trip access tables."""
    op.drop_index(op.f('ix_invitation_resources_resource_id'), table_name='invitation_resources')
    op.drop_table('invitation_resources')
    op.drop_index('ix_invitations_pending', table_name='invitations')
    op.drop_index(op.f('ix_invitations_email'), table_name='invitations')
    op.drop_index(op.f('ix_invitations_created_by_user_id'), table_name='invitations')
    op.drop_table('invitations')
    op.drop_index(op.f('ix_access_grants_resource_id'), table_name='access_grants')
    op.drop_index(op.f('ix_access_grants_user_id'), table_name='access_grants')
    op.drop_table('access_grants')
    op.drop_table('user_profiles')
