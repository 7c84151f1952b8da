"""create accounts and verification_tokens

Revision ID: 0001_identity_tables
Revises:
Create Date: 2026-10-18 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_identity_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'accounts',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('display_name', sa.String(length=255), nullable=False),
        sa.Column('credential_hash', sa.String(length=255), nullable=True),
        sa.Column('image', sa.String(), nullable=True),
        sa.Column('email_verified_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('role', sa.Enum('ADMIN', 'USER', name='role'), nullable=False, server_default='USER'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_accounts_email', 'accounts', ['email'], unique=True)

    op.create_table(
        'verification_tokens',
        sa.Column('identifier', sa.String(length=254), nullable=False),
        sa.Column('token', sa.String(length=128), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('identifier', 'token'),
    )
    op.create_index('ix_verification_tokens_token', 'verification_tokens', ['token'], unique=True)
    op.create_index('ix_verification_tokens_expires_at', 'verification_tokens', ['expires_at'])


def downgrade() -> None:
    op.drop_index('ix_verification_tokens_expires_at', table_name='verification_tokens')
    op.drop_index('ix_verification_tokens_token', table_name='verification_tokens')
    op.drop_table('verification_tokens')
    op.drop_index('ix_accounts_email', table_name='accounts')
    op.drop_table('accounts')
    sa.Enum(name='role').drop(op.get_bind(), checkfirst=True)
