"""create_lead_capture_tables

Revision ID: 3a1f6c2d9b47
Revises:
Create Date: 2026-10-19 10:12:41.508213

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3a1f6c2d9b47'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create contact_submissions and newsletter_subscriptions."""
    op.create_table(
        'contact_submissions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('full_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('project_type', sa.Text(), nullable=False),
        sa.Column('priority', sa.Text(), nullable=False),
        sa.Column('implementation_timeframe', sa.Text(), nullable=True),
        sa.Column('project_scale', sa.Text(), nullable=True),
        sa.Column('project_scope', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='new'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_contact_submissions_email', 'contact_submissions', ['email'])
    op.create_index('ix_contact_submissions_created_at', 'contact_submissions', ['created_at'])
    op.create_index('ix_contact_submissions_status', 'contact_submissions', ['status'])

    op.create_table(
        'newsletter_subscriptions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('source', sa.String(length=100), nullable=False),
        sa.Column('recorded_at', sa.DateTime(timezone=True), nullable=False),
    )
    # Uniqueness is what makes concurrent sign-ups of one address idempotent.
    op.create_index('ix_newsletter_subscriptions_email', 'newsletter_subscriptions', ['email'], unique=True)


def downgrade() -> None:
    """Drop the lead-capture tables."""
    op.drop_index('ix_newsletter_subscriptions_email', table_name='newsletter_subscriptions')
    op.drop_table('newsletter_subscriptions')
    op.drop_index('ix_contact_submissions_status', table_name='contact_submissions')
    op.drop_index('ix_contact_submissions_created_at', table_name='contact_submissions')
    op.drop_index('ix_contact_submissions_email', table_name='contact_submissions')
    op.drop_table('contact_submissions')
