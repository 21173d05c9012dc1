"""Create catalog table.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create catalog table and its indexes."""
    op.create_table(
        'catalog',
        sa.Column('id', sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column('public_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('industry_id', postgresql.UUID(as_uuid=True), nullable=False, index=True),
        sa.Column('industry_name', sa.String(255), nullable=False),
        sa.Column('categories', postgresql.ARRAY(sa.String()), nullable=False, server_default='{}'),
        sa.Column('tags', postgresql.ARRAY(sa.String()), nullable=False, server_default='{}'),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('merchant_id', postgresql.UUID(as_uuid=True), nullable=False, index=True),
        sa.Column('rating', sa.Float(), nullable=False),
        sa.Column('compliance_status', sa.String(32), nullable=False),
        sa.Column('availability_status', sa.String(32), nullable=False),
        sa.Column('created_on', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_on', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('price >= 0', name='ck_catalog_price_non_negative'),
        sa.CheckConstraint('rating >= 0 AND rating <= 5', name='ck_catalog_rating_range'),
    )

    # Unique public identifier
    op.create_index('ix_catalog_public_id', 'catalog', ['public_id'], unique=True)

    # Containment lookups on the array columns
    op.create_index(
        'ix_catalog_categories', 'catalog', ['categories'], postgresql_using='gin'
    )
    op.create_index('ix_catalog_tags', 'catalog', ['tags'], postgresql_using='gin')


def downgrade() -> None:
    """Drop catalog table."""
    op.drop_index('ix_catalog_tags', table_name='catalog')
    op.drop_index('ix_catalog_categories', table_name='catalog')
    op.drop_index('ix_catalog_public_id', table_name='catalog')
    op.drop_table('catalog')
