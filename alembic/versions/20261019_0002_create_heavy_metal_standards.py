"""create heavy_metal_standards table

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19 10:40:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0002"
down_revision = "20261019_0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "heavy_metal_standards",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("metal", sa.String(length=8), nullable=False),
        sa.Column("category", sa.String(length=16), nullable=False),
        sa.Column("permissible_limit", sa.Float(), nullable=False),
        sa.Column("ideal_value", sa.Float(), nullable=False),
        sa.Column("weightage", sa.Float(), nullable=True),
        sa.Column("unit", sa.String(length=16), nullable=False),
        sa.Column("source", sa.String(length=255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("metal", "category", name="uq_hms_metal_category"),
    )
    op.create_index("ix_heavy_metal_standards_metal", "heavy_metal_standards", ["metal"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_heavy_metal_standards_metal", table_name="heavy_metal_standards")
    op.drop_table("heavy_metal_standards")
