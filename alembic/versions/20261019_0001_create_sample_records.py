"""create sample_records table

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 10:15:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "sample_records",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("location_name", sa.String(length=255), nullable=False),
        sa.Column("state", sa.String(length=120), nullable=True),
        sa.Column("district", sa.String(length=120), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("sample_year", sa.Integer(), nullable=False),
        sa.Column("serial_number", sa.String(length=120), nullable=False),
        sa.Column("heavy_metals", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("environmental_params", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("pollution_indices", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("hpi_value", sa.Float(), nullable=True),
        sa.Column("risk_tier", sa.String(length=16), nullable=False),
        sa.Column("file_hash", sa.String(length=64), nullable=False),
        sa.Column("file_name", sa.String(length=255), nullable=False),
        sa.Column("processing_status", sa.String(length=32), nullable=False),
        sa.Column("processing_errors", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("quality_flags", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("row_number", sa.Integer(), nullable=False),
        sa.Column("raw_row", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("file_hash", "serial_number", name="uq_sample_records_file_hash_serial"),
    )
    op.create_index("ix_sample_records_file_hash", "sample_records", ["file_hash"], unique=False)
    op.create_index("ix_sample_records_state_year", "sample_records", ["state", "sample_year"], unique=False)
    op.create_index("ix_sample_records_risk_tier", "sample_records", ["risk_tier"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_sample_records_risk_tier", table_name="sample_records")
    op.drop_index("ix_sample_records_state_year", table_name="sample_records")
    op.drop_index("ix_sample_records_file_hash", table_name="sample_records")
    op.drop_table("sample_records")
