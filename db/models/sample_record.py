"""
db/models/sample_record.py

One ingested water sample with its heavy-metal readings and computed
pollution indices.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Float, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, JSONDocument, TimestampMixin, UUIDPrimaryKeyMixin


class ProcessingStatus:
    COMPLETED = "completed"
    COMPLETED_WITH_WARNINGS = "completed_with_warnings"


class SampleRecordModel(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "sample_records"

    location_name: Mapped[str] = mapped_column(String(255), nullable=False)
    state: Mapped[str | None] = mapped_column(String(120), nullable=True)
    district: Mapped[str | None] = mapped_column(String(120), nullable=True)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    sample_year: Mapped[int] = mapped_column(Integer, nullable=False)
    serial_number: Mapped[str] = mapped_column(String(120), nullable=False)
    heavy_metals: Mapped[dict[str, Any]] = mapped_column(
        JSONDocument,
        nullable=False,
        comment="symbol -> {value, unit} as uploaded",
    )
    environmental_params: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument, nullable=True)
    pollution_indices: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False)
    hpi_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    risk_tier: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        comment="Safe, Moderate, High, Unknown",
    )
    file_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    processing_status: Mapped[str] = mapped_column(String(32), nullable=False, default=ProcessingStatus.COMPLETED)
    processing_errors: Mapped[list[Any] | None] = mapped_column(JSONDocument, nullable=True)
    quality_flags: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument, nullable=True)
    row_number: Mapped[int] = mapped_column(Integer, nullable=False)
    raw_row: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument, nullable=True)

    __table_args__ = (
        UniqueConstraint("file_hash", "serial_number", name="uq_sample_records_file_hash_serial"),
        Index("ix_sample_records_file_hash", "file_hash"),
        Index("ix_sample_records_state_year", "state", "sample_year"),
        Index("ix_sample_records_risk_tier", "risk_tier"),
    )
