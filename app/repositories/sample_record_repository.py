"""
app/repositories/sample_record_repository.py

Persistence layer for ingested sample records.

Rows are inserted one SAVEPOINT at a time inside the caller's transaction, so
a constraint violation on one row rolls back only that row. Committing the
enclosing transaction is left to the caller.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.orm import Session

from db.models.sample_record import SampleRecordModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RowInsertOutcome:
    """
    Result of inserting one row: either ``record_id`` or ``error`` is set.
    """

    row_number: int
    record_id: uuid.UUID | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.record_id is not None


class SampleRecordRepository:
    """
    Repository for sample record inserts and reads.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def exists_by_file_hash(self, file_hash: str) -> bool:
        stmt = select(SampleRecordModel.id).where(SampleRecordModel.file_hash == file_hash).limit(1)
        return self._session.scalars(stmt).first() is not None

    def insert_rows(self, payloads: Sequence[dict[str, Any]]) -> list[RowInsertOutcome]:
        """
        Insert each payload in its own SAVEPOINT and report a per-row outcome.

        Every payload must carry ``row_number``.
        """

        outcomes: list[RowInsertOutcome] = []
        for payload in payloads:
            row_number = int(payload["row_number"])
            record = SampleRecordModel(**payload)
            try:
                with self._session.begin_nested():
                    self._session.add(record)
                    self._session.flush()
            except IntegrityError as exc:
                reason = _integrity_reason(exc, payload)
                logger.warning("Sample row %s rejected by database: %s", row_number, reason)
                outcomes.append(RowInsertOutcome(row_number=row_number, error=reason))
                continue
            except DataError as exc:
                logger.warning("Sample row %s has invalid data: %s", row_number, exc.orig)
                outcomes.append(RowInsertOutcome(row_number=row_number, error=f"Invalid data: {exc.orig}"))
                continue
            outcomes.append(RowInsertOutcome(row_number=row_number, record_id=record.id))
        return outcomes

    def get_by_id(self, record_id: uuid.UUID) -> SampleRecordModel | None:
        return self._session.get(SampleRecordModel, record_id)

    def list_by_ids(self, record_ids: Sequence[uuid.UUID]) -> list[SampleRecordModel]:
        if not record_ids:
            return []
        stmt = select(SampleRecordModel).where(SampleRecordModel.id.in_(list(record_ids)))
        by_id = {record.id: record for record in self._session.scalars(stmt).all()}
        return [by_id[record_id] for record_id in record_ids if record_id in by_id]

    def count_by_risk_tier(self, *, state: str | None = None, year: int | None = None) -> dict[str, int]:
        stmt = select(SampleRecordModel.risk_tier, func.count(SampleRecordModel.id))
        stmt = self._apply_filters(stmt, state=state, year=year).group_by(SampleRecordModel.risk_tier)
        return {tier: int(count) for tier, count in self._session.execute(stmt).all()}

    def hpi_summary(self, *, state: str | None = None, year: int | None = None) -> dict[str, float | int | None]:
        stmt = select(
            func.count(SampleRecordModel.id),
            func.avg(SampleRecordModel.hpi_value),
            func.max(SampleRecordModel.hpi_value),
            func.min(SampleRecordModel.hpi_value),
        )
        total, average, maximum, minimum = self._session.execute(
            self._apply_filters(stmt, state=state, year=year)
        ).one()
        return {
            "totalSamples": int(total or 0),
            "avgHpi": float(average) if average is not None else None,
            "maxHpi": float(maximum) if maximum is not None else None,
            "minHpi": float(minimum) if minimum is not None else None,
        }

    def yearly_trends(self, *, state: str | None = None, year: int | None = None) -> list[dict[str, Any]]:
        stmt = select(
            SampleRecordModel.sample_year,
            func.count(SampleRecordModel.id),
            func.avg(SampleRecordModel.hpi_value),
        )
        stmt = (
            self._apply_filters(stmt, state=state, year=year)
            .group_by(SampleRecordModel.sample_year)
            .order_by(SampleRecordModel.sample_year)
        )
        return [
            {
                "year": int(sample_year),
                "samples": int(count),
                "avgHpi": float(average) if average is not None else None,
            }
            for sample_year, count, average in self._session.execute(stmt).all()
        ]

    def list_heavy_metals(self, *, state: str | None = None, year: int | None = None) -> list[dict[str, Any]]:
        stmt = self._apply_filters(select(SampleRecordModel.heavy_metals), state=state, year=year)
        return [metals or {} for metals in self._session.scalars(stmt).all()]

    def delete_by_id(self, record_id: uuid.UUID) -> bool:
        """
        Delete one record; returns False when it does not exist. The caller
        commits.
        """

        record = self.get_by_id(record_id)
        if record is None:
            return False
        self._session.delete(record)
        self._session.flush()
        return True

    @staticmethod
    def _apply_filters(stmt: Any, *, state: str | None, year: int | None) -> Any:
        if state:
            stmt = stmt.where(SampleRecordModel.state == state)
        if year is not None:
            stmt = stmt.where(SampleRecordModel.sample_year == year)
        return stmt


def _integrity_reason(exc: IntegrityError, payload: dict[str, Any]) -> str:
    message = str(exc.orig).lower()
    if "unique" in message or "duplicate" in message:
        return (
            f"Duplicate sample: serial number '{payload.get('serial_number')}' "
            "already exists for this file."
        )
    return f"Database constraint violated: {exc.orig}"
