"""
app/services/sample_statistics_service.py

Read-side summaries over stored sample records.

Risk-tier counts, HPI aggregates and yearly trends are computed in SQL. Per-metal
concentration aggregates are computed in pandas because readings live in a
JSON column whose querying differs between PostgreSQL and SQLite.
"""

from __future__ import annotations

import uuid
from functools import lru_cache
from typing import Any

import pandas as pd
from sqlalchemy.orm import Session

from app.mappers.sample_document_mapper import model_to_document
from app.repositories.sample_record_repository import SampleRecordRepository

_STAT_DECIMALS = 4


def _rounded(value: Any) -> float | None:
    if value is None or pd.isna(value):
        return None
    return round(float(value), _STAT_DECIMALS)


class SampleStatisticsService:
    """
    Fetches single records and dataset-wide statistics.
    """

    def get_record(self, *, db: Session, record_id: uuid.UUID) -> dict[str, Any] | None:
        model = SampleRecordRepository(db).get_by_id(record_id)
        return model_to_document(model) if model is not None else None

    def get_statistics(
        self,
        *,
        db: Session,
        state: str | None = None,
        year: int | None = None,
    ) -> dict[str, Any]:
        repository = SampleRecordRepository(db)
        summary = repository.hpi_summary(state=state, year=year)
        distribution = repository.count_by_risk_tier(state=state, year=year)
        metal_rows = repository.list_heavy_metals(state=state, year=year)
        yearly = repository.yearly_trends(state=state, year=year)

        return {
            "total_samples": summary["totalSamples"],
            "avg_hpi": _rounded(summary["avgHpi"]),
            "max_hpi": _rounded(summary["maxHpi"]),
            "min_hpi": _rounded(summary["minHpi"]),
            "risk_distribution": [
                {"tier": tier, "count": count}
                for tier, count in sorted(distribution.items(), key=lambda item: (-item[1], item[0]))
            ],
            "metal_statistics": self._metal_statistics(metal_rows),
            "yearly_trends": [
                {"year": item["year"], "samples": item["samples"], "avg_hpi": _rounded(item["avgHpi"])}
                for item in yearly
            ],
        }

    def _metal_statistics(self, metal_rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        flat = [
            {"metal": symbol, "value": reading.get("value")}
            for metals in metal_rows
            for symbol, reading in metals.items()
            if isinstance(reading, dict)
        ]
        if not flat:
            return []

        frame = pd.DataFrame(flat)
        frame["value"] = pd.to_numeric(frame["value"], errors="coerce")
        grouped = frame.dropna(subset=["value"]).groupby("metal")["value"].agg(["count", "mean", "max", "min"])
        return [
            {
                "metal": metal,
                "samples": int(row["count"]),
                "avg_concentration": _rounded(row["mean"]),
                "max_concentration": _rounded(row["max"]),
                "min_concentration": _rounded(row["min"]),
            }
            for metal, row in grouped.sort_index().iterrows()
        ]


@lru_cache(maxsize=1)
def get_sample_statistics_service() -> SampleStatisticsService:
    return SampleStatisticsService()
