"""
app/schemas/sample_ingestion.py

Response schemas for sample ingestion endpoints.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RowErrorResponse(CamelModel):
    """
    API response model for one row-level error or warning.
    """

    row: int = Field(..., ge=1)
    message: str
    column: str | None = None
    value: str | None = None


class FileInfoResponse(CamelModel):
    original_name: str
    size: int = Field(..., ge=0)
    hash: str


class ProcessingSummaryResponse(CamelModel):
    total_rows: int = Field(..., ge=0)
    processed_rows: int = Field(..., ge=0)
    error_rows: int = Field(..., ge=0)
    detected_metals: list[str] = Field(default_factory=list)
    metal_columns: dict[str, str] = Field(default_factory=dict)


class UploadDataResponse(CamelModel):
    file_info: FileInfoResponse
    processing: ProcessingSummaryResponse
    results: list[dict[str, Any]] = Field(default_factory=list)


class UploadWarningsResponse(CamelModel):
    message: str
    errors: list[RowErrorResponse] = Field(default_factory=list)
    warnings: list[RowErrorResponse] = Field(default_factory=list)


class SampleUploadResponse(CamelModel):
    """
    API response model for one processed upload.
    """

    success: bool = True
    message: str
    data: UploadDataResponse
    warnings: UploadWarningsResponse | None = None


class RecordResponse(CamelModel):
    success: bool = True
    data: dict[str, Any]


class RiskTierCount(CamelModel):
    tier: str
    count: int = Field(..., ge=0)


class MetalStatistics(CamelModel):
    metal: str
    samples: int = Field(..., ge=0)
    avg_concentration: float | None = None
    max_concentration: float | None = None
    min_concentration: float | None = None


class YearlyTrend(CamelModel):
    year: int
    samples: int = Field(..., ge=0)
    avg_hpi: float | None = None


class StatisticsData(CamelModel):
    total_samples: int = Field(..., ge=0)
    avg_hpi: float | None = None
    max_hpi: float | None = None
    min_hpi: float | None = None
    risk_distribution: list[RiskTierCount] = Field(default_factory=list)
    metal_statistics: list[MetalStatistics] = Field(default_factory=list)
    yearly_trends: list[YearlyTrend] = Field(default_factory=list)


class DeleteRecordResponse(CamelModel):
    success: bool = True
    message: str


class StatisticsResponse(CamelModel):
    success: bool = True
    data: StatisticsData
