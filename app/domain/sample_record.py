"""
app/domain/sample_record.py

Domain models used by the sample ingestion flow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pollution.types import MetalReadingSet


@dataclass(frozen=True)
class Location:
    name: str
    state: str | None = None
    district: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "state": self.state, "district": self.district}


@dataclass(frozen=True)
class Coordinates:
    longitude: float
    latitude: float

    def to_geojson(self) -> dict[str, Any]:
        return {"type": "Point", "coordinates": [self.longitude, self.latitude]}


@dataclass(frozen=True)
class SampleInfo:
    year: int
    serial_number: str

    def to_dict(self) -> dict[str, Any]:
        return {"year": self.year, "serialNumber": self.serial_number}


@dataclass(frozen=True)
class EnvironmentalParam:
    value: float | str
    unit: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "unit": self.unit}


@dataclass(frozen=True)
class RecordValidationWarning:
    """
    Non-fatal data quality issue attached to one sample record.
    """

    code: str
    message: str
    field: str | None = None
    value: Any = None


@dataclass(frozen=True)
class SampleRecord:
    """
    One extracted spreadsheet row.

    Everything except ``warnings`` is fixed once extraction finishes.
    """

    row_number: int
    location: Location
    coordinates: Coordinates
    sample_info: SampleInfo
    metals: MetalReadingSet
    environmental_params: dict[str, EnvironmentalParam] = field(default_factory=dict)
    raw_row: dict[str, Any] = field(default_factory=dict)
    warnings: list[RecordValidationWarning] = field(default_factory=list)


@dataclass(frozen=True)
class QualityFlags:
    is_validated: bool
    has_anomalies: bool
    anomalies: tuple[str, ...] = ()
    confidence: float = 1.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "isValidated": self.is_validated,
            "hasAnomalies": self.has_anomalies,
            "anomalies": list(self.anomalies),
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class RowError:
    """
    One row-level failure or warning reported back to the uploader.
    """

    row_number: int
    message: str
    column: str | None = None
    value: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "row": self.row_number,
            "message": self.message,
            "column": self.column,
            "value": self.value,
        }


@dataclass(frozen=True)
class IngestionReport:
    """
    End-of-run summary for one uploaded file.
    """

    file_hash: str
    file_name: str
    file_size: int
    total_rows: int
    processed_rows: int
    error_rows: int
    detected_metals: list[str] = field(default_factory=list)
    metal_columns: dict[str, str] = field(default_factory=dict)
    row_errors: list[RowError] = field(default_factory=list)
    row_warnings: list[RowError] = field(default_factory=list)
    results_sample: list[dict[str, Any]] = field(default_factory=list)
