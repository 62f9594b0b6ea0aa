"""
app/mappers/sample_document_mapper.py

Conversions between extracted sample records, ORM rows, and the camelCase
record document returned to API clients.
"""

from __future__ import annotations

from typing import Any

from app.domain.sample_record import QualityFlags, SampleRecord
from db.models.sample_record import ProcessingStatus, SampleRecordModel
from pollution.engine import PollutionAssessment
from pollution.indices import HeavyMetalPollutionIndex


def build_record_payload(
    *,
    record: SampleRecord,
    assessment: PollutionAssessment,
    quality_flags: QualityFlags,
    processing_notes: list[str],
    file_hash: str,
    file_name: str,
) -> dict[str, Any]:
    """
    Flatten one assessed record into SampleRecordModel column values.
    """

    hpi = assessment.indices.get(HeavyMetalPollutionIndex.name)
    return {
        "location_name": record.location.name,
        "state": record.location.state,
        "district": record.location.district,
        "longitude": record.coordinates.longitude,
        "latitude": record.coordinates.latitude,
        "sample_year": record.sample_info.year,
        "serial_number": record.sample_info.serial_number,
        "heavy_metals": record.metals.to_dict(),
        "environmental_params": {
            name: param.to_dict() for name, param in record.environmental_params.items()
        },
        "pollution_indices": assessment.to_dict(),
        "hpi_value": hpi.value if hpi is not None else None,
        "risk_tier": assessment.overall.risk_tier,
        "file_hash": file_hash,
        "file_name": file_name,
        "processing_status": (
            ProcessingStatus.COMPLETED_WITH_WARNINGS if processing_notes else ProcessingStatus.COMPLETED
        ),
        "processing_errors": list(processing_notes),
        "quality_flags": quality_flags.to_dict(),
        "row_number": record.row_number,
        "raw_row": {key: _json_safe(value) for key, value in record.raw_row.items()},
    }


def model_to_document(model: SampleRecordModel) -> dict[str, Any]:
    """
    Render a stored row as the public record document.
    """

    return {
        "id": str(model.id),
        "location": {
            "name": model.location_name,
            "state": model.state,
            "district": model.district,
        },
        "coordinates": {
            "type": "Point",
            "coordinates": [model.longitude, model.latitude],
        },
        "sampleInfo": {
            "year": model.sample_year,
            "serialNumber": model.serial_number,
        },
        "heavyMetals": model.heavy_metals or {},
        "environmentalParams": model.environmental_params or {},
        "pollutionIndices": model.pollution_indices or {},
        "processing": {
            "fileHash": model.file_hash,
            "fileName": model.file_name,
            "processingStatus": model.processing_status,
            "processingErrors": model.processing_errors or [],
        },
        "qualityFlags": model.quality_flags or {},
        "rowNumber": model.row_number,
    }


def _json_safe(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)
