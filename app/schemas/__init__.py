"""
app/schemas package marker.
"""

from app.schemas.sample_ingestion import (
    DeleteRecordResponse,
    RecordResponse,
    RowErrorResponse,
    SampleUploadResponse,
    StatisticsResponse,
)

__all__ = [
    "DeleteRecordResponse",
    "RecordResponse",
    "RowErrorResponse",
    "SampleUploadResponse",
    "StatisticsResponse",
]
