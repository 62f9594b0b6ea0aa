"""
app/domain package marker.
"""

from app.domain.errors import (
    DuplicateFileError,
    EmptyDatasetError,
    FileValidationError,
    IngestionError,
    ParseError,
    PersistenceError,
    RecordExtractionError,
)
from app.domain.sample_record import (
    Coordinates,
    EnvironmentalParam,
    IngestionReport,
    Location,
    QualityFlags,
    RecordValidationWarning,
    RowError,
    SampleInfo,
    SampleRecord,
)

__all__ = [
    "Coordinates",
    "DuplicateFileError",
    "EmptyDatasetError",
    "EnvironmentalParam",
    "FileValidationError",
    "IngestionError",
    "IngestionReport",
    "Location",
    "ParseError",
    "PersistenceError",
    "QualityFlags",
    "RecordExtractionError",
    "RecordValidationWarning",
    "RowError",
    "SampleInfo",
    "SampleRecord",
]
