"""
app/mappers package marker.
"""

from app.mappers.column_classifier import (
    DEFAULT_METAL_SYMBOLS,
    ColumnClassification,
    ColumnClassifier,
    MetalColumn,
    MetalMatcher,
)
from app.mappers.record_extractor import RecordExtractor

__all__ = [
    "DEFAULT_METAL_SYMBOLS",
    "ColumnClassification",
    "ColumnClassifier",
    "MetalColumn",
    "MetalMatcher",
    "RecordExtractor",
]
