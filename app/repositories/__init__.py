"""
app/repositories package marker.
"""

from app.repositories.sample_record_repository import RowInsertOutcome, SampleRecordRepository

__all__ = [
    "RowInsertOutcome",
    "SampleRecordRepository",
]
