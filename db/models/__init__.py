"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.sample_record import ProcessingStatus, SampleRecordModel
from pollution.repository import HeavyMetalStandard

__all__ = [
    "HeavyMetalStandard",
    "ProcessingStatus",
    "SampleRecordModel",
]
