"""
app/services package marker.
"""

from app.services.sample_ingestion_service import (
    SampleIngestionService,
    get_sample_ingestion_service,
)
from app.services.sample_statistics_service import (
    SampleStatisticsService,
    get_sample_statistics_service,
)

__all__ = [
    "SampleIngestionService",
    "get_sample_ingestion_service",
    "SampleStatisticsService",
    "get_sample_statistics_service",
]
