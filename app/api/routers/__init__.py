"""
app/api/routers package marker.
"""

from app.api.routers.sample_ingestion import router as sample_ingestion_router

__all__ = [
    "sample_ingestion_router",
]
