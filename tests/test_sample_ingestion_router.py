"""
tests/test_sample_ingestion_router.py

HTTP contract for /api/data endpoints, with the database session and the
ingestion service overridden.

Coverage
--------
- POST /upload: 201 camelCase body, 409 duplicate, 400 invalid, 400 no file name
- GET /stats (with yearly trends) and GET /{id}, including 404
- DELETE /{id}: 200 then 404 for the same id
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api.routers import sample_ingestion_router
from app.mappers.record_extractor import RecordExtractor
from app.services.sample_ingestion_service import SampleIngestionService, get_sample_ingestion_service
from db.session import get_db

CSV_BODY = (
    "S.No,Location,State,Longitude,Latitude,Year,As (mg/L)\n"
    "1,Site A,Kerala,76.2,9.9,2022,0.02\n"
    "2,,Kerala,76.2,9.9,2022,0.02\n"
).encode("utf-8")


@pytest.fixture()
def client(db_session) -> Iterator[TestClient]:
    application = FastAPI()
    application.include_router(sample_ingestion_router)

    def _get_db():
        yield db_session

    service = SampleIngestionService(
        max_file_size_bytes=1024 * 1024,
        extractor=RecordExtractor(current_year=lambda: 2026),
    )
    application.dependency_overrides[get_db] = _get_db
    application.dependency_overrides[get_sample_ingestion_service] = lambda: service

    with TestClient(application) as test_client:
        yield test_client


def _post(client: TestClient, body: bytes = CSV_BODY, name: str = "survey.csv"):
    return client.post("/api/data/upload", files={"file": (name, body, "text/csv")})


class TestUploadEndpoint:
    def test_upload_created(self, client) -> None:
        response = _post(client)

        assert response.status_code == 201
        payload = response.json()
        assert payload["success"] is True
        assert payload["message"] == "Processed 1 of 2 rows"
        assert payload["data"]["fileInfo"]["originalName"] == "survey.csv"
        assert payload["data"]["processing"]["detectedMetals"] == ["AS"]
        assert payload["data"]["processing"]["errorRows"] == 1
        assert payload["data"]["results"][0]["pollutionIndices"]["hpi"]["value"] == 25.0
        assert payload["warnings"]["errors"] == [
            {"row": 3, "message": "Missing location name.", "column": None, "value": None}
        ]

    def test_duplicate_upload_conflict(self, client) -> None:
        first = _post(client)
        second = _post(client)

        assert second.status_code == 409
        detail = second.json()["detail"]
        assert detail["fileHash"] == first.json()["data"]["fileInfo"]["hash"]

    def test_bad_extension(self, client) -> None:
        response = _post(client, name="survey.txt")

        assert response.status_code == 400
        assert "Unsupported file type" in response.json()["detail"]

    def test_header_only(self, client) -> None:
        response = _post(client, body=b"Location,As\n")

        assert response.status_code == 400

    def test_missing_file_part(self, client) -> None:
        response = client.post("/api/data/upload")

        assert response.status_code == 422


class TestReadEndpoints:
    def test_record_lookup(self, client) -> None:
        record_id = _post(client).json()["data"]["results"][0]["id"]

        response = client.get(f"/api/data/{record_id}")

        assert response.status_code == 200
        assert response.json()["data"]["location"]["name"] == "Site A"

    def test_record_not_found(self, client) -> None:
        response = client.get(f"/api/data/{uuid.uuid4()}")

        assert response.status_code == 404

    def test_stats(self, client) -> None:
        _post(client)

        response = client.get("/api/data/stats", params={"state": "Kerala"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["totalSamples"] == 1
        assert data["riskDistribution"] == [{"tier": "Moderate", "count": 1}]
        assert data["yearlyTrends"] == [{"year": 2022, "samples": 1, "avgHpi": 25.0}]


class TestDeleteEndpoint:
    def test_delete_record(self, client) -> None:
        record_id = _post(client).json()["data"]["results"][0]["id"]

        response = client.delete(f"/api/data/{record_id}")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert client.get(f"/api/data/{record_id}").status_code == 404

    def test_delete_missing_record(self, client) -> None:
        response = client.delete(f"/api/data/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["detail"] == "Record not found."
