"""
app/api/routers/sample_ingestion.py

Sample upload, read and delete HTTP endpoints.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_spreadsheet_upload
from app.domain.errors import (
    DuplicateFileError,
    EmptyDatasetError,
    FileValidationError,
    ParseError,
    PersistenceError,
)
from app.domain.sample_record import IngestionReport
from app.schemas.sample_ingestion import (
    DeleteRecordResponse,
    FileInfoResponse,
    ProcessingSummaryResponse,
    RecordResponse,
    RowErrorResponse,
    SampleUploadResponse,
    StatisticsData,
    StatisticsResponse,
    UploadDataResponse,
    UploadWarningsResponse,
)
from app.services.sample_ingestion_service import SampleIngestionService, get_sample_ingestion_service
from app.services.sample_statistics_service import SampleStatisticsService, get_sample_statistics_service
from db.repositories.errors import FileStorageError
from db.repositories.storage import spool_upload
from db.repositories.types import UploadFileInput
from db.session import get_db

router = APIRouter(prefix="/api/data", tags=["samples"])


@router.post("/upload", response_model=SampleUploadResponse, status_code=status.HTTP_201_CREATED)
def upload_samples(
    file: UploadFile = Depends(get_spreadsheet_upload),
    db: Session = Depends(get_db),
    ingestion_service: SampleIngestionService = Depends(get_sample_ingestion_service),
) -> SampleUploadResponse:
    """
    Ingest one spreadsheet of water samples and assess every row.
    """

    try:
        temp_path, file_size = spool_upload(file.file, file_name=file.filename)
    except FileStorageError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc
    finally:
        file.file.close()

    upload = UploadFileInput(
        file_name=(file.filename or "").strip(),
        file_path=temp_path,
        file_size=file_size,
        content_type=file.content_type,
    )
    try:
        report = ingestion_service.ingest_file(upload=upload, db=db)
    except DuplicateFileError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": str(exc), "fileHash": exc.file_hash},
        ) from exc
    except (FileValidationError, ParseError, EmptyDatasetError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except PersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to persist sample records.",
        ) from exc

    return _to_upload_response(report)


@router.get("/stats", response_model=StatisticsResponse)
def get_statistics(
    state: str | None = Query(default=None, description="Filter by state"),
    year: int | None = Query(default=None, ge=1900, description="Filter by sampling year"),
    db: Session = Depends(get_db),
    statistics_service: SampleStatisticsService = Depends(get_sample_statistics_service),
) -> StatisticsResponse:
    statistics = statistics_service.get_statistics(db=db, state=state, year=year)
    return StatisticsResponse(data=StatisticsData.model_validate(statistics))


@router.get("/{record_id}", response_model=RecordResponse)
def get_record(
    record_id: uuid.UUID,
    db: Session = Depends(get_db),
    statistics_service: SampleStatisticsService = Depends(get_sample_statistics_service),
) -> RecordResponse:
    document = statistics_service.get_record(db=db, record_id=record_id)
    if document is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Record not found.",
        )
    return RecordResponse(data=document)


@router.delete("/{record_id}", response_model=DeleteRecordResponse)
def delete_record(
    record_id: uuid.UUID,
    db: Session = Depends(get_db),
    ingestion_service: SampleIngestionService = Depends(get_sample_ingestion_service),
) -> DeleteRecordResponse:
    try:
        deleted = ingestion_service.delete_record(record_id=record_id, db=db)
    except PersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to delete sample record.",
        ) from exc
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Record not found.",
        )
    return DeleteRecordResponse(message="Sample record deleted.")


def _to_upload_response(report: IngestionReport) -> SampleUploadResponse:
    warnings = None
    if report.row_errors or report.row_warnings:
        warnings = UploadWarningsResponse(
            message=f"{report.error_rows} rows had errors",
            errors=[RowErrorResponse.model_validate(error.to_dict()) for error in report.row_errors],
            warnings=[RowErrorResponse.model_validate(warning.to_dict()) for warning in report.row_warnings],
        )

    return SampleUploadResponse(
        message=f"Processed {report.processed_rows} of {report.total_rows} rows",
        data=UploadDataResponse(
            file_info=FileInfoResponse(
                original_name=report.file_name,
                size=report.file_size,
                hash=report.file_hash,
            ),
            processing=ProcessingSummaryResponse(
                total_rows=report.total_rows,
                processed_rows=report.processed_rows,
                error_rows=report.error_rows,
                detected_metals=report.detected_metals,
                metal_columns=report.metal_columns,
            ),
            results=report.results_sample,
        ),
        warnings=warnings,
    )
