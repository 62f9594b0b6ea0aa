"""
app/services/sample_ingestion_service.py

Service layer for spreadsheet sample ingestion.

One upload runs end to end in the request:

    validate -> hash -> duplicate check -> read -> classify
    -> per row: extract, normalize units, validate, assess
    -> per-row SAVEPOINT inserts -> commit

File-level problems raise before anything is written. Row-level problems are
collected into the report and never abort the batch. The spooled upload is
deleted on every exit path.
"""

from __future__ import annotations

import logging
import uuid
from functools import lru_cache
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_pollution_settings, get_sample_ingestion_settings
from app.domain.errors import (
    DuplicateFileError,
    EmptyDatasetError,
    FileValidationError,
    PersistenceError,
    RecordExtractionError,
)
from app.domain.sample_record import IngestionReport, RowError, SampleRecord
from app.logging_utils import log_event, timed_event
from app.mappers.column_classifier import ColumnClassifier
from app.mappers.record_extractor import RecordExtractor
from app.mappers.sample_document_mapper import build_record_payload, model_to_document
from app.parsers.tabular_reader import TabularReader
from app.repositories.sample_record_repository import SampleRecordRepository
from app.validators.record_validator import RecordValidator
from db.repositories.errors import FileStorageError, UploadValidationError
from db.repositories.storage import compute_file_digest, delete_file_quietly
from db.repositories.types import UploadFileInput
from db.repositories.validators import validate_upload_payload
from db.session import SessionLocal
from pollution.engine import PollutionIndexEngine, default_indices
from pollution.provider import StandardsProvider
from pollution.units import UnitNormalizer

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class SampleIngestionService:
    """
    Coordinates spreadsheet reading, column classification, per-row
    assessment, and fault-tolerant persistence.
    """

    def __init__(
        self,
        *,
        max_file_size_bytes: int,
        result_sample_size: int = 5,
        max_reported_errors: int = 10,
        log_row_errors: bool = True,
        reader: TabularReader | None = None,
        classifier: ColumnClassifier | None = None,
        extractor: RecordExtractor | None = None,
        normalizer: UnitNormalizer | None = None,
        validator: RecordValidator | None = None,
        engine: PollutionIndexEngine | None = None,
    ) -> None:
        self._max_file_size_bytes = max(1, max_file_size_bytes)
        self._result_sample_size = max(0, result_sample_size)
        self._max_reported_errors = max(1, max_reported_errors)
        self._log_row_errors = log_row_errors
        self._reader = reader or TabularReader()
        self._classifier = classifier or ColumnClassifier()
        self._extractor = extractor or RecordExtractor()
        self._normalizer = normalizer or UnitNormalizer()
        self._validator = validator or RecordValidator()
        self._engine = engine or PollutionIndexEngine()

    def ingest_file(self, *, upload: UploadFileInput, db: Session) -> IngestionReport:
        """
        Ingest one spooled spreadsheet upload.

        Args:
            upload: Spooled file metadata; the file at ``upload.file_path`` is
                    deleted before this method returns.
            db:     Active SQLAlchemy session (caller owns its lifecycle).

        Raises:
            FileValidationError, ParseError, EmptyDatasetError,
            DuplicateFileError: file-level failures, nothing persisted.
            PersistenceError: the ingestion transaction could not be committed.
        """
        try:
            with timed_event(logger, "sample_ingestion", file_name=upload.file_name) as summary:
                report = self._ingest(upload=upload, db=db)
                summary.update(
                    file_hash=report.file_hash,
                    total_rows=report.total_rows,
                    processed_rows=report.processed_rows,
                    error_rows=report.error_rows,
                    detected_metals=report.detected_metals,
                )
            return report
        finally:
            delete_file_quietly(upload.file_path)

    def delete_record(self, *, record_id: uuid.UUID, db: Session) -> bool:
        """
        Delete one stored sample. Returns False when no record has that id.

        Raises:
            PersistenceError: the deletion could not be committed.
        """
        repository = SampleRecordRepository(db)
        try:
            deleted = repository.delete_by_id(record_id)
            if deleted:
                db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise PersistenceError(f"Failed to delete sample record {record_id}.") from exc

        if deleted:
            log_event(logger, logging.INFO, "sample_record_deleted", record_id=record_id)
        return deleted

    # ------------------------------------------------------------------
    # Ingestion internals
    # ------------------------------------------------------------------

    def _ingest(self, *, upload: UploadFileInput, db: Session) -> IngestionReport:
        try:
            validate_upload_payload(upload, max_size_bytes=self._max_file_size_bytes)
        except UploadValidationError as exc:
            raise FileValidationError(str(exc)) from exc

        try:
            digest = compute_file_digest(upload.file_path)
        except FileStorageError as exc:
            raise FileValidationError(str(exc)) from exc

        repository = SampleRecordRepository(db)
        if repository.exists_by_file_hash(digest.checksum):
            log_event(
                logger,
                logging.INFO,
                "sample_ingestion_duplicate",
                file_name=upload.file_name,
                file_hash=digest.checksum,
            )
            raise DuplicateFileError(digest.checksum)

        data = self._reader.read(upload.file_path, file_name=upload.file_name)
        classification = self._classifier.classify(data.headers)
        if not classification.metal_columns:
            logger.warning("No heavy metal columns detected in %s", upload.file_name)

        row_errors: list[RowError] = []
        row_warnings: list[RowError] = []
        records: list[SampleRecord] = []
        for row_number, cells in data.rows:
            try:
                records.append(
                    self._extractor.extract(
                        row_number=row_number,
                        cells=cells,
                        classification=classification,
                    )
                )
            except RecordExtractionError as exc:
                self._record_error(row_errors, RowError(row_number=row_number, message=exc.message))

        if not records:
            raise EmptyDatasetError("No valid data found in the uploaded file.")

        payloads: list[dict[str, Any]] = []
        for record in records:
            try:
                payload = self._assess_record(
                    record=record,
                    file_hash=digest.checksum,
                    file_name=upload.file_name,
                    row_warnings=row_warnings,
                )
            except Exception as exc:  # noqa: BLE001
                logger.exception("Unexpected failure assessing row %s", record.row_number)
                self._record_error(
                    row_errors,
                    RowError(row_number=record.row_number, message=f"Processing failed: {exc}"),
                )
                continue
            payloads.append(payload)

        try:
            outcomes = repository.insert_rows(payloads)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise PersistenceError("Failed to persist sample records.") from exc

        stored_ids = [outcome.record_id for outcome in outcomes if outcome.record_id is not None]
        for outcome in outcomes:
            if not outcome.succeeded:
                self._record_error(
                    row_errors,
                    RowError(row_number=outcome.row_number, message=outcome.error or "Insert failed."),
                )

        results_sample = [
            model_to_document(model)
            for model in repository.list_by_ids(stored_ids[: self._result_sample_size])
        ]

        report = IngestionReport(
            file_hash=digest.checksum,
            file_name=upload.file_name,
            file_size=digest.file_size_bytes,
            total_rows=data.total_rows,
            processed_rows=len(stored_ids),
            error_rows=data.total_rows - len(stored_ids),
            detected_metals=classification.detected_metals,
            metal_columns=classification.metal_headers(),
            row_errors=sorted(row_errors, key=lambda error: error.row_number)[: self._max_reported_errors],
            row_warnings=row_warnings[: self._max_reported_errors],
            results_sample=results_sample,
        )
        return report

    def _assess_record(
        self,
        *,
        record: SampleRecord,
        file_hash: str,
        file_name: str,
        row_warnings: list[RowError],
    ) -> dict[str, Any]:
        normalized, unit_notes = self._normalizer.normalize_readings(record.metals)
        quality_flags = self._validator.validate(record)
        assessment = self._engine.assess(normalized)

        for message in quality_flags.anomalies:
            if len(row_warnings) < self._max_reported_errors:
                row_warnings.append(RowError(row_number=record.row_number, message=message))

        return build_record_payload(
            record=record,
            assessment=assessment,
            quality_flags=quality_flags,
            processing_notes=unit_notes,
            file_hash=file_hash,
            file_name=file_name,
        )

    def _record_error(self, captured_errors: list[RowError], error: RowError) -> None:
        if self._log_row_errors:
            logger.warning("Sample row error row=%s message=%s", error.row_number, error.message)
        captured_errors.append(error)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_standards_provider() -> StandardsProvider:
    settings = get_pollution_settings()
    return StandardsProvider(
        session_factory=SessionLocal,
        ttl_seconds=settings.standards_cache_ttl_seconds,
    )


@lru_cache(maxsize=1)
def get_sample_ingestion_service() -> SampleIngestionService:
    """
    Build and cache the ingestion service with env-driven settings.
    """
    settings = get_sample_ingestion_settings()
    pollution_settings = get_pollution_settings()
    engine = PollutionIndexEngine(
        provider=get_standards_provider(),
        category=pollution_settings.standards_category,
        indices=default_indices(
            body_weight_kg=pollution_settings.body_weight_kg,
            water_intake_l=pollution_settings.water_intake_l,
        ),
    )
    return SampleIngestionService(
        max_file_size_bytes=settings.max_file_size_bytes,
        result_sample_size=settings.result_sample_size,
        max_reported_errors=settings.max_reported_errors,
        log_row_errors=settings.log_row_errors,
        classifier=ColumnClassifier(metal_symbols=settings.heavy_metals),
        normalizer=UnitNormalizer(unknown_unit_policy=settings.unknown_unit_policy),
        engine=engine,
    )
