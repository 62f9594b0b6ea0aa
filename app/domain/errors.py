"""
app/domain/errors.py

Error taxonomy for the sample ingestion pipeline.

File-level errors abort an upload before anything is written. Row-level
errors are collected into the ingestion report instead of being raised to
the caller.
"""

from __future__ import annotations


class IngestionError(Exception):
    """Base exception for sample ingestion failures."""


class FileValidationError(IngestionError):
    """Raised when the upload is missing, empty, too large, or of a disallowed type."""


class ParseError(IngestionError):
    """Raised when the spreadsheet cannot be read into headers and rows."""


class EmptyDatasetError(IngestionError):
    """Raised when no row of the file yields a usable sample record."""


class DuplicateFileError(IngestionError):
    """Raised when a byte-identical file has already been ingested."""

    def __init__(self, file_hash: str) -> None:
        super().__init__("This file has already been uploaded and processed.")
        self.file_hash = file_hash


class RecordExtractionError(IngestionError):
    """Raised when one data row cannot be turned into a sample record."""

    def __init__(self, row_number: int, message: str) -> None:
        super().__init__(f"Row {row_number}: {message}")
        self.row_number = row_number
        self.message = message


class PersistenceError(IngestionError):
    """Raised when the ingestion transaction cannot be committed."""
