"""
Errors raised while accepting a sample spreadsheet, before any row is read.

The ingestion service translates these into its own FileValidationError so
callers only see one failure family for a rejected upload.
"""

from __future__ import annotations


class UploadRepositoryError(Exception):
    """Root of the upload-handling failures."""


class UploadValidationError(UploadRepositoryError):
    """
    The upload is not an acceptable sample spreadsheet (missing, empty,
    oversized, or of the wrong type).
    """

    def __init__(self, message: str, *, file_name: str | None = None) -> None:
        super().__init__(message)
        self.file_name = file_name


class FileStorageError(UploadRepositoryError):
    """Spooling, hashing, or removing the temporary copy failed."""
