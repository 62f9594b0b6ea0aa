"""
Pre-parse checks for sample spreadsheet uploads.

Checks run cheapest first and stop at the first failure; none of them
opens the workbook.
"""

from __future__ import annotations

from pathlib import Path

from db.repositories.errors import UploadValidationError
from db.repositories.types import UploadFileInput

ALLOWED_EXTENSIONS = {".csv", ".xls", ".xlsx"}

# Browsers disagree on spreadsheet MIME types, so octet-stream is accepted
# and the extension decides the reader.
ALLOWED_CONTENT_TYPES = {
    "text/csv",
    "text/plain",
    "application/csv",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/octet-stream",
}


def _media_type(content_type: str | None) -> str | None:
    # "text/csv; charset=utf-8" -> "text/csv"
    if not content_type:
        return None
    return content_type.split(";", 1)[0].strip().lower() or None


def validate_upload_payload(payload: UploadFileInput, *, max_size_bytes: int) -> None:
    name = (payload.file_name or "").strip()
    if not name:
        raise UploadValidationError("No file uploaded.")

    if payload.extension not in ALLOWED_EXTENSIONS:
        raise UploadValidationError(
            f"Unsupported file type '{payload.extension or name}'. "
            f"Upload one of: {', '.join(sorted(ALLOWED_EXTENSIONS))}.",
            file_name=name,
        )

    media_type = _media_type(payload.content_type)
    if media_type is not None and media_type not in ALLOWED_CONTENT_TYPES:
        raise UploadValidationError(
            f"Content type '{media_type}' is not a spreadsheet type.",
            file_name=name,
        )

    if not payload.file_path or not Path(payload.file_path).is_file():
        raise UploadValidationError("Spooled upload is missing from disk.", file_name=name)

    if payload.file_size <= 0:
        raise UploadValidationError(f"'{name}' is empty.", file_name=name)

    if payload.file_size > max_size_bytes:
        raise UploadValidationError(
            f"'{name}' is {payload.file_size} bytes; the limit is {max_size_bytes}.",
            file_name=name,
        )
