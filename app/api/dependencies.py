"""
Request-level guards for the sample endpoints.
"""

from __future__ import annotations

from fastapi import File, HTTPException, UploadFile, status

from db.repositories.validators import ALLOWED_EXTENSIONS


def get_spreadsheet_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Turn a nameless multipart part into a 400 before anything is spooled.
    The service repeats the full upload checks for non-HTTP callers.
    """

    if not (file.filename or "").strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"No file uploaded. Expected one of {', '.join(sorted(ALLOWED_EXTENSIONS))}.",
        )
    return file
