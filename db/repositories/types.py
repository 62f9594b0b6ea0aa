"""
Value objects passed between the upload router, storage helpers, and the
ingestion service.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class UploadFileInput:
    """
    A sample spreadsheet spooled to a temporary file.

    ``file_name`` is the client's name and drives format detection;
    ``file_path`` is the local copy the service reads and later deletes.
    """

    file_name: str
    file_path: str
    file_size: int
    content_type: str | None = None

    @property
    def extension(self) -> str:
        return Path(self.file_name or "").suffix.lower()


@dataclass(frozen=True)
class FileDigest:
    """SHA-256 of the spooled bytes; the duplicate-upload key."""

    checksum: str
    file_size_bytes: int
    algorithm: str = "sha256"
