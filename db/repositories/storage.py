"""
Local file helpers for spooled spreadsheet uploads.
"""

from __future__ import annotations

import hashlib
import os
import tempfile
from pathlib import Path
from typing import BinaryIO

from db.repositories.errors import FileStorageError
from db.repositories.types import FileDigest

CHUNK_SIZE = 1024 * 1024


def _sanitize_suffix(file_name: str | None, default: str) -> str:
    suffix = Path(file_name or "").suffix.lower()
    return suffix if suffix else default


def spool_upload(stream: BinaryIO, *, file_name: str | None, prefix: str = "sample_upload_") -> tuple[str, int]:
    """
    Copy an upload stream to a named temporary file in 1 MiB chunks.

    Returns the temporary path and the number of bytes written. The caller
    owns the file and must delete it; a failed copy removes its partial file.
    """

    suffix = _sanitize_suffix(file_name, ".xlsx")
    try:
        stream.seek(0)
    except (AttributeError, OSError):
        pass

    try:
        temp_file = tempfile.NamedTemporaryFile(delete=False, prefix=prefix, suffix=suffix)
    except OSError as exc:
        raise FileStorageError("Failed to create a temporary file for the upload.") from exc

    try:
        with temp_file:
            while True:
                chunk = stream.read(CHUNK_SIZE)
                if not chunk:
                    break
                temp_file.write(chunk)
            file_size = temp_file.tell()
    except OSError as exc:
        delete_file_quietly(temp_file.name)
        raise FileStorageError("Failed to spool uploaded file to disk.") from exc
    return temp_file.name, file_size


def compute_file_digest(file_path: str | Path) -> FileDigest:
    """
    Stream a file through SHA-256.
    """

    digest = hashlib.sha256()
    size = 0
    try:
        with open(file_path, "rb") as handle:
            for chunk in iter(lambda: handle.read(CHUNK_SIZE), b""):
                digest.update(chunk)
                size += len(chunk)
    except OSError as exc:
        raise FileStorageError(f"Failed to read uploaded file for hashing: {exc}") from exc
    return FileDigest(checksum=digest.hexdigest(), file_size_bytes=size)


def delete_file_quietly(file_path: str | Path | None) -> None:
    if not file_path:
        return
    try:
        os.remove(file_path)
    except OSError:
        return
