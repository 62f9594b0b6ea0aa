"""
tests/test_upload_storage.py

Spooling, hashing, and pre-parse checks for sample uploads.

Coverage
--------
- Stream spooled to a temp file with the upload's extension
- Stream failing mid-copy -> FileStorageError and no file left behind
- SHA-256 digest of the spooled bytes
- Upload checks: extension, media type parameters, empty, oversized
"""

from __future__ import annotations

import hashlib
import io
import tempfile

import pytest

from db.repositories.errors import FileStorageError, UploadValidationError
from db.repositories.storage import compute_file_digest, spool_upload
from db.repositories.types import UploadFileInput
from db.repositories.validators import validate_upload_payload


class _BrokenStream(io.RawIOBase):
    """Returns one chunk, then fails like a dropped connection."""

    def __init__(self) -> None:
        self._reads = 0

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        self._reads += 1
        if self._reads == 1:
            return b"Location,F"
        raise OSError("connection reset")


@pytest.fixture
def spool_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
    return tmp_path


class TestSpoolUpload:
    def test_copies_stream(self, spool_dir) -> None:
        body = b"Location,Fe (ppm)\nSite A,0.2\n"

        path, size = spool_upload(io.BytesIO(body), file_name="survey.CSV")

        assert path.endswith(".csv")
        assert size == len(body)
        with open(path, "rb") as handle:
            assert handle.read() == body

    def test_failed_copy_leaves_no_file(self, spool_dir) -> None:
        with pytest.raises(FileStorageError):
            spool_upload(_BrokenStream(), file_name="survey.csv", prefix="sample_upload_")

        assert list(spool_dir.iterdir()) == []


def test_digest_matches_sha256(tmp_path) -> None:
    path = tmp_path / "survey.csv"
    path.write_bytes(b"Location,As (ppb)\nSite A,20\n")

    digest = compute_file_digest(path)

    assert digest.checksum == hashlib.sha256(path.read_bytes()).hexdigest()
    assert digest.file_size_bytes == path.stat().st_size


class TestValidateUploadPayload:
    @pytest.fixture
    def spooled(self, tmp_path):
        path = tmp_path / "upload.tmp"
        path.write_bytes(b"x" * 64)
        return path

    def _payload(self, spooled, **overrides) -> UploadFileInput:
        fields = {
            "file_name": "survey.xlsx",
            "file_path": str(spooled),
            "file_size": 64,
            "content_type": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        }
        fields.update(overrides)
        return UploadFileInput(**fields)

    def test_accepts_spreadsheet(self, spooled) -> None:
        validate_upload_payload(self._payload(spooled), max_size_bytes=1024)

    def test_media_type_parameters_are_ignored(self, spooled) -> None:
        payload = self._payload(spooled, file_name="survey.csv", content_type="text/csv; charset=utf-8")

        validate_upload_payload(payload, max_size_bytes=1024)

    def test_rejects_extension(self, spooled) -> None:
        with pytest.raises(UploadValidationError, match="Unsupported file type") as exc_info:
            validate_upload_payload(self._payload(spooled, file_name="survey.pdf"), max_size_bytes=1024)

        assert exc_info.value.file_name == "survey.pdf"

    def test_rejects_media_type(self, spooled) -> None:
        with pytest.raises(UploadValidationError):
            validate_upload_payload(self._payload(spooled, content_type="image/png"), max_size_bytes=1024)

    def test_rejects_empty_and_oversized(self, spooled) -> None:
        with pytest.raises(UploadValidationError, match="empty"):
            validate_upload_payload(self._payload(spooled, file_size=0), max_size_bytes=1024)
        with pytest.raises(UploadValidationError, match="limit"):
            validate_upload_payload(self._payload(spooled), max_size_bytes=32)
