"""
Repository layer exports.
"""

from db.repositories.errors import FileStorageError, UploadRepositoryError, UploadValidationError
from db.repositories.storage import compute_file_digest, delete_file_quietly, spool_upload
from db.repositories.types import FileDigest, UploadFileInput
from db.repositories.validators import validate_upload_payload

__all__ = [
    "UploadFileInput",
    "FileDigest",
    "compute_file_digest",
    "delete_file_quietly",
    "spool_upload",
    "validate_upload_payload",
    "UploadRepositoryError",
    "UploadValidationError",
    "FileStorageError",
]
