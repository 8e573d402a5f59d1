"""Storage collaborators (S3 blobs, DynamoDB records) for photoIngest."""

from photoingest.storage.client import BlobStore, RecordStore
from photoingest.storage.models import PhotoRecord, UploadEvent
from photoingest.storage.exceptions import (
    StorageError,
    StorageReadError,
    StorageWriteError,
    InvalidEventError,
)

__all__ = [
    "BlobStore",
    "RecordStore",
    "PhotoRecord",
    "UploadEvent",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "InvalidEventError",
]
