"""Object store interface, S3 backend and local file helpers."""

from .base import ListPage, ObjectStore, StorageEntry
from .local import guess_content_type, list_local_files, remote_path
from .s3 import S3ObjectStore

__all__ = [
    "ListPage",
    "ObjectStore",
    "StorageEntry",
    "S3ObjectStore",
    "guess_content_type",
    "list_local_files",
    "remote_path",
]
