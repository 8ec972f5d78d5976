"""
Blob storage package.
"""

from .base import StorageBackend, StoredBlob
from .local_storage import LocalFileStorage

__all__ = [
    "StorageBackend",
    "StoredBlob",
    "LocalFileStorage",
]
