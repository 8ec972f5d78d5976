"""
Base storage interface.

Blob storage is treated as an opaque upload service: callers hand over
bytes and get back a public URL and an identifier.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class StoredBlob:
    """Reference to an uploaded blob."""

    url: str
    identifier: str
    size: int = 0
    content_type: Optional[str] = None

    def to_reference(self) -> Dict[str, Any]:
        """Shape persisted on party records."""
        return {"url": self.url, "publicId": self.identifier}


class StorageBackend(ABC):
    """
    Abstract base class for storage backends.
    """

    @abstractmethod
    def save(
        self,
        data: bytes,
        filename: str,
        folder: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> StoredBlob:
        """
        Save a blob.

        Args:
            data: File content
            filename: Original filename, used for its extension only
            folder: Logical folder, e.g. ``retailers/outlet_photos``
            content_type: MIME type reported by the client

        Returns:
            StoredBlob with the public URL and identifier
        """

    @abstractmethod
    def delete(self, identifier: str) -> bool:
        """Delete a blob by identifier."""

    @abstractmethod
    def exists(self, identifier: str) -> bool:
        """Check whether a blob exists."""
