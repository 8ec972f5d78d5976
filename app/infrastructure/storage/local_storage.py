"""
Local file storage implementation.
"""

import logging
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .base import StorageBackend, StoredBlob
from ...core.exceptions import FileStorageError

logger = logging.getLogger(__name__)


class LocalFileStorage(StorageBackend):
    """
    Local filesystem storage.

    Files are written under ``base_path/<folder>/`` with generated names, and
    exposed as ``public_base_url/<folder>/<name>``.
    """

    def __init__(self, base_path: str, public_base_url: str = "/uploads", create_dirs: bool = True):
        self.base_path = Path(base_path)
        self.public_base_url = public_base_url.rstrip("/")

        if create_dirs:
            self.base_path.mkdir(parents=True, exist_ok=True)

        if not self.base_path.is_dir():
            raise FileStorageError(f"Storage path is not a directory: {self.base_path}")

        logger.info(f"Local file storage initialized at {self.base_path}")

    def save(
        self,
        data: bytes,
        filename: str,
        folder: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> StoredBlob:
        storage_dir = self.base_path
        relative_dir = ""
        if folder:
            relative_dir = self._sanitize_path(folder)
            storage_dir = storage_dir / relative_dir

        final_name = self._generate_filename(filename)
        file_path = storage_dir / final_name
        self._validate_path(file_path)

        try:
            storage_dir.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(data)
        except OSError as e:
            logger.error(f"Failed to save file {filename}: {e}")
            raise FileStorageError("Failed to save file", operation="save") from e

        identifier = f"{relative_dir}/{final_name}" if relative_dir else final_name
        logger.info(f"File saved: {identifier} ({len(data)} bytes)")

        return StoredBlob(
            url=f"{self.public_base_url}/{identifier}",
            identifier=identifier,
            size=len(data),
            content_type=content_type,
        )

    def delete(self, identifier: str) -> bool:
        file_path = self.base_path / self._sanitize_path(identifier)
        self._validate_path(file_path)
        if not file_path.exists():
            return False
        try:
            file_path.unlink()
        except OSError as e:
            logger.error(f"Failed to delete file {identifier}: {e}")
            raise FileStorageError("Failed to delete file", operation="delete") from e
        logger.info(f"File deleted: {identifier}")
        return True

    def exists(self, identifier: str) -> bool:
        return (self.base_path / self._sanitize_path(identifier)).is_file()

    def _sanitize_filename(self, filename: str) -> str:
        """Sanitize filename to prevent security issues."""
        safe_name = os.path.basename(filename)

        for char in ['<', '>', ':', '"', '|', '?', '*', '..', '/', '\\']:
            safe_name = safe_name.replace(char, '_')

        safe_name = safe_name.strip(' .')
        return safe_name or "unnamed_file"

    def _sanitize_path(self, path: str) -> str:
        parts = [self._sanitize_filename(part) for part in Path(path).parts if part not in ('.', '..', '', '/')]
        return "/".join(parts)

    def _validate_path(self, full_path: Path) -> None:
        """Validate that path is within base directory."""
        try:
            full_path.resolve().relative_to(self.base_path.resolve())
        except ValueError:
            raise FileStorageError("Path traversal attempt detected")

    def _generate_filename(self, original_filename: str) -> str:
        """Generate unique filename using timestamp and a random suffix."""
        suffix = Path(self._sanitize_filename(original_filename)).suffix.lower()
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        return f"{timestamp}_{uuid.uuid4().hex[:8]}{suffix}"
