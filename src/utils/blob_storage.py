"""Blob storage for uploaded file bytes.

The file manager only talks to the ``BlobStorage`` interface; the local
filesystem implementation below is what the application wires in.
"""

import logging
import secrets
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


class BlobNotFoundError(Exception):
    """Raised when a storage reference does not resolve to stored bytes."""

    def __init__(self, storage_ref: str):
        self.storage_ref = storage_ref
        super().__init__(f"Blob '{storage_ref}' not found")


class BlobStorage(ABC):
    """Stores opaque byte payloads under storage references."""

    @abstractmethod
    def save(self, storage_ref: str, content: bytes) -> None:
        """Persist bytes. Raises OSError on failure."""

    @abstractmethod
    def read(self, storage_ref: str) -> bytes:
        """Return stored bytes. Raises BlobNotFoundError if absent."""

    @abstractmethod
    def delete(self, storage_ref: str) -> bool:
        """Remove stored bytes. Returns False if nothing was stored."""

    @staticmethod
    def new_ref(filename: str) -> str:
        """Generate a randomized storage name that keeps the file extension."""
        suffix = Path(filename or "").suffix.lower()
        if not suffix[1:].isalnum():
            suffix = ""
        return f"{secrets.token_hex(16)}{suffix}"


class LocalBlobStorage(BlobStorage):
    """Stores blobs as files in a single directory."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, storage_ref: str) -> Path:
        # Storage refs are generated by new_ref, never taken from clients
        path = (self.root / storage_ref).resolve()
        if path.parent != self.root.resolve():
            raise BlobNotFoundError(storage_ref)
        return path

    def save(self, storage_ref: str, content: bytes) -> None:
        path = self._path(storage_ref)
        with path.open("wb") as f:
            f.write(content)
        logger.debug("Stored blob %s (%d bytes)", storage_ref, len(content))

    def read(self, storage_ref: str) -> bytes:
        path = self._path(storage_ref)
        if not path.is_file():
            raise BlobNotFoundError(storage_ref)
        return path.read_bytes()

    def delete(self, storage_ref: str) -> bool:
        try:
            self._path(storage_ref).unlink()
        except (FileNotFoundError, BlobNotFoundError):
            return False
        return True
