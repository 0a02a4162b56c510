"""
Base interface for saved graph storage.

A backend is a key-value byte store keyed by opaque string. Durability and
directory semantics are the backend's concern; record format is the caller's.
"""

import re
from abc import ABC, abstractmethod

from talkgraph.utils.exceptions import NotFoundError

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


def check_key(key: str) -> str:
    """
    Reject keys that can't name a stored record.

    Raises:
        NotFoundError: If the key contains characters no backend ever generates
    """
    if not key or not _KEY_PATTERN.match(key) or ".." in key:
        raise NotFoundError(f"Saved graph not found: {key}", context={"key": key})
    return key


class StorageBackend(ABC):
    """Abstract base class for storage backend implementations."""

    async def initialize(self) -> None:
        """Prepare the backend (create directories or tables)."""

    @abstractmethod
    async def put(self, key: str, data: bytes) -> None:
        """
        Store bytes under a key, replacing any previous value.

        Raises:
            StoreError: If the write fails
        """
        pass

    @abstractmethod
    async def get(self, key: str) -> bytes:
        """
        Read the bytes stored under a key.

        Raises:
            NotFoundError: If the key doesn't exist
            StoreError: If the read fails
        """
        pass

    @abstractmethod
    async def list_keys(self) -> list[str]:
        """
        List every stored key.

        Raises:
            StoreError: If the store can't be enumerated
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """
        Delete a key.

        Raises:
            NotFoundError: If the key doesn't exist
        """
        pass

    async def exists(self, key: str) -> bool:
        return key in await self.list_keys()

    async def close(self) -> None:
        """Release any open resources."""
