"""
Directory-backed storage: one `<key>.json` file per saved graph.
"""

import asyncio
from pathlib import Path

from talkgraph.core.storage.base import StorageBackend, check_key
from talkgraph.utils.exceptions import NotFoundError, StoreError
from talkgraph.utils.logger import get_logger

logger = get_logger(__name__)


class FileSystemStorage(StorageBackend):
    """
    Stores each record as a JSON file in a directory.

    Writes go through a temporary file and a rename so a crash never leaves
    a half-written record behind.
    """

    suffix = ".json"

    def __init__(self, directory: str | Path = "data/graphs"):
        """
        Initialize filesystem storage.

        Args:
            directory: Directory holding the records
        """
        self.directory = Path(directory)

    async def initialize(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{check_key(key)}{self.suffix}"

    async def put(self, key: str, data: bytes) -> None:
        path = self._path(key)
        tmp_path = path.with_name(f".{path.name}.tmp")

        def write() -> None:
            tmp_path.write_bytes(data)
            tmp_path.replace(path)

        try:
            await asyncio.to_thread(write)
        except OSError as e:
            raise StoreError(f"Failed to write {path.name}: {e}", context={"key": key}) from e

    async def get(self, key: str) -> bytes:
        path = self._path(key)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError as e:
            raise NotFoundError(f"Saved graph not found: {key}", context={"key": key}) from e
        except OSError as e:
            raise StoreError(f"Failed to read {path.name}: {e}", context={"key": key}) from e

    async def list_keys(self) -> list[str]:
        try:
            entries = await asyncio.to_thread(lambda: sorted(self.directory.iterdir()))
        except OSError as e:
            logger.error(f"Error reading storage directory {self.directory}: {e}")
            raise StoreError(
                f"Failed to read storage directory: {e}", context={"path": str(self.directory)}
            ) from e

        return [
            entry.name[: -len(self.suffix)]
            for entry in entries
            if entry.name.endswith(self.suffix) and not entry.name.startswith(".")
        ]

    async def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            await asyncio.to_thread(path.unlink)
        except FileNotFoundError as e:
            raise NotFoundError(f"Saved graph not found: {key}", context={"key": key}) from e
        except OSError as e:
            raise StoreError(f"Failed to delete {path.name}: {e}", context={"key": key}) from e

    async def exists(self, key: str) -> bool:
        try:
            return self._path(key).exists()
        except NotFoundError:
            return False
