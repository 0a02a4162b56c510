"""In-process storage, for tests and throwaway sessions."""

from talkgraph.core.storage.base import StorageBackend, check_key
from talkgraph.utils.exceptions import NotFoundError


class InMemoryStorage(StorageBackend):
    """Dict-backed store. Contents are lost when the process exits."""

    def __init__(self):
        self.records: dict[str, bytes] = {}

    async def put(self, key: str, data: bytes) -> None:
        self.records[check_key(key)] = bytes(data)

    async def get(self, key: str) -> bytes:
        try:
            return self.records[check_key(key)]
        except KeyError as e:
            raise NotFoundError(f"Saved graph not found: {key}", context={"key": key}) from e

    async def list_keys(self) -> list[str]:
        return sorted(self.records)

    async def delete(self, key: str) -> None:
        try:
            del self.records[check_key(key)]
        except KeyError as e:
            raise NotFoundError(f"Saved graph not found: {key}", context={"key": key}) from e

    async def exists(self, key: str) -> bool:
        return key in self.records
