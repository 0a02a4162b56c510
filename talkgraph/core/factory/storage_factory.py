"""
Factory for creating saved graph storage backends.
"""

from talkgraph.config import StorageConfig
from talkgraph.core.storage.base import StorageBackend
from talkgraph.core.storage.filesystem import FileSystemStorage
from talkgraph.core.storage.memory import InMemoryStorage
from talkgraph.core.storage.sqlite import SQLiteStorage
from talkgraph.utils.exceptions import ConfigurationError


class StorageFactory:
    """Factory for creating storage backends from configuration."""

    @staticmethod
    def create(config: StorageConfig) -> StorageBackend:
        """
        Create storage backend from configuration.

        Args:
            config: Storage configuration

        Returns:
            Storage backend instance (not yet initialized)

        Raises:
            ConfigurationError: If backend is not supported
        """
        if config.backend == "filesystem":
            return FileSystemStorage(directory=config.graphs_dir)
        elif config.backend == "sqlite":
            return SQLiteStorage(db_path=config.db_path)
        elif config.backend == "memory":
            return InMemoryStorage()
        else:
            raise ConfigurationError(f"Unsupported storage backend: {config.backend}")
