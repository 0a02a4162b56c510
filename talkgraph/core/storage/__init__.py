"""
Storage backends for saved graphs.

Supported backends:
- filesystem: one JSON file per graph
- sqlite: single database file (aiosqlite)
- memory: in-process dict
"""

from talkgraph.core.storage.base import StorageBackend
from talkgraph.core.storage.filesystem import FileSystemStorage
from talkgraph.core.storage.memory import InMemoryStorage
from talkgraph.core.storage.sqlite import SQLiteStorage

__all__ = ["StorageBackend", "FileSystemStorage", "SQLiteStorage", "InMemoryStorage"]
