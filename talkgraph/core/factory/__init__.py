"""
Factory modules for creating TalkGraph components.

Provides factories for the LLM provider and the saved graph storage backend.
"""

from talkgraph.core.factory.llm_factory import LLMFactory
from talkgraph.core.factory.storage_factory import StorageFactory

__all__ = [
    "LLMFactory",
    "StorageFactory",
]
