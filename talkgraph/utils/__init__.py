"""Utility modules for TalkGraph."""

from talkgraph.utils.exceptions import (
    AnalysisError,
    ConfigurationError,
    ContentReadError,
    CorruptDataError,
    LLMError,
    NotFoundError,
    StoreError,
    TalkGraphError,
    UpstreamError,
    ValidationError,
)
from talkgraph.utils.id_generator import generate_graph_key, generate_upload_filename
from talkgraph.utils.logger import get_logger, setup_logging

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # ID Generators
    "generate_graph_key",
    "generate_upload_filename",
    # Exceptions
    "TalkGraphError",
    "ValidationError",
    "NotFoundError",
    "UpstreamError",
    "LLMError",
    "AnalysisError",
    "ContentReadError",
    "CorruptDataError",
    "StoreError",
    "ConfigurationError",
]
