"""
Custom exception hierarchy for TalkGraph.

Provides structured error types for better error handling and debugging.
All exceptions inherit from TalkGraphError for easy catching.
"""


class TalkGraphError(Exception):
    """
    Base exception for all TalkGraph errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize TalkGraph error.
        Args:
            message: Human-readable error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ValidationError(TalkGraphError):
    """
    Validation errors.
    Raised when input is rejected before any side effect happens
    (missing graph name, empty selection, empty content).
    """

    pass


class NotFoundError(TalkGraphError):
    """
    Resource not found errors.
    Raised when a storage key or source file doesn't exist.
    """

    pass


class UpstreamError(TalkGraphError):
    """
    Base exception for failures of external collaborators.
    Raised when fetching content or analyzing it fails.
    """

    pass


class LLMError(UpstreamError):
    """
    LLM operation errors.
    Raised when LLM operations fail (API errors, timeouts, etc.).
    """

    pass


class AnalysisError(UpstreamError):
    """
    Analysis errors.
    Raised when the analysis gateway fails or the model returns a malformed graph.
    """

    pass


class ContentReadError(UpstreamError):
    """
    Content read errors.
    Raised when a source file exists but its content can't be read.
    """

    pass


class CorruptDataError(TalkGraphError):
    """
    Corrupt data errors.
    Raised when a persisted record can't be parsed or is missing required fields.
    """

    pass


class StoreError(TalkGraphError):
    """
    Storage backend errors.
    Raised when the storage layer itself fails (listing, writing, deleting).
    """

    pass


class ConfigurationError(TalkGraphError):
    """
    Configuration errors.
    Raised when configuration is invalid or missing required values.
    """

    pass
