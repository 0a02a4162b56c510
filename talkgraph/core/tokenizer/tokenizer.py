"""
Token counting utilities for analysis input budgeting.

Uses tiktoken for accurate OpenAI-compatible token counting with
character-based approximation as fallback.
"""

import tiktoken

from talkgraph.config import AnalysisConfig
from talkgraph.utils.logger import get_logger

logger = get_logger(__name__)


class Tokenizer:
    """
    Token counter used to keep analyzed content inside the model's budget.

    Usage:
        tokenizer = Tokenizer()
        count = tokenizer.count_tokens("Hello world")
        if tokenizer.exceeds("Long text...", 1000):
            text = tokenizer.truncate("Long text...", 1000)
    """

    def __init__(self, config: AnalysisConfig | None = None):
        """
        Initialize tokenizer with configuration.

        Args:
            config: Optional analysis configuration. Uses defaults if not provided.
        """
        self.config = config or AnalysisConfig()
        self._encoder: tiktoken.Encoding | None = None
        self._encoder_failed = False

    @property
    def approximate(self) -> bool:
        """True when counting by character ratio: configured so, or the encoding can't be loaded."""
        return self.config.tokenizer_provider == "approximate" or not self._load_encoder()

    def _load_encoder(self) -> bool:
        if self._encoder is None and not self._encoder_failed:
            try:
                self._encoder = tiktoken.get_encoding(self.config.tokenizer_encoding)
            except Exception as e:
                logger.warning(
                    f"Could not load tiktoken encoding {self.config.tokenizer_encoding}: {e}; "
                    "falling back to character-ratio token counts"
                )
                self._encoder_failed = True
        return self._encoder is not None

    @property
    def encoder(self) -> tiktoken.Encoding:
        """
        Lazy-load tiktoken encoder.

        Returns:
            Tiktoken encoding instance
        """
        if self._encoder is None:
            self._encoder = tiktoken.get_encoding(self.config.tokenizer_encoding)
        return self._encoder

    def count_tokens(self, text: str) -> int:
        """
        Count tokens using tiktoken, or the character ratio in approximate mode.

        Args:
            text: Text to count tokens for

        Returns:
            Token count
        """
        if not text:
            return 0

        if self.approximate:
            return self.estimate_tokens(text)

        return len(self.encoder.encode(text))

    def estimate_tokens(self, text: str) -> int:
        """
        Fast approximate token count using character ratio.

        Args:
            text: Text to estimate tokens for

        Returns:
            Approximate token count
        """
        if not text:
            return 0
        return int(len(text) / self.config.chars_per_token)

    def exceeds(self, text: str, limit: int) -> bool:
        """
        Check if text is over a token limit.

        A fast estimate rejects text well under the limit before counting exactly.
        """
        if not text:
            return False

        if self.estimate_tokens(text) < limit * 0.8:
            return False

        return self.count_tokens(text) > limit

    def truncate(self, text: str, limit: int) -> str:
        """
        Cut text down to at most `limit` tokens.

        Args:
            text: Text to truncate
            limit: Maximum number of tokens to keep

        Returns:
            The text unchanged if it fits, otherwise its leading `limit` tokens
        """
        if not self.exceeds(text, limit):
            return text

        if self.approximate:
            return text[: int(limit * self.config.chars_per_token)]

        return self.encoder.decode(self.encoder.encode(text)[:limit])
