"""
Ollama LLM provider using native ollama-python SDK.
"""

import ollama

from talkgraph.core.llm.base import LLMProvider, build_messages
from talkgraph.utils.exceptions import LLMError, ValidationError
from talkgraph.utils.logger import get_logger

logger = get_logger(__name__)


class OllamaLLM(LLMProvider):
    """
    Ollama LLM provider for text generation.

    Uses native ollama-python SDK for chat completions
    with JSON mode for structured outputs.
    """

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "llama3.1:8b",
        timeout: float = 120.0,
    ):
        """
        Initialize Ollama LLM provider.

        Args:
            host: Ollama server URL
            model: Model name for text generation (e.g., "llama3.1", "mistral")
            timeout: Request timeout in seconds
        """
        self.host = host
        self.model = model
        self.timeout = timeout

        self.client = ollama.AsyncClient(host=host, timeout=timeout)

    async def complete(
        self,
        prompt: str,
        system: str | None = None,
        json_output: bool = False,
        max_tokens: int = 2000,
        temperature: float = 0.0,
        **kwargs,
    ) -> str:
        """
        Generate completion using Ollama.

        Args:
            prompt: User prompt
            system: Optional system instruction
            json_output: Use Ollama's JSON format mode
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            **kwargs: Additional options (passed to Ollama)

        Returns:
            Completion text

        Raises:
            LLMError: If the Ollama call fails or returns nothing
            ValidationError: If the prompt is empty
        """
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt cannot be empty")

        options = {
            "temperature": temperature,
            "num_predict": max_tokens,
            **kwargs.get("options", {}),
        }

        try:
            response = await self.client.chat(
                model=self.model,
                messages=build_messages(prompt, system),
                format="json" if json_output else None,
                options=options,
                **{k: v for k, v in kwargs.items() if k != "options"},
            )
        except Exception as e:
            logger.bind(model=self.model, error_type=type(e).__name__).error(f"Ollama API error: {e}")
            raise LLMError(f"Ollama API error: {e}") from e

        content = response["message"]["content"]
        if not content:
            raise LLMError("Ollama returned empty content")

        return content

    async def close(self):
        """Close client (Ollama SDK handles cleanup internally)."""
        pass
