"""
Abstract base class for LLM providers.
Handles chat completion with optional JSON-only output.
"""

from abc import ABC, abstractmethod


class LLMProvider(ABC):
    """
    Abstract base for LLM text generation providers.

    Responsibilities:
    - Chat completion from a system and a user message
    - JSON mode for machine-readable answers
    """

    @abstractmethod
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
        Generate completion from prompt.

        Args:
            prompt: The user prompt
            system: Optional system instruction
            json_output: Ask the provider to answer with a JSON object only
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature (0.0 = deterministic, 1.0 = creative)
            **kwargs: Provider-specific parameters

        Returns:
            Raw completion text

        Raises:
            ValidationError: If the prompt is empty
            LLMError: If the provider call fails
        """
        pass

    @abstractmethod
    async def close(self):
        """
        Close any open connections.
        """


def build_messages(prompt: str, system: str | None = None) -> list[dict[str, str]]:
    """Chat messages for a prompt with an optional system instruction."""
    messages = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": prompt})
    return messages
