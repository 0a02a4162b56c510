"""
OpenAI LLM provider using official SDK.
"""

from openai import AsyncOpenAI

from talkgraph.core.llm.base import LLMProvider, build_messages
from talkgraph.utils.exceptions import LLMError, ValidationError
from talkgraph.utils.logger import get_logger

logger = get_logger(__name__)


class OpenAILLM(LLMProvider):
    """
    OpenAI LLM provider for text generation.

    Uses the chat completions API; JSON output is requested through
    the `json_object` response format.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-3.5-turbo",
        organization: str | None = None,
        base_url: str | None = None,
        timeout: float = 120.0,
    ):
        """
        Initialize OpenAI LLM provider.

        Args:
            api_key: OpenAI API key
            model: Model name (e.g., "gpt-3.5-turbo", "gpt-4o-mini")
            organization: Optional organization ID
            base_url: Optional custom base URL
            timeout: Request timeout in seconds
        """
        self.model = model

        self.client = AsyncOpenAI(
            api_key=api_key, organization=organization, base_url=base_url, timeout=timeout
        )

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
        Generate completion using OpenAI.

        Args:
            prompt: User prompt
            system: Optional system instruction
            json_output: Request a JSON object response
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            **kwargs: Additional parameters (e.g., stop, presence_penalty)
        Returns:
            Completion text
        Raises:
            LLMError: If OpenAI API call fails or returns nothing
            ValidationError: If the prompt is empty
        """
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt cannot be empty")

        params = {
            "model": self.model,
            "messages": build_messages(prompt, system),
            "temperature": temperature,
            "max_tokens": max_tokens,
            **kwargs,
        }
        if json_output:
            params["response_format"] = {"type": "json_object"}

        try:
            response = await self.client.chat.completions.create(**params)
        except Exception as e:
            logger.bind(model=self.model, error_type=type(e).__name__).error(f"OpenAI API error: {e}")
            raise LLMError(f"OpenAI API error: {e}") from e

        content = response.choices[0].message.content
        if not content:
            raise LLMError("OpenAI returned empty content")

        return content

    async def close(self):
        """Close OpenAI client."""
        await self.client.close()
