"""
Factory for creating LLM providers.
"""

from talkgraph.config import LLMConfig
from talkgraph.core.llm.base import LLMProvider
from talkgraph.core.llm.ollama import OllamaLLM
from talkgraph.core.llm.openai import OpenAILLM
from talkgraph.utils.exceptions import ConfigurationError


class LLMFactory:
    """Factory for creating LLM providers from configuration."""

    @staticmethod
    def create(config: LLMConfig) -> LLMProvider:
        """
        Create LLM provider from configuration.

        Args:
            config: LLM configuration

        Returns:
            LLM provider instance

        Raises:
            ConfigurationError: If provider is not supported or the API key is missing
        """
        if config.provider == "openai":
            if not config.api_key:
                raise ConfigurationError("OpenAI API key is required (set OPENAI_API_KEY)")
            return OpenAILLM(
                api_key=config.api_key,
                model=config.model,
                base_url=config.base_url,
                timeout=config.timeout,
            )
        elif config.provider == "ollama":
            return OllamaLLM(
                host=config.base_url or "http://localhost:11434",
                model=config.model,
                timeout=config.timeout,
            )
        else:
            raise ConfigurationError(f"Unsupported LLM provider: {config.provider}")
