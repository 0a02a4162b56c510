"""
LLM provider abstraction layer for text generation.

Supported providers:
- OpenAI (official SDK)
- Ollama (native SDK)
"""
from talkgraph.core.llm.base import LLMProvider
from talkgraph.core.llm.ollama import OllamaLLM
from talkgraph.core.llm.openai import OpenAILLM

__all__ = [
    "LLMProvider",
    "OllamaLLM",
    "OpenAILLM",
]
