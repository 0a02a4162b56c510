"""
Tokenizer module for token counting.

Provides accurate token counting using tiktoken with fast approximation fallback.
Used to keep file content inside the analysis model's input budget.
"""

from talkgraph.core.tokenizer.tokenizer import Tokenizer

__all__ = ["Tokenizer"]
