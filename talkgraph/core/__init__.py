"""Core infrastructure: LLM providers, storage backends, file library, tokenizer."""
