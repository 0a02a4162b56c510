"""TalkGraph: concept graphs from uploaded text files."""

__version__ = "1.0.0"
