"""Source file library: where analyzed text comes from."""

from talkgraph.core.library.base import ContentProvider
from talkgraph.core.library.local import LocalFileLibrary

__all__ = ["ContentProvider", "LocalFileLibrary"]
