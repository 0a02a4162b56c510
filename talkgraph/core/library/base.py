"""
Base interface for source file content.
"""

from abc import ABC, abstractmethod

from talkgraph.models.source_file import SourceFile


class ContentProvider(ABC):
    """Abstract base for anything that can hand out the text of a source file."""

    @abstractmethod
    async def read_content(self, filename: str) -> str:
        """
        Read the raw text content of a source file.

        Args:
            filename: Stored filename of the source file

        Returns:
            File content as text

        Raises:
            NotFoundError: If the file doesn't exist
            ContentReadError: If the file exists but can't be read as text
        """
        pass

    @abstractmethod
    async def list_files(self) -> list[SourceFile]:
        """
        List the source files available for analysis.

        Raises:
            StoreError: If the library can't be enumerated
        """
        pass
