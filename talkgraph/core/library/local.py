"""
Local file library: uploaded files in one directory, their metadata in another.
"""

import asyncio
import json
from datetime import UTC, datetime
from pathlib import Path, PurePath

from pydantic import ValidationError as PydanticValidationError

from talkgraph.core.library.base import ContentProvider
from talkgraph.core.storage.base import check_key
from talkgraph.models.source_file import SourceFile
from talkgraph.utils.exceptions import ContentReadError, NotFoundError, StoreError, ValidationError
from talkgraph.utils.id_generator import generate_upload_filename
from talkgraph.utils.logger import get_logger

logger = get_logger(__name__)


class LocalFileLibrary(ContentProvider):
    """
    Library of uploaded text files on local disk.

    Layout:
        uploads/<filename>            raw file content
        metadata/<filename>.json      originalName, customName, uploadDate, fileType, size
    """

    def __init__(self, uploads_dir: str | Path = "data/uploads", metadata_dir: str | Path = "data/metadata"):
        """
        Initialize the library.

        Args:
            uploads_dir: Directory holding uploaded files
            metadata_dir: Directory holding per-file metadata
        """
        self.uploads_dir = Path(uploads_dir)
        self.metadata_dir = Path(metadata_dir)

    async def initialize(self) -> None:
        self.uploads_dir.mkdir(parents=True, exist_ok=True)
        self.metadata_dir.mkdir(parents=True, exist_ok=True)

    def _upload_path(self, filename: str) -> Path:
        try:
            check_key(filename)
        except NotFoundError as e:
            raise NotFoundError(f"File not found: {filename}", context={"filename": filename}) from e
        return self.uploads_dir / filename

    async def add_file(
        self,
        original_name: str,
        data: bytes,
        custom_name: str | None = None,
        file_type: str | None = None,
    ) -> SourceFile:
        """
        Store an uploaded file and its metadata.

        Args:
            original_name: Name of the file on the user's machine
            data: File content
            custom_name: Display name; defaults to the original name without extension
            file_type: MIME type reported by the client

        Returns:
            The stored SourceFile

        Raises:
            ValidationError: If no file name was given
            StoreError: If the file or its metadata can't be written
        """
        if not original_name or not original_name.strip():
            raise ValidationError("No file uploaded")

        filename = generate_upload_filename(original_name)
        source_file = SourceFile(
            filename=filename,
            original_name=original_name,
            custom_name=(custom_name or "").strip() or PurePath(original_name).stem,
            upload_date=datetime.now(UTC),
            file_type=file_type,
            size=len(data),
        )
        metadata = source_file.model_dump(mode="json", by_alias=True, exclude={"id", "filename"})

        def write() -> None:
            (self.uploads_dir / filename).write_bytes(data)
            (self.metadata_dir / f"{filename}.json").write_text(json.dumps(metadata, indent=2))

        try:
            await asyncio.to_thread(write)
        except OSError as e:
            raise StoreError(f"Failed to store upload {original_name}: {e}") from e

        logger.info(f"File uploaded successfully: {filename} ({original_name}, {len(data)} bytes)")
        return source_file

    async def list_files(self) -> list[SourceFile]:
        """
        List uploaded files.

        Unreadable or invalid metadata entries are logged and skipped.
        """
        try:
            entries = await asyncio.to_thread(lambda: sorted(self.metadata_dir.glob("*.json")))
        except OSError as e:
            raise StoreError(
                f"Failed to read files: {e}", context={"path": str(self.metadata_dir)}
            ) from e

        files = []
        for entry in entries:
            try:
                metadata = json.loads(await asyncio.to_thread(entry.read_text))
                files.append(SourceFile(**metadata, filename=entry.name[: -len(".json")]))
            except (OSError, json.JSONDecodeError, TypeError, PydanticValidationError) as e:
                logger.error(f"Error reading metadata file {entry.name}: {e}")
        return files

    async def get_file(self, filename: str) -> SourceFile:
        """
        Look up one uploaded file by its stored filename.

        Raises:
            NotFoundError: If no such file is in the library
        """
        for source_file in await self.list_files():
            if source_file.filename == filename:
                return source_file
        raise NotFoundError(f"File not found: {filename}", context={"filename": filename})

    async def read_content(self, filename: str) -> str:
        path = self._upload_path(filename)
        try:
            content = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError as e:
            raise NotFoundError(f"File not found: {filename}", context={"filename": filename}) from e
        except (OSError, UnicodeDecodeError) as e:
            raise ContentReadError(
                f"Failed to read file {filename}: {e}", context={"filename": filename}
            ) from e

        logger.debug(f"File read successfully: {filename} ({len(content)} chars)")
        return content
