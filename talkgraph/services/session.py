"""
Session state: which files are selected, which graph is displayed,
and what the save dialog holds.
"""

import asyncio
from datetime import UTC, datetime

from pydantic import BaseModel

from talkgraph.core.library.base import ContentProvider
from talkgraph.models.graph import GraphDocument
from talkgraph.models.saved_graph import GraphMetadata, SavedGraph, SavedGraphSummary, SaveRequest
from talkgraph.models.source_file import SourceFile
from talkgraph.services.analysis_gateway import AnalysisGateway
from talkgraph.services.graph_combiner import combine
from talkgraph.services.graph_store import GraphStore
from talkgraph.utils.exceptions import NotFoundError, TalkGraphError, UpstreamError, ValidationError
from talkgraph.utils.logger import get_logger

logger = get_logger(__name__)


class SaveDialogState(BaseModel):
    """Contents of the save dialog."""

    open: bool = False
    name: str = ""
    description: str = ""


class GraphSession:
    """
    One user's working state.

    Features:
    - File selection with toggle semantics
    - All-or-nothing batch analysis of the selection
    - Save dialog pre-filled from the selection
    - Loading saved graphs for display
    """

    def __init__(self, library: ContentProvider, gateway: AnalysisGateway, store: GraphStore):
        """
        Initialize a session.

        Args:
            library: Where selected files' content is read from
            gateway: Turns content into graphs
            store: Saved graph persistence
        """
        self.library = library
        self.gateway = gateway
        self.store = store

        self._selected: dict[str, SourceFile] = {}
        self.current_graph: GraphDocument | None = None
        self.current_source: GraphMetadata | None = None
        self.save_dialog = SaveDialogState()
        self.analyzing = False
        self.saving = False
        self.error: str | None = None

    # ═══════════════════════════════════════════════════════════
    # SELECTION
    # ═══════════════════════════════════════════════════════════

    @property
    def selected(self) -> list[SourceFile]:
        """Selected files in selection order."""
        return list(self._selected.values())

    def is_selected(self, source_file: SourceFile) -> bool:
        return source_file.id in self._selected

    def toggle(self, source_file: SourceFile) -> bool:
        """
        Select a file, or deselect it if it's already selected.

        Returns:
            True if the file is selected afterwards
        """
        if source_file.id in self._selected:
            del self._selected[source_file.id]
            return False
        self._selected[source_file.id] = source_file
        return True

    def select(self, source_file: SourceFile) -> None:
        self._selected.setdefault(source_file.id, source_file)

    def deselect(self, source_file: SourceFile) -> None:
        self._selected.pop(source_file.id, None)

    def clear_selection(self) -> None:
        self._selected.clear()

    # ═══════════════════════════════════════════════════════════
    # ANALYSIS
    # ═══════════════════════════════════════════════════════════

    async def analyze(self) -> GraphDocument:
        """
        Analyze every selected file and display the combined graph.

        All files are processed concurrently and every unit is awaited even
        after one fails; a single failure fails the batch and nothing is shown.

        Returns:
            Combined graph of the selection

        Raises:
            ValidationError: If nothing is selected
            NotFoundError: If a selected file is missing from the library
            UpstreamError: If reading or analyzing a file fails
        """
        files = self.selected
        if not files:
            raise ValidationError("No files selected")

        self.analyzing = True
        self.error = None
        try:
            results = await asyncio.gather(
                *(self._analyze_file(source_file) for source_file in files),
                return_exceptions=True,
            )
            for result in results:
                if isinstance(result, BaseException):
                    raise result
            graph = combine(results)
        except TalkGraphError as e:
            logger.error(f"Analysis error: {e.message}")
            self.error = f"Failed to analyze files: {e.message}"
            self.current_graph = None
            raise
        finally:
            self.analyzing = False

        self.current_graph = graph
        self.current_source = None
        return graph

    async def _analyze_file(self, source_file: SourceFile) -> GraphDocument:
        name = source_file.original_name
        try:
            logger.debug(f"Fetching file: {source_file.filename}")
            content = await self.library.read_content(source_file.filename)

            logger.debug(f"Analyzing file: {name}")
            document = await self.gateway.analyze(content)
        except NotFoundError as e:
            raise NotFoundError(
                f"Error processing {name}: {e.message}", context={"file": source_file.filename}
            ) from e
        except TalkGraphError as e:
            raise UpstreamError(
                f"Error processing {name}: {e.message}", context={"file": source_file.filename}
            ) from e
        except Exception as e:
            raise UpstreamError(
                f"Error processing {name}: {e}", context={"file": source_file.filename}
            ) from e

        return document.tagged(name)

    # ═══════════════════════════════════════════════════════════
    # SAVE / LOAD
    # ═══════════════════════════════════════════════════════════

    def open_save_dialog(self) -> SaveDialogState:
        """
        Open the save dialog with a name and description derived from the selection.

        Raises:
            ValidationError: If no graph is displayed
        """
        if self.current_graph is None:
            raise ValidationError("No graph to save")

        count = len(self._selected)
        self.save_dialog = SaveDialogState(
            open=True,
            name=" + ".join(source_file.short_name for source_file in self.selected),
            description=f"Graph generated from {count} source{'s' if count > 1 else ''}",
        )
        return self.save_dialog

    def close_save_dialog(self) -> None:
        self.save_dialog = SaveDialogState()

    async def save_current(
        self, name: str | None = None, description: str | None = None
    ) -> SavedGraphSummary:
        """
        Save the displayed graph.

        Args:
            name: Graph name; defaults to the dialog's name
            description: Graph description; defaults to the dialog's description

        Returns:
            Summary of the stored graph

        Raises:
            ValidationError: If no graph is displayed or the name is empty
        """
        if self.current_graph is None:
            raise ValidationError("No graph to save")

        request = SaveRequest(
            name=self.save_dialog.name if name is None else name,
            description=self.save_dialog.description if description is None else description,
            source_files=[source_file.original_name for source_file in self.selected],
            generated_at=datetime.now(UTC),
        )

        self.saving = True
        try:
            summary = await self.store.save(self.current_graph, request)
        except TalkGraphError as e:
            logger.error(f"Error saving graph: {e.message}")
            self.error = e.message
            raise
        finally:
            self.saving = False

        self.close_save_dialog()
        return summary

    async def load_saved(self, key: str) -> SavedGraph:
        """
        Display a saved graph, clearing the selection.

        Raises:
            NotFoundError: If the key doesn't exist
            CorruptDataError: If the stored record is unreadable
        """
        try:
            saved = await self.store.load(key)
        except TalkGraphError as e:
            logger.error(f"Error loading graph {key}: {e.message}")
            self.error = "Failed to load graph"
            raise

        self.current_graph = saved.graph
        self.current_source = saved.metadata
        self.clear_selection()
        return saved

    async def list_saved(self) -> list[SavedGraphSummary]:
        return await self.store.list()
