"""
Persistence of named graph snapshots.

Records are stored as JSON `{"metadata": {...}, "graph": {...}}` under a
generated key. Link endpoints are stored as bare node ids and handed back
resolved to node records on load.
"""

import asyncio
import json
from datetime import UTC, datetime

from pydantic import ValidationError as PydanticValidationError

from talkgraph.core.storage.base import StorageBackend
from talkgraph.models.graph import GraphDocument
from talkgraph.models.saved_graph import GraphMetadata, SavedGraph, SavedGraphSummary, SaveRequest
from talkgraph.utils.exceptions import CorruptDataError, NotFoundError, StoreError, ValidationError
from talkgraph.utils.id_generator import generate_graph_key
from talkgraph.utils.logger import get_logger

logger = get_logger(__name__)


class GraphStore:
    """
    Save, list and load graph snapshots on top of a storage backend.

    Saved graphs are never modified in place: every save creates a new key.
    """

    def __init__(self, backend: StorageBackend):
        """
        Initialize the store.

        Args:
            backend: Key-value byte store holding the records
        """
        self.backend = backend

    async def initialize(self) -> None:
        await self.backend.initialize()

    async def close(self) -> None:
        await self.backend.close()

    async def list(self) -> list[SavedGraphSummary]:
        """
        List saved graphs, newest first.

        Entries that can't be read or parsed are logged and skipped.

        Raises:
            StoreError: If the backend can't be enumerated
        """
        keys = await self.backend.list_keys()
        results = await asyncio.gather(
            *(self._read_summary(key) for key in keys), return_exceptions=True
        )

        summaries = []
        for key, result in zip(keys, results):
            if isinstance(result, (CorruptDataError, NotFoundError, StoreError)):
                logger.error(f"Error reading saved graph {key}: {result}")
                continue
            if isinstance(result, BaseException):
                raise result
            summaries.append(result)

        summaries.sort(key=lambda summary: summary.metadata.saved_at, reverse=True)
        return summaries

    async def save(self, graph: GraphDocument, request: SaveRequest) -> SavedGraphSummary:
        """
        Persist a graph under a freshly generated key.

        Args:
            graph: Graph to save; resolved link endpoints are stored as bare ids
            request: Name, description and provenance supplied by the user

        Returns:
            The stored key and metadata

        Raises:
            ValidationError: If the name is empty or a link references a missing node
            StoreError: If the write fails
        """
        name = request.name.strip() if request.name else ""
        if not name:
            raise ValidationError("Graph name is required")

        bare = graph.with_bare_endpoints()
        dangling = bare.dangling_links()
        if dangling:
            raise ValidationError(
                f"Graph has {len(dangling)} link(s) referencing missing nodes",
                context={"dangling_links": len(dangling)},
            )

        key = generate_graph_key()
        while await self.backend.exists(key):
            key = generate_graph_key()

        saved_at = datetime.now(UTC)
        metadata = GraphMetadata(
            name=name,
            description=request.description.strip(),
            source_files=list(request.source_files),
            generated_at=request.generated_at or saved_at,
            node_count=len(bare.nodes),
            edge_count=len(bare.links),
            saved_at=saved_at,
        )
        record = {
            "metadata": metadata.model_dump(mode="json", by_alias=True),
            "graph": bare.to_wire(),
        }

        await self.backend.put(key, json.dumps(record, indent=2).encode("utf-8"))
        logger.info(
            f"Saved graph '{name}' as {key} ({metadata.node_count} nodes, {metadata.edge_count} edges)"
        )
        return SavedGraphSummary(filename=key, metadata=metadata)

    async def load(self, key: str) -> SavedGraph:
        """
        Load a saved graph with link endpoints resolved to node records.

        Raises:
            NotFoundError: If the key doesn't exist
            CorruptDataError: If the record can't be parsed or is incomplete
        """
        record = await self._read_record(key)
        try:
            graph = GraphDocument.model_validate(record["graph"])
        except (KeyError, PydanticValidationError) as e:
            raise CorruptDataError(f"Saved graph {key} has an invalid graph: {e}") from e

        return SavedGraph(
            filename=key,
            metadata=self._parse_metadata(key, record),
            graph=graph.with_resolved_endpoints(),
        )

    async def delete(self, key: str) -> None:
        """
        Delete a saved graph.

        Raises:
            NotFoundError: If the key doesn't exist
        """
        await self.backend.delete(key)
        logger.info(f"Deleted saved graph {key}")

    async def _read_record(self, key: str) -> dict:
        data = await self.backend.get(key)
        try:
            record = json.loads(data)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CorruptDataError(f"Saved graph {key} is not valid JSON: {e}") from e
        if not isinstance(record, dict):
            raise CorruptDataError(f"Saved graph {key} is not a JSON object")
        return record

    async def _read_summary(self, key: str) -> SavedGraphSummary:
        record = await self._read_record(key)
        return SavedGraphSummary(filename=key, metadata=self._parse_metadata(key, record))

    @staticmethod
    def _parse_metadata(key: str, record: dict) -> GraphMetadata:
        try:
            return GraphMetadata.model_validate(record["metadata"])
        except (KeyError, PydanticValidationError) as e:
            raise CorruptDataError(f"Saved graph {key} has invalid metadata: {e}") from e
