"""
Data models for TalkGraph.

Core models:
- GraphNode, GraphLink, GraphDocument: the concept graph payload
- GraphMetadata, SaveRequest, SavedGraphSummary, SavedGraph: persisted snapshots
- SourceFile: uploaded files available for analysis
"""

from talkgraph.models.graph import (
    UNKNOWN_SOURCE,
    GraphDocument,
    GraphLink,
    GraphNode,
    NodeRef,
    ref_id,
)
from talkgraph.models.saved_graph import (
    GraphMetadata,
    SavedGraph,
    SavedGraphSummary,
    SaveRequest,
)
from talkgraph.models.source_file import SourceFile

__all__ = [
    # Graph models
    "GraphNode",
    "GraphLink",
    "GraphDocument",
    "NodeRef",
    "ref_id",
    "UNKNOWN_SOURCE",
    # Persistence models
    "GraphMetadata",
    "SaveRequest",
    "SavedGraphSummary",
    "SavedGraph",
    # Source files
    "SourceFile",
]
