"""
Services layer for TalkGraph.

- AnalysisGateway: text to concept graph through an LLM
- combine: merge per-file graphs with provenance
- GraphStore: save/list/load named graph snapshots
- GraphSession: selection, batch analysis and save dialog state
"""

from talkgraph.services.analysis_gateway import AnalysisGateway
from talkgraph.services.graph_combiner import combine, merge_node
from talkgraph.services.graph_store import GraphStore
from talkgraph.services.session import GraphSession, SaveDialogState

__all__ = [
    "AnalysisGateway",
    "combine",
    "merge_node",
    "GraphStore",
    "GraphSession",
    "SaveDialogState",
]
