"""
Graph combination: merge per-file concept graphs into one.

Nodes are deduplicated by id and accumulate provenance; links are
deduplicated on their whole record, so the same relationship reported by
two files stays as two links, one per source.
"""

from collections.abc import Sequence

from talkgraph.models.graph import GraphDocument, GraphLink, GraphNode
from talkgraph.utils.logger import get_logger

logger = get_logger(__name__)

BASE_NODE_SIZE = 20
SIZE_PER_SOURCE = 5
SHARED_COLOR = "#e74c3c"
SINGLE_SOURCE_COLOR = "#69b3a2"


def node_size(source_count: int) -> int:
    return BASE_NODE_SIZE + SIZE_PER_SOURCE * source_count


def node_color(source_count: int) -> str:
    return SHARED_COLOR if source_count > 1 else SINGLE_SOURCE_COLOR


def merge_node(node: GraphNode, source: str) -> GraphNode:
    """
    Add one provenance tag to a node.

    Returns a new node; `node` is left untouched. Tags already present collapse.
    """
    if source in node.sources:
        return node
    return node.model_copy(update={"sources": [*node.sources, source]})


def decorate_node(node: GraphNode) -> GraphNode:
    """Recompute the presentation attributes of a merged node from its sources."""
    count = len(node.sources)
    return node.model_copy(update={"size": node_size(count), "color": node_color(count)})


def combine(documents: Sequence[GraphDocument]) -> GraphDocument:
    """
    Combine graph documents into one.

    Each document's provenance tag is its `source` ("unknown" when untagged).

    Args:
        documents: One document per analyzed file

    Returns:
        Combined document with unique node ids and resolvable link endpoints
    """
    merged: dict[str, GraphNode] = {}
    links: dict[str, GraphLink] = {}

    for document in documents:
        tag = document.provenance

        for node in document.nodes:
            existing = merged.get(node.id)
            if existing is None:
                # Whatever provenance the input carried is replaced by this document's tag
                merged[node.id] = node.model_copy(update={"sources": [tag]})
            else:
                merged[node.id] = merge_node(existing, tag)

        for link in document.links:
            tagged = link.with_bare_endpoints().model_copy(update={"sources": [tag]})
            links.setdefault(tagged.identity_key(), tagged)

    nodes = [decorate_node(node) for node in merged.values()]

    kept = [link for link in links.values() if link.source_id in merged and link.target_id in merged]
    dropped = len(links) - len(kept)
    if dropped:
        logger.warning(f"Dropped {dropped} link(s) referencing nodes missing from the combined graph")

    logger.debug(
        f"Combined {len(documents)} document(s) into {len(nodes)} nodes and {len(kept)} links"
    )
    return GraphDocument(nodes=nodes, links=kept)
