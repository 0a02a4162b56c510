"""
Concept graph models.

A GraphDocument is the unit produced by analysis, combination and persistence.
Nodes and links are immutable; unknown fields returned by the model (or written
by a newer client) are kept and round-trip untouched.
"""

import json
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from talkgraph.utils.exceptions import CorruptDataError

UNKNOWN_SOURCE = "unknown"


def _coerce_id(value: Any) -> Any:
    # Models frequently number their concepts; ids are compared as strings.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class GraphNode(BaseModel):
    """A concept in the graph."""

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str
    label: str = ""
    description: str = ""

    # Provenance: ordered, duplicate-free names of the files that produced this node
    sources: list[str] = Field(default_factory=list)

    # Presentation, derived from sources after combination
    size: int | None = None
    color: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Any) -> Any:
        return _coerce_id(value)


NodeRef = Union[str, GraphNode]


def ref_id(ref: NodeRef) -> str:
    """Return the bare node id of a link endpoint."""
    return ref.id if isinstance(ref, GraphNode) else ref


class GraphLink(BaseModel):
    """A relationship between two concepts."""

    model_config = ConfigDict(frozen=True, extra="allow")

    # Bare id when stored, resolved GraphNode after a load
    source: NodeRef
    target: NodeRef
    relationship: str = ""
    sources: list[str] = Field(default_factory=list)

    @field_validator("source", "target", mode="before")
    @classmethod
    def _endpoint_id_as_str(cls, value: Any) -> Any:
        return _coerce_id(value)

    @property
    def source_id(self) -> str:
        return ref_id(self.source)

    @property
    def target_id(self) -> str:
        return ref_id(self.target)

    def with_bare_endpoints(self) -> "GraphLink":
        """Copy of this link whose endpoints are plain node ids."""
        return self.model_copy(update={"source": self.source_id, "target": self.target_id})

    def identity_key(self) -> str:
        """
        Whole-record identity used for link deduplication.

        Every field takes part, extra fields included, so two links only
        collapse when they are indistinguishable once stored.
        """
        record = self.with_bare_endpoints().model_dump(mode="json")
        return json.dumps(record, sort_keys=True)


class GraphDocument(BaseModel):
    """Nodes and links of one concept graph."""

    model_config = ConfigDict(frozen=True)

    nodes: list[GraphNode] = Field(default_factory=list)
    links: list[GraphLink] = Field(default_factory=list)

    # Name of the file this document was produced from; never serialized
    source: str | None = Field(default=None, exclude=True)

    @property
    def provenance(self) -> str:
        """Provenance tag applied when this document is combined."""
        return self.source or UNKNOWN_SOURCE

    def tagged(self, source: str) -> "GraphDocument":
        """Copy of this document tagged with its originating file name."""
        return self.model_copy(update={"source": source})

    def node_ids(self) -> set[str]:
        return {node.id for node in self.nodes}

    def dangling_links(self) -> list[GraphLink]:
        """Links with at least one endpoint missing from this document's nodes."""
        ids = self.node_ids()
        return [
            link for link in self.links if link.source_id not in ids or link.target_id not in ids
        ]

    def check_integrity(self) -> None:
        """
        Raise if any link references a node that isn't in the document.

        Raises:
            CorruptDataError: If dangling links are found
        """
        dangling = self.dangling_links()
        if dangling:
            first = dangling[0]
            raise CorruptDataError(
                f"Link {first.source_id} -> {first.target_id} references a missing node",
                context={"dangling_links": len(dangling)},
            )

    def with_bare_endpoints(self) -> "GraphDocument":
        """Copy of this document with every link endpoint replaced by its node id."""
        return self.model_copy(
            update={"links": [link.with_bare_endpoints() for link in self.links]}
        )

    def with_resolved_endpoints(self) -> "GraphDocument":
        """
        Copy of this document with every link endpoint replaced by its node record.

        Raises:
            CorruptDataError: If an endpoint doesn't resolve to a node
        """
        node_map = {node.id: node for node in self.nodes}
        links = []
        for link in self.links:
            source = node_map.get(link.source_id)
            target = node_map.get(link.target_id)
            if source is None or target is None:
                raise CorruptDataError(
                    f"Link {link.source_id} -> {link.target_id} references a missing node"
                )
            links.append(link.model_copy(update={"source": source, "target": target}))
        return self.model_copy(update={"links": links})

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict in the storage format (bare endpoint ids)."""
        return self.with_bare_endpoints().model_dump(mode="json")
