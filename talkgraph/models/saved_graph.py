"""Saved graph snapshot models."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from talkgraph.models.graph import GraphDocument


class GraphMetadata(BaseModel):
    """Metadata stored alongside a saved graph."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    name: str
    description: str = ""
    source_files: list[str] = Field(default_factory=list)
    generated_at: datetime
    node_count: int
    edge_count: int
    saved_at: datetime

    @field_validator("generated_at", "saved_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Timestamps are always offset-aware; values without an offset are UTC
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class SaveRequest(BaseModel):
    """User-provided metadata for a save."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # Empty names are rejected by the store, not by the model
    name: str = ""
    description: str = ""
    source_files: list[str] = Field(default_factory=list)
    generated_at: datetime | None = None


class SavedGraphSummary(BaseModel):
    """Entry returned when listing saved graphs."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    filename: str
    metadata: GraphMetadata

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class SavedGraph(SavedGraphSummary):
    """A saved graph with its content."""

    graph: GraphDocument

    def to_wire(self) -> dict[str, Any]:
        data = super().to_wire()
        # Loaded graphs carry resolved endpoints; they are dumped as nested nodes
        data["graph"] = self.graph.model_dump(mode="json")
        return data
