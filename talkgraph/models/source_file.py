"""Uploaded source file models."""

from datetime import datetime
from pathlib import PurePath
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class SourceFile(BaseModel):
    """An uploaded text file that can be analyzed."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    filename: str
    original_name: str
    custom_name: str | None = None

    # Upload metadata
    upload_date: datetime | None = None
    file_type: str | None = None
    size: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _default_id(cls, data: Any) -> Any:
        # Library entries are identified by their stored filename
        if isinstance(data, dict) and not data.get("id") and data.get("filename"):
            return {**data, "id": data["filename"]}
        return data

    @property
    def display_name(self) -> str:
        return self.custom_name or self.original_name

    @property
    def short_name(self) -> str:
        """Custom name, or the original name without its extension."""
        return self.custom_name or PurePath(self.original_name).stem
