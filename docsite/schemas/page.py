"""Page-related schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class HeaderSchema(BaseModel):
    """A page heading as exposed in serialized page data."""

    level: int
    title: str
    slug: str


class PageDataSchema(BaseModel):
    """Serialized page metadata embedded in every generated page."""

    title: str
    description: str
    frontmatter: dict[str, Any] = Field(default_factory=dict)
    headers: list[HeaderSchema] = Field(default_factory=list)
    relative_path: str = Field(serialization_alias="relativePath")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class PageSummary(BaseModel):
    """Build report entry for one written page."""

    route: str
    title: str
    output_path: str
    dead_links: int = 0
