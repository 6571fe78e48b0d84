from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class ResourceQueryModel(BaseModel):
    kw: str = ""
    tags: List[str] = Field(default_factory=list)


class ResourcesResponse(BaseModel):
    items: List[Dict[str, Any]]
    page: int
    page_size: int
    total_items: int
    total_pages: int
    all_tags: List[str]
    total_before_filter: int
    total_after_filter: int
    columns: List[str]
    query: ResourceQueryModel


class MetaTagsResponse(BaseModel):
    tags: List[str]
    counts: List[Dict[str, Any]]
    chart: Dict[str, Any] | None = None


class MetaColumnsResponse(BaseModel):
    columns: List[str]


class ErrorResponse(BaseModel):
    error: str
    type: str
