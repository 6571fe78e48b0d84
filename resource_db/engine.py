from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Tuple, Union

import pandas as pd

from resource_db.config import Settings
from resource_db.data import load_dataset, load_resource_data
from resource_db.filters import ResourceQuery, filter_resources
from resource_db.pagination import DEFAULT_ITEMS_PER_PAGE, Page, page_payload, paginate

logger = logging.getLogger(__name__)

Loader = Callable[[Union[str, Path]], Tuple[List[str], pd.DataFrame]]


@dataclass(frozen=True)
class QueryResult:
    page: Page
    all_tags: List[str] = field(default_factory=list)
    total_before_filter: int = 0
    total_after_filter: int = 0
    header: List[str] = field(default_factory=list)

    @property
    def is_filtered(self) -> bool:
        return self.total_after_filter != self.total_before_filter

    def to_dict(self) -> Dict[str, Any]:
        payload = page_payload(self.page)
        payload.update(
            {
                "all_tags": self.all_tags,
                "total_before_filter": self.total_before_filter,
                "total_after_filter": self.total_after_filter,
                "columns": self.header,
            }
        )
        return payload


class ResourceQueryEngine:
    """Load -> tag -> filter -> paginate, re-reading the source on every call."""

    def __init__(
        self,
        source: Union[str, Path],
        *,
        loader: Loader = load_dataset,
        tag_column: str = "Keywords",
        page_size: int = DEFAULT_ITEMS_PER_PAGE,
    ) -> None:
        self.source = source
        self.loader = loader
        self.tag_column = tag_column
        self.page_size = page_size

    @classmethod
    def from_settings(cls, settings: Settings) -> "ResourceQueryEngine":
        return cls(settings.resource_path, tag_column=settings.TAG_COLUMN, page_size=settings.page_size)

    def _load(self) -> Dict[str, Any]:
        return load_resource_data(self.source, tag_column=self.tag_column, loader=self.loader)

    def run(self, query: ResourceQuery, page_number: object = 1, page_size: object = None) -> QueryResult:
        ctx = self._load()
        header, records, all_tags = ctx["header"], ctx["records"], ctx["tags"]
        filtered = filter_resources(records, query, header=header, tag_column=self.tag_column)
        page = paginate(filtered, page_number, page_size if page_size is not None else self.page_size)
        logger.debug(
            "query terms=%s tags=%s matched %d of %d (page %d/%d)",
            query.terms,
            list(query.selected_tags),
            len(filtered),
            len(records),
            page.page_number,
            page.total_pages,
        )
        return QueryResult(
            page=page,
            all_tags=all_tags,
            total_before_filter=int(len(records)),
            total_after_filter=int(len(filtered)),
            header=header,
        )

    def vocabulary(self) -> List[str]:
        return self._load()["tags"]

    def columns(self) -> List[str]:
        header, _ = self.loader(self.source)
        return header

    def records(self) -> pd.DataFrame:
        return self._load()["records"]
