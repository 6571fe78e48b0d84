from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import pandas as pd

from resource_db.tags import TAGS_ARRAY_COLUMN, record_tags

_TAG_RE = re.compile(r"<[^>]*>")
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")
_WS_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class ResourceQuery:
    search_text: str = ""
    selected_tags: Tuple[str, ...] = ()

    @property
    def terms(self) -> List[str]:
        return search_terms(self.search_text)

    @property
    def is_empty(self) -> bool:
        return not self.terms and not self.selected_tags


def sanitize_text(value: object) -> str:
    """Strip markup, control characters and redundant whitespace from user input."""
    if value is None:
        return ""
    s = _TAG_RE.sub("", str(value))
    s = _CONTROL_RE.sub(" ", s)
    return _WS_RE.sub(" ", s).strip()


def sanitize_tags(values: Optional[Iterable[object]]) -> List[str]:
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    out: List[str] = []
    for v in values:
        if v is None:
            continue
        tag = sanitize_text(v)
        if tag and tag not in out:
            out.append(tag)
    return out


def search_terms(search_text: str) -> List[str]:
    return [t for t in (search_text or "").split() if t]


def normalize_query(raw: dict) -> ResourceQuery:
    """Build a query from already URL-decoded request values (``kw``/``tags``)."""
    search_text = raw.get("search_text")
    if search_text is None:
        search_text = raw.get("kw")
    tags = raw.get("selected_tags")
    if tags is None:
        tags = raw.get("tags")
    return ResourceQuery(search_text=sanitize_text(search_text), selected_tags=tuple(sanitize_tags(tags)))


def _haystack(records: pd.DataFrame, header: Optional[List[str]]) -> pd.Series:
    if header is None:
        cols = [c for c in records.columns if c != TAGS_ARRAY_COLUMN]
    else:
        cols = [c for c in header if c in records.columns]
    if not cols:
        return pd.Series("", index=records.index, dtype=object)
    return records[cols].fillna("").astype(str).apply(" ".join, axis=1).str.lower()


def text_mask(records: pd.DataFrame, terms: List[str], *, header: Optional[List[str]] = None) -> pd.Series:
    mask = pd.Series(True, index=records.index)
    if not terms:
        return mask
    haystack = _haystack(records, header)
    for term in terms:
        mask &= haystack.str.contains(term.lower(), regex=False)
    return mask


def tag_mask(records: pd.DataFrame, selected_tags: Iterable[str], *, tag_column: str = "Keywords") -> pd.Series:
    wanted = set(selected_tags)
    if not wanted:
        return pd.Series(True, index=records.index)
    tags = record_tags(records, tag_column)
    return tags.apply(lambda t: len(wanted & set(t)) == len(wanted)).astype(bool)


def filter_resources(
    records: pd.DataFrame,
    query: ResourceQuery,
    *,
    header: Optional[List[str]] = None,
    tag_column: str = "Keywords",
) -> pd.DataFrame:
    if records.empty:
        return records.copy()
    mask = text_mask(records, query.terms, header=header) & tag_mask(
        records, query.selected_tags, tag_column=tag_column
    )
    return records[mask]
