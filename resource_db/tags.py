from __future__ import annotations

from typing import List

import pandas as pd

TAGS_ARRAY_COLUMN = "TagsArray"


def split_tags(value: object) -> List[str]:
    """Split a keyword cell on commas, trim each piece and drop the empty ones.

    Every tag comparison in the package goes through this function so the
    vocabulary and the per-record tag lists can never disagree.
    """
    if value is None or not isinstance(value, str):
        return []
    return [piece.strip() for piece in value.split(",") if piece.strip()]


def attach_tags_array(records: pd.DataFrame, tag_column: str = "Keywords") -> pd.DataFrame:
    out = records.copy()
    if tag_column in out.columns:
        out[TAGS_ARRAY_COLUMN] = out[tag_column].apply(split_tags)
    else:
        out[TAGS_ARRAY_COLUMN] = [[] for _ in range(len(out))]
    return out


def record_tags(records: pd.DataFrame, tag_column: str = "Keywords") -> pd.Series:
    """Per-record tag lists, reusing an attached ``TagsArray`` column when present."""
    if TAGS_ARRAY_COLUMN in records.columns:
        return records[TAGS_ARRAY_COLUMN]
    if tag_column in records.columns:
        return records[tag_column].apply(split_tags)
    return pd.Series([[] for _ in range(len(records))], index=records.index, dtype=object)


def extract_tags(records: pd.DataFrame, tag_column: str = "Keywords") -> List[str]:
    if records.empty or tag_column not in records.columns:
        return []
    vocabulary = set()
    for value in records[tag_column]:
        vocabulary.update(split_tags(value))
    return sorted(vocabulary)
