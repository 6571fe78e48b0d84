from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, TextIO, Tuple, Union

import pandas as pd

from resource_db.errors import MalformedHeader, SourceUnavailable
from resource_db.tags import TAGS_ARRAY_COLUMN, attach_tags_array, extract_tags

logger = logging.getLogger(__name__)

Source = Union[str, Path, TextIO]

COMMENT_PREFIX = "#"


def is_comment_row(row: List[str]) -> bool:
    return bool(row) and row[0].startswith(COMMENT_PREFIX)


def parse_header(row: Optional[List[str]], source_name: Optional[str]) -> List[str]:
    if row is None:
        raise MalformedHeader(source_name)
    header = [cell.lstrip("\ufeff").strip() for cell in row]
    if not any(header):
        raise MalformedHeader(source_name)
    duplicates = sorted({name for name in header if header.count(name) > 1})
    if duplicates:
        raise MalformedHeader(source_name, f"duplicate column(s) {', '.join(duplicates)}")
    if TAGS_ARRAY_COLUMN in header:
        raise MalformedHeader(source_name, f"column name {TAGS_ARRAY_COLUMN} is reserved")
    return header


def parse_rows(rows: Iterable[List[str]], source_name: Optional[str] = None) -> Tuple[List[str], pd.DataFrame]:
    """Split the header from the data rows and keep the rows that fit it."""
    iterator = iter(rows)
    header = parse_header(next(iterator, None), source_name)

    kept: List[List[str]] = []
    dropped = 0
    for row_no, row in enumerate(iterator, start=2):
        if not row or is_comment_row(row):
            continue
        if len(row) != len(header):
            dropped += 1
            logger.debug(
                "Skipping row %d of %s: %d fields, header has %d",
                row_no,
                source_name or "<stream>",
                len(row),
                len(header),
            )
            continue
        kept.append(row)

    if dropped:
        logger.info("Dropped %d malformed row(s) from %s", dropped, source_name or "<stream>")

    records = pd.DataFrame(kept, columns=header, dtype=object)
    return header, records


def _read_stream(handle: TextIO, source_name: Optional[str]) -> Tuple[List[str], pd.DataFrame]:
    return parse_rows(csv.reader(handle), source_name)


def load_dataset(source: Source) -> Tuple[List[str], pd.DataFrame]:
    """Read a delimited source into ``(header, records)``.

    ``source`` is a path or an already-open text stream. Raises
    ``SourceUnavailable`` when the file cannot be opened or read and
    ``MalformedHeader`` when there is no usable header row.
    """
    if hasattr(source, "read"):
        name = getattr(source, "name", None)
        try:
            return _read_stream(source, name)  # type: ignore[arg-type]
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            raise SourceUnavailable(name, str(exc)) from exc

    path = Path(source)  # type: ignore[arg-type]
    if not path.is_file():
        raise SourceUnavailable(path, "file does not exist")
    try:
        with path.open("r", encoding="utf-8-sig", newline="") as handle:
            return _read_stream(handle, str(path))
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        logger.error("Error processing CSV %s: %s", path, exc)
        raise SourceUnavailable(path, str(exc)) from exc


def describe_source(source: Source) -> str:
    if hasattr(source, "read"):
        return str(getattr(source, "name", "<stream>"))
    return str(source)


def load_resource_data(
    source: Source,
    *,
    tag_column: str = "Keywords",
    loader: Callable[[Source], Tuple[List[str], pd.DataFrame]] = load_dataset,
) -> Dict[str, Any]:
    header, records = loader(source)
    records = attach_tags_array(records, tag_column)
    return {
        "header": header,
        "records": records,
        "tags": extract_tags(records, tag_column),
        "source": describe_source(source),
    }
