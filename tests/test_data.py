"""Tests for the CSV dataset loader."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest

from resource_db.data import describe_source, load_dataset, load_resource_data
from resource_db.errors import MalformedHeader, SourceUnavailable
from tests.conftest import HEADER, write_csv


def test_load_dataset_keeps_header_and_order(two_row_csv: Path) -> None:
    header, records = load_dataset(two_row_csv)

    assert header == ["Resource", "PhoneNumber", "Description", "Keywords", "Website"]
    assert list(records["Resource"]) == ["Shelter", "Hotline"]
    assert list(records.columns) == header
    assert records.iloc[0]["Keywords"] == "food, shelter"


def test_comment_rows_are_dropped(tmp_path: Path) -> None:
    path = write_csv(
        tmp_path / "c.csv",
        [
            "Resource,PhoneNumber,Description,Keywords",
            "# skip,,,",
            "Kept,1,d,k",
            "#another,,,",
        ],
    )
    _, records = load_dataset(path)

    assert len(records) == 1
    assert records.iloc[0]["Resource"] == "Kept"
    assert not records["Resource"].str.startswith("#").any()


def test_rows_with_wrong_field_count_are_dropped(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = write_csv(
        tmp_path / "bad.csv",
        [
            HEADER,
            "Short,1,d",
            'Good,2,d,"a, b",http://g',
            "Long,3,d,k,http://l,extra",
        ],
    )
    with caplog.at_level(logging.DEBUG, logger="resource_db.data"):
        _, records = load_dataset(path)

    assert list(records["Resource"]) == ["Good"]
    assert any("Skipping row 2" in r.getMessage() for r in caplog.records)
    assert any("Dropped 2 malformed row(s)" in r.getMessage() for r in caplog.records)


def test_blank_lines_are_ignored(tmp_path: Path) -> None:
    path = write_csv(tmp_path / "blank.csv", [HEADER, "", 'A,1,d,"x",http://a', ""])
    _, records = load_dataset(path)
    assert len(records) == 1


def test_quoted_fields_keep_commas(tmp_path: Path) -> None:
    path = write_csv(tmp_path / "q.csv", [HEADER, '"Food, Inc.",1,"one, two","a, b",http://f'])
    _, records = load_dataset(path)
    assert records.iloc[0]["Resource"] == "Food, Inc."
    assert records.iloc[0]["Description"] == "one, two"


def test_missing_file_raises_source_unavailable(tmp_path: Path) -> None:
    with pytest.raises(SourceUnavailable) as exc_info:
        load_dataset(tmp_path / "nope.csv")
    assert "not found" in str(exc_info.value)


def test_directory_is_not_a_source(tmp_path: Path) -> None:
    with pytest.raises(SourceUnavailable):
        load_dataset(tmp_path)


def test_undecodable_file_raises_source_unavailable(tmp_path: Path) -> None:
    path = tmp_path / "latin.csv"
    path.write_bytes(b"Resource,Keywords\n\xff\xfe\xfa,k\n")
    with pytest.raises(SourceUnavailable):
        load_dataset(path)


def test_empty_file_raises_malformed_header(tmp_path: Path) -> None:
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")
    with pytest.raises(MalformedHeader):
        load_dataset(path)


def test_blank_header_raises_malformed_header(tmp_path: Path) -> None:
    path = write_csv(tmp_path / "blank_header.csv", [",,", "a,b,c"])
    with pytest.raises(MalformedHeader):
        load_dataset(path)


def test_header_only_yields_no_records(tmp_path: Path) -> None:
    path = write_csv(tmp_path / "h.csv", [HEADER])
    header, records = load_dataset(path)
    assert len(header) == 5
    assert records.empty
    assert list(records.columns) == header


def test_bom_is_stripped_from_header(tmp_path: Path) -> None:
    path = tmp_path / "bom.csv"
    path.write_bytes(("\ufeff" + HEADER + "\nA,1,d,k,http://a\n").encode("utf-8"))
    header, _ = load_dataset(path)
    assert header[0] == "Resource"


def test_load_dataset_accepts_stream() -> None:
    stream = io.StringIO(HEADER + '\nA,1,d,"x, y",http://a\n')
    header, records = load_dataset(stream)
    assert header[0] == "Resource"
    assert records.iloc[0]["Website"] == "http://a"


def test_load_resource_data_builds_context(two_row_csv: Path) -> None:
    ctx = load_resource_data(two_row_csv)

    assert ctx["tags"] == ["crisis", "food", "hotline", "shelter"]
    assert list(ctx["records"]["TagsArray"]) == [["food", "shelter"], ["crisis", "hotline"]]
    assert ctx["source"] == str(two_row_csv)


def test_load_resource_data_reports_full_path_for_str_and_path(two_row_csv: Path) -> None:
    assert load_resource_data(two_row_csv)["source"] == str(two_row_csv)
    assert load_resource_data(str(two_row_csv))["source"] == str(two_row_csv)


def test_describe_source_for_streams() -> None:
    assert describe_source(io.StringIO("")) == "<stream>"


def test_duplicate_header_names_raise_malformed_header(tmp_path: Path) -> None:
    path = write_csv(tmp_path / "dup.csv", ["Resource,Resource,Keywords", "A,B,x"])
    with pytest.raises(MalformedHeader) as exc_info:
        load_dataset(path)
    assert "duplicate column(s) Resource" in str(exc_info.value)


def test_reserved_tags_array_header_raises_malformed_header(tmp_path: Path) -> None:
    path = write_csv(tmp_path / "reserved.csv", ["Resource,Keywords,TagsArray", 'A,"x, y",raw'])
    with pytest.raises(MalformedHeader) as exc_info:
        load_dataset(path)
    assert "TagsArray is reserved" in str(exc_info.value)
