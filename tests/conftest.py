"""Shared fixtures: small CSV datasets written to a temp dir."""

from __future__ import annotations

from pathlib import Path

import pytest

HEADER = "Resource,PhoneNumber,Description,Keywords,Website"


def write_csv(path: Path, lines: list[str]) -> Path:
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def two_row_csv(tmp_path: Path) -> Path:
    return write_csv(
        tmp_path / "resources.csv",
        [
            HEADER,
            'Shelter,555-1111,desc1,"food, shelter",http://x',
            'Hotline,555-2222,desc2,"crisis, hotline",http://y',
        ],
    )


@pytest.fixture
def many_rows_csv(tmp_path: Path) -> Path:
    lines = [HEADER]
    for i in range(25):
        tag = "even" if i % 2 == 0 else "odd"
        lines.append(f'Resource {i:02d},555-{i:04d},Description {i},"{tag}, all",http://example.org/{i}')
    return write_csv(tmp_path / "many.csv", lines)
