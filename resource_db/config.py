from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List

from pydantic import BaseModel, Field

DATA_DIR = Path(__file__).resolve().parents[1]
DEFAULT_RESOURCE_FILE = DATA_DIR / "crisisResources.csv"
DEFAULT_TAG_COLUMN = "Keywords"
DEFAULT_PAGE_SIZE = 10
DEFAULT_PAGE_WINDOW = 2
DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [part.strip() for part in raw.split(",") if part.strip()]


class Settings(BaseModel):
    RESOURCE_FILE: str = Field(default_factory=lambda: os.getenv("RESOURCE_FILE", str(DEFAULT_RESOURCE_FILE)))
    TAG_COLUMN: str = Field(default_factory=lambda: os.getenv("RESOURCE_TAG_COLUMN", DEFAULT_TAG_COLUMN))
    PAGE_SIZE: int = Field(default_factory=lambda: _env_int("RESOURCE_PAGE_SIZE", DEFAULT_PAGE_SIZE))
    PAGE_WINDOW: int = Field(default_factory=lambda: _env_int("RESOURCE_PAGE_WINDOW", DEFAULT_PAGE_WINDOW))
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: _env_list("RESOURCE_CORS_ORIGINS", DEFAULT_CORS_ORIGINS))
    LOG_LEVEL: str = Field(default_factory=lambda: os.getenv("RESOURCE_LOG_LEVEL", "INFO"))

    @property
    def resource_path(self) -> Path:
        return Path(self.RESOURCE_FILE)

    @property
    def page_size(self) -> int:
        return self.PAGE_SIZE if self.PAGE_SIZE >= 1 else DEFAULT_PAGE_SIZE


def get_settings() -> Settings:
    """Build settings from the current environment (no cached instance)."""
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level.upper())
        return
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
