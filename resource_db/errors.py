from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class ResourceError(Exception):
    """Base class for failures that abort a resource query."""


class SourceUnavailable(ResourceError):
    def __init__(self, source: Union[str, Path, None], reason: Optional[str] = None) -> None:
        self.source = str(source) if source is not None else None
        self.reason = reason
        message = "Resource file not found or not readable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MalformedHeader(ResourceError):
    def __init__(self, source: Union[str, Path, None], reason: Optional[str] = None) -> None:
        self.source = str(source) if source is not None else None
        self.reason = reason
        message = "Failed to read CSV headers"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
