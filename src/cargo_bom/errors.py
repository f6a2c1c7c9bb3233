from __future__ import annotations

from pathlib import Path
from typing import Optional


class BomError(Exception):
    """Base class for failures that abort a BOM run."""


class ResolutionError(BomError):
    """The dependency resolver could not produce a graph."""


class FilesystemError(BomError):
    """A package directory could not be listed or a license file could not be read."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path
