"""VersionControl protocol — the primitives file selection is built on."""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Protocol, runtime_checkable


class ScanMode(enum.Enum):
    """Policy selecting which repository files are in scope for a scan."""

    RISKY = "risky"  # tracked + untracked non-ignored (default)
    TRACKED = "tracked"
    STAGED = "staged"
    MODIFIED = "modified"  # staged + changed since HEAD
    COMPREHENSIVE = "comprehensive"  # everything, ignore rules disregarded


@runtime_checkable
class VersionControl(Protocol):
    """Protocol for version-control backends.

    Every ``list_*`` method returns absolute paths and raises
    ``SelectorError`` when the underlying tool fails.
    """

    def is_repository(self) -> bool:
        """Whether the root lives inside a working tree."""
        ...

    def list_tracked(self) -> list[Path]:
        """Files known to version control."""
        ...

    def list_staged(self) -> list[Path]:
        """Files queued for the next commit."""
        ...

    def list_modified(self) -> list[Path]:
        """Files differing from the last commit."""
        ...

    def list_untracked(self) -> list[Path]:
        """Untracked files that are not ignored."""
        ...

    def is_ignored(self, path: Path) -> bool:
        """Whether ignore rules exclude the given path."""
        ...
