"""File selector — resolves a scan mode into the set of files to scan."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

from leakwatch.repo.base import ScanMode, VersionControl

logger = logging.getLogger(__name__)

# Version-control metadata directories, excluded in every mode
VCS_DIRS = frozenset({".git"})


class FileSelector:
    """Selects in-scope files under a root for a given scan mode.

    Built only on the ``VersionControl`` primitives. A failing primitive
    raises ``SelectorError`` straight through: an empty list would read as
    "nothing to scan" and hide secrets.
    """

    def __init__(
        self,
        root: str | Path,
        vcs: VersionControl,
        skip_dir: Callable[[Path], bool] | None = None,
    ) -> None:
        self.root = Path(root).resolve()
        self._vcs = vcs
        self._skip_dir = skip_dir

    @property
    def is_repository(self) -> bool:
        return self._vcs.is_repository()

    def select(self, mode: ScanMode = ScanMode.RISKY) -> list[Path]:
        """Return sorted absolute paths of existing files in scope for ``mode``.

        Outside a repository every mode walks the whole tree.
        """
        if mode is ScanMode.COMPREHENSIVE or not self._vcs.is_repository():
            candidates: Iterable[Path] = walk_files(self.root, self._skip_dir)
        elif mode is ScanMode.TRACKED:
            candidates = self._vcs.list_tracked()
        elif mode is ScanMode.STAGED:
            candidates = self._vcs.list_staged()
        elif mode is ScanMode.MODIFIED:
            candidates = [*self._vcs.list_staged(), *self._vcs.list_modified()]
        else:
            candidates = [*self._vcs.list_tracked(), *self._risky_untracked()]

        selected = sorted(
            {p for p in candidates if self._is_scannable(p)},
            key=str,
        )
        logger.debug(
            "Selected %d file(s) under %s for mode %s",
            len(selected),
            self.root,
            mode.value,
        )
        return selected

    def _risky_untracked(self) -> Iterator[Path]:
        for path in self._vcs.list_untracked():
            if not self._vcs.is_ignored(path):
                yield path

    def _is_scannable(self, path: Path) -> bool:
        try:
            parts = path.relative_to(self.root).parts
        except ValueError:
            parts = path.parts
        if any(part in VCS_DIRS for part in parts):
            return False
        # Deleted files still show up in diffs; symlinks are not followed
        return path.is_file() and not path.is_symlink()


def walk_files(
    root: Path,
    skip_dir: Callable[[Path], bool] | None = None,
) -> Iterator[Path]:
    """Yield every file under ``root``, skipping VCS metadata directories."""
    for dirpath, dirs, files in os.walk(root):
        parent = Path(dirpath)
        dirs[:] = sorted(
            d
            for d in dirs
            if d not in VCS_DIRS and not (skip_dir and skip_dir(parent / d))
        )
        for name in sorted(files):
            yield parent / name
