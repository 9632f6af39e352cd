"""Git backend — implements the VersionControl primitives via the git CLI."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from leakwatch.errors import SelectorError

logger = logging.getLogger(__name__)

# Timeout in seconds for a single git invocation.
_GIT_TIMEOUT = 30


class GitCli:
    """Runs ``git -C <root> ...`` subprocesses.

    Paths are listed relative to ``root`` (``--relative`` for diffs) so a
    root below the top of the working tree only sees its own subtree.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()
        self._is_repo: bool | None = None

    def is_repository(self) -> bool:
        if self._is_repo is None:
            self._is_repo = self._check_is_repository()
        return self._is_repo

    def list_tracked(self) -> list[Path]:
        return self._list_paths(["ls-files", "-z"])

    def list_staged(self) -> list[Path]:
        return self._list_paths(["diff", "--cached", "--name-only", "--relative", "-z"])

    def list_modified(self) -> list[Path]:
        if not self._has_head():
            # No commit yet, so nothing can differ from it
            return []
        return self._list_paths(["diff", "HEAD", "--name-only", "--relative", "-z"])

    def list_untracked(self) -> list[Path]:
        return self._list_paths(["ls-files", "--others", "--exclude-standard", "-z"])

    def is_ignored(self, path: Path) -> bool:
        proc = self._run(["check-ignore", "-q", "--", str(path)], check=False)
        # 0 = ignored, 1 = not ignored, anything else is a failure
        if proc.returncode == 0:
            return True
        if proc.returncode == 1:
            return False
        raise SelectorError(
            f"git check-ignore failed for {path}: {_stderr(proc)}"
        )

    def _check_is_repository(self) -> bool:
        try:
            proc = subprocess.run(
                ["git", "-C", str(self.root), "rev-parse", "--is-inside-work-tree"],
                capture_output=True,
                text=True,
                timeout=_GIT_TIMEOUT,
            )
        except FileNotFoundError:
            logger.debug("git executable not found; treating %s as plain directory", self.root)
            return False
        except subprocess.TimeoutExpired:
            raise SelectorError(f"git timed out probing {self.root}") from None
        return proc.returncode == 0 and proc.stdout.strip() == "true"

    def _has_head(self) -> bool:
        proc = self._run(["rev-parse", "--verify", "--quiet", "HEAD"], check=False)
        return proc.returncode == 0

    def _list_paths(self, args: list[str]) -> list[Path]:
        proc = self._run(args)
        return [
            self.root / name
            for name in proc.stdout.split("\0")
            if name.strip()
        ]

    def _run(
        self, args: list[str], check: bool = True
    ) -> subprocess.CompletedProcess[str]:
        cmd = ["git", "-C", str(self.root), *args]
        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=_GIT_TIMEOUT,
            )
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            raise SelectorError(f"git {args[0]} failed: {e}") from e

        if check and proc.returncode != 0:
            raise SelectorError(f"git {' '.join(args)} failed: {_stderr(proc)}")
        return proc


def _stderr(proc: subprocess.CompletedProcess[str]) -> str:
    return (proc.stderr or "").strip() or f"exit status {proc.returncode}"
