"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import pytest

from leakwatch.config import ScannerConfig
from leakwatch.errors import SelectorError
from leakwatch.rules.models import Rule, Severity
from leakwatch.rules.registry import PatternRegistry
from leakwatch.scanner.models import Finding, FindingStatus
from leakwatch.storage.store import FindingsStore

PASSWORD_PATTERN = r'(?i)password\s*=\s*"([^"]{8,})"'
PASSWORD_LINE = 'password = "hunter2fake"'


class FakeVCS:
    """In-memory VersionControl double. Paths are given relative to root.

    ``untracked`` lists every untracked file, ignored ones included;
    ``ignored`` decides what ``is_ignored`` reports. Names in ``failing``
    ("tracked", "staged", "modified", "untracked", "ignored") make that
    primitive raise SelectorError.
    """

    def __init__(
        self,
        root: Path,
        *,
        is_repo: bool = True,
        tracked: Iterable[str] = (),
        staged: Iterable[str] = (),
        modified: Iterable[str] = (),
        untracked: Iterable[str] = (),
        ignored: Iterable[str] = (),
        failing: Iterable[str] = (),
    ) -> None:
        self.root = Path(root).resolve()
        self._is_repo = is_repo
        self.tracked = [self.root / p for p in tracked]
        self.staged = [self.root / p for p in staged]
        self.modified = [self.root / p for p in modified]
        self.untracked = [self.root / p for p in untracked]
        self.ignored = {self.root / p for p in ignored}
        self.failing = set(failing)

    def is_repository(self) -> bool:
        return self._is_repo

    def list_tracked(self) -> list[Path]:
        return self._result("tracked", self.tracked)

    def list_staged(self) -> list[Path]:
        return self._result("staged", self.staged)

    def list_modified(self) -> list[Path]:
        return self._result("modified", self.modified)

    def list_untracked(self) -> list[Path]:
        return self._result("untracked", self.untracked)

    def is_ignored(self, path: Path) -> bool:
        if "ignored" in self.failing:
            raise SelectorError("check-ignore failed")
        return path in self.ignored

    def _result(self, name: str, paths: list[Path]) -> list[Path]:
        if name in self.failing:
            raise SelectorError(f"listing {name} files failed")
        return list(paths)


@pytest.fixture
def root(tmp_path: Path) -> Path:
    project = tmp_path.resolve() / "project"
    project.mkdir()
    return project


@pytest.fixture
def write_files():
    """Create files below a directory from a ``{relative_path: content}`` map."""

    def _write(base: Path, files: dict[str, str | bytes]) -> None:
        for rel, content in files.items():
            path = base / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content)

    return _write


@pytest.fixture
def make_finding():
    def _make(
        finding_id: str = "f1",
        severity: Severity = Severity.MEDIUM,
        file: str = "/repo/app.py",
        line: int = 1,
        type: str = "password",
        confidence: float = 0.6,
        status: FindingStatus = FindingStatus.ACTIVE,
        timestamp: float = 1_700_000_000.0,
    ) -> Finding:
        return Finding(
            id=finding_id,
            file=file,
            line=line,
            column=1,
            type=type,
            severity=severity,
            message="Password literal detected",
            context=PASSWORD_LINE,
            value="hunt***fake",
            raw_value="hunter2fake",
            rule="password_literal",
            confidence=confidence,
            timestamp=timestamp,
            status=status,
        )

    return _make


@pytest.fixture
def password_rule() -> Rule:
    return Rule(
        name="password_literal",
        type="password",
        pattern=PASSWORD_PATTERN,
        severity=Severity.MEDIUM,
        description="Password literal detected",
        confidence=0.7,
    )


@pytest.fixture
def registry(password_rule: Rule) -> PatternRegistry:
    return PatternRegistry([password_rule])


@pytest.fixture
def config() -> ScannerConfig:
    return ScannerConfig(context_lines=1)


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path.resolve() / "findings.json"


@pytest.fixture
def store(store_path: Path) -> FindingsStore:
    return FindingsStore(store_path)


@pytest.fixture
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the user's config file and LEAKWATCH_* variables out of tests."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for name in (
        "LEAKWATCH_DATABASE",
        "LEAKWATCH_SCAN_MODE",
        "LEAKWATCH_MAX_FILE_SIZE",
        "LEAKWATCH_WEB_PORT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_vcs():
    """Factory for FakeVCS instances."""
    return FakeVCS
