"""Findings store — in-memory map persisted as one JSON document.

Every mutation rewrites the whole file. That keeps the on-disk format
human-readable and trivially correct at local-project scale; callers only
see this class, so a key-value backend can replace it later.

Concurrent writers in separate processes are not coordinated: the last
writer wins.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import os
import tempfile
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from leakwatch.errors import FindingNotFoundError, StoreError
from leakwatch.scanner.models import Finding, FindingStatus, format_timestamp

logger = logging.getLogger(__name__)


@dataclass
class Stats:
    """Statistics derived from the store's current contents."""

    total_findings: int = 0
    findings_by_severity: dict[str, int] = field(default_factory=dict)
    findings_by_type: dict[str, int] = field(default_factory=dict)
    findings_by_status: dict[str, int] = field(default_factory=dict)
    files_with_issues: int = 0
    last_scan_time: float | None = None

    def to_dict(self) -> dict:
        return {
            "total_findings": self.total_findings,
            "findings_by_severity": dict(self.findings_by_severity),
            "findings_by_type": dict(self.findings_by_type),
            "findings_by_status": dict(self.findings_by_status),
            "files_with_issues": self.files_with_issues,
            "last_scan_time": (
                format_timestamp(self.last_scan_time)
                if self.last_scan_time is not None
                else None
            ),
        }


class FindingsStore:
    """Durable, filterable collection of findings keyed by ID.

    A single lock covers both the map and the file rewrite, so no reader
    ever sees a half-written file. ``path=None`` keeps everything in memory.
    """

    def __init__(self, path: str | Path | None = ".security-findings.json") -> None:
        self._path = Path(path) if path is not None else None
        self._lock = threading.Lock()
        self._findings: dict[str, Finding] = {}
        if self._path is not None:
            self._load()

    @property
    def path(self) -> Path | None:
        return self._path

    def __len__(self) -> int:
        with self._lock:
            return len(self._findings)

    def save(self, finding: Finding) -> None:
        self.save_many([finding])

    def save_many(self, findings: Iterable[Finding]) -> int:
        """Insert or refresh findings with a single rewrite.

        A finding that already exists keeps its stored status; status only
        changes through ``update_status``. The passed findings are updated to
        show that status, and the store keeps its own copies.
        """
        count = 0
        with self._lock:
            snapshot = dict(self._findings)
            for finding in findings:
                existing = self._findings.get(finding.id)
                if existing is not None:
                    finding.status = existing.status
                self._findings[finding.id] = dataclasses.replace(finding)
                count += 1
            if count:
                try:
                    self._persist()
                except StoreError:
                    self._findings = snapshot
                    raise
        return count

    def query(self, filters: Mapping[str, Any] | None = None) -> list[Finding]:
        """Return findings matching every recognized filter.

        Recognized keys: ``severity``, ``type``, ``status``, ``file`` and
        ``min_confidence``. Anything else is ignored.
        """
        filters = filters or {}
        with self._lock:
            matched = [
                dataclasses.replace(f)
                for f in self._findings.values()
                if _matches(f, filters)
            ]
        return sorted(matched, key=_sort_key)

    def get(self, finding_id: str) -> Finding:
        with self._lock:
            finding = self._findings.get(finding_id)
        if finding is None:
            raise FindingNotFoundError(finding_id)
        return dataclasses.replace(finding)

    def update_status(self, finding_id: str, status: FindingStatus | str) -> Finding:
        status = FindingStatus(status) if isinstance(status, str) else status
        with self._lock:
            finding = self._findings.get(finding_id)
            if finding is None:
                raise FindingNotFoundError(finding_id)
            previous = finding.status
            finding.status = status
            try:
                self._persist()
            except StoreError:
                finding.status = previous
                raise
            updated = dataclasses.replace(finding)
        logger.info("Finding %s marked %s", finding_id, status.value)
        return updated

    def delete(self, finding_id: str) -> None:
        with self._lock:
            finding = self._findings.pop(finding_id, None)
            if finding is None:
                raise FindingNotFoundError(finding_id)
            try:
                self._persist()
            except StoreError:
                self._findings[finding_id] = finding
                raise
        logger.info("Finding %s deleted", finding_id)

    def stats(self) -> Stats:
        """Recompute statistics from the current findings."""
        stats = Stats()
        files: set[str] = set()
        with self._lock:
            for f in self._findings.values():
                stats.total_findings += 1
                _bump(stats.findings_by_severity, f.severity.value)
                _bump(stats.findings_by_type, f.type)
                _bump(stats.findings_by_status, f.status.value)
                files.add(f.file)
                if stats.last_scan_time is None or f.timestamp > stats.last_scan_time:
                    stats.last_scan_time = f.timestamp
        stats.files_with_issues = len(files)
        return stats

    def close(self) -> None:
        """Release the store.

        Every successful mutation is already on disk and a failed one is
        rolled back, so there is never anything left to write.
        """
        logger.debug("Closing findings store %s", self._path)

    def __enter__(self) -> FindingsStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _load(self) -> None:
        assert self._path is not None
        if not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8") or "[]")
        except (OSError, ValueError) as e:
            raise StoreError(f"Cannot load findings from {self._path}: {e}") from e
        if data is None:
            data = []
        if not isinstance(data, list):
            raise StoreError(f"{self._path} must contain a JSON array of findings")

        try:
            for item in data:
                finding = Finding.from_dict(item)
                self._findings[finding.id] = finding
        except (KeyError, TypeError, ValueError) as e:
            raise StoreError(f"Malformed finding in {self._path}: {e}") from e
        logger.info("Loaded %d finding(s) from %s", len(self._findings), self._path)

    def _persist(self) -> None:
        """Rewrite the backing file. Caller must hold the lock."""
        if self._path is None:
            return
        ordered = sorted(self._findings.values(), key=_sort_key)
        payload = json.dumps([f.to_dict() for f in ordered], indent=2)

        directory = self._path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=directory
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                    fh.write("\n")
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StoreError(f"Cannot write findings to {self._path}: {e}") from e


def _matches(finding: Finding, filters: Mapping[str, Any]) -> bool:
    for key, value in filters.items():
        if key == "severity":
            if finding.severity.value != _value(value):
                return False
        elif key == "type":
            if finding.type != value:
                return False
        elif key == "status":
            if finding.status.value != _value(value):
                return False
        elif key == "file":
            if finding.file != str(value):
                return False
        elif key == "min_confidence":
            if finding.confidence < float(value):
                return False
    return True


def _value(value: Any) -> str:
    """Filter values may be enums or their string values."""
    return str(getattr(value, "value", value)).lower()


def _bump(counter: dict[str, int], key: str) -> None:
    counter[key] = counter.get(key, 0) + 1


def _sort_key(finding: Finding) -> tuple:
    return (finding.file, finding.line, finding.column, finding.rule)
