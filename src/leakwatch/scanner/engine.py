"""Scan engine — orchestrates file selection, scanning, and persistence."""

from __future__ import annotations

import dataclasses
import fnmatch
import logging
import time
from collections.abc import Callable
from pathlib import Path

from leakwatch.config import ScannerConfig
from leakwatch.errors import FileReadError
from leakwatch.repo.base import ScanMode, VersionControl
from leakwatch.repo.git import GitCli
from leakwatch.repo.selector import FileSelector
from leakwatch.rules.defaults import default_rules
from leakwatch.rules.models import Rule
from leakwatch.rules.registry import PatternRegistry
from leakwatch.scanner.content import ContentScanner
from leakwatch.scanner.models import Finding, ScanOptions, ScanResult
from leakwatch.storage.store import FindingsStore

logger = logging.getLogger(__name__)


def build_registry(config: ScannerConfig) -> PatternRegistry:
    """Default rules overlaid with config rules (same name replaces)."""
    rules: dict[str, Rule] = {r.name: r for r in default_rules()}
    for rule in config.rules:
        rules[rule.name] = rule
    for name in config.disabled_rules:
        if name in rules:
            rules[name] = dataclasses.replace(rules[name], enabled=False)
        else:
            logger.warning("Cannot disable unknown rule '%s'", name)
    return PatternRegistry(rules.values())


class ScanEngine:
    """Runs scans one file at a time and persists every finding.

    Only per-file read failures are swallowed during a directory scan;
    selector and store errors always propagate to the caller.
    """

    def __init__(
        self,
        store: FindingsStore,
        config: ScannerConfig | None = None,
        registry: PatternRegistry | None = None,
        vcs_factory: Callable[[Path], VersionControl] = GitCli,
    ) -> None:
        self._store = store
        self._config = config or ScannerConfig()
        self._registry = registry or build_registry(self._config)
        self._vcs_factory = vcs_factory
        self._scanner = ContentScanner(self._registry, self._config)

    @property
    def config(self) -> ScannerConfig:
        return self._config

    @property
    def registry(self) -> PatternRegistry:
        return self._registry

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._registry.rules

    def add_rule(self, rule: Rule) -> None:
        self._registry.add_rule(rule)

    def remove_rule(self, name: str) -> bool:
        return self._registry.remove_rule(name)

    def scan(self, options: ScanOptions) -> ScanResult:
        """Scan every target in ``options.paths`` (default: the cwd)."""
        start = time.time()
        targets = options.paths or ["."]
        combined = ScanResult(timestamp=start, scan_type="multi")

        for target in targets:
            path = Path(target).resolve()
            if path.is_dir():
                result = self.scan_directory(path, options)
            else:
                result = self.scan_file(path)
            combined.merge(result)
            if len(targets) == 1:
                combined.scan_type = result.scan_type

        combined.duration = time.time() - start
        return combined

    def scan_file(self, path: str | Path) -> ScanResult:
        """Scan one file and persist its findings.

        Only the file name is tested against exclusions: the directories
        above an explicit target are not part of the scan. Excluded,
        oversized and binary files produce an empty result with
        ``files_scanned == 0``. Raises FileReadError for unreadable files.
        """
        start = time.time()
        path = Path(path).resolve()
        result = ScanResult(timestamp=start, scan_type="file")

        if self._is_excluded(path, path.parent):
            logger.debug("Skipping excluded file %s", path)
            result.files_skipped = 1
        else:
            findings = self._scanner.scan_path(path)
            if findings is None:
                result.files_skipped = 1
            else:
                result.files_scanned = 1
                result.findings = findings
                self._store.save_many(findings)

        result.duration = time.time() - start
        return result

    def scan_directory(
        self,
        root: str | Path,
        options: ScanOptions | None = None,
    ) -> ScanResult:
        """Scan the files under ``root`` selected by the effective scan mode."""
        start = time.time()
        options = options or ScanOptions()
        root = Path(root).resolve()
        mode = _resolve_mode(options.scan_mode or self._config.default_scan_mode)

        selector = FileSelector(
            root,
            self._vcs_factory(root),
            skip_dir=lambda d: self._config.is_excluded_dir(_relative(d, root)),
        )
        use_vcs = (
            mode is not ScanMode.COMPREHENSIVE
            and options.respect_gitignore
            and self._config.respect_gitignore
            and selector.is_repository
        )
        candidates = selector.select(mode if use_vcs else ScanMode.COMPREHENSIVE)
        logger.info(
            "Scanning %d candidate file(s) under %s (mode=%s, vcs=%s)",
            len(candidates),
            root,
            mode.value,
            use_vcs,
        )

        result = ScanResult(timestamp=start, scan_type=f"directory-{mode.value}")
        findings: list[Finding] = []

        for path in candidates:
            # The selector's list does not honour scanner-level excludes
            if self._is_excluded(path, root) or not _option_allows(path, root, options):
                result.files_skipped += 1
                continue
            try:
                file_findings = self._scanner.scan_path(path)
            except FileReadError as e:
                logger.warning("Skipping unreadable file: %s", e)
                result.files_skipped += 1
                continue
            if file_findings is None:
                result.files_skipped += 1
                continue
            result.files_scanned += 1
            findings.extend(file_findings)

        self._store.save_many(findings)
        result.findings = findings
        if options.include_history:
            result.merge(self.scan_history(root, options.max_depth))
        result.duration = time.time() - start
        return result

    def scan_history(self, root: str | Path, max_depth: int | None = None) -> ScanResult:
        """Commit-history scanning is not implemented; returns an empty result."""
        depth = max_depth if max_depth is not None else self._config.max_history_depth
        logger.warning(
            "History scanning is not implemented; skipping %s (max depth %d)",
            root,
            depth,
        )
        return ScanResult(scan_type="history")

    def _is_excluded(self, path: Path, root: Path | None = None) -> bool:
        store_path = self._store.path
        if store_path is not None and path == store_path.resolve():
            return True
        return self._config.is_excluded(path if root is None else _relative(path, root))


def _resolve_mode(mode: ScanMode | str) -> ScanMode:
    return mode if isinstance(mode, ScanMode) else ScanMode(mode)


def _relative(path: Path, root: Path) -> Path:
    """Path relative to ``root`` when below it."""
    try:
        return path.relative_to(root)
    except ValueError:
        return path


def _option_allows(path: Path, root: Path, options: ScanOptions) -> bool:
    rel = _relative(path, root).as_posix()
    name = path.name
    if options.file_patterns and not any(
        fnmatch.fnmatch(name, p) or fnmatch.fnmatch(rel, p)
        for p in options.file_patterns
    ):
        return False
    for pattern in options.exclude_patterns:
        if fnmatch.fnmatch(name, pattern) or fnmatch.fnmatch(rel, pattern):
            return False
        if pattern in Path(rel).parts:
            return False
    return True
