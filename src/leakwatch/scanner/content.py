"""Content scanner — matches compiled rules against file contents."""

from __future__ import annotations

import hashlib
import logging
import re
import time
from collections.abc import Collection
from pathlib import Path

from leakwatch.config import ScannerConfig
from leakwatch.errors import FileReadError
from leakwatch.rules.models import Severity
from leakwatch.rules.registry import CompiledRuleSet, PatternRegistry
from leakwatch.scanner.models import Finding, FindingStatus

logger = logging.getLogger(__name__)

# Leading bytes inspected for NUL when sniffing binary content (same as git)
_BINARY_SNIFF_BYTES = 8192

# Characters left visible at each end of a long masked secret
_MASK_KEEP = 4


def scan_content(
    path: str,
    content: bytes | str,
    rules: CompiledRuleSet,
    *,
    context_lines: int = 3,
    max_file_size: int | None = None,
    enabled_severities: Collection[Severity] | None = None,
) -> list[Finding]:
    """Scan one file's content and return findings ordered by position.

    Oversized or binary content yields no findings. Lines are split on LF
    after normalizing CRLF; a lone CR stays part of its line.
    """
    if isinstance(content, bytes):
        if max_file_size is not None and len(content) > max_file_size:
            return []
        if is_binary(content):
            return []
        text = content.decode("utf-8", errors="replace")
    else:
        text = content
        if max_file_size is not None and len(text.encode("utf-8")) > max_file_size:
            return []

    lines = split_lines(text)
    now = time.time()
    findings: list[Finding] = []

    for compiled in rules:
        rule = compiled.rule
        if enabled_severities is not None and rule.severity not in enabled_severities:
            continue

        for index, line in enumerate(lines):
            for match in compiled.regex.finditer(line):
                secret, start = _secret_span(match)
                line_no = index + 1
                findings.append(
                    Finding(
                        id=finding_id(path, line_no, rule.name),
                        file=path,
                        line=line_no,
                        column=start + 1,
                        type=rule.type,
                        severity=rule.severity,
                        message=rule.description,
                        context=_context(lines, index, context_lines),
                        value=mask_secret(secret),
                        raw_value=secret,
                        timestamp=now,
                        status=FindingStatus.ACTIVE,
                        rule=rule.name,
                        confidence=rule.confidence,
                    )
                )

    findings.sort(key=lambda f: (f.line, f.column, f.rule))
    return findings


class ContentScanner:
    """Binds the registry's current rule set and the config to ``scan_content``."""

    def __init__(self, registry: PatternRegistry, config: ScannerConfig) -> None:
        self._registry = registry
        self._config = config

    def scan(self, path: str, content: bytes | str) -> list[Finding]:
        return scan_content(
            path,
            content,
            self._registry.compiled,
            context_lines=self._config.context_lines,
            max_file_size=self._config.max_file_size,
            enabled_severities=self._config.enabled_severities,
        )

    def scan_path(self, path: str | Path) -> list[Finding] | None:
        """Read and scan a file. Returns None when the file is skipped.

        Raises FileReadError if the file cannot be read.
        """
        path = Path(path)
        try:
            size = path.stat().st_size
            if size > self._config.max_file_size:
                logger.debug("Skipping %s: %d bytes exceeds limit", path, size)
                return None
            content = path.read_bytes()
        except OSError as e:
            raise FileReadError(str(path), e.strerror or str(e)) from e

        if is_binary(content):
            logger.debug("Skipping %s: binary content", path)
            return None
        return self.scan(str(path), content)


def is_binary(content: bytes) -> bool:
    return b"\0" in content[:_BINARY_SNIFF_BYTES]


def split_lines(text: str) -> list[str]:
    lines = text.replace("\r\n", "\n").split("\n")
    if len(lines) > 1 and lines[-1] == "":
        lines.pop()
    return lines


def mask_secret(secret: str) -> str:
    """Redact a secret, keeping the first and last four characters when long."""
    if len(secret) <= 2 * _MASK_KEEP:
        return "*" * len(secret)
    hidden = len(secret) - 2 * _MASK_KEEP
    return secret[:_MASK_KEEP] + "*" * hidden + secret[-_MASK_KEEP:]


def finding_id(path: str, line: int, rule_name: str) -> str:
    """Stable 16-hex-char ID, so rescanning unchanged content is idempotent."""
    data = f"{path}:{line}:{rule_name}".encode("utf-8")
    return hashlib.md5(data, usedforsecurity=False).hexdigest()[:16]


def _secret_span(match: re.Match[str]) -> tuple[str, int]:
    """First non-empty capturing group, else the whole match."""
    for group in range(1, (match.re.groups or 0) + 1):
        value = match.group(group)
        if value:
            return value, match.start(group)
    return match.group(0), match.start()


def _context(lines: list[str], index: int, radius: int) -> str:
    start = max(0, index - radius)
    end = min(len(lines), index + radius + 1)
    return "\n".join(lines[start:end])
