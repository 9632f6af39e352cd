"""Scanner data models — findings, scan options, and scan results."""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone

from leakwatch.repo.base import ScanMode
from leakwatch.rules.models import Severity


class FindingStatus(enum.Enum):
    """Resolution state of a finding. Only an operator moves it off ACTIVE."""

    ACTIVE = "active"
    RESOLVED = "resolved"
    IGNORED = "ignored"


@dataclass
class Finding:
    """One detected instance of a potential secret."""

    id: str
    file: str
    line: int
    column: int
    type: str
    severity: Severity
    message: str
    context: str
    value: str
    rule: str
    confidence: float
    raw_value: str = field(default="", repr=False)
    timestamp: float = field(default_factory=time.time)
    status: FindingStatus = FindingStatus.ACTIVE

    def to_dict(self) -> dict:
        """Serialize for storage or output. The raw secret is never included."""
        return {
            "id": self.id,
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "type": self.type,
            "severity": self.severity.value,
            "message": self.message,
            "context": self.context,
            "value": self.value,
            "timestamp": format_timestamp(self.timestamp),
            "status": self.status.value,
            "rule": self.rule,
            "confidence": self.confidence,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Finding:
        return cls(
            id=data["id"],
            file=data["file"],
            line=int(data["line"]),
            column=int(data.get("column", 0)),
            type=data.get("type", ""),
            severity=Severity(data["severity"]),
            message=data.get("message", ""),
            context=data.get("context", ""),
            value=data.get("value", ""),
            rule=data.get("rule", ""),
            confidence=float(data.get("confidence", 0.0)),
            timestamp=parse_timestamp(data.get("timestamp")),
            status=FindingStatus(data.get("status", "active")),
        )


@dataclass
class ScanOptions:
    """Caller-supplied knobs for a single scan invocation."""

    paths: list[str] = field(default_factory=list)
    scan_mode: ScanMode | None = None
    include_history: bool = False
    max_depth: int = 100
    file_patterns: list[str] = field(default_factory=list)
    exclude_patterns: list[str] = field(default_factory=list)
    respect_gitignore: bool = True


@dataclass
class ScanResult:
    """Aggregate result of one scan invocation."""

    findings: list[Finding] = field(default_factory=list)
    files_scanned: int = 0
    files_skipped: int = 0
    duration: float = 0.0
    timestamp: float = field(default_factory=time.time)
    scan_type: str = "file"

    def merge(self, other: ScanResult) -> None:
        self.findings.extend(other.findings)
        self.files_scanned += other.files_scanned
        self.files_skipped += other.files_skipped

    def to_dict(self) -> dict:
        return {
            "findings": [f.to_dict() for f in self.findings],
            "files_scanned": self.files_scanned,
            "files_skipped": self.files_skipped,
            "duration": self.duration,
            "timestamp": format_timestamp(self.timestamp),
            "scan_type": self.scan_type,
        }


def format_timestamp(ts: float) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()


def parse_timestamp(value: str | float | None) -> float:
    """Accept ISO-8601 strings or epoch seconds; missing means now."""
    if value is None or value == "":
        return time.time()
    if isinstance(value, (int, float)):
        return float(value)
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()
