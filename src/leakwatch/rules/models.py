"""Rule data models — immutable definitions shared by registry and scanner."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Severity(enum.Enum):
    """Finding severity level, most severe first."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.CRITICAL: 0,
    Severity.HIGH: 1,
    Severity.MEDIUM: 2,
    Severity.LOW: 3,
}


@dataclass(frozen=True)
class Rule:
    """A named detection pattern with severity, confidence, and type."""

    name: str
    type: str
    pattern: str
    severity: Severity
    description: str = ""
    confidence: float = 0.5
    enabled: bool = True

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Rule name must not be empty")
        if isinstance(self.severity, str):
            # Accept plain strings from YAML/JSON callers
            object.__setattr__(self, "severity", Severity(self.severity.lower()))
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(
                f"Rule '{self.name}' confidence must be within [0, 1], "
                f"got {self.confidence}"
            )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "type": self.type,
            "pattern": self.pattern,
            "severity": self.severity.value,
            "description": self.description,
            "confidence": self.confidence,
            "enabled": self.enabled,
        }
