"""Load custom detection rules from YAML files."""

from __future__ import annotations

from pathlib import Path

import yaml

from leakwatch.errors import RuleError
from leakwatch.rules.models import Rule, Severity


def load_rules(path: str | Path) -> list[Rule]:
    """Load rules from a YAML file path."""
    text = Path(path).read_text(encoding="utf-8")
    return load_rules_from_string(text)


def load_rules_from_string(text: str) -> list[Rule]:
    """Parse YAML text holding either a bare list or a ``rules:`` mapping."""
    data = yaml.safe_load(text)
    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("rules", [])
    if not isinstance(data, list):
        raise RuleError("Rules YAML must be a list or a mapping with 'rules'")
    return parse_rules(data)


def parse_rules(rules_data: list) -> list[Rule]:
    rules: list[Rule] = []
    for r in rules_data:
        if not isinstance(r, dict):
            raise RuleError(f"Rule definition must be a mapping, got {r!r}")
        try:
            rules.append(
                Rule(
                    name=r["name"],
                    type=r.get("type", r["name"]),
                    pattern=r["pattern"],
                    severity=Severity(str(r.get("severity", "medium")).lower()),
                    description=r.get("description", ""),
                    confidence=float(r.get("confidence", 0.5)),
                    enabled=bool(r.get("enabled", True)),
                )
            )
        except KeyError as e:
            raise RuleError(f"Rule definition missing field {e}") from e
        except ValueError as e:
            raise RuleError(f"Invalid rule definition: {e}") from e
    return rules
