"""Exception hierarchy shared by all leakwatch components."""

from __future__ import annotations


class LeakwatchError(Exception):
    """Base class for every error raised by leakwatch."""


class RuleError(LeakwatchError):
    """A detection rule is invalid or conflicts with the registry."""


class RuleCompileError(RuleError):
    """An enabled rule's pattern failed to compile."""

    def __init__(self, rule_name: str, reason: str) -> None:
        super().__init__(f"Rule '{rule_name}' failed to compile: {reason}")
        self.rule_name = rule_name
        self.reason = reason


class FileReadError(LeakwatchError):
    """A file selected for scanning could not be read."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot read {path}: {reason}")
        self.path = path


class StoreError(LeakwatchError):
    """The findings store could not load or persist its backing file."""


class FindingNotFoundError(LeakwatchError):
    """No finding exists with the requested ID."""

    def __init__(self, finding_id: str) -> None:
        super().__init__(f"Finding with ID {finding_id} not found")
        self.finding_id = finding_id


class SelectorError(LeakwatchError):
    """A version-control primitive failed while selecting files."""
