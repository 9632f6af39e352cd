"""Pattern registry — compiles rules and swaps the compiled set atomically."""

from __future__ import annotations

import itertools
import logging
import re
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field

from leakwatch.errors import RuleCompileError, RuleError
from leakwatch.rules.models import Rule

logger = logging.getLogger(__name__)

_versions = itertools.count(1)


@dataclass(frozen=True)
class CompiledRule:
    """A rule paired with its compiled matcher."""

    rule: Rule
    regex: re.Pattern[str]


@dataclass(frozen=True)
class CompiledRuleSet:
    """An immutable snapshot of every enabled rule, ready for matching."""

    rules: tuple[CompiledRule, ...] = ()
    version: int = 0
    _by_name: dict[str, Rule] = field(default_factory=dict, repr=False, compare=False)

    def __iter__(self):
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def get(self, name: str) -> Rule | None:
        return self._by_name.get(name)


def compile_rules(rules: Iterable[Rule]) -> CompiledRuleSet:
    """Compile every enabled rule, or raise without producing a partial set."""
    compiled: list[CompiledRule] = []
    for rule in rules:
        if not rule.enabled:
            continue
        try:
            regex = re.compile(rule.pattern)
        except re.error as e:
            raise RuleCompileError(rule.name, str(e)) from e
        compiled.append(CompiledRule(rule=rule, regex=regex))

    return CompiledRuleSet(
        rules=tuple(compiled),
        version=next(_versions),
        _by_name={cr.rule.name: cr.rule for cr in compiled},
    )


class PatternRegistry:
    """Owns the rule catalog and the compiled set derived from it.

    Mutations build a brand new compiled set first and only then replace
    the current ``(rules, compiled)`` pair in one assignment, so a pattern
    that fails to compile leaves the registry exactly as it was. Readers
    grab ``compiled`` once and keep a consistent snapshot for a whole scan.
    """

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self._lock = threading.Lock()
        rules = tuple(rules)
        _check_unique(rules)
        self._state: tuple[tuple[Rule, ...], CompiledRuleSet] = (
            rules,
            compile_rules(rules),
        )

    @property
    def rules(self) -> tuple[Rule, ...]:
        """All rules, including disabled ones."""
        return self._state[0]

    @property
    def compiled(self) -> CompiledRuleSet:
        return self._state[1]

    def get(self, name: str) -> Rule | None:
        """Look up a rule by name, enabled or not."""
        for rule in self.rules:
            if rule.name == name:
                return rule
        return None

    def add_rule(self, rule: Rule) -> None:
        with self._lock:
            if self.get(rule.name) is not None:
                raise RuleError(f"Rule '{rule.name}' already exists")
            self._swap(self.rules + (rule,))
        logger.debug("Added rule %s", rule.name)

    def remove_rule(self, name: str) -> bool:
        """Remove a rule by name. Returns False if no such rule existed."""
        with self._lock:
            remaining = tuple(r for r in self.rules if r.name != name)
            if len(remaining) == len(self.rules):
                return False
            self._swap(remaining)
        logger.debug("Removed rule %s", name)
        return True

    def replace_rules(self, rules: Iterable[Rule]) -> None:
        """Replace the entire catalog."""
        rules = tuple(rules)
        _check_unique(rules)
        with self._lock:
            self._swap(rules)

    def _swap(self, rules: tuple[Rule, ...]) -> None:
        compiled = compile_rules(rules)  # raises before anything changes
        self._state = (rules, compiled)
        logger.debug(
            "Rule set v%d active (%d enabled of %d)",
            compiled.version,
            len(compiled),
            len(rules),
        )


def _check_unique(rules: tuple[Rule, ...]) -> None:
    seen: set[str] = set()
    for rule in rules:
        if rule.name in seen:
            raise RuleError(f"Duplicate rule name '{rule.name}'")
        seen.add(rule.name)
