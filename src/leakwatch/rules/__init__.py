"""Detection rules — models, the default catalog, and the compiled registry."""

from leakwatch.rules.defaults import default_rules
from leakwatch.rules.loader import load_rules, load_rules_from_string
from leakwatch.rules.models import Rule, Severity
from leakwatch.rules.registry import CompiledRuleSet, PatternRegistry, compile_rules

__all__ = [
    "CompiledRuleSet",
    "PatternRegistry",
    "Rule",
    "Severity",
    "compile_rules",
    "default_rules",
    "load_rules",
    "load_rules_from_string",
]
