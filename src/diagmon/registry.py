"""Rule Registry: binds rule names to evaluators, once, at startup.

For every configured module ``M`` one topic rule is registered:

    "{M}_topic_status"  → check_topic_status(snapshot.topic_stats, M)

plus one fixed transform rule:

    "localization_tf_status"  → check_tf_status(snapshot.tf_stats, "localization")

The registry is immutable after ``build_registry`` returns. Rules keep
registration order: topic rules in configured order, then the tf rule.

Usage:
    registry = build_registry(["sensing", "localization"])
    for rule in registry:
        report = rule.evaluate(snapshot)
"""

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from operator import attrgetter
from types import MappingProxyType
from typing import Any

from diagmon.config import DEFAULT_HARDWARE_ID
from diagmon.engine import (
    DiagnosticReport,
    StateSnapshot,
    check_tf_status,
    check_topic_status,
)

logger = logging.getLogger(__name__)

TOPIC_RULE_FORMAT = "{}_topic_status"
TF_RULE_NAME = "localization_tf_status"
TF_RULE_MODULE = "localization"


@dataclass(frozen=True)
class DiagnosticRule:
    """One named rule: an evaluator bound to a fixed module filter.

    Attributes:
        name: Rule name, e.g. "sensing_topic_status"
        target: Module name passed to the evaluator as filter
        check: Evaluator, ``(stats, module_name) -> DiagnosticReport``
        select: Picks the stats the evaluator reads out of a snapshot
    """

    name: str
    target: str
    check: Callable[[Any, str], DiagnosticReport]
    select: Callable[[StateSnapshot], Any]

    def evaluate(self, snapshot: StateSnapshot) -> DiagnosticReport:
        """Run the bound evaluator against one snapshot."""
        report = self.check(self.select(snapshot), self.target)
        report.name = self.name
        return report


@dataclass(frozen=True)
class RuleRegistry:
    """Read-only rule name → rule mapping plus the hardware identifier."""

    hardware_id: str
    rules: Mapping[str, DiagnosticRule]

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", MappingProxyType(dict(self.rules)))

    def __iter__(self) -> Iterator[DiagnosticRule]:
        return iter(self.rules.values())

    def __len__(self) -> int:
        return len(self.rules)

    def __contains__(self, name: object) -> bool:
        return name in self.rules

    def names(self) -> list[str]:
        """Rule names in registration order."""
        return list(self.rules)

    def get(self, name: str) -> DiagnosticRule:
        """Look up a rule by name.

        Raises:
            KeyError: If no rule with that name is registered
        """
        return self.rules[name]


def topic_rule_name(module_name: str) -> str:
    """Rule name for a module's topic status rule."""
    return TOPIC_RULE_FORMAT.format(module_name)


def build_registry(
    module_names: Iterable[str],
    hardware_id: str = DEFAULT_HARDWARE_ID,
) -> RuleRegistry:
    """Build the rule registry from the configured module names.

    Args:
        module_names: Ordered module names, each gets a topic status rule
        hardware_id: Identifier the host attaches to the report bundle

    Returns:
        Immutable RuleRegistry

    Raises:
        ValueError: If a module name is empty or hardware_id is empty
    """
    if not hardware_id:
        raise ValueError("hardware_id must not be empty")

    rules: dict[str, DiagnosticRule] = {}

    # Topic
    for module_name in module_names:
        if not module_name or not module_name.strip():
            raise ValueError("module names must be non-empty strings")

        name = topic_rule_name(module_name)
        if name in rules:
            logger.warning("Module %s configured twice, keeping first registration", module_name)
            continue

        rules[name] = DiagnosticRule(
            name=name,
            target=module_name,
            check=check_topic_status,
            select=attrgetter("topic_stats"),
        )

    # TF
    rules[TF_RULE_NAME] = DiagnosticRule(
        name=TF_RULE_NAME,
        target=TF_RULE_MODULE,
        check=check_tf_status,
        select=attrgetter("tf_stats"),
    )

    logger.info("Registered %d diagnostic rules: %s", len(rules), list(rules))
    return RuleRegistry(hardware_id=hardware_id, rules=rules)
