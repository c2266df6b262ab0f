"""Diagnostic Updater: runs every registered rule once per tick.

The updater owns nothing but a read-only registry. Each ``update`` call
evaluates all rules against the snapshot it is given and bundles the
reports, in registration order, with the registry's hardware identifier.

Rules may be evaluated on a thread pool (``max_workers > 1``); evaluators
only read the snapshot, so no locking is needed and the bundle order does
not depend on completion order.

Usage:
    registry = build_registry(settings.module_names, settings.hardware_id)
    updater = DiagnosticUpdater(registry, node_name="autoware_state_monitor")
    array = updater.update(snapshot)
    for status in array.statuses:
        print(status.format_full())
"""

import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional

from diagmon.engine import DiagnosticLevel, DiagnosticReport, StateSnapshot
from diagmon.registry import DiagnosticRule, RuleRegistry

logger = logging.getLogger(__name__)


@dataclass
class DiagnosticArray:
    """All reports of one tick.

    Attributes:
        stamp: Wall-clock time of the update [s since epoch]
        hardware_id: Hardware identifier from the registry
        statuses: One report per rule, in registration order
    """

    stamp: float
    hardware_id: str
    statuses: list[DiagnosticReport] = field(default_factory=list)

    def worst_level(self) -> DiagnosticLevel:
        """Most severe level in the bundle (OK when empty)."""
        return max((status.level for status in self.statuses), default=DiagnosticLevel.OK)

    def overall(self) -> DiagnosticReport:
        """Fold every status into one summary report for the bundle.

        Non-OK statuses contribute "{name}: {message}", joined with "; ".
        An all-OK (or empty) bundle summarizes as OK.

        Example:
            "monitor: sensing_topic_status: Warn; monitor: localization_tf_status: Error"
        """
        report = DiagnosticReport(name=self.hardware_id, hardware_id=self.hardware_id)
        report.summary(DiagnosticLevel.OK, DiagnosticLevel.OK.get_summary())
        for status in self.statuses:
            if status.level > DiagnosticLevel.OK:
                report.merge_summary(status.level, f"{status.name}: {status.message}")
        return report

    def format_full(self) -> str:
        """Format the whole bundle as text."""
        overall = self.overall()
        lines = [f"=== Diagnostics: {self.hardware_id} @ {self.stamp:.2f} ==="]
        lines.append(f"Overall: [{overall.level.name}] {overall.message}")
        for status in self.statuses:
            lines.append("")
            lines.append(status.format_full())
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Convert to a structured dictionary."""
        overall = self.overall()
        return {
            "stamp": self.stamp,
            "hardware_id": self.hardware_id,
            "level": int(overall.level),
            "message": overall.message,
            "status": [status.to_dict() for status in self.statuses],
        }


class DiagnosticUpdater:
    """Evaluates a RuleRegistry against snapshots, once per tick.

    Args:
        registry: Rules to evaluate, fixed for the updater's lifetime
        node_name: Prefix for status names ("{node_name}: {rule_name}")
        max_workers: Threads used within one tick (1 = evaluate inline)
        clock: Time source for the bundle stamp
    """

    def __init__(
        self,
        registry: RuleRegistry,
        node_name: str = "",
        max_workers: int = 1,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self.registry = registry
        self.node_name = node_name
        self.max_workers = max_workers
        self._clock = clock

    def status_name(self, rule_name: str) -> str:
        """Full status name for a rule."""
        if not self.node_name:
            return rule_name
        return f"{self.node_name}: {rule_name}"

    def _run_rule(self, rule: DiagnosticRule, snapshot: StateSnapshot) -> DiagnosticReport:
        try:
            report = rule.evaluate(snapshot)
        except Exception as e:  # noqa: BLE001 - one broken rule must not drop the bundle
            logger.error("Diagnostic rule %s failed: %s", rule.name, e, exc_info=True)
            report = DiagnosticReport()
            report.summary(DiagnosticLevel.ERROR, f"Rule raised exception: {e}")

        report.name = self.status_name(rule.name)
        report.hardware_id = self.registry.hardware_id
        return report

    def update(self, snapshot: StateSnapshot) -> DiagnosticArray:
        """Evaluate every rule against one snapshot.

        Args:
            snapshot: Statistics of the current tick (read only)

        Returns:
            DiagnosticArray with one report per rule, in registration order
        """
        rules = list(self.registry)
        if self.max_workers > 1 and len(rules) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                statuses = list(executor.map(lambda rule: self._run_rule(rule, snapshot), rules))
        else:
            statuses = [self._run_rule(rule, snapshot) for rule in rules]

        array = DiagnosticArray(
            stamp=self._clock(),
            hardware_id=self.registry.hardware_id,
            statuses=statuses,
        )
        logger.debug(
            "Updated %d diagnostics (worst: %s)", len(statuses), array.worst_level().name
        )
        return array

    def run(
        self,
        get_snapshot: Callable[[], StateSnapshot],
        publish: Callable[[DiagnosticArray], None],
        stop_event: threading.Event,
        period: float,
        max_ticks: Optional[int] = None,
    ) -> int:
        """Periodically update and publish until ``stop_event`` is set.

        Args:
            get_snapshot: Returns the snapshot of the current tick
            publish: Receives each DiagnosticArray
            stop_event: Set by the caller to end the loop
            period: Seconds between two ticks
            max_ticks: Optional tick limit

        Returns:
            Number of ticks run
        """
        if period <= 0:
            raise ValueError(f"period must be > 0, got {period}")

        ticks = 0
        logger.info("Diagnostic updater started (period=%.3fs, rules=%d)", period, len(self.registry))
        while not stop_event.is_set():
            publish(self.update(get_snapshot()))
            ticks += 1
            if max_ticks is not None and ticks >= max_ticks:
                break
            stop_event.wait(period)

        logger.info("Diagnostic updater stopped after %d ticks", ticks)
        return ticks
