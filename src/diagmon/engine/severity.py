"""Severity levels and the rule for combining them.

Levels are totally ordered: OK < WARN < ERROR. Every evaluator folds the
entries it scans into one final level by keeping a running maximum, so a
later, milder observation can never lower an earlier, more severe one.
"""

from enum import IntEnum


class DiagnosticLevel(IntEnum):
    """Diagnostic severity, valued like the diagnostic status message bytes."""

    OK = 0
    WARN = 1
    ERROR = 2

    def get_summary(self) -> str:
        """Get the summary text reported for this level."""
        summaries = {
            DiagnosticLevel.OK: "OK",
            DiagnosticLevel.WARN: "Warn",
            DiagnosticLevel.ERROR: "Error",
        }
        return summaries[self]


def combine_levels(current: DiagnosticLevel, observed: DiagnosticLevel) -> DiagnosticLevel:
    """Return the more severe of two levels."""
    return max(current, observed)


class LevelTracker:
    """Running maximum over the levels seen during one scan.

    Usage:
        tracker = LevelTracker()
        tracker.escalate(DiagnosticLevel.ERROR)
        tracker.escalate(DiagnosticLevel.WARN)
        tracker.level  # DiagnosticLevel.ERROR
    """

    def __init__(self, initial: DiagnosticLevel = DiagnosticLevel.OK) -> None:
        self._level = DiagnosticLevel(initial)

    @property
    def level(self) -> DiagnosticLevel:
        """Most severe level seen so far."""
        return self._level

    def escalate(self, observed: DiagnosticLevel) -> DiagnosticLevel:
        """Fold one observation into the running maximum and return it."""
        self._level = combine_levels(self._level, DiagnosticLevel(observed))
        return self._level
