"""Diagnostic report produced by one rule on one tick.

A report is a severity level, an ordered list of (key, value) string facts
and a summary message. Fact order is the order in which the evaluator
encountered the entries; keys are not deduplicated.

Example (text form):
    [ERROR] perception_topic_status: Error
      lidar_points status: Timeout
      lidar_points timeout: 1.00 [s]
      lidar_points checked_time: 15.00 [s]
      lidar_points last_received_time: 12.34 [s]
"""

from dataclasses import dataclass, field

from diagmon.engine.severity import DiagnosticLevel


@dataclass
class DiagnosticReport:
    """Level, ordered facts and summary for one rule.

    Attributes:
        level: Final severity of the rule
        message: Summary text
        values: Ordered (key, value) facts
        name: Status name (set by the host when bundling)
        hardware_id: Hardware identifier (set by the host when bundling)
    """

    level: DiagnosticLevel = DiagnosticLevel.OK
    message: str = ""
    values: list[tuple[str, str]] = field(default_factory=list)
    name: str = ""
    hardware_id: str = ""

    def add(self, key: str, value: str) -> None:
        """Append one fact."""
        self.values.append((key, str(value)))

    def addf(self, key: str, fmt: str, *args) -> None:
        """Append one fact rendered with printf-style formatting.

        Example:
            >>> report.addf("gnss warn_rate", "%.2f [Hz]", 10.0)
            >>> report.values[-1]
            ('gnss warn_rate', '10.00 [Hz]')
        """
        self.add(key, fmt % args)

    def summary(self, level: DiagnosticLevel, message: str) -> None:
        """Set level and summary message, replacing the previous ones."""
        self.level = DiagnosticLevel(level)
        self.message = message

    def merge_summary(self, level: DiagnosticLevel, message: str) -> None:
        """Fold another summary into this one.

        Two non-OK summaries have their messages joined with "; ". Otherwise
        the more severe message wins. The level only ever rises.
        """
        level = DiagnosticLevel(level)
        if level > DiagnosticLevel.OK and self.level > DiagnosticLevel.OK:
            self.message = f"{self.message}; {message}" if self.message else message
        elif level > self.level:
            self.message = message
        if level > self.level:
            self.level = level

    def format_full(self) -> str:
        """Format the report as a multi-line block."""
        header = f"[{self.level.name}] {self.name or '<unnamed>'}: {self.message}"
        lines = [header]
        for key, value in self.values:
            lines.append(f"  {key}: {value}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Convert to a structured dictionary.

        Facts stay a list of pairs so that order and duplicate keys survive.
        """
        return {
            "name": self.name,
            "hardware_id": self.hardware_id,
            "level": int(self.level),
            "level_name": self.level.name,
            "message": self.message,
            "values": [{"key": key, "value": value} for key, value in self.values],
        }
