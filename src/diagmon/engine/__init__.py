"""Core diagnostic engine for diagmon.

Modules:
    - severity: OK < WARN < ERROR ordering, running maximum, summary text
    - stats: Read-only topic/tf statistics snapshot
    - report: DiagnosticReport (level + ordered facts + summary)
    - topic_status: Per-module topic status evaluator
    - tf_status: Per-module transform status evaluator
"""

from diagmon.engine.severity import (
    DiagnosticLevel,
    LevelTracker,
    combine_levels,
)
from diagmon.engine.stats import (
    StateSnapshot,
    TfConfig,
    TfStats,
    TopicConfig,
    TopicStats,
    load_snapshot,
)
from diagmon.engine.report import DiagnosticReport
from diagmon.engine.topic_status import check_topic_status
from diagmon.engine.tf_status import check_tf_status

__all__ = [
    "DiagnosticLevel",
    "LevelTracker",
    "combine_levels",
    "StateSnapshot",
    "TfConfig",
    "TfStats",
    "TopicConfig",
    "TopicStats",
    "load_snapshot",
    "DiagnosticReport",
    "check_topic_status",
    "check_tf_status",
]
