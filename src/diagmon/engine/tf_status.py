"""Transform (tf) status evaluator.

Same shape as the topic evaluator, with two categories: ``ok_list`` then
``timeout_list``. Facts are keyed by the relation name ``{from}2{to}``.
There is no slow-rate category for transforms, so a tf report is either
OK or ERROR.
"""

from diagmon.engine.report import DiagnosticReport
from diagmon.engine.severity import DiagnosticLevel, LevelTracker
from diagmon.engine.stats import TfStats


def check_tf_status(tf_stats: TfStats, module_name: str) -> DiagnosticReport:
    """Build the tf status report for the relations of one module.

    Args:
        tf_stats: Current transform statistics (read only)
        module_name: Only relations whose ``module`` equals this are reported

    Returns:
        Fresh DiagnosticReport with facts in scan order
    """
    report = DiagnosticReport()
    tracker = LevelTracker()

    # OK
    for tf_config in tf_stats.ok_list:
        if tf_config.module != module_name:
            continue

        report.add(f"{tf_config.pair_name} status", "OK")

    # Timeout
    for tf_config, last_received_time in tf_stats.timeout_list:
        if tf_config.module != module_name:
            continue

        name = tf_config.pair_name
        report.add(f"{name} status", "Timeout")
        report.addf(f"{name} timeout", "%.2f [s]", tf_config.timeout)
        report.addf(f"{name} checked_time", "%.2f [s]", tf_stats.checked_time)
        report.addf(f"{name} last_received_time", "%.2f [s]", last_received_time)
        tracker.escalate(DiagnosticLevel.ERROR)

    report.summary(tracker.level, tracker.level.get_summary())
    return report
