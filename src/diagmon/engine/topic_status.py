"""Topic status evaluator.

Scans one ``TopicStats`` snapshot for the entries of a single module and
reports them in fixed category order:

    1. ok_list            "OK"            level unchanged
    2. non_received_list  "Not Received"  → ERROR
    3. slow_rate_list     "Slow Rate"     → WARN
    4. timeout_list       "Timeout"       → ERROR

Every category is scanned in full; the final level is the maximum over the
whole scan. A module with no entries anywhere is reported as OK with no
facts.
"""

from diagmon.engine.report import DiagnosticReport
from diagmon.engine.severity import DiagnosticLevel, LevelTracker
from diagmon.engine.stats import TopicStats


def check_topic_status(topic_stats: TopicStats, module_name: str) -> DiagnosticReport:
    """Build the topic status report for one module.

    Args:
        topic_stats: Current topic statistics (read only)
        module_name: Only entries whose ``module`` equals this are reported

    Returns:
        Fresh DiagnosticReport with facts in scan order

    Example:
        >>> stats = TopicStats(ok_list=(TopicConfig(module="localization", name="gnss_pose"),))
        >>> report = check_topic_status(stats, "localization")
        >>> report.values
        [('gnss_pose status', 'OK')]
    """
    report = DiagnosticReport()
    tracker = LevelTracker()

    # OK
    for topic_config in topic_stats.ok_list:
        if topic_config.module != module_name:
            continue

        report.add(f"{topic_config.name} status", "OK")

    # Not received
    for topic_config in topic_stats.non_received_list:
        if topic_config.module != module_name:
            continue

        report.add(f"{topic_config.name} status", "Not Received")
        tracker.escalate(DiagnosticLevel.ERROR)

    # Slow rate
    for topic_config, measured_rate in topic_stats.slow_rate_list:
        if topic_config.module != module_name:
            continue

        name = topic_config.name
        report.add(f"{name} status", "Slow Rate")
        report.addf(f"{name} warn_rate", "%.2f [Hz]", topic_config.warn_rate)
        report.addf(f"{name} measured_rate", "%.2f [Hz]", measured_rate)
        tracker.escalate(DiagnosticLevel.WARN)

    # Timeout
    for topic_config, last_received_time in topic_stats.timeout_list:
        if topic_config.module != module_name:
            continue

        name = topic_config.name
        report.add(f"{name} status", "Timeout")
        report.addf(f"{name} timeout", "%.2f [s]", topic_config.timeout)
        report.addf(f"{name} checked_time", "%.2f [s]", topic_stats.checked_time)
        report.addf(f"{name} last_received_time", "%.2f [s]", last_received_time)
        tracker.escalate(DiagnosticLevel.ERROR)

    report.summary(tracker.level, tracker.level.get_summary())
    return report
