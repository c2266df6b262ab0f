"""Tabular export of diagnostic reports.

Flattens reports into a pandas DataFrame with one row per fact, keeping
fact order. A report without facts still gets one row (empty key and
value) so healthy-by-absence rules stay visible.
"""

from collections.abc import Iterable

import pandas as pd

from diagmon.engine import DiagnosticReport

FRAME_COLUMNS = ["name", "level", "message", "key", "value"]


def reports_to_frame(reports: Iterable[DiagnosticReport]) -> pd.DataFrame:
    """Flatten reports into a DataFrame.

    Args:
        reports: Reports in the order they should appear

    Returns:
        DataFrame with columns name, level, message, key, value.
        ``level`` holds the level name ("OK", "WARN", "ERROR").
    """
    rows = []
    for report in reports:
        level = report.level.name
        if not report.values:
            rows.append((report.name, level, report.message, "", ""))
            continue
        for key, value in report.values:
            rows.append((report.name, level, report.message, key, value))

    return pd.DataFrame(rows, columns=FRAME_COLUMNS)
