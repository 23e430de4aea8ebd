"""CSV report export for aggregate results."""
import logging
from pathlib import Path
from typing import List

import pandas as pd

from activity_stats.utilities import config
from activity_stats.utilities.models import AggregatedData

logger = logging.getLogger(__name__)


def build_employee_report(data: AggregatedData) -> pd.DataFrame:
    """
    Employee table sorted by efficiency, with a low-data flag.

    Employees with fewer work hours than LOW_DATA_WORK_HOURS are flagged so
    readers can separate them from the main ranking.

    Args:
        data: Aggregate data

    Returns:
        Employee report dataframe
    """
    frame = data.employee_frame()
    frame["low_data"] = frame["work_hours"] < config.LOW_DATA_WORK_HOURS
    return frame.sort_values(
        ["efficiency", "name"],
        ascending=[False, True],
        kind="mergesort",
    ).reset_index(drop=True)


def write_reports(data: AggregatedData, output_dir: str | Path) -> List[Path]:
    """
    Write every aggregate view as a CSV file.

    Args:
        data: Aggregate data
        output_dir: Target directory (created if missing)

    Returns:
        Paths of written files
    """
    target = Path(output_dir)
    target.mkdir(parents=True, exist_ok=True)

    reports = {
        config.DAILY_REPORT_FILE: data.daily_frame(),
        config.PROJECT_TRENDS_REPORT_FILE: data.project_trends_frame(),
        config.PROJECT_META_REPORT_FILE: data.project_meta_frame(),
        config.EMPLOYEE_REPORT_FILE: build_employee_report(data),
    }

    written: List[Path] = []
    for file_name, frame in reports.items():
        path = target / file_name
        frame.to_csv(path, index=False, encoding=config.REPORT_ENCODING)
        logger.debug("Wrote %d row(s) to %s", len(frame), path)
        written.append(path)

    return written
