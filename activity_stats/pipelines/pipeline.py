"""Main orchestration pipeline for activity log statistics."""
import logging
import time
from functools import cached_property
from pathlib import Path
from typing import Dict, List, Optional

from activity_stats.extractors import csv_reader
from activity_stats.loaders import report_writer
from activity_stats.transformers import aggregator, anomaly_filter, record_decoder
from activity_stats.utilities.models import AggregatedData, DayTotals, FilterOptions, RawRecord

logger = logging.getLogger(__name__)


class ActivityLog:
    """
    Decoded records of one activity log.

    Per-date totals used by the anomaly filter are computed once and reused
    whenever thresholds change; aggregates are always rebuilt from the full
    record set.
    """

    def __init__(self, records: List[RawRecord]):
        self.records = records

    @cached_property
    def totals(self) -> Dict[str, DayTotals]:
        return anomaly_filter.daily_totals(self.records)

    def aggregate(self, options: Optional[FilterOptions] = None) -> AggregatedData:
        """
        Aggregate the records, dropping anomaly days.

        Args:
            options: Filter thresholds (config defaults if not provided)

        Returns:
            Aggregate data
        """
        options = options or FilterOptions()
        excluded = anomaly_filter.excluded_from_totals(
            self.totals,
            options.min_daily_hours,
            options.max_work_percent,
        )
        return aggregator.aggregate(self.records, excluded)


def decode_text(text: str) -> ActivityLog:
    """Decode log text into an ActivityLog."""
    records = record_decoder.decode(text)
    admitted = sum(1 for record in records if record.is_admitted)
    logger.info(
        "Decoded %d record(s); %d with a usable date",
        len(records),
        admitted,
    )
    return ActivityLog(records)


def analyze_text(text: str, options: Optional[FilterOptions] = None) -> AggregatedData:
    """Decode and aggregate log text in one call."""
    return decode_text(text).aggregate(options)


def log_summary(data: AggregatedData) -> None:
    """Log a short summary of aggregate results."""
    if data.is_empty:
        if data.excluded_dates:
            logger.warning(
                "⚠ WARNING: All %d day(s) excluded by filter; nothing left to aggregate",
                len(data.excluded_dates),
            )
        else:
            logger.warning("⚠ WARNING: No usable data found in activity log")
        return

    logger.info(
        "Days: %d (excluded %d) | Projects: %d | Employees: %d",
        len(data.daily_percents),
        len(data.excluded_dates),
        len(data.project_list),
        len(data.employee_stats),
    )
    for name in data.project_list:
        meta = data.project_meta[name]
        logger.info(
            "  %s: %.2f h, average efficiency %.1f%%",
            name,
            meta.total_hours,
            meta.average_efficiency,
        )


def run_full_pipeline(
    file_path: str | Path,
    options: Optional[FilterOptions] = None,
    output_dir: Optional[str | Path] = None,
    encoding: Optional[str] = None,
) -> AggregatedData:
    """
    Run the complete activity log pipeline.

    Args:
        file_path: CSV export to process
        options: Filter thresholds (config defaults if not provided)
        output_dir: Directory for CSV reports; nothing is written if not provided
        encoding: Force a text encoding instead of auto-detection

    Returns:
        Aggregate data

    Raises:
        ActivityFileError: If the file cannot be read
    """
    options = options or FilterOptions()

    logger.info("=" * 70)
    logger.info("STARTING ACTIVITY LOG PIPELINE")
    logger.info("File: %s", file_path)
    logger.info(
        "Filter: min daily hours %s, max work percent %s",
        options.min_daily_hours,
        options.max_work_percent,
    )
    logger.info("=" * 70)

    start_time = time.time()

    activity_file = csv_reader.read_activity_file(file_path, encoding=encoding)
    if activity_file.used_fallback:
        logger.info("✓ Decoded with fallback encoding %s", activity_file.encoding)

    data = decode_text(activity_file.text).aggregate(options)
    log_summary(data)

    if output_dir is not None:
        written = report_writer.write_reports(data, output_dir)
        logger.info("✓ Wrote %d report(s) to %s", len(written), output_dir)

    elapsed_time = time.time() - start_time
    logger.info("=" * 70)
    logger.info("PIPELINE COMPLETE - Total time: %.2f seconds", elapsed_time)
    logger.info("=" * 70)

    return data
