"""Main entry point for activity log statistics."""
import argparse
import logging

from activity_stats.extractors.csv_reader import ActivityFileError
from activity_stats.pipelines import pipeline
from activity_stats.utilities import config
from activity_stats.utilities.models import FilterOptions

logger = logging.getLogger(__name__)


def non_negative_float(value: str) -> float:
    """Parse a non-negative number argument."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid number: {value}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"Value must not be negative: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Aggregate an exported CSV activity log",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Summarize a log with no day filtering (default)
  python main.py export.csv

  # Drop days with fewer than 4 hours or 95%+ work share, write CSV reports
  python main.py export.csv --min-daily-hours 4 --max-work-percent 95 --output-dir out

  # Force the file encoding
  python main.py export.csv --encoding windows-1251
        """,
    )

    parser.add_argument(
        "file",
        help="CSV activity log to process",
    )

    parser.add_argument(
        "--min-daily-hours",
        type=non_negative_float,
        default=config.DEFAULT_MIN_DAILY_HOURS,
        help="Exclude days with fewer total hours (default: %(default)s)",
    )

    parser.add_argument(
        "--max-work-percent",
        type=non_negative_float,
        default=config.DEFAULT_MAX_WORK_PERCENT,
        help="Exclude days whose work share reaches this percent (default: %(default)s)",
    )

    parser.add_argument(
        "--encoding",
        help="Text encoding of the file (auto-detected if not provided)",
    )

    parser.add_argument(
        "--output-dir",
        help="Directory to write CSV reports to",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Set logging level (default: INFO)",
    )

    return parser


def main(argv=None):
    """Main entry point with CLI argument parsing."""
    args = build_parser().parse_args(argv)

    # Configure logging with detailed format
    log_format = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format=log_format,
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    options = FilterOptions(
        min_daily_hours=args.min_daily_hours,
        max_work_percent=args.max_work_percent,
    )

    try:
        pipeline.run_full_pipeline(
            args.file,
            options=options,
            output_dir=args.output_dir,
            encoding=args.encoding,
        )
        return 0
    except KeyboardInterrupt:
        logger.warning("Pipeline interrupted by user")
        return 130
    except ActivityFileError as exc:
        logger.error("✗ %s", exc)
        return 1
    except Exception as exc:
        logger.error("="*70)
        logger.error("PIPELINE EXECUTION FAILED")
        logger.error("="*70)
        logger.exception("Fatal error: %s", exc)
        return 1


if __name__ == "__main__":
    exit(main())
