"""Utility functions for activity log statistics."""
from typing import Dict, Iterable, List, Tuple

import pandas as pd


def parse_date_key(date_key: str) -> pd.Timestamp:
    """
    Parse a date key into a timestamp.

    Args:
        date_key: Date string as it appeared in the log

    Returns:
        Parsed timestamp, or NaT if the string is not a calendar date
    """
    try:
        return pd.to_datetime(date_key, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return pd.NaT


def chronological_order(date_keys: Iterable[str]) -> List[str]:
    """
    Sort date keys by calendar date rather than lexically.

    Keys that do not parse are placed after all parseable ones, in lexical order.

    Args:
        date_keys: Distinct date keys

    Returns:
        Sorted list of date keys
    """
    keys: Dict[str, Tuple] = {}
    for date_key in date_keys:
        parsed = parse_date_key(date_key)
        if pd.isna(parsed):
            keys[date_key] = (1, date_key)
        else:
            keys[date_key] = (0, parsed.value)
    return sorted(keys, key=keys.__getitem__)
