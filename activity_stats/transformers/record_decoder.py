"""Decoding of exported CSV activity logs into flat records."""
import logging
import re
from functools import lru_cache
from typing import List, Sequence, Tuple

from activity_stats.utilities import config
from activity_stats.utilities.models import ColumnMap, RawRecord

logger = logging.getLogger(__name__)

BOM = "\ufeff"

_OUTER_QUOTES_RE = re.compile(r'^"|"$')
_WHITESPACE_RE = re.compile(r"\s+")
_NON_NUMERIC_RE = re.compile(r"[^0-9.,-]")
_LEADING_NUMBER_RE = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")

POSITIONAL_MAP = ColumnMap()


def split_lines(text: str) -> List[str]:
    """Strip a leading BOM and split text into lines; empty text gives no lines."""
    if text.startswith(BOM):
        text = text[1:]
    text = text.strip()
    if not text:
        return []
    return text.split("\n")


def detect_delimiter(first_line: str) -> str:
    """Semicolon if the first line has one, comma otherwise."""
    return ";" if ";" in first_line else ","


def normalize_header(value: str) -> str:
    return _OUTER_QUOTES_RE.sub("", value.strip()).lower()


def has_header(headers: Sequence[str]) -> bool:
    """Check whether normalized first-line fields look like a header row."""
    return any(
        keyword in header
        for header in headers
        for keyword in config.HEADER_KEYWORDS
    )


def _find_column(headers: Sequence[str], keywords: Sequence[str]) -> int:
    for index, header in enumerate(headers):
        if any(keyword in header for keyword in keywords):
            return index
    return config.NOT_FOUND


def infer_column_map(headers: Sequence[str]) -> ColumnMap:
    """
    Derive a column mapping from normalized header fields.

    Each field takes the first header containing one of its keywords. When the
    date or hours column cannot be located the derived mapping is discarded
    as a whole and the positional mapping is returned instead.

    Args:
        headers: Normalized (trimmed, unquoted, lowercased) header fields

    Returns:
        Column mapping
    """
    found = {
        name: _find_column(headers, keywords)
        for name, keywords in config.COLUMN_KEYWORDS.items()
    }

    missing = [name for name in config.REQUIRED_HEADER_COLUMNS if found[name] == config.NOT_FOUND]
    if missing:
        logger.debug(
            "Header lacks required column(s) %s; using positional mapping",
            ", ".join(missing),
        )
        return POSITIONAL_MAP

    if found["activity_type"] == config.NOT_FOUND:
        found["activity_type"] = config.DEFAULT_ACTIVITY_COLUMN

    return ColumnMap(**found)


def resolve_layout(first_line: str) -> Tuple[str, ColumnMap, bool]:
    """
    Decide delimiter, column mapping and whether the first line is a header.

    Args:
        first_line: First line of the input

    Returns:
        Tuple of (delimiter, column_map, header_present)
    """
    delimiter = detect_delimiter(first_line)
    headers = [normalize_header(value) for value in first_line.split(delimiter)]

    if not has_header(headers):
        return delimiter, POSITIONAL_MAP, False

    return delimiter, infer_column_map(headers), True


@lru_cache(maxsize=None)
def _quoted_row_pattern(delimiter: str) -> "re.Pattern[str]":
    sep = re.escape(delimiter)
    return re.compile(rf'(?:^|{sep})(?:"([^"]*)"|([^{sep}]*))')


def split_row(line: str, delimiter: str) -> List[str]:
    """
    Split a row on the delimiter, honouring quoted fields.

    The quote-aware result is used only when it yields more than one field.
    """
    values = line.split(delimiter)
    if '"' in line:
        matches = [
            match.group(1) or match.group(2) or ""
            for match in _quoted_row_pattern(delimiter).finditer(line)
        ]
        if len(matches) > 1:
            values = matches
    return values


def clean_value(value: str) -> str:
    """Trim, strip outer quotes and collapse whitespace runs."""
    value = _OUTER_QUOTES_RE.sub("", value.strip())
    return _WHITESPACE_RE.sub(" ", value)


def parse_number(value: str) -> float:
    """
    Parse an hours/sessions value tolerant of decimal commas and stray text.

    Args:
        value: Raw cell text such as "0,28", "1.5 h" or ""

    Returns:
        Parsed number, or 0.0 when nothing numeric is present
    """
    if not value:
        return 0.0
    cleaned = _NON_NUMERIC_RE.sub("", value).replace(",", ".", 1)
    match = _LEADING_NUMBER_RE.match(cleaned)
    if not match:
        return 0.0
    return float(match.group(0)) or 0.0


def _field(values: Sequence[str], index: int) -> str:
    if index < 0 or index >= len(values):
        return ""
    return clean_value(values[index])


def decode_row(values: Sequence[str], columns: ColumnMap) -> RawRecord:
    """Build a record from split row values using a column mapping."""
    return RawRecord(
        date=_field(values, columns.date),
        project=_field(values, columns.project),
        activity_type=_field(values, columns.activity_type),
        employee=_field(values, columns.employee),
        role=_field(values, columns.role),
        program=_field(values, columns.program),
        hours=parse_number(_field(values, columns.hours)),
        sessions=parse_number(_field(values, columns.sessions)),
    )


def decode(text: str) -> List[RawRecord]:
    """
    Decode CSV activity log text into records.

    Rows are not validated here; records without a usable date are dropped
    later, at aggregation time.

    Args:
        text: Already-decoded file contents

    Returns:
        Records in input order
    """
    lines = split_lines(text)
    if not lines:
        logger.debug("Empty input; no records decoded")
        return []

    delimiter, columns, header_present = resolve_layout(lines[0])
    logger.debug(
        "Detected delimiter %r, header %s, mapping %s",
        delimiter,
        "present" if header_present else "absent",
        columns,
    )

    records: List[RawRecord] = []
    for raw_line in lines[1 if header_present else 0:]:
        line = raw_line.strip()
        if not line:
            continue
        records.append(decode_row(split_row(line, delimiter), columns))

    return records
