"""CSV file reading and encoding resolution for activity logs."""
import logging
from pathlib import Path
from typing import Optional, Tuple

from activity_stats.utilities import config
from activity_stats.utilities.models import ActivityFile

logger = logging.getLogger(__name__)


class ActivityFileError(ValueError):
    """Raised when an activity log file cannot be located or read."""


def decode_bytes(raw: bytes, encoding: str) -> str:
    """Decode a byte buffer, replacing undecodable bytes."""
    return raw.decode(encoding, errors="replace")


def looks_misdecoded(text: str) -> bool:
    """
    Judge whether decoded text is likely garbage from the wrong encoding.

    Args:
        text: Decoded file contents

    Returns:
        True if no expected header keyword is present or the text
        contains replacement characters
    """
    has_keyword = any(keyword in text for keyword in config.ENCODING_CHECK_KEYWORDS)
    return not has_keyword or config.REPLACEMENT_CHAR in text


def resolve_text(
    raw: bytes,
    primary: Optional[str] = None,
    fallback: Optional[str] = None,
) -> Tuple[str, str]:
    """
    Decode a byte buffer, retrying with the fallback encoding when needed.

    The fallback decoding is returned even if it also looks wrong; the
    decoder copes with degraded text.

    Args:
        raw: File contents
        primary: First encoding to try (config default if not provided)
        fallback: Encoding used when the primary result looks wrong

    Returns:
        Tuple of (text, encoding_used)
    """
    primary = primary or config.PRIMARY_ENCODING
    fallback = fallback or config.FALLBACK_ENCODING

    text = decode_bytes(raw, primary)
    if not looks_misdecoded(text) or primary.lower() == fallback.lower():
        return text, primary

    logger.info(
        "%s decoding looks wrong (no header keywords or replacement chars); retrying with %s",
        primary,
        fallback,
    )
    fallback_text = decode_bytes(raw, fallback)
    if looks_misdecoded(fallback_text):
        logger.warning("%s decoding also looks wrong; loading it anyway", fallback)
    return fallback_text, fallback


def read_activity_file(
    file_path: str | Path,
    encoding: Optional[str] = None,
) -> ActivityFile:
    """
    Read an activity log file from disk and resolve its text encoding.

    Args:
        file_path: Path to a .csv export
        encoding: Force this encoding instead of auto-detection

    Returns:
        ActivityFile with decoded text

    Raises:
        ActivityFileError: If the file is missing, not a CSV or unreadable
    """
    path = Path(file_path)

    if not path.is_file():
        raise ActivityFileError(f"File {path} does not exist")

    if path.suffix.lower() not in config.ALLOWED_SUFFIXES:
        raise ActivityFileError(f"File {path} is not a CSV export (suffix {path.suffix!r})")

    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ActivityFileError(f"File {path} could not be read: {exc}") from exc

    if encoding:
        try:
            text = decode_bytes(raw, encoding)
        except LookupError as exc:
            raise ActivityFileError(f"Unknown encoding {encoding!r}") from exc
        used = encoding
    else:
        text, used = resolve_text(raw)

    logger.info("Read %s (%d bytes, encoding %s)", path.name, len(raw), used)

    return ActivityFile(
        path=str(path),
        text=text,
        encoding=used,
        used_fallback=not encoding and used != config.PRIMARY_ENCODING,
    )
