"""Keyword classification of free-text activity labels."""
from activity_stats.utilities import config
from activity_stats.utilities.models import ActivityCategory


def is_work(label: str) -> bool:
    """Check whether a label names productive work."""
    text = label.lower()
    return any(keyword in text for keyword in config.WORK_KEYWORDS)


def is_communication(label: str) -> bool:
    """Check whether a label names communication (meetings, mail, chat)."""
    text = label.lower()
    return any(keyword in text for keyword in config.COMMUNICATION_KEYWORDS)


def classify(label: str) -> ActivityCategory:
    """
    Map an activity label to its category.

    Work keywords are checked first, so a label matching both lists is Work.
    Every label resolves to exactly one category.

    Args:
        label: Activity label from the log

    Returns:
        Activity category
    """
    if is_work(label):
        return ActivityCategory.WORK
    if is_communication(label):
        return ActivityCategory.COMMUNICATION
    return ActivityCategory.OTHER
