import re
from datetime import datetime

TIMESTAMP_FORMAT = "[%d-%m-%Y %H:%M:%S]"
TIMESTAMP_PATTERN = re.compile(r"^\[\d{2}-\d{2}-\d{4} \d{2}:\d{2}:\d{2}\]$")


def format_timestamp(moment: datetime | None = None) -> str:
    """ stamp for the start of a log line, local time, e.g. '[05-03-2024 14:02:31]'
    uses datetime.now() when no moment is given
    """
    if moment is None:
        moment = datetime.now()
    return moment.strftime(TIMESTAMP_FORMAT)


def is_log_timestamp(value: str) -> bool:
    # test for [DD-MM-YYYY HH:MM:SS] and that it is a real date
    if not isinstance(value, str) or not TIMESTAMP_PATTERN.match(value):
        return False
    try:
        datetime.strptime(value, TIMESTAMP_FORMAT)
        return True
    except ValueError:
        return False


__all__ = ["TIMESTAMP_FORMAT", "TIMESTAMP_PATTERN", "format_timestamp", "is_log_timestamp"]
