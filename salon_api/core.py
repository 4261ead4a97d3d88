# salon_api/core.py

import re
from datetime import time
from typing import Union

from salon_api.errors import InvalidTimeFormat

MINUTES_PER_DAY = 24 * 60

_HHMM = re.compile(r"^([01][0-9]|2[0-3]):([0-5][0-9])$")


def parse_time(value: str, field: str = "time") -> int:
    """Convert a zero-padded ``HH:MM`` string to minutes since midnight."""
    if not isinstance(value, str):
        raise InvalidTimeFormat(field)
    match = _HHMM.match(value)
    if match is None:
        raise InvalidTimeFormat(field)
    return int(match.group(1)) * 60 + int(match.group(2))


def format_time(minutes: int) -> str:
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"minute offset out of range: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def minutes_of(t: time) -> int:
    return t.hour * 60 + t.minute


def to_minutes(value: Union[str, int], field: str = "time") -> int:
    if isinstance(value, int):
        return value
    return parse_time(value, field)


def overlaps(start_a, end_a, start_b, end_b) -> bool:
    # half-open intervals: touching endpoints do not overlap
    return start_a < end_b and start_b < end_a
