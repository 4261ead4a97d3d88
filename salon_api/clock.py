# salon_api/clock.py

from datetime import datetime
from zoneinfo import ZoneInfo

from salon_api import config


class Clock:
    """Source of "now" in the shop's local wall-clock time (naive datetime)."""

    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock(Clock):
    def __init__(self, timezone: str = None):
        self.tz = ZoneInfo(timezone or config.SHOP_TIMEZONE)

    def now(self) -> datetime:
        return datetime.now(self.tz).replace(tzinfo=None)


class FixedClock(Clock):
    def __init__(self, current: datetime):
        self.current = current

    def now(self) -> datetime:
        return self.current


_system_clock = None


def get_clock() -> Clock:
    global _system_clock
    if _system_clock is None:
        _system_clock = SystemClock()
    return _system_clock
