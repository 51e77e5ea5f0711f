"""Time utilities (WIB, exchange local time)."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from bandarmology.config import settings

WIB = ZoneInfo(settings.TIMEZONE)


def now_wib_naive() -> datetime:
    """
    Current time in WIB, returned as naive datetime for DB storage.
    """
    return datetime.now(WIB).replace(tzinfo=None)


def today_wib() -> date:
    """Current calendar date on the exchange."""
    return datetime.now(WIB).date()


def parse_iso_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string, raising ``ValueError`` when malformed."""
    return date.fromisoformat(value.strip())
