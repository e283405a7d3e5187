from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Optional

from ..core.constants import DEFAULT_UTC_OFFSET_HOURS
from ..core.enums import Weekday
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError as exc:
        raise ValidationError(f"Invalid date: {value!r}") from exc


def parse_clock_time(value: str) -> time:
    """Parse HH:MM or HH:MM:SS into time."""
    text = str(value).strip()
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    raise ValidationError(f"Invalid time: {value!r}")


def seconds_of_day(t: time) -> int:
    return t.hour * 3600 + t.minute * 60 + t.second


def fixed_zone(utc_offset_hours: float) -> timezone:
    return timezone(timedelta(hours=utc_offset_hours))


class BusinessClock:
    """Resolves "now" and business dates in one fixed civil time zone.

    The business does not observe DST, so a fixed UTC offset is enough.
    ``source`` returns the current instant; tests inject a fixed one.
    """

    def __init__(
        self,
        utc_offset_hours: float = DEFAULT_UTC_OFFSET_HOURS,
        *,
        source: Optional[Callable[[], datetime]] = None,
    ):
        self._tz = fixed_zone(utc_offset_hours)
        self._source = source or (lambda: datetime.now(timezone.utc))

    @property
    def tz(self) -> timezone:
        return self._tz

    def now(self) -> datetime:
        current = self._source()
        if current.tzinfo is None:
            # Naive instants are taken as already local.
            return current.replace(tzinfo=self._tz)
        return current.astimezone(self._tz)

    def business_date(self, offset_days: int = 0) -> date:
        return self.now().date() + timedelta(days=offset_days)

    def weekday(self, on: Optional[date] = None) -> Weekday:
        return Weekday((on or self.business_date()).weekday())

    def localize(self, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=self._tz)
        return value.astimezone(self._tz)


def fixed_clock(instant: datetime, utc_offset_hours: float = DEFAULT_UTC_OFFSET_HOURS) -> BusinessClock:
    """Clock frozen at ``instant`` (naive instants are read as local time)."""
    return BusinessClock(utc_offset_hours, source=lambda: instant)
