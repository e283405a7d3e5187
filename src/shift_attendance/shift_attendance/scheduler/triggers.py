from __future__ import annotations

from dataclasses import dataclass
from datetime import time, tzinfo
from typing import Optional

from apscheduler.triggers.cron import CronTrigger

from ..common.datetime_utils import parse_clock_time, seconds_of_day


@dataclass(frozen=True)
class TriggerSpec:
    """Daily wall-clock trigger; ``day_of_week`` uses cron syntax ("sat", "mon-fri,sun")."""

    name: str
    at: time
    day_of_week: Optional[str] = None
    # Days between the business date a job handles and the day it fires.
    lag_days: int = 0

    @classmethod
    def parse(cls, name: str, value: str, day_of_week: Optional[str] = None, *, lag_days: int = 0) -> "TriggerSpec":
        return cls(name=name, at=parse_clock_time(value), day_of_week=day_of_week, lag_days=lag_days)

    def to_trigger(self, tz: tzinfo) -> CronTrigger:
        fields = dict(hour=self.at.hour, minute=self.at.minute, second=self.at.second, timezone=tz)
        if self.day_of_week:
            fields["day_of_week"] = self.day_of_week
        return CronTrigger(**fields)

    def offset_from_business_day(self) -> int:
        """Seconds between midnight of the handled business date and the firing time."""
        return self.lag_days * 86400 + seconds_of_day(self.at)


@dataclass(frozen=True)
class ScheduleSettings:
    day_open: time = time(0, 5)
    finalize: time = time(9, 30)
    night_auto_checkout: time = time(7, 56)
    night_checkout_at: time = time(6, 0)
    day_auto_checkout: time = time(19, 0)
    day_checkout_at: time = time(18, 0)
    saturday_auto_checkout: time = time(16, 0)
    saturday_checkout_at: time = time(15, 0)
    saturday_checkout_until: time = time(15, 59, 59)

    @classmethod
    def from_mapping(cls, values: Optional[dict]) -> "ScheduleSettings":
        values = values or {}
        parsed = {key: parse_clock_time(value) for key, value in values.items() if key in cls.__dataclass_fields__}
        return cls(**parsed)
