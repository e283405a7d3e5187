from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import tzinfo
from typing import Callable, Optional, Sequence

from apscheduler.schedulers.background import BackgroundScheduler

from ..core.enums import ALL_WEEKDAYS, ShiftType, Weekday
from ..shifts.policy import ShiftWindowPolicy
from .jobs import ReconciliationJobs
from .triggers import ScheduleSettings, TriggerSpec

logger = logging.getLogger(__name__)

SATURDAY = frozenset({Weekday.SATURDAY})


@dataclass(frozen=True)
class ScheduledJob:
    trigger: TriggerSpec
    handler: Callable[[], object]
    # Checkout windows (shift, business-date weekdays) this job force-closes.
    closes: Optional[tuple[ShiftType, frozenset[Weekday]]] = None


def default_schedule(jobs: ReconciliationJobs, settings: ScheduleSettings = ScheduleSettings()) -> list[ScheduledJob]:
    """The fixed daily cadence, as explicit (trigger, handler) pairs."""

    s = settings
    return [
        ScheduledJob(TriggerSpec("day_open", s.day_open), jobs.day_open),
        ScheduledJob(
            TriggerSpec("night_auto_checkout", s.night_auto_checkout, lag_days=1),
            lambda: jobs.auto_checkout(ShiftType.NIGHT, s.night_checkout_at, date_offset=-1),
            closes=(ShiftType.NIGHT, ALL_WEEKDAYS),
        ),
        ScheduledJob(
            TriggerSpec("day_auto_checkout", s.day_auto_checkout, day_of_week="mon-fri,sun"),
            lambda: jobs.auto_checkout(ShiftType.DAY, s.day_checkout_at),
            closes=(ShiftType.DAY, ALL_WEEKDAYS - SATURDAY),
        ),
        ScheduledJob(
            TriggerSpec("saturday_auto_checkout", s.saturday_auto_checkout, day_of_week="sat"),
            lambda: jobs.auto_checkout(ShiftType.DAY, s.saturday_checkout_at),
            closes=(ShiftType.DAY, SATURDAY),
        ),
        ScheduledJob(TriggerSpec("day_close", s.finalize, lag_days=1), jobs.day_close),
    ]


def _describe(trigger: TriggerSpec) -> str:
    return f"{trigger.name} at {trigger.at:%H:%M} (+{trigger.lag_days}d)"


def validate_schedule(entries: Sequence[ScheduledJob], policy: ShiftWindowPolicy) -> None:
    """Each auto-checkout must fire after the windows it closes, and finalize after every checkout window."""

    latest = policy.latest_checkout_offset()
    for entry in entries:
        fires_at = entry.trigger.offset_from_business_day()
        if entry.trigger.name == "day_close" and fires_at <= latest:
            raise ValueError(f"{_describe(entry.trigger)} does not run after the last checkout window")
        if entry.closes is None:
            continue
        closes_at = policy.checkout_close_offset(*entry.closes)
        if closes_at is not None and fires_at <= closes_at:
            raise ValueError(f"{_describe(entry.trigger)} fires before its checkout window closes")


class ReconciliationScheduler:
    """Process-wide owner of the reconciliation triggers."""

    def __init__(
        self,
        entries: Sequence[ScheduledJob],
        *,
        timezone: tzinfo,
        misfire_grace_time: int = 3600,
    ):
        self._entries = tuple(entries)
        self._tz = timezone
        self._scheduler = BackgroundScheduler(
            timezone=timezone,
            job_defaults={
                "coalesce": True,
                "misfire_grace_time": misfire_grace_time,
                "max_instances": 1,
            },
        )
        for entry in self._entries:
            self._scheduler.add_job(
                entry.handler,
                trigger=entry.trigger.to_trigger(timezone),
                id=entry.trigger.name,
                name=entry.trigger.name,
                replace_existing=True,
            )

    @property
    def running(self) -> bool:
        return bool(self._scheduler.running)

    @property
    def job_ids(self) -> list[str]:
        return [job.id for job in self._scheduler.get_jobs()]

    def start(self) -> None:
        if self.running:
            return
        self._scheduler.start()
        logger.info("scheduler started with jobs: %s", ", ".join(e.trigger.name for e in self._entries))

    def shutdown(self, *, wait: bool = True) -> None:
        if not self.running:
            return
        self._scheduler.shutdown(wait=wait)
        logger.info("scheduler stopped")
