from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, time, timedelta
from typing import Callable, Collection, Mapping, Optional

from ..attendance.repository import AttendanceLedger
from ..attendance.service import AttendanceService
from ..common.datetime_utils import BusinessClock
from ..core.enums import ShiftType, Weekday
from ..core.exceptions import StoreUnavailable

logger = logging.getLogger(__name__)

DEFAULT_WORKING_WEEKDAYS = frozenset(Weekday) - {Weekday.SUNDAY}


@dataclass(frozen=True)
class JobReport:
    job: str
    business_date: date
    affected: int = 0
    skipped: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ReconciliationJobs:
    """Time-triggered batch transitions against the ledger.

    Jobs bypass geofence and window checks; they act on stale or incomplete
    rows directly. Each job is a set-based write, and a store failure is
    logged and reported instead of raised so the next trigger still runs.
    """

    def __init__(
        self,
        ledger: AttendanceLedger,
        attendance: AttendanceService,
        clock: BusinessClock,
        *,
        working_weekdays: Collection[Weekday] = DEFAULT_WORKING_WEEKDAYS,
        default_checkout: Optional[Mapping[ShiftType, time]] = None,
    ):
        self._ledger = ledger
        self._attendance = attendance
        self._clock = clock
        self._working_weekdays = frozenset(working_weekdays)
        self._default_checkout = dict(default_checkout or {})

    def _run(self, job: str, business_date: date, work: Callable[[], int]) -> JobReport:
        logger.info("[%s] start for %s", job, business_date)
        try:
            affected = int(work())
        except StoreUnavailable as exc:
            logger.error("[%s] failed for %s: %s", job, business_date, exc, exc_info=True)
            return JobReport(job, business_date, error=str(exc))
        logger.info("[%s] done for %s (%d rows)", job, business_date, affected)
        return JobReport(job, business_date, affected=affected)

    def day_open(self, on: Optional[date] = None) -> JobReport:
        business_date = on or self._clock.business_date()
        if self._clock.weekday(business_date) not in self._working_weekdays:
            logger.info("[day_open] %s is not a working day; skipped", business_date)
            return JobReport("day_open", business_date, skipped=True)
        return self._run("day_open", business_date, lambda: self._attendance.initialize_day(business_date))

    def day_close(self, business_date: Optional[date] = None) -> JobReport:
        """Finalize a completed business date (yesterday by default)."""

        business_date = business_date or self._clock.business_date(-1)

        def work() -> int:
            outcome = self._ledger.finalize_day(business_date, default_checkout=self._default_checkout)
            logger.info(
                "[day_close] %s: %d absent, %d backfilled, %d late",
                business_date,
                outcome.absent,
                outcome.backfilled,
                outcome.late,
            )
            return outcome.total

        return self._run("day_close", business_date, work)

    def auto_checkout(
        self,
        shift: ShiftType | str,
        cutoff: time,
        business_date: Optional[date] = None,
        *,
        date_offset: int = 0,
    ) -> JobReport:
        """Force a checkout at ``cutoff`` on open rows of ``shift``; present becomes late."""

        shift = ShiftType(shift)
        business_date = business_date or (self._clock.business_date() + timedelta(days=date_offset))
        return self._run(
            f"auto_checkout:{shift.value}",
            business_date,
            lambda: self._ledger.auto_checkout(business_date, shift=shift, checkout_time=cutoff),
        )
