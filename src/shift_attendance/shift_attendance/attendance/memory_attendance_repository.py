from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, time
from typing import Iterable, Mapping, Optional, Sequence

from ..core.enums import AttendanceStatus, ShiftType
from ..core.exceptions import Conflict, NotFound
from .model import AttendanceRecord, FinalizeOutcome
from .repository import AttendanceLedger
from .transitions import (
    CHECK_IN_GUARD,
    CHECK_OUT_GUARD,
    ConditionalUpdate,
    auto_checkout_update,
    finalize_updates,
)


class InMemoryAttendanceLedger(AttendanceLedger):
    """Process-local ledger; one lock makes every operation atomic.

    Used for development (``STORE_BACKEND=memory``) and in tests.
    """

    def __init__(self, records: Iterable[AttendanceRecord] = ()):
        self._lock = threading.Lock()
        self._rows: dict[tuple[int, date], AttendanceRecord] = {}
        self._next_id = 1
        for record in records:
            self._rows[(record.employee_id, record.business_date)] = record
            self._next_id = max(self._next_id, record.record_id + 1)

    def _insert(self, employee_id: int, business_date: date, shift: ShiftType) -> bool:
        key = (int(employee_id), business_date)
        if key in self._rows:
            return False
        self._rows[key] = AttendanceRecord(
            record_id=self._next_id,
            employee_id=int(employee_id),
            business_date=business_date,
            status=AttendanceStatus.PENDING,
            shift=shift,
        )
        self._next_id += 1
        return True

    def _apply(self, business_date: date, update: ConditionalUpdate) -> int:
        affected = 0
        for key, record in list(self._rows.items()):
            if record.business_date != business_date or not update.where.matches(record):
                continue
            self._rows[key] = update.apply(record)
            affected += 1
        return affected

    def ensure_record(self, employee_id: int, business_date: date, *, shift: ShiftType = ShiftType.UNSPECIFIED) -> bool:
        with self._lock:
            return self._insert(employee_id, business_date, shift)

    def ensure_records(self, business_date: date, employees: Iterable[tuple[int, ShiftType]]) -> int:
        with self._lock:
            return sum(1 for employee_id, shift in employees if self._insert(employee_id, business_date, shift))

    def record_check_in(
        self,
        employee_id: int,
        business_date: date,
        *,
        check_in_time: time,
        status: AttendanceStatus,
        shift: ShiftType,
        punctuality: Optional[int] = None,
    ) -> None:
        with self._lock:
            key = (int(employee_id), business_date)
            record = self._rows.get(key)
            if record is None:
                raise NotFound("No attendance record for this date")
            if not CHECK_IN_GUARD.matches(record):
                raise Conflict("Check-in already recorded")
            self._rows[key] = replace(
                record,
                check_in_time=check_in_time,
                status=status,
                shift=shift,
                punctuality=punctuality,
            )

    def record_check_out(self, employee_id: int, business_date: date, *, check_out_time: time) -> None:
        with self._lock:
            key = (int(employee_id), business_date)
            record = self._rows.get(key)
            if record is None or not CHECK_OUT_GUARD.matches(record):
                raise NotFound("No active check-in found")
            self._rows[key] = replace(record, check_out_time=check_out_time)

    def finalize_day(
        self,
        business_date: date,
        *,
        default_checkout: Optional[Mapping[ShiftType, time]] = None,
    ) -> FinalizeOutcome:
        counts = {"absent": 0, "backfilled": 0, "late": 0}
        with self._lock:
            for update in finalize_updates(default_checkout):
                counts[update.name] += self._apply(business_date, update)
        return FinalizeOutcome(business_date=business_date, **counts)

    def auto_checkout(self, business_date: date, *, shift: ShiftType, checkout_time: time) -> int:
        with self._lock:
            return self._apply(business_date, auto_checkout_update(shift, checkout_time))

    def get(self, employee_id: int, business_date: date) -> Optional[AttendanceRecord]:
        with self._lock:
            return self._rows.get((int(employee_id), business_date))

    def list_for_employee(self, employee_id: int, *, limit: int) -> Sequence[AttendanceRecord]:
        with self._lock:
            items = [r for r in self._rows.values() if r.employee_id == int(employee_id)]
        items.sort(key=lambda r: r.business_date, reverse=True)
        return items[: int(limit)]

    def list_by_date(self, business_date: date) -> Sequence[AttendanceRecord]:
        with self._lock:
            items = [r for r in self._rows.values() if r.business_date == business_date]
        items.sort(key=lambda r: r.employee_id)
        return items

    def count_by_status(self, business_date: date) -> Mapping[AttendanceStatus, int]:
        counts: dict[AttendanceStatus, int] = {}
        for record in self.list_by_date(business_date):
            counts[record.status] = counts.get(record.status, 0) + 1
        return counts
