from __future__ import annotations

from datetime import date, time
from typing import Iterable, Mapping, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, ShiftType
from .model import AttendanceRecord, FinalizeOutcome


class AttendanceLedger(Protocol):
    """Authoritative per-(employee, business date) record store.

    At most one row exists per (employee_id, business_date). Mutations are
    conditional updates; a write that no longer applies affects no rows and
    is reported as ``Conflict`` / ``NotFound`` instead of corrupting data.
    """

    def ensure_record(self, employee_id: int, business_date: date, *, shift: ShiftType = ShiftType.UNSPECIFIED) -> bool:
        """Insert a pending row unless one exists. Returns True if inserted."""

        raise NotImplementedError

    def ensure_records(self, business_date: date, employees: Iterable[tuple[int, ShiftType]]) -> int:
        """Set-based ``ensure_record`` for a whole roster. Returns rows inserted."""

        raise NotImplementedError

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
        """Raises Conflict when a check-in is already recorded."""

        raise NotImplementedError

    def record_check_out(self, employee_id: int, business_date: date, *, check_out_time: time) -> None:
        """Close an open check-in; status is left as is. Raises NotFound when nothing is open."""

        raise NotImplementedError

    def finalize_day(
        self,
        business_date: date,
        *,
        default_checkout: Optional[Mapping[ShiftType, time]] = None,
    ) -> FinalizeOutcome:
        raise NotImplementedError

    def auto_checkout(self, business_date: date, *, shift: ShiftType, checkout_time: time) -> int:
        raise NotImplementedError

    def get(self, employee_id: int, business_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int, *, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_by_date(self, business_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_by_status(self, business_date: date) -> Mapping[AttendanceStatus, int]:
        raise NotImplementedError
