from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from typing import Mapping, Optional

from ..core.enums import Action, AttendanceStatus, ShiftType


def _clock(t: Optional[time]) -> Optional[str]:
    return t.strftime("%H:%M:%S") if t is not None else None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one ledger row per (employee, business date)."""

    record_id: int
    employee_id: int
    business_date: date
    status: AttendanceStatus
    shift: ShiftType = ShiftType.UNSPECIFIED
    check_in_time: Optional[time] = None
    check_out_time: Optional[time] = None
    punctuality: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "date": self.business_date.isoformat(),
            "shift": self.shift.value,
            "check_in_time": _clock(self.check_in_time),
            "check_out_time": _clock(self.check_out_time),
            "status": self.status.value,
            "punctuality": self.punctuality,
        }


@dataclass(frozen=True)
class CheckResult:
    """What a successful check-in / check-out hands back to the caller."""

    employee_id: int
    business_date: date
    action: Action
    status: AttendanceStatus
    time: time

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "date": self.business_date.isoformat(),
            "action": self.action.value,
            "status": self.status.value,
            "time": _clock(self.time),
        }


@dataclass(frozen=True)
class StatusSummary:
    business_date: date
    counts: Mapping[AttendanceStatus, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def to_dict(self) -> dict:
        out = {status.value: int(self.counts.get(status, 0)) for status in AttendanceStatus}
        out["total"] = self.total
        out["date"] = self.business_date.isoformat()
        return out


@dataclass(frozen=True)
class FinalizeOutcome:
    business_date: date
    absent: int = 0
    backfilled: int = 0
    late: int = 0

    @property
    def total(self) -> int:
        return self.absent + self.backfilled + self.late
