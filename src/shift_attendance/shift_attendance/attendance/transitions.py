"""Set-based state transitions applied to the attendance ledger.

Every bulk change is a ``ConditionalUpdate``: a filter over the rows of one
business date plus the columns to write. The MySQL ledger renders them as
single UPDATE statements; the in-memory ledger applies them row by row.
Both read the same rules from here.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import time
from enum import Enum
from typing import Mapping, Optional

from ..core.constants import SYNTHETIC_TIME
from ..core.enums import AttendanceStatus, ShiftType
from .model import AttendanceRecord

# Checkout written by finalize when a shift was left open.
DEFAULT_SHIFT_END: Mapping[ShiftType, time] = {
    ShiftType.DAY: time(18, 0),
    ShiftType.NIGHT: time(6, 0),
    ShiftType.UNSPECIFIED: SYNTHETIC_TIME,
}

OPEN_STATUSES = frozenset({AttendanceStatus.PENDING, AttendanceStatus.PRESENT, AttendanceStatus.LATE})


class Presence(str, Enum):
    ANY = "any"
    NULL = "null"
    SET = "set"

    def matches(self, value: Optional[time]) -> bool:
        if self is Presence.NULL:
            return value is None
        if self is Presence.SET:
            return value is not None
        return True


@dataclass(frozen=True)
class RecordFilter:
    statuses: Optional[frozenset[AttendanceStatus]] = None
    check_in: Presence = Presence.ANY
    check_out: Presence = Presence.ANY
    shift: Optional[ShiftType] = None
    missing_any_time: bool = False

    def matches(self, record: AttendanceRecord) -> bool:
        if self.statuses is not None and record.status not in self.statuses:
            return False
        if not self.check_in.matches(record.check_in_time):
            return False
        if not self.check_out.matches(record.check_out_time):
            return False
        if self.shift is not None and record.shift != self.shift:
            return False
        if self.missing_any_time and record.check_in_time is not None and record.check_out_time is not None:
            return False
        return True


@dataclass(frozen=True)
class ConditionalUpdate:
    """``fill_only`` writes times only into NULL columns (COALESCE semantics)."""

    name: str
    where: RecordFilter
    set_status: Optional[AttendanceStatus] = None
    set_check_in: Optional[time] = None
    set_check_out: Optional[time] = None
    fill_only: bool = False

    def apply(self, record: AttendanceRecord) -> AttendanceRecord:
        changes: dict = {}
        if self.set_status is not None:
            changes["status"] = self.set_status
        if self.set_check_in is not None and not (self.fill_only and record.check_in_time is not None):
            changes["check_in_time"] = self.set_check_in
        if self.set_check_out is not None and not (self.fill_only and record.check_out_time is not None):
            changes["check_out_time"] = self.set_check_out
        return replace(record, **changes)


CHECK_IN_GUARD = RecordFilter(statuses=frozenset({AttendanceStatus.PENDING}), check_in=Presence.NULL)
CHECK_OUT_GUARD = RecordFilter(statuses=OPEN_STATUSES, check_in=Presence.SET, check_out=Presence.NULL)


ABSENT_FILL = ConditionalUpdate(
    name="absent",
    where=RecordFilter(statuses=frozenset({AttendanceStatus.PENDING}), check_in=Presence.NULL),
    set_status=AttendanceStatus.ABSENT,
    set_check_in=SYNTHETIC_TIME,
    set_check_out=SYNTHETIC_TIME,
)

# Absent is terminal: only the empty time columns are filled.
ABSENT_BACKFILL = ConditionalUpdate(
    name="backfilled",
    where=RecordFilter(statuses=frozenset({AttendanceStatus.ABSENT}), missing_any_time=True),
    set_check_in=SYNTHETIC_TIME,
    set_check_out=SYNTHETIC_TIME,
    fill_only=True,
)


def late_fill(shift: ShiftType, checkout: time) -> ConditionalUpdate:
    return ConditionalUpdate(
        name="late",
        where=RecordFilter(
            statuses=frozenset({AttendanceStatus.PRESENT, AttendanceStatus.PENDING}),
            check_in=Presence.SET,
            check_out=Presence.NULL,
            shift=shift,
        ),
        set_status=AttendanceStatus.LATE,
        set_check_out=checkout,
    )


def finalize_updates(default_checkout: Optional[Mapping[ShiftType, time]] = None) -> list[ConditionalUpdate]:
    """Ordered rules that close one business date."""

    ends = dict(DEFAULT_SHIFT_END)
    ends.update(default_checkout or {})
    updates = [ABSENT_FILL, ABSENT_BACKFILL]
    updates.extend(late_fill(shift, ends[shift]) for shift in ShiftType)
    return updates


def auto_checkout_update(shift: ShiftType, checkout: time) -> ConditionalUpdate:
    """Close dangling shifts of one type; anything still open ends up late."""

    return ConditionalUpdate(
        name="auto_checkout",
        where=RecordFilter(
            statuses=frozenset({AttendanceStatus.PRESENT, AttendanceStatus.LATE}),
            check_in=Presence.SET,
            check_out=Presence.NULL,
            shift=shift,
        ),
        set_status=AttendanceStatus.LATE,
        set_check_out=checkout,
    )
