from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Employee role, as carried by the external employee directory."""

    ADMIN = "admin"
    STAFF = "staff"
    FIELD = "field"


class ShiftType(str, Enum):
    DAY = "day"
    NIGHT = "night"
    UNSPECIFIED = "unspecified"


class AttendanceStatus(str, Enum):
    """Status stored on the attendance ledger."""

    PENDING = "pending"
    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"


class Action(str, Enum):
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


class Weekday(int, Enum):
    """Day of week, numbered like ``date.weekday()`` (Monday == 0)."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def parse(cls, value: "Weekday | int | str") -> "Weekday":
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls(value)
        key = str(value).strip().upper()
        for member in cls:
            if member.name == key or member.name[:3] == key:
                return member
        raise ValueError(f"Unknown weekday: {value!r}")


ALL_WEEKDAYS = frozenset(Weekday)
