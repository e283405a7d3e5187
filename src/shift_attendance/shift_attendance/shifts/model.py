from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..core.enums import ALL_WEEKDAYS, Action, AttendanceStatus, Role, ShiftType, Weekday


@dataclass(frozen=True)
class ShiftWindow:
    """One row of the policy table.

    ``start`` and ``end`` are inclusive wall-clock bounds at second
    resolution. ``date_offset`` is added to today's business date to find
    the record the action belongs to (-1 for the pre-dawn night checkout).
    """

    shift: ShiftType
    action: Action
    start: time
    end: time
    status: Optional[AttendanceStatus] = None
    date_offset: int = 0
    weekdays: frozenset[Weekday] = ALL_WEEKDAYS
    roles: Optional[frozenset[Role]] = None

    def contains(self, now_time: time) -> bool:
        return self.start <= now_time.replace(microsecond=0, tzinfo=None) <= self.end

    def applies(self, *, action: Action, shift_hint: ShiftType, weekday: Weekday, role: Optional[Role]) -> bool:
        if action != self.action or weekday not in self.weekdays:
            return False
        if shift_hint != ShiftType.UNSPECIFIED and shift_hint != self.shift:
            return False
        if self.roles is not None and role not in self.roles:
            return False
        return True

    def describe(self) -> str:
        return f"{self.shift.value} {self.action.value} {self.start:%H:%M:%S}-{self.end:%H:%M:%S}"


@dataclass(frozen=True)
class WindowGuard:
    """Extra restriction on an already matched window; it never widens one."""

    action: Action
    not_before: time
    weekdays: frozenset[Weekday]
    roles: Optional[frozenset[Role]] = None
    reason: str = "not allowed before the configured time today"

    def blocks(self, *, action: Action, now_time: time, weekday: Weekday, role: Optional[Role]) -> bool:
        if action != self.action or weekday not in self.weekdays:
            return False
        if self.roles is not None and role not in self.roles:
            return False
        return now_time.replace(microsecond=0, tzinfo=None) < self.not_before


@dataclass(frozen=True)
class PolicyDecision:
    allowed: bool
    status: Optional[AttendanceStatus] = None
    reason: Optional[str] = None
    window: Optional[ShiftWindow] = None

    @classmethod
    def rejected(cls, reason: str, window: Optional[ShiftWindow] = None) -> "PolicyDecision":
        return cls(allowed=False, reason=reason, window=window)

    @property
    def date_offset(self) -> int:
        return self.window.date_offset if self.window else 0

    @property
    def shift(self) -> ShiftType:
        return self.window.shift if self.window else ShiftType.UNSPECIFIED
