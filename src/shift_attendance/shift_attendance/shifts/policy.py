from __future__ import annotations

import logging
from datetime import time
from typing import Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import seconds_of_day
from ..core.enums import ALL_WEEKDAYS, Action, AttendanceStatus, Role, ShiftType, Weekday
from .model import PolicyDecision, ShiftWindow, WindowGuard

logger = logging.getLogger(__name__)

REASON_OUTSIDE_WINDOW = "outside allowed window"

# Linear punctuality ramp: 100 at/before the first bound, 0 at/after the second.
DEFAULT_PUNCTUALITY_ANCHORS: Mapping[ShiftType, tuple[time, time]] = {
    ShiftType.DAY: (time(7, 0), time(8, 0)),
    ShiftType.NIGHT: (time(19, 0), time(20, 0)),
}


def build_default_windows(
    *,
    saturday_checkout: tuple[time, time] = (time(15, 0), time(15, 59, 59)),
) -> list[ShiftWindow]:
    """Canonical window table, most specific rows first."""

    saturday = frozenset({Weekday.SATURDAY})
    not_saturday = ALL_WEEKDAYS - saturday

    return [
        # check-in
        ShiftWindow(ShiftType.DAY, Action.CHECK_IN, time(7, 30), time(8, 0), AttendanceStatus.PRESENT),
        ShiftWindow(ShiftType.DAY, Action.CHECK_IN, time(8, 1), time(9, 0), AttendanceStatus.LATE),
        ShiftWindow(ShiftType.NIGHT, Action.CHECK_IN, time(19, 30), time(20, 0), AttendanceStatus.PRESENT),
        ShiftWindow(ShiftType.NIGHT, Action.CHECK_IN, time(20, 1), time(21, 0), AttendanceStatus.LATE),
        # check-out
        ShiftWindow(
            ShiftType.DAY, Action.CHECK_OUT, saturday_checkout[0], saturday_checkout[1], weekdays=saturday
        ),
        ShiftWindow(ShiftType.DAY, Action.CHECK_OUT, time(18, 0), time(18, 59, 59), weekdays=not_saturday),
        ShiftWindow(ShiftType.NIGHT, Action.CHECK_OUT, time(6, 0), time(7, 55), date_offset=-1),
    ]


def _overlap(a: ShiftWindow, b: ShiftWindow) -> bool:
    if a.action != b.action or a.shift != b.shift:
        return False
    if a.roles is not None or b.roles is not None:
        return False
    if not (a.weekdays & b.weekdays):
        return False
    return a.start <= b.end and b.start <= a.end


class ShiftWindowPolicy:
    """Declarative window table evaluated by a single matching function."""

    def __init__(self, windows: Sequence[ShiftWindow], guards: Iterable[WindowGuard] = ()):
        self._windows = tuple(windows)
        self._guards = tuple(guards)

        for i, a in enumerate(self._windows):
            for b in self._windows[i + 1 :]:
                if _overlap(a, b):
                    raise ValueError(f"Overlapping windows: {a.describe()} / {b.describe()}")

    @classmethod
    def default(
        cls,
        guards: Iterable[WindowGuard] = (),
        *,
        saturday_checkout: tuple[time, time] = (time(15, 0), time(15, 59, 59)),
    ) -> "ShiftWindowPolicy":
        return cls(build_default_windows(saturday_checkout=saturday_checkout), guards)

    @property
    def windows(self) -> tuple[ShiftWindow, ...]:
        return self._windows

    def classify(
        self,
        action: Action | str,
        shift_hint: Optional[ShiftType | str],
        now_time: time,
        weekday: Weekday | int | str,
        *,
        role: Optional[Role] = None,
    ) -> PolicyDecision:
        action = Action(action)
        shift_hint = ShiftType(shift_hint or ShiftType.UNSPECIFIED)
        weekday = Weekday.parse(weekday)

        for window in self._windows:
            if not window.applies(action=action, shift_hint=shift_hint, weekday=weekday, role=role):
                continue
            if not window.contains(now_time):
                continue

            for guard in self._guards:
                if guard.blocks(action=action, now_time=now_time, weekday=weekday, role=role):
                    logger.debug("guard rejected %s at %s (%s)", action.value, now_time, guard.reason)
                    return PolicyDecision.rejected(guard.reason, window)

            return PolicyDecision(allowed=True, status=window.status, window=window)

        return PolicyDecision.rejected(REASON_OUTSIDE_WINDOW)

    def checkout_close_offset(self, shift: ShiftType, weekdays: Iterable[Weekday] = ALL_WEEKDAYS) -> Optional[int]:
        """When the last checkout window of ``shift`` on ``weekdays`` closes, in seconds from the business date start."""
        days = frozenset(weekdays)
        ends = [
            -w.date_offset * 86400 + seconds_of_day(w.end)
            for w in self._windows
            if w.action == Action.CHECK_OUT and w.shift == shift and w.weekdays & days
        ]
        return max(ends, default=None)

    def latest_checkout_offset(self) -> int:
        """Seconds after the start of a business date at which its last checkout window closes."""
        ends = [
            -w.date_offset * 86400 + seconds_of_day(w.end)
            for w in self._windows
            if w.action == Action.CHECK_OUT
        ]
        return max(ends, default=0)


def punctuality_score(
    shift: ShiftType,
    check_in: time,
    anchors: Mapping[ShiftType, tuple[time, time]] = DEFAULT_PUNCTUALITY_ANCHORS,
) -> Optional[int]:
    bounds = anchors.get(shift)
    if not bounds:
        return None

    start, end = (seconds_of_day(t) for t in bounds)
    at = seconds_of_day(check_in)
    if at <= start:
        return 100
    if at >= end:
        return 0
    return round((end - at) / (end - start) * 100)
