from datetime import time

import pytest

from shift_attendance.core.enums import Action, AttendanceStatus, Role, ShiftType, Weekday
from shift_attendance.shifts.model import ShiftWindow, WindowGuard
from shift_attendance.shifts.policy import REASON_OUTSIDE_WINDOW, ShiftWindowPolicy, punctuality_score

WED = Weekday.WEDNESDAY
SAT = Weekday.SATURDAY


@pytest.fixture
def policy():
    return ShiftWindowPolicy.default()


@pytest.mark.parametrize(
    "shift, at, expected",
    [
        (ShiftType.DAY, time(7, 30), AttendanceStatus.PRESENT),
        (ShiftType.DAY, time(7, 45), AttendanceStatus.PRESENT),
        (ShiftType.DAY, time(8, 0), AttendanceStatus.PRESENT),
        (ShiftType.DAY, time(8, 1), AttendanceStatus.LATE),
        (ShiftType.DAY, time(9, 0), AttendanceStatus.LATE),
        (ShiftType.NIGHT, time(19, 30), AttendanceStatus.PRESENT),
        (ShiftType.NIGHT, time(20, 0), AttendanceStatus.PRESENT),
        (ShiftType.NIGHT, time(20, 10), AttendanceStatus.LATE),
        (ShiftType.NIGHT, time(21, 0), AttendanceStatus.LATE),
    ],
)
def test_check_in_windows(policy, shift, at, expected):
    decision = policy.classify(Action.CHECK_IN, shift, at, WED)

    assert decision.allowed
    assert decision.status == expected
    assert decision.shift == shift
    assert decision.date_offset == 0


@pytest.mark.parametrize(
    "at",
    [
        time(7, 29, 59),
        time(8, 0, 1),
        time(8, 0, 30),
        time(9, 0, 1),
        time(9, 0, 30),
        time(12, 0),
        time(19, 29),
        time(20, 0, 30),
        time(21, 0, 1),
        time(21, 0, 30),
        time(23, 59),
    ],
)
def test_check_in_outside_every_window_is_rejected(policy, at):
    decision = policy.classify(Action.CHECK_IN, ShiftType.UNSPECIFIED, at, WED)

    assert not decision.allowed
    assert decision.reason == REASON_OUTSIDE_WINDOW
    assert decision.status is None


def test_specific_shift_only_matches_its_own_windows(policy):
    assert not policy.classify(Action.CHECK_IN, ShiftType.NIGHT, time(7, 45), WED).allowed
    assert not policy.classify(Action.CHECK_IN, ShiftType.DAY, time(19, 45), WED).allowed


def test_unspecified_shift_takes_the_matched_window_shift(policy):
    decision = policy.classify(Action.CHECK_IN, ShiftType.UNSPECIFIED, time(19, 45), WED)

    assert decision.allowed
    assert decision.shift == ShiftType.NIGHT


def test_day_checkout_on_weekday(policy):
    decision = policy.classify(Action.CHECK_OUT, ShiftType.DAY, time(18, 30), WED)

    assert decision.allowed
    assert decision.status is None
    assert decision.date_offset == 0


def test_saturday_checkout_replaces_evening_window(policy):
    assert policy.classify(Action.CHECK_OUT, ShiftType.DAY, time(15, 0), SAT).allowed
    assert policy.classify(Action.CHECK_OUT, ShiftType.DAY, time(15, 59, 59), SAT).allowed
    assert not policy.classify(Action.CHECK_OUT, ShiftType.DAY, time(18, 30), SAT).allowed
    assert not policy.classify(Action.CHECK_OUT, ShiftType.DAY, time(15, 30), WED).allowed


def test_night_checkout_closes_on_the_minute(policy):
    assert policy.classify(Action.CHECK_OUT, ShiftType.NIGHT, time(7, 55), Weekday.THURSDAY).allowed
    assert not policy.classify(Action.CHECK_OUT, ShiftType.NIGHT, time(7, 55, 30), Weekday.THURSDAY).allowed


def test_night_checkout_belongs_to_previous_date(policy):
    decision = policy.classify(Action.CHECK_OUT, ShiftType.NIGHT, time(6, 30), Weekday.THURSDAY)

    assert decision.allowed
    assert decision.date_offset == -1


@pytest.mark.parametrize("at", [time(5, 59, 59), time(7, 55, 1), time(7, 55, 30), time(7, 56), time(12, 0), time(19, 0)])
def test_checkout_between_windows_is_rejected(policy, at):
    assert not policy.classify(Action.CHECK_OUT, ShiftType.UNSPECIFIED, at, WED).allowed


def test_string_arguments_are_accepted(policy):
    decision = policy.classify("check_in", "day", time(7, 45), "wed")

    assert decision.status == AttendanceStatus.PRESENT


def test_guard_narrows_a_matched_window():
    guard = WindowGuard(
        action=Action.CHECK_OUT,
        not_before=time(18, 30),
        weekdays=frozenset({WED}),
        roles=frozenset({Role.STAFF}),
        reason="staff leave after 18:30 on Wednesdays",
    )
    policy = ShiftWindowPolicy.default(guards=[guard])

    blocked = policy.classify(Action.CHECK_OUT, ShiftType.DAY, time(18, 10), WED, role=Role.STAFF)
    assert not blocked.allowed
    assert blocked.reason == "staff leave after 18:30 on Wednesdays"

    assert policy.classify(Action.CHECK_OUT, ShiftType.DAY, time(18, 40), WED, role=Role.STAFF).allowed
    assert policy.classify(Action.CHECK_OUT, ShiftType.DAY, time(18, 10), WED, role=Role.FIELD).allowed
    assert policy.classify(Action.CHECK_OUT, ShiftType.DAY, time(18, 10), Weekday.THURSDAY, role=Role.STAFF).allowed


def test_guard_never_widens():
    guard = WindowGuard(action=Action.CHECK_OUT, not_before=time(12, 0), weekdays=frozenset({WED}))
    policy = ShiftWindowPolicy.default(guards=[guard])

    assert policy.classify(Action.CHECK_OUT, ShiftType.DAY, time(13, 0), WED).reason == REASON_OUTSIDE_WINDOW


def test_overlapping_windows_are_refused():
    windows = [
        ShiftWindow(ShiftType.DAY, Action.CHECK_IN, time(7, 0), time(8, 0), AttendanceStatus.PRESENT),
        ShiftWindow(ShiftType.DAY, Action.CHECK_IN, time(7, 59), time(9, 0), AttendanceStatus.LATE),
    ]

    with pytest.raises(ValueError):
        ShiftWindowPolicy(windows)


def test_disjoint_weekdays_may_share_times():
    windows = [
        ShiftWindow(ShiftType.DAY, Action.CHECK_OUT, time(15, 0), time(18, 0), weekdays=frozenset({SAT})),
        ShiftWindow(ShiftType.DAY, Action.CHECK_OUT, time(15, 0), time(18, 0), weekdays=frozenset({WED})),
    ]

    assert len(ShiftWindowPolicy(windows).windows) == 2


def test_latest_checkout_offset_accounts_for_next_morning(policy):
    assert policy.latest_checkout_offset() == 86400 + 7 * 3600 + 55 * 60


@pytest.mark.parametrize(
    "shift, at, expected",
    [
        (ShiftType.DAY, time(6, 50), 100),
        (ShiftType.DAY, time(7, 0), 100),
        (ShiftType.DAY, time(7, 30), 50),
        (ShiftType.DAY, time(7, 45), 25),
        (ShiftType.DAY, time(8, 0), 0),
        (ShiftType.DAY, time(8, 30), 0),
        (ShiftType.NIGHT, time(20, 10), 0),
        (ShiftType.NIGHT, time(19, 30), 50),
        (ShiftType.UNSPECIFIED, time(7, 30), None),
    ],
)
def test_punctuality_score(shift, at, expected):
    assert punctuality_score(shift, at) == expected


def test_checkout_close_offset_per_shift_and_weekday(policy):
    saturday = frozenset({SAT})

    assert policy.checkout_close_offset(ShiftType.DAY, saturday) == 15 * 3600 + 59 * 60 + 59
    assert policy.checkout_close_offset(ShiftType.DAY, frozenset({WED})) == 18 * 3600 + 59 * 60 + 59
    assert policy.checkout_close_offset(ShiftType.NIGHT) == 86400 + 7 * 3600 + 55 * 60
    assert policy.checkout_close_offset(ShiftType.UNSPECIFIED) is None


def test_saturday_checkout_window_is_configurable():
    policy = ShiftWindowPolicy.default(saturday_checkout=(time(13, 0), time(13, 59, 59)))

    assert policy.classify(Action.CHECK_OUT, ShiftType.DAY, time(13, 30), SAT).allowed
    assert not policy.classify(Action.CHECK_OUT, ShiftType.DAY, time(15, 30), SAT).allowed
