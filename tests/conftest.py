from __future__ import annotations

from datetime import datetime

import pytest

from shift_attendance.attendance.memory_attendance_repository import InMemoryAttendanceLedger
from shift_attendance.attendance.service import AttendanceService
from shift_attendance.common.datetime_utils import BusinessClock
from shift_attendance.core.constants import DEFAULT_GEOFENCE_CENTER
from shift_attendance.core.enums import Role, ShiftType
from shift_attendance.employees.memory_employee_repository import InMemoryEmployeeDirectory
from shift_attendance.employees.model import Employee
from shift_attendance.geofence.model import GeoPoint
from shift_attendance.geofence.validator import Geofence
from shift_attendance.shifts.policy import ShiftWindowPolicy

SITE_LAT, SITE_LON = DEFAULT_GEOFENCE_CENTER

ADMIN = Employee(1, "Admin", Role.ADMIN, ShiftType.DAY)
DAY_STAFF = Employee(2, "Day Staff", Role.STAFF, ShiftType.DAY)
NIGHT_STAFF = Employee(3, "Night Staff", Role.STAFF, ShiftType.NIGHT)
FIELD = Employee(4, "Field", Role.FIELD, ShiftType.UNSPECIFIED)
RETIRED = Employee(5, "Retired", Role.STAFF, ShiftType.DAY, is_active=False)


class MutableClock(BusinessClock):
    """Business clock whose instant is moved by the test (naive = local)."""

    def __init__(self, instant: datetime, utc_offset_hours: float = 3):
        self.instant = instant
        super().__init__(utc_offset_hours, source=lambda: self.instant)

    def set(self, instant: datetime) -> None:
        self.instant = instant


@pytest.fixture
def fixed_now() -> datetime:
    # Wednesday
    return datetime(2024, 5, 15, 7, 45)


@pytest.fixture
def clock(fixed_now) -> MutableClock:
    return MutableClock(fixed_now)


@pytest.fixture
def ledger() -> InMemoryAttendanceLedger:
    return InMemoryAttendanceLedger()


@pytest.fixture
def employees() -> InMemoryEmployeeDirectory:
    return InMemoryEmployeeDirectory([ADMIN, DAY_STAFF, NIGHT_STAFF, FIELD, RETIRED])


@pytest.fixture
def policy() -> ShiftWindowPolicy:
    return ShiftWindowPolicy.default()


@pytest.fixture
def geofence() -> Geofence:
    return Geofence(GeoPoint(SITE_LAT, SITE_LON), 100.0)


@pytest.fixture
def service(ledger, employees, policy, geofence, clock) -> AttendanceService:
    return AttendanceService(ledger, employees, policy, geofence, clock)
