from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.memory_attendance_repository import InMemoryAttendanceLedger
from .attendance.mysql_attendance_repository import MySQLAttendanceLedger
from .attendance.repository import AttendanceLedger
from .attendance.service import AttendanceService
from .common.datetime_utils import BusinessClock
from .core.settings import EngineSettings
from .database.connection import DBConfig, DatabaseConnection
from .employees.memory_employee_repository import InMemoryEmployeeDirectory, employee_from_dict
from .employees.mysql_employee_repository import MySQLEmployeeDirectory
from .employees.repository import EmployeeDirectory
from .geofence.model import GeoPoint
from .geofence.validator import Geofence
from .scheduler.jobs import ReconciliationJobs
from .scheduler.runner import ReconciliationScheduler, default_schedule, validate_schedule
from .shifts.policy import ShiftWindowPolicy


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    employees: EmployeeDirectory
    ledger: AttendanceLedger

    clock: BusinessClock
    policy: ShiftWindowPolicy
    geofence: Geofence

    attendance_service: AttendanceService
    jobs: ReconciliationJobs
    scheduler: ReconciliationScheduler


def build_container(*, settings: EngineSettings, clock: Optional[BusinessClock] = None) -> Container:
    clock = clock or BusinessClock(settings.utc_offset_hours)

    conn: Optional[DatabaseConnection] = None
    if settings.store_backend == "memory":
        employees: EmployeeDirectory = InMemoryEmployeeDirectory(
            employee_from_dict(e) for e in settings.demo_employees
        )
        ledger: AttendanceLedger = InMemoryAttendanceLedger()
    else:
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(settings.db_config))
        employees = MySQLEmployeeDirectory(conn)
        ledger = MySQLAttendanceLedger(conn)

    schedule = settings.schedule
    policy = ShiftWindowPolicy.default(
        guards=settings.checkout_guards,
        saturday_checkout=(schedule.saturday_checkout_at, schedule.saturday_checkout_until),
    )
    geofence = Geofence(GeoPoint(*settings.geofence_center), settings.geofence_radius_m)

    attendance_service = AttendanceService(
        ledger,
        employees,
        policy,
        geofence,
        clock,
        exempt_roles=settings.exempt_roles,
    )
    jobs = ReconciliationJobs(
        ledger,
        attendance_service,
        clock,
        working_weekdays=settings.working_weekdays,
    )

    entries = default_schedule(jobs, schedule)
    validate_schedule(entries, policy)
    scheduler = ReconciliationScheduler(entries, timezone=clock.tz)

    return Container(
        conn=conn,
        employees=employees,
        ledger=ledger,
        clock=clock,
        policy=policy,
        geofence=geofence,
        attendance_service=attendance_service,
        jobs=jobs,
        scheduler=scheduler,
    )
