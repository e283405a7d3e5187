from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Collection, Optional, Sequence

from ..common.datetime_utils import BusinessClock
from ..common.validators import require_coordinates, require_positive_id
from ..core.constants import CLIENT_SKEW_WARN_SECONDS, DEFAULT_HISTORY_LIMIT
from ..core.enums import Action, Role
from ..core.exceptions import NotFound, PolicyRejected
from ..employees.model import Employee
from ..employees.repository import EmployeeDirectory
from ..geofence.model import GeoPoint
from ..geofence.validator import Geofence
from ..shifts.model import PolicyDecision
from ..shifts.policy import ShiftWindowPolicy, punctuality_score
from .model import AttendanceRecord, CheckResult, StatusSummary
from .repository import AttendanceLedger

logger = logging.getLogger(__name__)


class AttendanceService:
    """Interactive check-in / check-out plus the read side of the ledger.

    Every request runs: input validation -> geofence -> employee lookup ->
    window policy -> ledger. Nothing is written before the last step.
    """

    def __init__(
        self,
        ledger: AttendanceLedger,
        employees: EmployeeDirectory,
        policy: ShiftWindowPolicy,
        geofence: Geofence,
        clock: BusinessClock,
        *,
        exempt_roles: Collection[Role] = (Role.ADMIN,),
    ):
        self._ledger = ledger
        self._employees = employees
        self._policy = policy
        self._geofence = geofence
        self._clock = clock
        self._exempt_roles = frozenset(exempt_roles)

    def _require_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee or not employee.is_active:
            raise NotFound("Employee not found")
        return employee

    def _require_on_site(self, latitude, longitude) -> None:
        lat, lon = require_coordinates(latitude, longitude)
        point = GeoPoint(lat, lon)
        if not self._geofence.contains(point):
            logger.debug("position %.6f,%.6f is %.0fm from site", lat, lon, self._geofence.distance_to(point))
            raise PolicyRejected("Outside company area")

    def _classify(self, action: Action, employee: Employee, now: datetime) -> PolicyDecision:
        decision = self._policy.classify(
            action,
            employee.shift,
            now.time(),
            self._clock.weekday(now.date()),
            role=employee.role,
        )
        if not decision.allowed:
            logger.debug("%s rejected for employee %s at %s: %s", action.value, employee.employee_id, now, decision.reason)
            raise PolicyRejected(decision.reason or "Action not allowed at this time")
        return decision

    def _warn_on_skew(self, employee_id: int, now: datetime, client_time: Optional[datetime]) -> None:
        if client_time is None:
            return
        skew = abs((self._clock.localize(client_time) - now).total_seconds())
        if skew > CLIENT_SKEW_WARN_SECONDS:
            logger.warning("client clock of employee %s is off by %ds; using server time", employee_id, int(skew))

    def check_in(
        self,
        employee_id: int,
        latitude,
        longitude,
        client_time: Optional[datetime] = None,
    ) -> CheckResult:
        employee_id = require_positive_id(employee_id, "employee_id")
        self._require_on_site(latitude, longitude)
        employee = self._require_employee(employee_id)

        now = self._clock.now()
        self._warn_on_skew(employee_id, now, client_time)
        decision = self._classify(Action.CHECK_IN, employee, now)

        today = now.date()
        at = _wall_clock(now)
        self._ledger.ensure_record(employee_id, today, shift=decision.shift)
        self._ledger.record_check_in(
            employee_id,
            today,
            check_in_time=at,
            status=decision.status,
            shift=decision.shift,
            punctuality=punctuality_score(decision.shift, at),
        )

        logger.info("employee %s checked in %s at %s (%s)", employee_id, today, at, decision.status.value)
        return CheckResult(employee_id, today, Action.CHECK_IN, decision.status, at)

    def check_out(self, employee_id: int, latitude, longitude) -> CheckResult:
        employee_id = require_positive_id(employee_id, "employee_id")
        self._require_on_site(latitude, longitude)
        employee = self._require_employee(employee_id)

        now = self._clock.now()
        decision = self._classify(Action.CHECK_OUT, employee, now)

        # Pre-dawn night checkouts close the previous business date.
        business_date = now.date() + timedelta(days=decision.date_offset)

        at = _wall_clock(now)
        try:
            self._ledger.record_check_out(employee_id, business_date, check_out_time=at)
        except NotFound as exc:
            raise NotFound("No active shift") from exc

        record = self._ledger.get(employee_id, business_date)
        logger.info("employee %s checked out %s at %s", employee_id, business_date, at)
        return CheckResult(employee_id, business_date, Action.CHECK_OUT, record.status, at)

    def initialize_day(self, business_date: Optional[date] = None) -> int:
        """Create pending rows for every tracked employee lacking one."""

        business_date = business_date or self._clock.business_date()
        roster = [
            (e.employee_id, e.shift)
            for e in self._employees.list_active()
            if e.role not in self._exempt_roles
        ]
        inserted = self._ledger.ensure_records(business_date, roster)
        logger.info("initialized %s: %d new of %d tracked employees", business_date, inserted, len(roster))
        return inserted

    def get_history(self, employee_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._ledger.list_for_employee(require_positive_id(employee_id, "employee_id"), limit=limit)

    def get_by_date(self, business_date: date) -> Sequence[AttendanceRecord]:
        return self._ledger.list_by_date(business_date)

    def get_summary(self, business_date: date) -> StatusSummary:
        return StatusSummary(business_date=business_date, counts=dict(self._ledger.count_by_status(business_date)))


def _wall_clock(now: datetime) -> time:
    return now.time().replace(microsecond=0, tzinfo=None)
