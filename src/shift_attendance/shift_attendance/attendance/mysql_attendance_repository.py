from __future__ import annotations

from datetime import date, time
from typing import Iterable, Mapping, Optional, Sequence

from ..core.enums import AttendanceStatus, ShiftType
from ..core.exceptions import Conflict, NotFound
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import AttendanceRecord, FinalizeOutcome
from .repository import AttendanceLedger
from .transitions import (
    CHECK_IN_GUARD,
    CHECK_OUT_GUARD,
    ConditionalUpdate,
    Presence,
    RecordFilter,
    auto_checkout_update,
    finalize_updates,
)

_COLUMNS = "record_id, employee_id, business_date, shift, check_in_time, check_out_time, status, punctuality"


def _to_record(r: dict) -> AttendanceRecord:
    punctuality = r.get("punctuality")
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        employee_id=int(r["employee_id"]),
        business_date=r["business_date"],
        status=AttendanceStatus(r["status"]),
        shift=ShiftType(r.get("shift") or ShiftType.UNSPECIFIED),
        check_in_time=normalize_mysql_time(r.get("check_in_time")),
        check_out_time=normalize_mysql_time(r.get("check_out_time")),
        punctuality=int(punctuality) if punctuality is not None else None,
    )


def _render_filter(where: RecordFilter) -> tuple[list[str], list[object]]:
    clauses: list[str] = []
    params: list[object] = []

    if where.statuses is not None:
        statuses = sorted(s.value for s in where.statuses)
        clauses.append(f"status IN ({', '.join(['%s'] * len(statuses))})")
        params.extend(statuses)
    for column, presence in (("check_in_time", where.check_in), ("check_out_time", where.check_out)):
        if presence is Presence.NULL:
            clauses.append(f"{column} IS NULL")
        elif presence is Presence.SET:
            clauses.append(f"{column} IS NOT NULL")
    if where.shift is not None:
        clauses.append("shift=%s")
        params.append(where.shift.value)
    if where.missing_any_time:
        clauses.append("(check_in_time IS NULL OR check_out_time IS NULL)")
    return clauses, params


def render_update(update: ConditionalUpdate, business_date: date) -> tuple[str, tuple]:
    """Render one conditional update as a single UPDATE statement."""

    assignments: list[str] = []
    params: list[object] = []

    if update.set_status is not None:
        assignments.append("status=%s")
        params.append(update.set_status.value)
    for column, value in (("check_in_time", update.set_check_in), ("check_out_time", update.set_check_out)):
        if value is None:
            continue
        assignments.append(f"{column}=COALESCE({column}, %s)" if update.fill_only else f"{column}=%s")
        params.append(value)

    clauses, where_params = _render_filter(update.where)
    sql = f"UPDATE attendance SET {', '.join(assignments)} WHERE {' AND '.join(['business_date=%s', *clauses])}"
    return sql, tuple([*params, business_date, *where_params])


class MySQLAttendanceLedger(AttendanceLedger):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def ensure_record(self, employee_id: int, business_date: date, *, shift: ShiftType = ShiftType.UNSPECIFIED) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # The (employee_id, business_date) unique key turns a duplicate into a no-op.
            cur.execute(
                """
                INSERT IGNORE INTO attendance(employee_id, business_date, shift, status)
                VALUES(%s,%s,%s,%s)
                """,
                (int(employee_id), business_date, shift.value, AttendanceStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def ensure_records(self, business_date: date, employees: Iterable[tuple[int, ShiftType]]) -> int:
        rows = [
            (int(employee_id), business_date, shift.value, AttendanceStatus.PENDING.value)
            for employee_id, shift in employees
        ]
        if not rows:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT IGNORE INTO attendance(employee_id, business_date, shift, status)
                VALUES(%s,%s,%s,%s)
                """,
                rows,
            )
            return max(int(cur.rowcount), 0)

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
        clauses, guard_params = _render_filter(CHECK_IN_GUARD)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE attendance
                SET check_in_time=%s, status=%s, shift=%s, punctuality=%s
                WHERE employee_id=%s AND business_date=%s AND {' AND '.join(clauses)}
                """,
                (check_in_time, status.value, shift.value, punctuality, int(employee_id), business_date, *guard_params),
            )
            if cur.rowcount > 0:
                return

            cur.execute(
                "SELECT record_id FROM attendance WHERE employee_id=%s AND business_date=%s",
                (int(employee_id), business_date),
            )
            if fetchone(cur) is None:
                raise NotFound("No attendance record for this date")
            raise Conflict("Check-in already recorded")

    def record_check_out(self, employee_id: int, business_date: date, *, check_out_time: time) -> None:
        clauses, guard_params = _render_filter(CHECK_OUT_GUARD)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE attendance
                SET check_out_time=%s
                WHERE employee_id=%s AND business_date=%s AND {' AND '.join(clauses)}
                """,
                (check_out_time, int(employee_id), business_date, *guard_params),
            )
            if cur.rowcount == 0:
                raise NotFound("No active check-in found")

    def finalize_day(
        self,
        business_date: date,
        *,
        default_checkout: Optional[Mapping[ShiftType, time]] = None,
    ) -> FinalizeOutcome:
        counts = {"absent": 0, "backfilled": 0, "late": 0}
        with db_cursor(self._conn_factory) as (_, cur):
            for update in finalize_updates(default_checkout):
                sql, params = render_update(update, business_date)
                cur.execute(sql, params)
                counts[update.name] += max(int(cur.rowcount), 0)
        return FinalizeOutcome(business_date=business_date, **counts)

    def auto_checkout(self, business_date: date, *, shift: ShiftType, checkout_time: time) -> int:
        sql, params = render_update(auto_checkout_update(shift, checkout_time), business_date)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return max(int(cur.rowcount), 0)

    def get(self, employee_id: int, business_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE employee_id=%s AND business_date=%s",
                (int(employee_id), business_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_employee(self, employee_id: int, *, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE employee_id=%s
                ORDER BY business_date DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_by_date(self, business_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE business_date=%s ORDER BY employee_id ASC",
                (business_date,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count_by_status(self, business_date: date) -> Mapping[AttendanceStatus, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT status, COUNT(*) AS total
                FROM attendance
                WHERE business_date=%s
                GROUP BY status
                """,
                (business_date,),
            )
            return {AttendanceStatus(r["status"]): int(r["total"]) for r in fetchall(cur)}
