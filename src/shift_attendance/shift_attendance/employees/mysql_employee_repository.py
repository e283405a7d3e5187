from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..core.enums import Role, ShiftType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeDirectory

logger = logging.getLogger(__name__)


def _shift(value: Any) -> ShiftType:
    try:
        return ShiftType(value) if value else ShiftType.UNSPECIFIED
    except ValueError:
        return ShiftType.UNSPECIFIED


def _to_employee(row: dict) -> Optional[Employee]:
    """Map a row; rows with an unknown role are skipped, not fatal."""
    try:
        role = Role(row.get("role"))
    except ValueError:
        logger.warning("employee %s has unknown role %r; skipped", row.get("id"), row.get("role"))
        return None
    return Employee(
        employee_id=int(row["id"]),
        name=row.get("name") or "",
        role=role,
        shift=_shift(row.get("shift")),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLEmployeeDirectory(EmployeeDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, name, role, shift, is_active
                FROM employee
                WHERE id=%s
                """,
                (int(employee_id),),
            )
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def list_active(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, name, role, shift, is_active
                FROM employee
                WHERE is_active=1
                ORDER BY id
                """
            )
            employees = (_to_employee(r) for r in fetchall(cur))
            return [e for e in employees if e is not None]
