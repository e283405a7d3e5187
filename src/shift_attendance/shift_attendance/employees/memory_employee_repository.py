from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..core.enums import Role, ShiftType
from .model import Employee
from .repository import EmployeeDirectory


def employee_from_dict(data: dict) -> Employee:
    return Employee(
        employee_id=int(data["id"]),
        name=str(data.get("name", "")),
        role=Role(data.get("role", Role.STAFF.value)),
        shift=ShiftType(data.get("shift") or ShiftType.UNSPECIFIED),
        is_active=bool(data.get("is_active", True)),
    )


class InMemoryEmployeeDirectory(EmployeeDirectory):
    def __init__(self, employees: Iterable[Employee] = ()):
        self._by_id = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._by_id.get(int(employee_id))

    def list_active(self) -> Sequence[Employee]:
        return [e for _, e in sorted(self._by_id.items()) if e.is_active]
