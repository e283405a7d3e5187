from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role, ShiftType


@dataclass(frozen=True)
class Employee:
    """Employee as seen by the engine (read-only, owned by the directory)."""

    employee_id: int
    name: str
    role: Role
    shift: ShiftType = ShiftType.UNSPECIFIED
    is_active: bool = True
