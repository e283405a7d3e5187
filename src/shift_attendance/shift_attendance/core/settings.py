from __future__ import annotations

from dataclasses import dataclass, field
from types import ModuleType
from typing import Any, Iterable, Optional

from ..common.datetime_utils import parse_clock_time
from ..scheduler.triggers import ScheduleSettings
from ..shifts.model import WindowGuard
from .constants import DEFAULT_GEOFENCE_CENTER, DEFAULT_GEOFENCE_RADIUS_M, DEFAULT_UTC_OFFSET_HOURS
from .enums import Action, Role, Weekday

STORE_BACKENDS = ("mysql", "memory")


def _weekdays(values: Iterable[Any]) -> frozenset[Weekday]:
    return frozenset(Weekday.parse(v) for v in values)


def _roles(values: Optional[Iterable[Any]]) -> Optional[frozenset[Role]]:
    if values is None:
        return None
    return frozenset(Role(v) for v in values)


def parse_guard(data: dict) -> WindowGuard:
    """Build a guard from ``{"action", "weekdays", "roles", "not_before", "reason"}``."""

    kwargs = dict(
        action=Action(data.get("action", Action.CHECK_OUT.value)),
        not_before=parse_clock_time(data["not_before"]),
        weekdays=_weekdays(data.get("weekdays", Weekday)),
        roles=_roles(data.get("roles")),
    )
    if data.get("reason"):
        kwargs["reason"] = str(data["reason"])
    return WindowGuard(**kwargs)


@dataclass(frozen=True)
class EngineSettings:
    """Engine configuration read from one of the ``config.*`` modules."""

    store_backend: str = "mysql"
    db_config: dict = field(default_factory=dict)
    utc_offset_hours: float = DEFAULT_UTC_OFFSET_HOURS
    geofence_center: tuple[float, float] = DEFAULT_GEOFENCE_CENTER
    geofence_radius_m: float = DEFAULT_GEOFENCE_RADIUS_M
    working_weekdays: frozenset[Weekday] = frozenset(Weekday) - {Weekday.SUNDAY}
    exempt_roles: frozenset[Role] = frozenset({Role.ADMIN})
    checkout_guards: tuple[WindowGuard, ...] = ()
    enable_scheduler: bool = False
    schedule: ScheduleSettings = ScheduleSettings()
    demo_employees: tuple[dict, ...] = ()

    @classmethod
    def from_module(cls, settings: ModuleType) -> "EngineSettings":
        backend = str(getattr(settings, "STORE_BACKEND", "mysql")).lower()
        if backend not in STORE_BACKENDS:
            raise ValueError(f"STORE_BACKEND must be one of {STORE_BACKENDS}, got {backend!r}")

        center = getattr(settings, "GEOFENCE_CENTER", DEFAULT_GEOFENCE_CENTER)
        return cls(
            store_backend=backend,
            db_config=dict(getattr(settings, "DB_CONFIG", {}) or {}),
            utc_offset_hours=float(getattr(settings, "UTC_OFFSET_HOURS", DEFAULT_UTC_OFFSET_HOURS)),
            geofence_center=(float(center[0]), float(center[1])),
            geofence_radius_m=float(getattr(settings, "GEOFENCE_RADIUS_M", DEFAULT_GEOFENCE_RADIUS_M)),
            working_weekdays=_weekdays(getattr(settings, "WORKING_WEEKDAYS", cls.working_weekdays)),
            exempt_roles=_roles(getattr(settings, "EXEMPT_ROLES", [Role.ADMIN.value])) or frozenset(),
            checkout_guards=tuple(parse_guard(g) for g in getattr(settings, "CHECKOUT_GUARDS", ()) or ()),
            enable_scheduler=bool(getattr(settings, "ENABLE_SCHEDULER", False)),
            schedule=ScheduleSettings.from_mapping(getattr(settings, "SCHEDULE", None)),
            demo_employees=tuple(getattr(settings, "DEMO_EMPLOYEES", ()) or ()),
        )
