from __future__ import annotations

import math
from typing import Any

from ..core.exceptions import ValidationError


def require_coordinate(value: Any, field_name: str, *, limit: float) -> float:
    if value is None or isinstance(value, bool) or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field_name} is required")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{field_name} is not a number") from exc
    if not math.isfinite(number) or abs(number) > limit:
        raise ValidationError(f"{field_name} is out of range")
    return number


def require_coordinates(latitude: Any, longitude: Any) -> tuple[float, float]:
    return (
        require_coordinate(latitude, "latitude", limit=90.0),
        require_coordinate(longitude, "longitude", limit=180.0),
    )


def require_positive_id(value: Any, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{field_name} is not valid") from exc
    if number <= 0:
        raise ValidationError(f"{field_name} is not valid")
    return number
