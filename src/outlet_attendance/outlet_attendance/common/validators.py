from __future__ import annotations

import math
from typing import Any

from ..core.exceptions import InvalidCoordinate, ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} không hợp lệ")
    return value.strip()


def require_coordinate(value: Any, field_name: str, *, limit: float) -> float:
    """Parse a signed decimal degree and check it lies within [-limit, limit].

    Out-of-range values are reported, never clamped.
    """

    if value is None or value == "" or isinstance(value, bool):
        raise InvalidCoordinate(f"{field_name} là bắt buộc")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidCoordinate(f"{field_name} không phải là số: {value!r}")

    if math.isnan(number) or not (-limit <= number <= limit):
        raise InvalidCoordinate(f"{field_name} phải nằm trong khoảng [-{limit:g}, {limit:g}]")
    return number


def require_radius(value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError("Bán kính check-in không hợp lệ")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value < 0:
        raise ValidationError("Bán kính check-in phải là số nguyên >= 0")
    return value
