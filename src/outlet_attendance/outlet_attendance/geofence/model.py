from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Coordinate:
    """Điểm GPS (độ thập phân có dấu)."""

    lat: float
    lng: float


@dataclass(frozen=True)
class GeofenceResult:
    distance_meters: float
    accepted: bool
