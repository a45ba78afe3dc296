"""Geofence decision: is an observed position inside an outlet's check-in circle?"""

from __future__ import annotations

import math
from typing import Any, Mapping

from ..common.validators import require_coordinate, require_radius
from ..core.constants import EARTH_RADIUS_METERS
from .model import Coordinate, GeofenceResult


def parse_coordinate(lat: Any, lng: Any) -> Coordinate:
    """Build a validated Coordinate; raises InvalidCoordinate on bad input."""
    return Coordinate(
        lat=require_coordinate(lat, "Vĩ độ (lat)", limit=90),
        lng=require_coordinate(lng, "Kinh độ (lng)", limit=180),
    )


def parse_position(payload: Mapping[str, Any] | None) -> Coordinate:
    """Accept ``{"lat", "lng"}`` as well as ``{"latitude", "longitude"}``."""
    payload = payload or {}
    lat = payload.get("lat", payload.get("latitude"))
    lng = payload.get("lng", payload.get("longitude"))
    return parse_coordinate(lat, lng)


def haversine_m(a: Coordinate, b: Coordinate) -> float:
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    dlat = lat2 - lat1
    dlng = math.radians(b.lng - a.lng)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    # Rounding can push h a hair above 1 for antipodal points.
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(h))


def evaluate(center: Coordinate, radius_meters: int, observed: Coordinate) -> GeofenceResult:
    """Distance from ``center`` to ``observed`` and whether it is within the radius.

    The boundary is inclusive. Both coordinates are re-validated so a
    hand-built Coordinate with NaN or out-of-range values is reported too.
    """

    center = parse_coordinate(center.lat, center.lng)
    observed = parse_coordinate(observed.lat, observed.lng)
    radius_meters = require_radius(radius_meters)

    distance = haversine_m(center, observed)
    return GeofenceResult(distance_meters=distance, accepted=distance <= radius_meters)
