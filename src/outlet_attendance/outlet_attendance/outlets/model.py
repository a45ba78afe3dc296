from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import FALLBACK_CHECKIN_RADIUS_METERS
from ..geofence.model import Coordinate


@dataclass(frozen=True)
class Outlet:
    """Thực thể miền (domain): Điểm bán (outlet) với tâm GPS và bán kính check-in."""

    outlet_id: int
    name: str
    center: Coordinate
    radius_meters: Optional[int]
    address: Optional[str] = None

    def effective_radius(self, project_default: Optional[int] = None) -> int:
        """Outlet radius, else the project's default, else 100 m."""
        if self.radius_meters is not None:
            return self.radius_meters
        if project_default is not None:
            return project_default
        return FALLBACK_CHECKIN_RADIUS_METERS
