from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import AttendanceKind
from ..geofence.model import Coordinate


@dataclass(frozen=True)
class AttendanceEvent:
    """Thực thể miền (domain): Một lần check-in/check-out tại outlet.

    Mỗi lần thử tạo đúng một sự kiện; sự kiện bị từ chối (ngoài bán kính) vẫn được lưu.
    """

    event_id: int
    shift_id: int
    kind: AttendanceKind
    observed_position: Coordinate
    distance_meters: float
    accepted: bool
    timestamp: datetime
    radius_meters: int = 0
