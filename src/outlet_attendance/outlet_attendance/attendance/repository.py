from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceKind
from ..geofence.model import Coordinate
from .model import AttendanceEvent


class AttendanceRepository(Protocol):
    def create_event(
        self,
        *,
        shift_id: int,
        kind: AttendanceKind,
        observed_position: Coordinate,
        distance_meters: float,
        accepted: bool,
        radius_meters: int,
        timestamp: datetime,
    ) -> int:
        raise NotImplementedError

    def get_accepted(self, shift_id: int, kind: AttendanceKind) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def list_for_shift(self, shift_id: int) -> Sequence[AttendanceEvent]:
        raise NotImplementedError
