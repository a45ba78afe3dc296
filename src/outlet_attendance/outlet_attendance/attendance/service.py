from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional, Union

from ..common.datetime_utils import now_utc
from ..core.enums import AttendanceKind
from ..core.exceptions import ValidationError
from ..geofence.model import Coordinate
from ..geofence.validator import evaluate, parse_coordinate, parse_position
from ..outlets.repository import OutletRepository
from ..shifts.repository import ShiftRepository
from .factory import AttendanceStrategyFactory
from .model import AttendanceEvent
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

OUT_OF_RANGE = "OUT_OF_RANGE"

Position = Union[Coordinate, Mapping[str, Any]]


@dataclass(frozen=True)
class AttendanceOutcome:
    """Kết quả một lần check-in/out: sự kiện đã lưu và mã lỗi nếu bị từ chối."""

    event: AttendanceEvent
    error: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.event.accepted

    def message(self) -> str:
        if self.event.accepted:
            if self.event.kind == AttendanceKind.CHECK_IN:
                return "Check-in thành công!"
            return "Check-out thành công!"
        return (
            f"Bạn đang ở quá xa outlet ({self.event.distance_meters:.0f}m > "
            f"{self.event.radius_meters}m)"
        )


class AttendanceService:
    """Use case: geofenced check-in/check-out against the user's active shift."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        outlets: OutletRepository,
        shifts: ShiftRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        default_radius_meters: int | None = None,
    ):
        self._attendance = attendance
        self._outlets = outlets
        self._shifts = shifts
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._default_radius = default_radius_meters

    def check_in(self, user_id: str, outlet_id: int, position: Position, *, now: datetime | None = None) -> AttendanceOutcome:
        return self._attempt(AttendanceKind.CHECK_IN, user_id, outlet_id, position, now=now)

    def check_out(self, user_id: str, outlet_id: int, position: Position, *, now: datetime | None = None) -> AttendanceOutcome:
        return self._attempt(AttendanceKind.CHECK_OUT, user_id, outlet_id, position, now=now)

    def _attempt(
        self,
        kind: AttendanceKind,
        user_id: str,
        outlet_id: int,
        position: Position,
        *,
        now: datetime | None,
    ) -> AttendanceOutcome:
        now = now or now_utc()

        # Malformed GPS never reaches the event log.
        if isinstance(position, Coordinate):
            observed = parse_coordinate(position.lat, position.lng)
        else:
            observed = parse_position(position)

        outlet = self._outlets.get_by_id(outlet_id)
        if not outlet:
            raise ValidationError("Outlet không tồn tại")

        shift = self._shifts.get_active_shift(user_id, outlet_id)
        if not shift:
            raise ValidationError("Bạn chưa có ca làm việc đang hoạt động tại outlet này")

        strategy = self._factory.for_kind(kind)
        strategy.ensure_allowed(shift=shift, events=self._attendance)

        radius = outlet.effective_radius(self._default_radius)
        result = evaluate(outlet.center, radius, observed)

        event_id = self._attendance.create_event(
            shift_id=shift.shift_id,
            kind=kind,
            observed_position=observed,
            distance_meters=result.distance_meters,
            accepted=result.accepted,
            radius_meters=radius,
            timestamp=now,
        )
        event = AttendanceEvent(
            event_id=event_id,
            shift_id=shift.shift_id,
            kind=kind,
            observed_position=observed,
            distance_meters=result.distance_meters,
            accepted=result.accepted,
            timestamp=now,
            radius_meters=radius,
        )

        if not result.accepted:
            logger.info(
                "%s rejected shift=%s distance=%.1fm radius=%sm",
                kind.value, shift.shift_id, result.distance_meters, radius,
            )
            return AttendanceOutcome(event=event, error=OUT_OF_RANGE)

        strategy.after_accepted(shift=shift, shifts=self._shifts, now=now)
        logger.info("%s accepted shift=%s distance=%.1fm", kind.value, shift.shift_id, result.distance_meters)
        return AttendanceOutcome(event=event)

    def history(self, shift_id: int) -> list[dict]:
        return [self._to_ui(e) for e in self._attendance.list_for_shift(shift_id)]

    def _to_ui(self, e: AttendanceEvent) -> dict:
        return {
            "event_id": e.event_id,
            "kind": e.kind.value,
            "time": e.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            "lat": e.observed_position.lat,
            "lng": e.observed_position.lng,
            "distance_meters": round(e.distance_meters, 1),
            "accepted": e.accepted,
        }
