from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceKind
from ...core.exceptions import ValidationError
from ...shifts.model import Shift
from ...shifts.repository import ShiftRepository
from ..repository import AttendanceRepository
from .base import AttendanceStrategy


class CheckInStrategy(AttendanceStrategy):
    """Check-in: only once per shift."""

    kind = AttendanceKind.CHECK_IN

    def ensure_allowed(self, *, shift: Shift, events: AttendanceRepository) -> None:
        if events.get_accepted(shift.shift_id, AttendanceKind.CHECK_IN):
            raise ValidationError("Bạn đã check-in ca này rồi")

    def after_accepted(self, *, shift: Shift, shifts: ShiftRepository, now: datetime) -> None:
        return None
