from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceKind
from ...core.exceptions import ValidationError
from ...shifts.model import Shift
from ...shifts.repository import ShiftRepository
from ..repository import AttendanceRepository
from .base import AttendanceStrategy


class CheckOutStrategy(AttendanceStrategy):
    """Check-out: needs an accepted check-in; an accepted check-out closes the shift."""

    kind = AttendanceKind.CHECK_OUT

    def ensure_allowed(self, *, shift: Shift, events: AttendanceRepository) -> None:
        if not events.get_accepted(shift.shift_id, AttendanceKind.CHECK_IN):
            raise ValidationError("Bạn chưa check-in ca này")
        if events.get_accepted(shift.shift_id, AttendanceKind.CHECK_OUT):
            raise ValidationError("Bạn đã check-out ca này rồi")

    def after_accepted(self, *, shift: Shift, shifts: ShiftRepository, now: datetime) -> None:
        shifts.close(shift_id=shift.shift_id, ended_at=now)
