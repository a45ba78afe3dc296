from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from ...core.enums import AttendanceKind
from ...shifts.model import Shift
from ...shifts.repository import ShiftRepository
from ..repository import AttendanceRepository


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate the rules that differ between check-in and check-out."""

    kind: AttendanceKind

    @abstractmethod
    def ensure_allowed(self, *, shift: Shift, events: AttendanceRepository) -> None:
        """Raise ValidationError when this attempt must not even be evaluated."""
        raise NotImplementedError

    @abstractmethod
    def after_accepted(self, *, shift: Shift, shifts: ShiftRepository, now: datetime) -> None:
        raise NotImplementedError
