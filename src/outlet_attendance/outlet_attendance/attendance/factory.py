from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import AttendanceKind
from .strategies.base import AttendanceStrategy
from .strategies.checkin_strategy import CheckInStrategy
from .strategies.checkout_strategy import CheckOutStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose the strategy for an attendance kind."""

    def for_kind(self, kind: AttendanceKind) -> AttendanceStrategy:
        if kind == AttendanceKind.CHECK_IN:
            return CheckInStrategy()
        if kind == AttendanceKind.CHECK_OUT:
            return CheckOutStrategy()
        raise ValueError(f"Unsupported attendance kind: {kind!r}")
