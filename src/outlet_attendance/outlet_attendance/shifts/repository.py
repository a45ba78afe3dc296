from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import Shift


class ShiftRepository(Protocol):
    """Giao diện repository cho Shift.

    ``get_active_shift`` raises ShiftLookupUnavailable when the backend cannot
    answer, so callers can tell "no shift" from "could not check".
    """

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        raise NotImplementedError

    def get_active_shift(self, user_id: str, outlet_id: int) -> Optional[Shift]:
        raise NotImplementedError

    def close(self, *, shift_id: int, ended_at: datetime) -> bool:
        raise NotImplementedError
