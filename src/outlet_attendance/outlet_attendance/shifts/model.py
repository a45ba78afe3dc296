from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Shift:
    """Thực thể miền (domain): Ca làm việc của nhân viên tại một outlet.

    Ca đang hoạt động khi chưa có ``ended_at``.
    """

    shift_id: int
    user_id: str
    outlet_id: int
    started_at: datetime
    ended_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.ended_at is None
