from __future__ import annotations

from typing import Optional, Protocol

from .model import Outlet


class OutletRepository(Protocol):
    def get_by_id(self, outlet_id: int) -> Optional[Outlet]:
        raise NotImplementedError
