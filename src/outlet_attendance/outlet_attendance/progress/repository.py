from __future__ import annotations

from typing import Optional, Protocol

from .model import ProgressRecord


class ProgressStore(Protocol):
    """Per-device persisted progress, keyed by flow name.

    ``set`` overwrites atomically (last-write-wins); ``clear`` on a missing key
    is a no-op.
    """

    def get(self, flow_name: str) -> Optional[ProgressRecord]:
        raise NotImplementedError

    def set(self, flow_name: str, record: ProgressRecord) -> None:
        raise NotImplementedError

    def clear(self, flow_name: str) -> None:
        raise NotImplementedError
