from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

from ..core.enums import ProgressState
from ..sessions.identity import has_session_changed
from .model import ProgressRecord
from .repository import ProgressStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MountResult:
    state: ProgressState
    record: Optional[ProgressRecord]
    was_reset: bool = False


class SessionResetPolicy:
    """Decide whether a flow's stored progress is honored or cleared.

    Two independent triggers clear a flow:

    * ``on_mount`` compares the record's marker with the live session marker
      and clears on change (FRESH -> BOUND, or STALE -> clear -> FRESH).
    * ``on_unload`` is the backstop for markers that update late. It clears
      only a record that is not bound to the live marker, so a plain reload
      keeps progress.

    Both are idempotent and may run in either order.
    """

    def __init__(self, store: ProgressStore, *, reset_on_unload: bool = True):
        self._store = store
        self._reset_on_unload = reset_on_unload

    def on_mount(self, flow_name: str, current_marker: Optional[str]) -> MountResult:
        record = self._store.get(flow_name)
        if record is None:
            return MountResult(state=ProgressState.FRESH, record=None)

        if has_session_changed(record.session_marker, current_marker):
            logger.info("new login session detected; resetting %s", flow_name)
            # STALE is never handed out: clear before anyone reads the record.
            self._store.clear(flow_name)
            return MountResult(state=ProgressState.FRESH, record=None, was_reset=True)

        if not record.session_marker and current_marker:
            # Legacy record without a baseline: bind it to this session.
            record = replace(record, session_marker=current_marker)
            self._store.set(flow_name, record)

        return MountResult(state=ProgressState.BOUND, record=record)

    def on_unload(self, flow_name: str, live_marker: Optional[str] = None) -> bool:
        """Returns True when a record was cleared."""
        if not self._reset_on_unload:
            return False

        record = self._store.get(flow_name)
        if record is None:
            return False
        if live_marker and record.session_marker == live_marker:
            return False

        logger.info("unload signal cleared %s", flow_name)
        self._store.clear(flow_name)
        return True

    def classify(self, flow_name: str, current_marker: Optional[str]) -> ProgressState:
        """Read-only view of the state ``on_mount`` would start from."""
        record = self._store.get(flow_name)
        if record is None:
            return ProgressState.FRESH
        if has_session_changed(record.session_marker, current_marker):
            return ProgressState.STALE
        return ProgressState.BOUND
