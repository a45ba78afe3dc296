from __future__ import annotations

import logging
from typing import Optional

from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import ProgressRecord
from .repository import ProgressStore

logger = logging.getLogger(__name__)


class MySQLProgressStore(ProgressStore):
    """One row per (device, flow); the payload column holds ProgressRecord JSON."""

    def __init__(self, conn_factory: DatabaseConnection, device_id: str):
        self._conn_factory = conn_factory
        self._device_id = device_id

    def get(self, flow_name: str) -> Optional[ProgressRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT payload FROM flow_progress WHERE device_id=%s AND flow_name=%s",
                (self._device_id, flow_name),
            )
            r = fetchone(cur)
        if not r:
            return None
        try:
            return ProgressRecord.from_json(flow_name, r["payload"])
        except ValidationError:
            # Unreadable rows are treated as no progress; the next write replaces them.
            logger.warning("discarding corrupt progress device=%s flow=%s", self._device_id, flow_name)
            return None

    def set(self, flow_name: str, record: ProgressRecord) -> None:
        # Single statement upsert, so readers see either the old or the new payload.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO flow_progress(device_id, flow_name, payload)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE payload=VALUES(payload)
                """,
                (self._device_id, flow_name, record.to_json()),
            )

    def clear(self, flow_name: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM flow_progress WHERE device_id=%s AND flow_name=%s",
                (self._device_id, flow_name),
            )
