from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional

import mysql.connector

from ..common.datetime_utils import ensure_aware
from ..core.exceptions import ShiftLookupUnavailable
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Shift
from .repository import ShiftRepository

logger = logging.getLogger(__name__)


def _to_shift(r: Dict[str, Any]) -> Shift:
    ended_at = r.get("ended_at")
    return Shift(
        shift_id=int(r["shift_id"]),
        user_id=str(r["user_id"]),
        outlet_id=int(r["outlet_id"]),
        started_at=ensure_aware(r["started_at"]),
        ended_at=ensure_aware(ended_at) if ended_at else None,
    )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT shift_id, user_id, outlet_id, started_at, ended_at
                FROM shifts
                WHERE shift_id=%s
                """,
                (int(shift_id),),
            )
            r = fetchone(cur)
            return _to_shift(r) if r else None

    def get_active_shift(self, user_id: str, outlet_id: int) -> Optional[Shift]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    SELECT shift_id, user_id, outlet_id, started_at, ended_at
                    FROM shifts
                    WHERE user_id=%s AND outlet_id=%s AND ended_at IS NULL
                    ORDER BY started_at DESC
                    LIMIT 1
                    """,
                    (str(user_id), int(outlet_id)),
                )
                r = fetchone(cur)
        except mysql.connector.Error as e:
            logger.warning("active shift lookup failed user=%s outlet=%s: %s", user_id, outlet_id, e)
            raise ShiftLookupUnavailable(str(e)) from e
        return _to_shift(r) if r else None

    def close(self, *, shift_id: int, ended_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE shifts SET ended_at=%s WHERE shift_id=%s AND ended_at IS NULL",
                (ended_at.replace(tzinfo=None), int(shift_id)),
            )
            return cur.rowcount > 0
