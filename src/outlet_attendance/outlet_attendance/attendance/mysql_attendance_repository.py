from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import ensure_aware
from ..core.enums import AttendanceKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..geofence.model import Coordinate
from .model import AttendanceEvent
from .repository import AttendanceRepository


_SELECT = """
    SELECT event_id, shift_id, kind, latitude, longitude, distance_meters,
           accepted, radius_meters, created_at
    FROM attendance_events
"""


def _to_event(r: Dict[str, Any]) -> AttendanceEvent:
    return AttendanceEvent(
        event_id=int(r["event_id"]),
        shift_id=int(r["shift_id"]),
        kind=AttendanceKind(r["kind"]),
        observed_position=Coordinate(lat=float(r["latitude"]), lng=float(r["longitude"])),
        distance_meters=float(r["distance_meters"]),
        accepted=bool(r["accepted"]),
        timestamp=ensure_aware(r["created_at"]),
        radius_meters=int(r.get("radius_meters") or 0),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_event(
        self,
        *,
        shift_id: int,
        kind: AttendanceKind,
        observed_position: Coordinate,
        distance_meters: float,
        accepted: bool,
        radius_meters: int,
        timestamp: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_events
                    (shift_id, kind, latitude, longitude, distance_meters, accepted, radius_meters, created_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    int(shift_id),
                    kind.value,
                    observed_position.lat,
                    observed_position.lng,
                    float(distance_meters),
                    1 if accepted else 0,
                    int(radius_meters),
                    timestamp.replace(tzinfo=None),
                ),
            )
            return int(cur.lastrowid)

    def get_accepted(self, shift_id: int, kind: AttendanceKind) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE shift_id=%s AND kind=%s AND accepted=1 ORDER BY event_id LIMIT 1",
                (int(shift_id), kind.value),
            )
            r = fetchone(cur)
            return _to_event(r) if r else None

    def list_for_shift(self, shift_id: int) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE shift_id=%s ORDER BY event_id", (int(shift_id),))
            return [_to_event(r) for r in fetchall(cur)]
