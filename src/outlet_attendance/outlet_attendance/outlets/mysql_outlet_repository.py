from __future__ import annotations

from typing import Any, Dict, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from ..geofence.model import Coordinate
from .model import Outlet
from .repository import OutletRepository


def _to_outlet(r: Dict[str, Any]) -> Outlet:
    radius = r.get("checkin_radius_meters")
    return Outlet(
        outlet_id=int(r["outlet_id"]),
        name=r["outlet_name"],
        center=Coordinate(lat=float(r["latitude"]), lng=float(r["longitude"])),
        radius_meters=int(radius) if radius is not None else None,
        address=r.get("address"),
    )


class MySQLOutletRepository(OutletRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, outlet_id: int) -> Optional[Outlet]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT outlet_id, outlet_name, address, latitude, longitude, checkin_radius_meters
                FROM outlets
                WHERE outlet_id=%s
                """,
                (int(outlet_id),),
            )
            r = fetchone(cur)
            return _to_outlet(r) if r else None
