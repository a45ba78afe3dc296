"""Create the database, apply ``database/schema.sql`` and seed a demo outlet."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Iterator, Mapping

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

# schema.sql carries its own CREATE DATABASE/USE; the configured name wins.
_DB_DIRECTIVE = re.compile(r"(?im)^[ \t]*(?:CREATE\s+DATABASE|USE)\b[^;]*;[ \t]*$")
_STATEMENT_END = re.compile(r";[ \t]*$", re.MULTILINE)

DEMO_OUTLET = ("Outlet Demo", "Quận Bình Thạnh, TP.HCM", 10.823553418004595, 106.6935899631407, 200)


def _connect(cfg: DBConfig, *, with_database: bool = True):
    kwargs = dict(
        host=cfg.host,
        port=cfg.port,
        user=cfg.user,
        password=cfg.password,
        connection_timeout=cfg.connection_timeout,
        charset=cfg.charset,
    )
    if with_database:
        kwargs["database"] = cfg.database
    return mysql.connector.connect(**kwargs)


def schema_statements(sql: str) -> Iterator[str]:
    """Split a schema file into statements.

    A statement ends with ``;`` at the end of a line; the schema keeps
    semicolons out of string literals.
    """
    for chunk in _STATEMENT_END.split(_DB_DIRECTIVE.sub("", sql)):
        stmt = chunk.strip()
        if stmt:
            yield stmt


def ensure_database_exists(db_config: Mapping[str, Any]) -> None:
    cfg = DBConfig.from_mapping(db_config)
    conn = _connect(cfg, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(f"CREATE DATABASE IF NOT EXISTS `{cfg.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: Mapping[str, Any], *, schema_path: str | Path) -> int:
    """Idempotent (CREATE TABLE IF NOT EXISTS). Returns the number of statements run."""
    ensure_database_exists(db_config)
    statements = list(schema_statements(Path(schema_path).read_text(encoding="utf-8")))

    cfg = DBConfig.from_mapping(db_config)
    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("schema applied to %s (%d statements)", cfg.describe(), len(statements))
    return len(statements)


def ensure_demo_outlet(db_config: Mapping[str, Any]) -> None:
    """Seed one outlet so a fresh dev database has something to check in at."""
    conn = _connect(DBConfig.from_mapping(db_config))
    try:
        cur = conn.cursor()
        cur.execute(
            """
            INSERT INTO outlets (outlet_name, address, latitude, longitude, checkin_radius_meters)
            VALUES (%s, %s, %s, %s, %s)
            ON DUPLICATE KEY UPDATE latitude=VALUES(latitude), longitude=VALUES(longitude),
                checkin_radius_meters=VALUES(checkin_radius_meters)
            """,
            DEMO_OUTLET,
        )
        conn.commit()
    finally:
        conn.close()
