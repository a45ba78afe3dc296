from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .database.bootstrap import apply_schema, ensure_demo_outlet
from .database.connection import DBConfig

from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .guards.decorators import register_device_cookie
from .progress.controller import register as register_progress
from .sessions.controller import register as register_sessions


def create_app(container: Container | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        if app.config["DEBUG"]:
            print(
                "[outlet-attendance] settings=", settings_module,
                " db=", DBConfig.from_mapping(db_config).describe(),
            )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            statements = apply_schema(db_config, schema_path=schema_path)
            if app.config["DEBUG"]:
                print(f"[outlet-attendance] schema ready (statements={statements})")
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_outlet(db_config)
            if app.config["DEBUG"]:
                print("[outlet-attendance] demo outlet ready")

        container = build_container(db_config=db_config, settings=settings)

    app.extensions["outlet_attendance"] = container

    register_device_cookie(app)
    register_sessions(app, container)
    register_attendance(app, container)
    register_progress(app, container)

    return app
