from __future__ import annotations

import atexit
import importlib
import logging
import time
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.settings import EngineSettings
from .database.bootstrap import apply_schema, apply_sql_file, list_tables

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO, format=LOG_FORMAT)
    # APScheduler logs every job execution at INFO.
    logging.getLogger("apscheduler").setLevel(logging.WARNING)


def _load_settings():
    load_dotenv(override=False)
    settings_module = get_settings_module()
    return settings_module, importlib.import_module(settings_module)


def _init_database(settings, engine: EngineSettings) -> None:
    if engine.store_backend != "mysql":
        return
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(engine.db_config, schema_path=DATABASE_DIR / "schema.sql")
        logger.info("schema ready (tables=%d)", len(list_tables(engine.db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_sql_file(engine.db_config, path=DATABASE_DIR / "seed.sql")
        logger.info("demo employees seeded")


def bootstrap(settings=None) -> tuple[EngineSettings, Container]:
    if settings is None:
        settings_module, settings = _load_settings()
    else:
        settings_module = settings.__name__
    configure_logging(bool(getattr(settings, "DEBUG", False)))

    engine = EngineSettings.from_module(settings)
    db = engine.db_config
    logger.info(
        "settings=%s backend=%s db=%s@%s:%s/%s",
        settings_module,
        engine.store_backend,
        db.get("user"),
        db.get("host"),
        db.get("port", 3306),
        db.get("database"),
    )
    _init_database(settings, engine)
    return engine, build_container(settings=engine)


def create_app(settings=None) -> Flask:
    if settings is None:
        _, settings = _load_settings()
    engine, container = bootstrap(settings)

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.extensions["shift_attendance"] = container

    register_attendance(app, container)

    # One scheduler per deployment: leave ENABLE_SCHEDULER off on extra web workers.
    if engine.enable_scheduler:
        container.scheduler.start()
        atexit.register(container.scheduler.shutdown, wait=False)

    return app


def run_scheduler(settings=None, *, poll_seconds: float = 60.0, stop_after: Optional[float] = None) -> None:
    """Run the reconciliation scheduler as a standalone process."""

    _, container = bootstrap(settings)
    container.scheduler.start()
    logger.info("reconciliation jobs: %s", ", ".join(container.scheduler.job_ids))
    started = time.monotonic()
    try:
        while stop_after is None or time.monotonic() - started < stop_after:
            time.sleep(poll_seconds)
    except (KeyboardInterrupt, SystemExit):
        logger.info("shutdown requested")
    finally:
        container.scheduler.shutdown()
