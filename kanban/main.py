from __future__ import annotations

from loguru import logger
from sqlalchemy import Engine

from kanban.core.config import get_settings
from kanban.core.logging import setup_logging
from kanban.services.db import get_engine, init_db


def bootstrap() -> Engine:
    """Configure logging and make sure the schema exists; returns the shared engine."""
    settings = get_settings()
    setup_logging(settings.logging.level, sql_level=settings.logging.sql_level)

    engine = get_engine()
    init_db(engine)
    logger.info("Kanban engine ready (env={env})", env=settings.env)
    return engine
