"""
Engine and session factory for the warehouse database.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from biomine.core.settings import get_settings
from biomine.models.models import Base

logger = logging.getLogger(__name__)

# Bound by init_engine()
SessionLocal = sessionmaker(autoflush=False, expire_on_commit=False)


def init_engine(
    database_url: Optional[str] = None,
    db_schema: Optional[str] = None,
    echo: Optional[bool] = None,
) -> Engine:
    """
    Create the engine and bind SessionLocal to it.

    Args:
        database_url: SQLAlchemy URL (default: DATABASE_URL setting)
        db_schema: Schema holding the warehouse tables (default: DB_SCHEMA)
        echo: Log emitted SQL (default: SQL_ECHO setting)

    Returns:
        The bound Engine

    Raises:
        ValueError: If no database URL is configured
    """
    settings = get_settings()
    database_url = database_url or settings.database_url
    db_schema = db_schema or settings.db_schema
    echo = settings.sql_echo if echo is None else echo

    if not database_url:
        raise ValueError("DATABASE_URL is not set")

    engine = create_engine(database_url, echo=echo)
    if db_schema:
        # Models are declared without a schema; qualify them at execution time
        engine = engine.execution_options(schema_translate_map={None: db_schema})

    SessionLocal.configure(bind=engine)
    logger.debug(f"Database engine initialised (schema: {db_schema or 'default'})")
    return engine


def create_schema(engine: Engine) -> None:
    """Create any missing tables."""
    Base.metadata.create_all(engine)
    logger.info(f"Created tables: {', '.join(sorted(Base.metadata.tables))}")
