"""Database connection and schema setup."""

from __future__ import annotations

from sqlalchemy import Engine, create_engine, make_url, text
from sqlalchemy.exc import SQLAlchemyError

from .domain import Base
from .logging_setup import get_logger


def connect(uri: str) -> Engine:
    """Open an engine for uri and check that the database answers."""
    logger = get_logger("connect")
    url = make_url(uri)
    pooled = url.get_backend_name() != "sqlite"
    engine = create_engine(url, **({"pool_size": 25, "max_overflow": 0, "pool_recycle": 3600} if pooled else {}))
    try:
        engine.connect().close()
    except SQLAlchemyError as exc:
        logger.critical("Cannot connect to the database: %s", exc)
        engine.dispose()
        raise
    logger.info("Database connected")
    return engine


def auto_migrate(engine: Engine) -> None:
    """Create the tables the service needs, if they do not exist yet."""
    if engine.dialect.name == "postgresql":
        try:
            with engine.begin() as conn:
                conn.execute(text('CREATE EXTENSION IF NOT EXISTS "pgcrypto"'))
        except SQLAlchemyError:
            pass
    Base.metadata.create_all(engine)