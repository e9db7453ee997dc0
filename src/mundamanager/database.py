"""Engine construction, schema creation and a few inspection helpers.

Request sessions come from ``ApiState.session_factory``; the module-level
engine here only backs the CLI ``--reset-db`` path and ad-hoc scripts.
"""

import logging
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event, func, inspect, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from mundamanager.config import Settings, get_settings
from mundamanager.models import Base

logger = logging.getLogger(__name__)

SQLITE_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA foreign_keys=ON",
)

_engine: Engine | None = None


def _apply_sqlite_pragmas(dbapi_connection: Any, _connection_record: Any) -> None:
    # gang deletion cascades through foreign keys
    cursor = dbapi_connection.cursor()
    for pragma in SQLITE_PRAGMAS:
        cursor.execute(pragma)
    cursor.close()


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def create_db_engine(settings: Settings | None = None) -> Engine:
    """Build an engine for ``settings.database_url``.

    SQLite gets per-connection pragmas, and an in-memory database is pinned
    to one shared connection so every session sees the same tables. Other
    backends use the pool options from settings.
    """
    settings = settings or get_settings()
    url = settings.database_url

    if url.startswith("sqlite"):
        options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if _is_memory_sqlite(url):
            options["poolclass"] = StaticPool
        engine = create_engine(url, echo=settings.database_echo, **options)
        event.listen(engine, "connect", _apply_sqlite_pragmas)
    else:
        engine = create_engine(
            url,
            echo=settings.database_echo,
            pool_pre_ping=True,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_recycle=settings.database_pool_recycle,
            pool_timeout=settings.database_pool_timeout,
        )

    logger.debug("created database engine for %s", engine.url.render_as_string())
    return engine


def get_engine() -> Engine:
    global _engine  # noqa: PLW0603
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def init_db(engine: Engine | None = None) -> None:
    """Create every missing table from the ORM metadata."""
    Base.metadata.create_all(bind=engine or get_engine())


def reset_database() -> None:
    """Drop all gang, campaign and catalog data and rebuild the schema.

    A SQLite database file is deleted outright; other backends drop and
    recreate every table. Development use only.
    """
    global _engine  # noqa: PLW0603
    if _engine is not None:
        _engine.dispose()
        _engine = None

    url = get_settings().database_url
    db_file = url.removeprefix("sqlite:///") if url.startswith("sqlite:///") else None
    if db_file and not _is_memory_sqlite(url):
        Path(db_file).unlink(missing_ok=True)
        init_db()
    else:
        engine = get_engine()
        Base.metadata.drop_all(bind=engine)
        Base.metadata.create_all(bind=engine)
    logger.warning("database reset: all tables rebuilt")


def check_database_health(engine: Engine | None = None) -> bool:
    """True when a trivial query round-trips."""
    try:
        with (engine or get_engine()).connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("database health check failed")
        return False
    return True


def get_table_names(engine: Engine | None = None) -> list[str]:
    return inspect(engine or get_engine()).get_table_names()


def count_rows(session: Session, table_name: str) -> int:
    """Number of rows in ``table_name``.

    Raises:
        ValueError: If the name is not a table of the Munda Manager schema
    """
    table = Base.metadata.tables.get(table_name)
    if table is None:
        valid_tables = ", ".join(sorted(Base.metadata.tables))
        raise ValueError(f"Invalid table name: {table_name}. Valid tables: {valid_tables}")
    return session.execute(select(func.count()).select_from(table)).scalar() or 0
