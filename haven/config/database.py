"""
Database connection settings for the Haven hostel operations core.
Provides SQLAlchemy engine/session management with lazy initialisation.
"""

import logging
import time
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from haven.config.settings import get_settings

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def get_engine() -> Engine:
    """Create the process-wide engine on first use."""
    global _engine
    if _engine is None:
        settings = get_settings()
        url = settings.get_database_url()
        kwargs = {
            "pool_pre_ping": True,
            "echo": settings.DB_ECHO,
            "connect_args": settings.DB_CONNECT_ARGS,
        }
        if not url.startswith("sqlite"):
            kwargs.update(
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_POOL_OVERFLOW,
                pool_recycle=3600,
            )
        _engine = create_engine(url, **kwargs)
    return _engine


def get_session_factory() -> sessionmaker:
    """Return the shared sessionmaker bound to the engine."""
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _session_factory


@event.listens_for(Engine, "connect")
def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores ON DELETE rules unless foreign keys are switched on."""
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@event.listens_for(Engine, "before_cursor_execute")
def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Log query execution time - start timer"""
    conn.info.setdefault('query_start_time', []).append(time.time())


@event.listens_for(Engine, "after_cursor_execute")
def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Log query execution time - stop timer and log if slow query"""
    total_time = time.time() - conn.info['query_start_time'].pop()

    if total_time > 0.5:
        logger.warning(
            f"Slow query detected ({total_time:.4f}s): {statement[:100]}..."
        )
