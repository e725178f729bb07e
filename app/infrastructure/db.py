"""Database infrastructure setup."""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.infrastructure.config.settings import settings

# Engine creation is deferred until needed so in-memory mode never touches a database
_engine = None
_SessionLocal = None


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """
    Turn on foreign key enforcement for SQLite connections.

    SQLite ignores ON DELETE CASCADE and owner references unless the pragma is set
    on every new connection. No-op for other dialects.

    Args:
        engine: Engine to configure
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, _connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _get_engine() -> Engine:
    """Get or create the database engine."""
    global _engine
    if _engine is None:
        if not settings.database_url:
            raise ValueError("DATABASE_URL is required when BUYER_REPOSITORY=postgres")
        _engine = create_engine(
            settings.database_url,
            pool_pre_ping=True,
            echo=settings.debug_mode,
        )
        enable_sqlite_foreign_keys(_engine)
    return _engine


def get_db_session():
    """
    Get a database session.

    Returns:
        SQLAlchemy session instance (caller owns commit/rollback/close)
    """
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_get_engine())
    return _SessionLocal()
