from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from filterkit.core.config import settings


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def install_sqlite_unicode_lower(engine: Engine) -> Engine:
    """Replace SQLite's ASCII-only lower() so ILIKE folds Cyrillic and other non-ASCII text."""
    if engine.dialect.name != "sqlite":
        return engine

    @event.listens_for(engine, "connect")
    def _register_lower(dbapi_connection, connection_record):
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)

    return engine


engine = install_sqlite_unicode_lower(
    create_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO, pool_pre_ping=True)
)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


class Base(DeclarativeBase):
    pass


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
