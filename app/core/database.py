import re
from typing import Any, Sequence

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import CursorResult
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from app.core.config import settings

engine_options = {"pool_pre_ping": True}  # Verify connections before using them
if not settings.DATABASE_URL.startswith("sqlite"):
    engine_options.update(
        pool_size=10,  # Connection pool size
        max_overflow=20  # Allow up to 20 connections beyond pool_size
    )

# Create SQLAlchemy engine
engine = create_engine(settings.DATABASE_URL, **engine_options)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()

# Positional placeholders ($1, $2, ...) as written in the crud layer
_POSITIONAL_PARAM = re.compile(r"\$(\d+)")


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def enable_sqlite_foreign_keys(bind) -> None:
    """
    Turn on foreign key enforcement for every new SQLite connection.

    SQLite ships with it disabled; PostgreSQL needs nothing.
    """
    @event.listens_for(bind, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def execute_sql(db: Session, sql: str, values: Sequence[Any] = ()) -> CursorResult:
    """
    Execute hand-written SQL with a positional parameter list.

    Queries are written with PostgreSQL-style ``$n`` placeholders. They are
    rewritten into SQLAlchemy bind parameters (``:p1``, ``:p2``, ...) so the
    same statement runs unchanged on PostgreSQL and SQLite.

    Args:
        db: Database session
        sql: Statement text using $1..$n placeholders
        values: Parameter values, $1 being values[0]

    Returns:
        SQLAlchemy result for the statement
    """
    params = {f"p{i}": value for i, value in enumerate(values, start=1)}
    return db.execute(text(_POSITIONAL_PARAM.sub(r":p\1", sql)), params)


def init_db(bind=None):
    """
    Initialize database.

    Imports the models so their tables are registered on Base.metadata,
    then creates any missing tables.
    """
    from app.models import company, job, user, application  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)
