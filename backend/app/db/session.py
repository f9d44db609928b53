"""
Database Session Management
Creates and manages SQLAlchemy database engine and session factory.

This module sets up the database connection using SQLAlchemy 2.0 style
and provides a session factory for creating database sessions in endpoints.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from typing import Generator

from app.core.config import settings


def _connect_args(url: str) -> dict:
    # SQLite connections are shared across the threadpool FastAPI runs sync endpoints in
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


# Create SQLAlchemy engine
# Configuration:
# - echo=settings.DEBUG: Log all SQL queries when debug mode is enabled
# - pool_pre_ping=True: Verify connections before using them
# - pool_recycle=3600: Recycle connections after 1 hour
engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
    pool_recycle=3600,
    connect_args=_connect_args(settings.DATABASE_URL),
)

# Session factory
# - autocommit=False: Require explicit commit() calls
# - autoflush=False: Require explicit flush() calls
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function that provides database sessions to FastAPI endpoints.

    Yields:
        Database session object

    Usage in FastAPI endpoint:
        @router.get("/lookup/sources")
        def list_sources(db: Session = Depends(get_db)):
            return LookupSourceService.get_lookup_sources(db)

    The session is automatically closed after the endpoint returns,
    even if an exception occurs.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
