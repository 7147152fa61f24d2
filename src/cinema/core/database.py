"""
Database configuration and session management
"""
import logging
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from cinema.core.config import settings

logger = logging.getLogger(__name__)

# Disable verbose SQLAlchemy logs
logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
logging.getLogger('sqlalchemy.pool').setLevel(logging.WARNING)


def create_db_engine(database_url: str) -> Engine:
    """
    Create an engine for the given URL.

    SQLite gets a thread-shareable connection (requests run in a thread pool);
    every other backend gets a sized connection pool.
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=settings.DEBUG,
            connect_args={"check_same_thread": False},
        )

    return create_engine(
        database_url,
        echo=settings.DEBUG,  # Log SQL queries in debug mode
        pool_pre_ping=True,  # Verify connections before using
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
    )


def create_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(
        bind=bind,
        class_=Session,
        expire_on_commit=False,  # Reservations are returned after commit
        autoflush=False,
    )


engine = create_db_engine(settings.DATABASE_URL)

SessionLocal = create_session_factory(engine)

# Create declarative base for models
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for FastAPI to provide database sessions.

    Usage:
        @router.get("/halls")
        def list_halls(db: Session = Depends(get_db)):
            return HallService.list_halls(db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine = None):
    """
    Initialize database tables.
    Only for development - use migrations in production.
    """
    # Import all models to register them with Base
    from cinema.models import Hall, Movie, Repertoire, Reservation, User  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables created")
