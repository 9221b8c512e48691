"""
Database configuration and session management.

Only used when STORAGE_BACKEND=database. Provides:
- Database engine creation with proper configuration
- SessionLocal factory for creating database sessions
- Database initialization utilities
"""

import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from availability_engine.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

if settings.is_production:
    settings.validate_production_config()

if "sqlite" in settings.database_url.lower():
    engine = create_engine(
        settings.database_url,
        connect_args={"check_same_thread": False},  # FastAPI runs sync handlers in a threadpool
        poolclass=StaticPool,
        echo=settings.log_level == "DEBUG",
    )
else:
    engine = create_engine(
        settings.database_url,
        pool_size=5,
        pool_recycle=3600,
        pool_pre_ping=True,
        echo=settings.log_level == "DEBUG",
    )


SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def init_db() -> None:
    """
    Initialize database by creating all tables.

    Useful for development and testing. In production, use Alembic migrations
    (`alembic upgrade head`).
    """
    from availability_engine.models.base import Base

    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")
