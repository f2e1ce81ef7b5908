"""Database connection and session management."""
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from app.config import get_settings

Base = declarative_base()


@lru_cache
def get_engine() -> Engine:
    """Build the engine for the configured database URL."""
    settings = get_settings()
    echo = settings.environment == "development" and not settings.database_url.startswith("sqlite")

    if settings.database_url.startswith("sqlite"):
        # In-memory SQLite must share one connection across threads
        if settings.database_url in ("sqlite://", "sqlite:///:memory:"):
            return create_engine(
                settings.database_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_engine(
            settings.database_url,
            connect_args={"check_same_thread": False},
        )

    # Pooler connections (e.g. port 6543) manage their own pool
    if settings.database_url.endswith(":6543") or "pooler." in settings.database_url:
        return create_engine(settings.database_url, poolclass=NullPool, echo=echo)

    return create_engine(
        settings.database_url,
        pool_size=20,
        max_overflow=10,
        echo=echo,
    )


@lru_cache
def get_sessionmaker() -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


def init_db() -> None:
    """Create tables that do not exist yet (use migrations in production)."""
    # Import models so they register on Base.metadata
    import app.models  # noqa: F401

    Base.metadata.create_all(bind=get_engine())


def get_db():
    """Dependency for getting database session."""
    db = get_sessionmaker()()
    try:
        yield db
    finally:
        db.close()
