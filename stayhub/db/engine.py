"""
SQLAlchemy engine singleton and session factory.

The default URL is an in-process SQLite database shared by every thread
through a static pool, which stands in for the marketplace dataset. Any
other URL (PostgreSQL in production) gets a regular connection pool.
"""

from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from stayhub.config import DATABASE_URL


def build_engine(url: str) -> Engine:
    """
    Create an engine with pooling suited to the backing store.

    Args:
        url: SQLAlchemy database URL

    Returns:
        Engine: configured SQLAlchemy engine
    """
    options: dict[str, Any] = {"future": True, "echo": False}
    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url.rstrip("/").endswith("sqlite+pysqlite:"):
            options["poolclass"] = StaticPool
    else:
        options.update(pool_size=10, max_overflow=20, pool_pre_ping=True, pool_recycle=3600)
    return create_engine(url, **options)


engine: Engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
