"""Database base configuration

Nothing here is created at import time: ``create_app`` builds the engine and
session factory from its settings and keeps them on ``app.state``, so tests
and scripts can run against their own database.
"""

import logging

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from worktrack.infrastructure.config.settings import Settings

logger = logging.getLogger(__name__)

# Base class for models
Base = declarative_base()

# Scopes serialized by the relation_locks table
LOCK_SCOPES = ("dependency", "hierarchy", "work_period")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(settings: Settings) -> Engine:
    """Create database engine with appropriate connect_args"""
    database_url = settings.get_database_url()

    if database_url.startswith("sqlite"):
        logger.info("Using SQLite database: %s", database_url)
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every session sees an empty database
            kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    if settings.DATABASE_TYPE == "postgresql":
        logger.info(
            "Connecting to PostgreSQL database: %s@%s:%s",
            settings.DB_NAME, settings.DB_HOST, settings.DB_PORT,
        )
        return create_engine(
            database_url,
            pool_pre_ping=True,  # Verify connections before using
            pool_size=10,
            max_overflow=20,
        )

    raise ValueError(f"Unsupported database type: {settings.DATABASE_TYPE}")


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create session factory

    autocommit=False means we need to explicitly commit transactions
    autoflush=False means we need to explicitly flush before commit
    """
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create all tables and seed one lock row per scope"""
    from worktrack.infrastructure.database import models  # Import models to register them

    Base.metadata.create_all(bind=engine)

    with engine.begin() as conn:
        existing = {
            row[0] for row in conn.execute(text("SELECT scope FROM relation_locks"))
        }
        for scope in LOCK_SCOPES:
            if scope not in existing:
                conn.execute(
                    models.RelationLockModel.__table__.insert().values(scope=scope, version=0)
                )
    logger.info("Database initialized")


def get_db(request: Request):
    """Get database session

    This is a FastAPI dependency that provides a database session.
    The session is automatically closed after the request completes.

    IMPORTANT: Repositories must commit their own transactions.
    This function only ensures the session is properly closed.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
