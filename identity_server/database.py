"""
Database engines and sessions for the three contexts: application, persisted grants
and identity server configuration. Each may point at its own database.
"""
import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from identity_server.config import (
    APPLICATION_DATABASE_URL,
    CONFIGURATION_DATABASE_URL,
    PERSISTED_GRANT_DATABASE_URL,
)
from identity_server.configuration_models import ConfigurationBase
from identity_server.grant_models import PersistedGrantBase
from identity_server.models import ApplicationBase

logger = logging.getLogger(__name__)

# Columns added after the first schema version: (column, type, table)
APPLICATION_COLUMN_MIGRATIONS = [
    ("full_name", "VARCHAR(255)", "users"),
    ("phone_number_confirmed", "BOOLEAN NOT NULL DEFAULT 0", "users"),
    ("description", "VARCHAR(255)", "roles"),
]
PERSISTED_GRANT_COLUMN_MIGRATIONS = [
    ("session_id", "VARCHAR(100)", "persisted_grants"),
    ("consumed_time", "DATETIME", "persisted_grants"),
]
CONFIGURATION_COLUMN_MIGRATIONS = [
    ("allowed_cors_origins", "TEXT NOT NULL DEFAULT '[]'", "clients"),
    ("properties", "TEXT NOT NULL DEFAULT '{}'", "api_resources"),
    ("updated_at", "DATETIME", "api_resources"),
]


def create_db_engine(url: str) -> Engine:
    # SQLite: in-memory needs StaticPool so all connections share the same DB (for tests)
    # File-based SQLite needs check_same_thread=False for FastAPI
    if url.startswith("sqlite:///:memory:"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args)


application_engine = create_db_engine(APPLICATION_DATABASE_URL)
persisted_grant_engine = create_db_engine(PERSISTED_GRANT_DATABASE_URL)
configuration_engine = create_db_engine(CONFIGURATION_DATABASE_URL)

ApplicationSession = sessionmaker(autocommit=False, autoflush=False, bind=application_engine)
PersistedGrantSession = sessionmaker(autocommit=False, autoflush=False, bind=persisted_grant_engine)
ConfigurationSession = sessionmaker(autocommit=False, autoflush=False, bind=configuration_engine)


def _add_missing_columns(engine: Engine, columns: list[tuple[str, str, str]]) -> None:
    if engine.dialect.name != "sqlite":
        return
    with engine.connect() as conn:
        for col, typ, table in columns:
            try:
                conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {col} {typ}"))
                conn.commit()
                logger.info("Added column %s.%s", table, col)
            except OperationalError:
                # Column already exists
                conn.rollback()


def migrate_application(engine: Engine = application_engine) -> None:
    """Create application tables and add columns missing from older databases."""
    ApplicationBase.metadata.create_all(bind=engine)
    _add_missing_columns(engine, APPLICATION_COLUMN_MIGRATIONS)


def migrate_persisted_grants(engine: Engine = persisted_grant_engine) -> None:
    PersistedGrantBase.metadata.create_all(bind=engine)
    _add_missing_columns(engine, PERSISTED_GRANT_COLUMN_MIGRATIONS)


def migrate_configuration(engine: Engine = configuration_engine) -> None:
    ConfigurationBase.metadata.create_all(bind=engine)
    _add_missing_columns(engine, CONFIGURATION_COLUMN_MIGRATIONS)


def get_configuration_db():
    """Dependency: yield a configuration DB session."""
    db = ConfigurationSession()
    try:
        yield db
    finally:
        db.close()
