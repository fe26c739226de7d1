"""
Pytest configuration for identity_server. Use in-memory SQLite so tests don't touch the filesystem.
"""
import os

# In-memory SQLite; database.py uses StaticPool so all connections share the same DB
os.environ["BOILERPLATE_DATABASE_URL"] = "sqlite:///:memory:"
os.environ["BOILERPLATE_GRANT_DATABASE_URL"] = "sqlite:///:memory:"
os.environ["BOILERPLATE_CONFIGURATION_DATABASE_URL"] = "sqlite:///:memory:"
# Seeded accounts use the development passwords during tests
for name in ("BOILERPLATE_ADMIN_PASSWORD", "BOILERPLATE_USER_PASSWORD", "BOILERPLATE_PASSWORD_MIN_LENGTH"):
    os.environ.pop(name, None)

import pytest


@pytest.fixture(autouse=True)
def clean_databases():
    """Every test starts from freshly migrated, empty databases."""
    from identity_server.configuration_models import ConfigurationBase
    from identity_server.database import (
        application_engine,
        configuration_engine,
        migrate_application,
        migrate_configuration,
        migrate_persisted_grants,
        persisted_grant_engine,
    )
    from identity_server.grant_models import PersistedGrantBase
    from identity_server.models import ApplicationBase

    ApplicationBase.metadata.drop_all(bind=application_engine)
    PersistedGrantBase.metadata.drop_all(bind=persisted_grant_engine)
    ConfigurationBase.metadata.drop_all(bind=configuration_engine)
    migrate_application()
    migrate_persisted_grants()
    migrate_configuration()
    yield
