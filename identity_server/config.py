"""
Identity server configuration. Values come from the environment with development defaults.
"""
import os
import re

# Application database (users, roles, claims, profiles, todos, API logs)
APPLICATION_DATABASE_URL = os.environ.get("BOILERPLATE_DATABASE_URL", "sqlite:///./identity_server.db")

# Persisted grants and configuration default to the application database
PERSISTED_GRANT_DATABASE_URL = os.environ.get("BOILERPLATE_GRANT_DATABASE_URL", APPLICATION_DATABASE_URL)
CONFIGURATION_DATABASE_URL = os.environ.get("BOILERPLATE_CONFIGURATION_DATABASE_URL", APPLICATION_DATABASE_URL)

# Web client base URL; redirect and post-logout URIs are built from it
APP_BASE_URL = os.environ.get("BOILERPLATE_APP_URL", "http://127.0.0.1:8000").rstrip("/")

# Seeded API resource (also the scope name requested by clients)
API_RESOURCE_NAME = os.environ.get("BOILERPLATE_API_NAME", "BlazorBoilerplateAPI")
API_DISPLAY_NAME = os.environ.get("BOILERPLATE_API_DISPLAY_NAME", "Blazor Boilerplate API")

# Inbuilt accounts. Development defaults; override outside of local use.
ADMIN_PASSWORD = os.environ.get("BOILERPLATE_ADMIN_PASSWORD", "admin123")
USER_PASSWORD = os.environ.get("BOILERPLATE_USER_PASSWORD", "user123")
PASSWORD_MIN_LENGTH = int(os.environ.get("BOILERPLATE_PASSWORD_MIN_LENGTH", "6"))

# Secret of the seeded client-credentials client (hashed before storage)
SAMPLE_CLIENT_SECRET = os.environ.get("BOILERPLATE_CLIENT_SECRET", "secret")

# Access token lifetime (seconds) for seeded clients
ACCESS_TOKEN_LIFETIME = int(os.environ.get("OAUTH_ACCESS_TOKEN_LIFETIME", "3600"))


def sql_identifier(value: str) -> str:
    """Return value if it is a plain SQL identifier (letters, digits, underscore)."""
    if not re.fullmatch(r"\w+", value):
        raise ValueError(f"Invalid SQL identifier: {value!r}")
    return value


# SQL Server log sink table (default sink layout). Interpolated into DDL, so it must be a plain identifier.
LOG_TABLE_NAME = sql_identifier(os.environ.get("BOILERPLATE_LOG_TABLE", "Logs2"))
