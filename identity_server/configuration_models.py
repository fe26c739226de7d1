"""
SQLAlchemy models for the identity server configuration database: clients and resources.
List-valued settings are stored as JSON strings (encoded and decoded in mappers).
"""
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ConfigurationBase(DeclarativeBase):
    pass


class Client(ConfigurationBase):
    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    client_id: Mapped[str] = mapped_column(String(200), unique=True, nullable=False, index=True)
    client_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    require_client_secret: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    require_pkce: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    allow_offline_access: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    access_token_lifetime: Mapped[int] = mapped_column(Integer, default=3600, nullable=False)
    allowed_grant_types: Mapped[str] = mapped_column(Text, default="[]", nullable=False)
    redirect_uris: Mapped[str] = mapped_column(Text, default="[]", nullable=False)
    post_logout_redirect_uris: Mapped[str] = mapped_column(Text, default="[]", nullable=False)
    allowed_cors_origins: Mapped[str] = mapped_column(Text, default="[]", nullable=False)
    allowed_scopes: Mapped[str] = mapped_column(Text, default="[]", nullable=False)
    # JSON array of {"value": bcrypt hash, "description": ...}
    client_secrets: Mapped[str] = mapped_column(Text, default="[]", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)


class IdentityResource(ConfigurationBase):
    __tablename__ = "identity_resources"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False, index=True)
    display_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    required: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    emphasize: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    show_in_discovery_document: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    user_claims: Mapped[str] = mapped_column(Text, default="[]", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)


class ApiResource(ConfigurationBase):
    __tablename__ = "api_resources"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False, index=True)
    display_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    show_in_discovery_document: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    user_claims: Mapped[str] = mapped_column(Text, default="[]", nullable=False)
    scopes: Mapped[str] = mapped_column(Text, default="[]", nullable=False)
    properties: Mapped[str] = mapped_column(Text, default="{}", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
