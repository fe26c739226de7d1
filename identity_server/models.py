"""
SQLAlchemy models for the application database: identity users, roles and claims,
plus the sample application tables (user profiles, todos, API logs).
"""
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class ApplicationBase(DeclarativeBase):
    pass


class ApplicationUser(ApplicationBase):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_name: Mapped[str] = mapped_column(String(256), unique=True, nullable=False)
    normalized_user_name: Mapped[str] = mapped_column(String(256), unique=True, nullable=False, index=True)
    email: Mapped[str | None] = mapped_column(String(256), nullable=True)
    normalized_email: Mapped[str | None] = mapped_column(String(256), nullable=True, index=True)
    email_confirmed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    phone_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    phone_number_confirmed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    security_stamp: Mapped[str | None] = mapped_column(String(64), nullable=True)
    first_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    claims: Mapped[list["UserClaim"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    role_links: Mapped[list["UserRole"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    profile: Mapped[Optional["UserProfile"]] = relationship(
        back_populates="application_user", cascade="all, delete-orphan", uselist=False
    )


class Role(ApplicationBase):
    __tablename__ = "roles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(256), unique=True, nullable=False)
    normalized_name: Mapped[str] = mapped_column(String(256), unique=True, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)

    claims: Mapped[list["RoleClaim"]] = relationship(
        back_populates="role", cascade="all, delete-orphan"
    )
    user_links: Mapped[list["UserRole"]] = relationship(
        back_populates="role", cascade="all, delete-orphan"
    )


class RoleClaim(ApplicationBase):
    __tablename__ = "role_claims"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    role_id: Mapped[str] = mapped_column(ForeignKey("roles.id"), nullable=False, index=True)
    claim_type: Mapped[str] = mapped_column(String(255), nullable=False)
    claim_value: Mapped[str] = mapped_column(Text, nullable=False)

    role: Mapped["Role"] = relationship(back_populates="claims")


class UserClaim(ApplicationBase):
    __tablename__ = "user_claims"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    claim_type: Mapped[str] = mapped_column(String(255), nullable=False)
    claim_value: Mapped[str] = mapped_column(Text, nullable=False)

    user: Mapped["ApplicationUser"] = relationship(back_populates="claims")


class UserRole(ApplicationBase):
    __tablename__ = "user_roles"

    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), primary_key=True)
    role_id: Mapped[str] = mapped_column(ForeignKey("roles.id"), primary_key=True)

    user: Mapped["ApplicationUser"] = relationship(back_populates="role_links")
    role: Mapped["Role"] = relationship(back_populates="user_links")


class UserProfile(ApplicationBase):
    __tablename__ = "user_profiles"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), unique=True, nullable=False)
    count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_nav_open: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_page_visited: Mapped[str] = mapped_column(String(255), default="/", nullable=False)
    is_nav_minified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    last_updated_date: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    application_user: Mapped["ApplicationUser"] = relationship(back_populates="profile")


class Todo(ApplicationBase):
    __tablename__ = "todos"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class ApiLogItem(ApplicationBase):
    """Request/response audit row for API calls."""
    __tablename__ = "api_logs"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    request_time: Mapped[datetime] = mapped_column(DateTime, default=_utc_now, index=True)
    response_millis: Mapped[int] = mapped_column(Integer, nullable=False)
    status_code: Mapped[int] = mapped_column(Integer, nullable=False)
    method: Mapped[str] = mapped_column(String(16), nullable=False)
    path: Mapped[str] = mapped_column(String(2048), nullable=False)
    query_string: Mapped[str] = mapped_column(Text, default="", nullable=False)
    request_body: Mapped[str] = mapped_column(Text, default="", nullable=False)
    response_body: Mapped[str] = mapped_column(Text, default="", nullable=False)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    application_user_id: Mapped[str | None] = mapped_column(ForeignKey("users.id"), nullable=True)

    application_user: Mapped[Optional["ApplicationUser"]] = relationship()
