"""
SQLAlchemy models for the persisted grant database (operational data of the token service).
"""
from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class PersistedGrantBase(DeclarativeBase):
    pass


class PersistedGrant(PersistedGrantBase):
    __tablename__ = "persisted_grants"

    key: Mapped[str] = mapped_column(String(200), primary_key=True)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    subject_id: Mapped[str | None] = mapped_column(String(200), nullable=True, index=True)
    session_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    client_id: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    creation_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    expiration: Mapped[datetime | None] = mapped_column(DateTime, nullable=True, index=True)
    consumed_time: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    data: Mapped[str] = mapped_column(Text, nullable=False)


class DeviceFlowCode(PersistedGrantBase):
    __tablename__ = "device_codes"

    user_code: Mapped[str] = mapped_column(String(200), primary_key=True)
    device_code: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    subject_id: Mapped[str | None] = mapped_column(String(200), nullable=True)
    client_id: Mapped[str] = mapped_column(String(200), nullable=False)
    creation_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    expiration: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    data: Mapped[str] = mapped_column(Text, nullable=False)
