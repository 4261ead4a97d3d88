# salon_api/models.py

from typing import Optional
from datetime import datetime, timezone, date as Date

from sqlalchemy import Column, Integer
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    role: str = "client"  # client or admin
    first_name: str = ""
    last_name: str = ""
    phone: str = ""


class Formula(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    description: str = ""
    price: float
    duration: int  # minutes, informational only
    is_active: bool = True


# Bumped by SQLAlchemy on every UPDATE; a write based on a stale read fails
_appointment_version = Column("version", Integer, nullable=False)


class Appointment(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    client_id: int = Field(foreign_key="user.id", index=True)
    formula_id: int = Field(foreign_key="formula.id")

    date: Date = Field(index=True)
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    status: str = "pending"

    cancellation_reason: Optional[str] = None
    admin_notes: Optional[str] = None
    processed_by: Optional[int] = Field(default=None, foreign_key="user.id")

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    version: Optional[int] = Field(default=None, sa_column=_appointment_version)

    __mapper_args__ = {"version_id_col": _appointment_version}
