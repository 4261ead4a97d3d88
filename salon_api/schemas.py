# salon_api/schemas.py

from pydantic import BaseModel, Field
from enum import Enum
from datetime import datetime, date as Date
from typing import Optional


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserRole(str, Enum):
    client = "client"
    admin = "admin"


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


class UserPublic(BaseModel):
    id: int
    email: str
    role: UserRole
    first_name: str = ""
    last_name: str = ""
    phone: str = ""


class UserCreate(BaseModel):
    email: str
    password: str = Field(min_length=6, max_length=72)
    first_name: str
    last_name: str
    phone: str


class FormulaCreate(BaseModel):
    title: str
    description: str = ""
    price: float = Field(ge=0)
    duration: int = Field(gt=0)


class FormulaPublic(BaseModel):
    id: int
    title: str
    description: str
    price: float
    duration: int
    is_active: bool


# Fields are optional so the booking service can report every missing one itself
class AppointmentCreate(BaseModel):
    date: Optional[Date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    formula_id: Optional[int] = None


class AppointmentUpdate(BaseModel):
    """Partial admin edit; only fields present in the request are applied."""

    date: Optional[Date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    formula_id: Optional[int] = None
    status: Optional[str] = None
    admin_notes: Optional[str] = None
    cancellation_reason: Optional[str] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class StatusUpdate(BaseModel):
    status: Optional[str] = None
    admin_notes: Optional[str] = None


class CancelRequest(BaseModel):
    cancellation_reason: Optional[str] = None


class AppointmentPublic(BaseModel):
    id: int
    client_id: int
    formula_id: int
    date: Date
    start_time: str
    end_time: str
    status: AppointmentStatus
    cancellation_reason: Optional[str] = None
    admin_notes: Optional[str] = None
    processed_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class AppointmentFilter(BaseModel):
    status: Optional[str] = None
    date: Optional[Date] = None
    client_id: Optional[int] = None
