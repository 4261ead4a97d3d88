# salon_api/routers/appointments_routes.py

from datetime import date as Date
from typing import Optional, List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from salon_api.auth import Principal, get_current_admin, get_current_principal
from salon_api.catalog import DatabaseServiceCatalog
from salon_api.clock import Clock, get_clock
from salon_api.db import get_session
from salon_api.repository import AppointmentRepository
from salon_api.schemas import (
    AppointmentCreate,
    AppointmentFilter,
    AppointmentPublic,
    AppointmentUpdate,
    CancelRequest,
    StatusUpdate,
)
from salon_api.services.booking import BookingService
from salon_api.services.management import UNSET, ManagementService
from salon_api.services.queries import AdminQueryService

router = APIRouter(
    prefix="/appointments",
    tags=["appointments"],
)


def get_booking_service(
    session: Session = Depends(get_session),
    clock: Clock = Depends(get_clock),
) -> BookingService:
    return BookingService(AppointmentRepository(session), DatabaseServiceCatalog(session), clock)


def get_management_service(
    session: Session = Depends(get_session),
    clock: Clock = Depends(get_clock),
) -> ManagementService:
    return ManagementService(AppointmentRepository(session), DatabaseServiceCatalog(session), clock)


def get_query_service(session: Session = Depends(get_session)) -> AdminQueryService:
    return AdminQueryService(AppointmentRepository(session))


# --- client routes ---

@router.post("", response_model=AppointmentPublic, status_code=201)
def create_appointment(
    appt: AppointmentCreate,
    current: Principal = Depends(get_current_principal),
    service: BookingService = Depends(get_booking_service),
):
    return service.create_appointment(
        client_id=current.id,
        day=appt.date,
        start_time=appt.start_time,
        end_time=appt.end_time,
        formula_id=appt.formula_id,
    )


@router.get("/my", response_model=List[AppointmentPublic])
def list_my_appointments(
    current: Principal = Depends(get_current_principal),
    queries: AdminQueryService = Depends(get_query_service),
):
    return queries.list_own_appointments(current.id)


@router.get("/history", response_model=List[AppointmentPublic])
def list_my_history(
    current: Principal = Depends(get_current_principal),
    queries: AdminQueryService = Depends(get_query_service),
):
    return queries.list_own_history(current.id)


@router.put("/{appt_id}/cancel", response_model=AppointmentPublic)
def cancel_appointment(
    appt_id: int,
    body: Optional[CancelRequest] = None,
    current: Principal = Depends(get_current_principal),
    service: ManagementService = Depends(get_management_service),
):
    reason = body.cancellation_reason if body is not None else None
    return service.cancel_appointment(appt_id, current, reason)


# --- admin routes ---

@router.get("/admin", response_model=List[AppointmentPublic])
def list_all_appointments(
    status: Optional[str] = None,
    date: Optional[Date] = None,
    client: Optional[int] = None,
    admin: Principal = Depends(get_current_admin),
    queries: AdminQueryService = Depends(get_query_service),
):
    return queries.list_appointments(AppointmentFilter(status=status, date=date, client_id=client))


@router.get("/{appt_id}", response_model=AppointmentPublic)
def get_appointment(
    appt_id: int,
    current: Principal = Depends(get_current_principal),
    queries: AdminQueryService = Depends(get_query_service),
):
    return queries.get_appointment(appt_id, current)


@router.put("/{appt_id}", response_model=AppointmentPublic)
def update_appointment(
    appt_id: int,
    patch: AppointmentUpdate,
    current: Principal = Depends(get_current_principal),
    service: ManagementService = Depends(get_management_service),
):
    return service.update_appointment(appt_id, current, patch)


@router.put("/{appt_id}/status", response_model=AppointmentPublic)
def set_appointment_status(
    appt_id: int,
    body: StatusUpdate,
    current: Principal = Depends(get_current_principal),
    service: ManagementService = Depends(get_management_service),
):
    notes = body.admin_notes if "admin_notes" in body.model_fields_set else UNSET
    return service.set_status(appt_id, current, body.status, admin_notes=notes)
