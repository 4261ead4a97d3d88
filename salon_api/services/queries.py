# salon_api/services/queries.py

from typing import Optional

from salon_api.deps import require_access
from salon_api.errors import AppointmentNotFound
from salon_api.models import Appointment
from salon_api.repository import AppointmentRepository
from salon_api.schemas import AppointmentFilter, AppointmentStatus
from salon_api.services.lifecycle import parse_status


class AdminQueryService:
    """Read-only lookups; every call returns a fresh, fully loaded list."""

    def __init__(self, repo: AppointmentRepository):
        self.repo = repo

    def list_appointments(self, filters: Optional[AppointmentFilter] = None) -> list[Appointment]:
        filters = filters or AppointmentFilter()
        status = parse_status(filters.status).value if filters.status else None
        return self.repo.find_all(status=status, day=filters.date, client_id=filters.client_id)

    def list_own_appointments(self, client_id: int) -> list[Appointment]:
        return self.repo.find_by_client(client_id)

    def list_own_history(self, client_id: int) -> list[Appointment]:
        return self.repo.find_by_client(client_id, status=AppointmentStatus.completed.value)

    def get_appointment(self, appointment_id: int, principal) -> Appointment:
        appointment = self.repo.find_by_id(appointment_id)
        if appointment is None:
            raise AppointmentNotFound()
        require_access(principal, appointment)
        return appointment
