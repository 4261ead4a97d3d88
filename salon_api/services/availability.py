# salon_api/services/availability.py

from datetime import date
from typing import Optional, Union

from salon_api.core import overlaps, parse_time, to_minutes
from salon_api.models import Appointment
from salon_api.repository import AppointmentRepository
from salon_api.schemas import AppointmentStatus


class AvailabilityChecker:
    """Answers whether a [start, end) slot on a given day is free.

    Cancelled appointments never block a slot. ``exclude_id`` lets an
    appointment being edited be re-checked against everything but itself.
    """

    def __init__(self, repo: AppointmentRepository):
        self.repo = repo

    def conflicts(
        self,
        day: date,
        start: Union[str, int],
        end: Union[str, int],
        exclude_id: Optional[int] = None,
    ) -> list[Appointment]:
        start_min = to_minutes(start, "start_time")
        end_min = to_minutes(end, "end_time")

        blocking = []
        for appt in self.repo.find_by_date(day):
            if appt.status == AppointmentStatus.cancelled.value:
                continue
            if exclude_id is not None and appt.id == exclude_id:
                continue
            existing_start = parse_time(appt.start_time)
            existing_end = parse_time(appt.end_time)
            if overlaps(start_min, end_min, existing_start, existing_end):
                blocking.append(appt)
        return blocking

    def is_available(
        self,
        day: date,
        start: Union[str, int],
        end: Union[str, int],
        exclude_id: Optional[int] = None,
    ) -> bool:
        return not self.conflicts(day, start, end, exclude_id)
