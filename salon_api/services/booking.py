# salon_api/services/booking.py

import logging
from datetime import date
from typing import Optional

from salon_api.catalog import ServiceCatalog
from salon_api.clock import Clock
from salon_api.core import format_time, minutes_of, parse_time
from salon_api.errors import (
    InvalidInterval,
    MissingField,
    PastDate,
    PastStartTime,
    SlotConflict,
)
from salon_api.locks import DateLocks, date_locks
from salon_api.models import Appointment
from salon_api.repository import AppointmentRepository
from salon_api.services.availability import AvailabilityChecker
from salon_api.services.lifecycle import INITIAL_STATUS

logger = logging.getLogger(__name__)


class BookingService:
    def __init__(
        self,
        repo: AppointmentRepository,
        catalog: ServiceCatalog,
        clock: Clock,
        locks: DateLocks = date_locks,
    ):
        self.repo = repo
        self.catalog = catalog
        self.clock = clock
        self.locks = locks
        self.availability = AvailabilityChecker(repo)

    def create_appointment(
        self,
        client_id: int,
        day: Optional[date],
        start_time: Optional[str],
        end_time: Optional[str],
        formula_id: Optional[int],
    ) -> Appointment:
        # 1) Required fields
        provided = {"date": day, "start_time": start_time, "end_time": end_time, "formula_id": formula_id}
        missing = [name for name, value in provided.items() if value is None or value == ""]
        if missing:
            raise MissingField(missing)
        start_min = parse_time(start_time, "start_time")
        end_min = parse_time(end_time, "end_time")

        # 2) Formula must exist in the catalog
        self.catalog.resolve(formula_id)

        # 3) No past dates, and no past start times today
        now = self.clock.now()
        if day < now.date():
            raise PastDate()
        if day == now.date() and start_min <= minutes_of(now.time()):
            raise PastStartTime()

        # 4) Interval
        if end_min <= start_min:
            raise InvalidInterval()

        # 5) Availability check and insert happen under the day's lock
        with self.locks.hold(day):
            blocking = self.availability.conflicts(day, start_min, end_min)
            if blocking:
                logger.warning(
                    "Slot %s %s-%s rejected for client %s: overlaps appointment %s",
                    day, start_time, end_time, client_id, blocking[0].id,
                )
                raise SlotConflict()

            appointment = Appointment(
                client_id=client_id,
                formula_id=formula_id,
                date=day,
                start_time=format_time(start_min),
                end_time=format_time(end_min),
                status=INITIAL_STATUS.value,
            )
            appointment = self.repo.insert(appointment)

        logger.info(
            "Appointment %s booked by client %s on %s %s-%s",
            appointment.id, client_id, day, appointment.start_time, appointment.end_time,
        )
        return appointment
