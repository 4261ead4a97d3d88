# salon_api/services/management.py

import logging
from contextlib import nullcontext

from salon_api.catalog import ServiceCatalog
from salon_api.clock import Clock
from salon_api.core import format_time, parse_time
from salon_api.deps import require_admin
from salon_api.errors import AppointmentNotFound, InvalidInterval, InvalidStatus, SlotConflict, ValidationError
from salon_api.locks import DateLocks, date_locks
from salon_api.models import Appointment
from salon_api.repository import AppointmentRepository
from salon_api.schemas import AppointmentStatus, AppointmentUpdate
from salon_api.services.availability import AvailabilityChecker
from salon_api.services.lifecycle import AppointmentLifecycle, check_transition, parse_status

logger = logging.getLogger(__name__)

# Patch fields that may be sent but never cleared
NON_NULLABLE = ("date", "start_time", "end_time", "formula_id", "status")

UNSET = object()


class ManagementService:
    def __init__(
        self,
        repo: AppointmentRepository,
        catalog: ServiceCatalog,
        clock: Clock,
        locks: DateLocks = date_locks,
    ):
        self.repo = repo
        self.catalog = catalog
        self.locks = locks
        self.availability = AvailabilityChecker(repo)
        self.lifecycle = AppointmentLifecycle(clock)

    def _load(self, appointment_id: int) -> Appointment:
        appointment = self.repo.find_by_id(appointment_id)
        if appointment is None:
            raise AppointmentNotFound()
        return appointment

    def update_appointment(self, appointment_id: int, admin, patch: AppointmentUpdate) -> Appointment:
        """Apply an admin's partial edit.

        Moving an active appointment to another day or time re-runs the
        availability check, ignoring the appointment's own current slot.
        """
        require_admin(admin)
        appointment = self._load(appointment_id)
        changes = patch.changes()

        nulled = [name for name in NON_NULLABLE if name in changes and changes[name] is None]
        if nulled:
            raise ValidationError(
                "Fields cannot be cleared: " + ", ".join(nulled),
                errors=[f"{name} cannot be null" for name in nulled],
            )

        # 1) Interval after the patch
        new_date = changes.get("date", appointment.date)
        start_min = parse_time(changes.get("start_time", appointment.start_time), "start_time")
        end_min = parse_time(changes.get("end_time", appointment.end_time), "end_time")
        new_start = format_time(start_min)
        new_end = format_time(end_min)
        if end_min <= start_min:
            raise InvalidInterval()

        # 2) Formula
        if "formula_id" in changes:
            self.catalog.resolve(changes["formula_id"])

        # 3) Status
        current = parse_status(appointment.status)
        target = current
        if "status" in changes:
            target = parse_status(changes["status"])
            check_transition(current, target)

        moved = (
            new_date != appointment.date
            or new_start != appointment.start_time
            or new_end != appointment.end_time
        )
        must_check = moved and target is not AppointmentStatus.cancelled

        with self.locks.hold(new_date) if must_check else nullcontext():
            if must_check and not self.availability.is_available(
                new_date, start_min, end_min, exclude_id=appointment.id
            ):
                logger.warning(
                    "Move of appointment %s to %s %s-%s rejected: slot taken",
                    appointment.id, new_date, new_start, new_end,
                )
                raise SlotConflict()

            appointment.date = new_date
            appointment.start_time = new_start
            appointment.end_time = new_end
            if "formula_id" in changes:
                appointment.formula_id = changes["formula_id"]
            if "admin_notes" in changes:
                appointment.admin_notes = changes["admin_notes"]
            if "cancellation_reason" in changes:
                appointment.cancellation_reason = changes["cancellation_reason"]
            if target is not current:
                self.lifecycle.apply(appointment, target, admin)

            # Always record the admin who processed the edit
            appointment.processed_by = admin.id
            appointment = self.repo.update(appointment)

        logger.info("Appointment %s updated by admin %s (%s)", appointment.id, admin.id, ", ".join(changes) or "no fields")
        return appointment

    def set_status(self, appointment_id: int, admin, status, admin_notes=UNSET) -> Appointment:
        require_admin(admin)
        if status is None or status == "":
            raise InvalidStatus(status)
        target = parse_status(status)

        appointment = self._load(appointment_id)
        with self.locks.hold(appointment.date):
            # another request may have changed the status since the load
            self.repo.reload(appointment)
            self.lifecycle.apply(appointment, target, admin)
            if admin_notes is not UNSET:
                appointment.admin_notes = admin_notes
            return self.repo.update(appointment)

    def cancel_appointment(self, appointment_id: int, principal, reason=None) -> Appointment:
        appointment = self._load(appointment_id)
        with self.locks.hold(appointment.date):
            self.repo.reload(appointment)
            self.lifecycle.cancel(appointment, principal, reason)
            return self.repo.update(appointment)
