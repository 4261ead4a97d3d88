# salon_api/services/lifecycle.py

#   pending ──> confirmed ──> in_progress ──> completed
#      │            │              │
#      └────────────┴──────────────┴────────> cancelled
#
# Admins may move a non-terminal appointment to any status, backwards
# included. completed and cancelled are terminal: re-applying the same
# status is the only accepted "transition" out of them, and it is a no-op.
# Owners may only cancel, and only before the appointment starts.

import logging
from datetime import datetime, timedelta

from salon_api.clock import Clock
from salon_api.core import parse_time
from salon_api.deps import require_access, require_admin
from salon_api.errors import CancellationWindowClosed, InvalidStatus, TerminalStateViolation
from salon_api.models import Appointment
from salon_api.schemas import AppointmentStatus

logger = logging.getLogger(__name__)

INITIAL_STATUS = AppointmentStatus.pending
TERMINAL_STATUSES = frozenset({AppointmentStatus.completed, AppointmentStatus.cancelled})


def parse_status(value) -> AppointmentStatus:
    if isinstance(value, AppointmentStatus):
        return value
    try:
        return AppointmentStatus(value)
    except ValueError:
        raise InvalidStatus(value)


def is_terminal(status) -> bool:
    return parse_status(status) in TERMINAL_STATUSES


def transition_allowed(current, target) -> bool:
    current = parse_status(current)
    target = parse_status(target)
    if current in TERMINAL_STATUSES:
        return target is current
    return True


def check_transition(current, target) -> None:
    if not transition_allowed(current, target):
        raise TerminalStateViolation(parse_status(current).value, parse_status(target).value)


def starts_at(appointment: Appointment) -> datetime:
    minutes = parse_time(appointment.start_time, "start_time")
    return datetime.combine(appointment.date, datetime.min.time()) + timedelta(minutes=minutes)


class AppointmentLifecycle:
    def __init__(self, clock: Clock):
        self.clock = clock

    def apply(self, appointment: Appointment, target, admin) -> bool:
        """Admin-driven status change. Returns False for an idempotent no-op."""
        require_admin(admin)
        target = parse_status(target)
        current = parse_status(appointment.status)
        check_transition(current, target)

        appointment.processed_by = admin.id
        if target is current:
            return False
        appointment.status = target.value
        logger.info(
            "Appointment %s: %s -> %s by admin %s", appointment.id, current.value, target.value, admin.id
        )
        return True

    def cancel(self, appointment: Appointment, principal, reason=None) -> None:
        """Owner- or admin-requested cancellation of an upcoming appointment."""
        require_access(principal, appointment)

        if is_terminal(appointment.status):
            raise TerminalStateViolation()
        if starts_at(appointment) <= self.clock.now():
            raise CancellationWindowClosed()

        appointment.status = AppointmentStatus.cancelled.value
        if reason:
            appointment.cancellation_reason = reason
        if principal.is_admin:
            appointment.processed_by = principal.id
        logger.info("Appointment %s cancelled by %s %s", appointment.id, principal.role.value, principal.id)
