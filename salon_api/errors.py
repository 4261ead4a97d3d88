# salon_api/errors.py

# Every error carries its HTTP status and a stable ``code``; the handlers in
# main.py render them without knowing each class.

from typing import Iterable, Optional


class SchedulingError(Exception):
    status_code = 500
    code = "internal_error"
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code}


class InternalError(SchedulingError):
    pass


# --- validation ---

class ValidationError(SchedulingError):
    status_code = 400
    code = "validation_error"
    default_message = "Invalid request"

    def __init__(self, message: Optional[str] = None, errors: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.errors = list(errors) if errors else [self.message]

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["errors"] = self.errors
        return body


class MissingField(ValidationError):
    code = "missing_field"

    def __init__(self, fields: Iterable[str]):
        self.fields = list(fields)
        super().__init__(
            f"Missing required field(s): {', '.join(self.fields)}",
            errors=[f"{name} is required" for name in self.fields],
        )


class InvalidTimeFormat(ValidationError):
    code = "invalid_time_format"

    def __init__(self, field: str = "time"):
        self.field = field
        super().__init__(f"{field} must use the HH:MM format")


class InvalidInterval(ValidationError):
    code = "invalid_interval"
    default_message = "End time must be after start time"


class InvalidStatus(ValidationError):
    code = "invalid_status"

    def __init__(self, value=None):
        self.value = value
        super().__init__(f"Invalid status: {value!r}")


class PastDate(ValidationError):
    code = "past_date"
    default_message = "Appointment date cannot be in the past"


class PastStartTime(ValidationError):
    code = "past_start_time"
    default_message = "Appointment start time must be in the future"


class CancellationWindowClosed(ValidationError):
    code = "cancellation_window_closed"
    default_message = "Cannot cancel an appointment that has already started"


# --- lookup ---

class NotFound(SchedulingError):
    status_code = 404
    code = "not_found"
    default_message = "Not found"


class AppointmentNotFound(NotFound):
    code = "appointment_not_found"
    default_message = "Appointment not found"


class FormulaNotFound(NotFound):
    code = "formula_not_found"
    default_message = "Formula not found"


# --- state ---

class Conflict(SchedulingError):
    status_code = 409
    code = "conflict"
    default_message = "Conflict"


class SlotConflict(Conflict):
    code = "slot_conflict"
    default_message = "This time slot is already booked"


class TerminalStateViolation(Conflict):
    code = "terminal_state"

    def __init__(self, current=None, target=None):
        self.current = current
        self.target = target
        if current is not None:
            message = f"Appointment is already {current} and cannot become {target}"
        else:
            message = "Appointment is already cancelled or completed"
        super().__init__(message)


class ConcurrentModification(Conflict):
    code = "concurrent_modification"
    default_message = "Appointment was modified by another request, reload and retry"


class DuplicateEmail(Conflict):
    code = "duplicate_email"
    default_message = "Email already registered"


# --- access ---

class Forbidden(SchedulingError):
    status_code = 403
    code = "forbidden"
    default_message = "Forbidden"


class Unauthenticated(SchedulingError):
    status_code = 401
    code = "unauthenticated"
    default_message = "Invalid token"
