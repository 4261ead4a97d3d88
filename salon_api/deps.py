# salon_api/deps.py

from salon_api.errors import Forbidden


def require_admin(principal) -> None:
    if not principal.is_admin:
        raise Forbidden("Admin role required")


def can_access(principal, appointment) -> bool:
    return principal.is_admin or appointment.client_id == principal.id


def require_access(principal, appointment) -> None:
    if not can_access(principal, appointment):
        raise Forbidden("You are not allowed to access this appointment")
