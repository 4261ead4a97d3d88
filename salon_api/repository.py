# salon_api/repository.py

import logging
from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError
from sqlmodel import Session, select

from salon_api.errors import ConcurrentModification, InternalError
from salon_api.models import Appointment, utcnow

logger = logging.getLogger(__name__)


class AppointmentRepository:
    """Repository for appointment database operations"""

    def __init__(self, session: Session):
        self.session = session

    def find_by_id(self, appointment_id: int) -> Optional[Appointment]:
        return self.session.get(Appointment, appointment_id)

    def find_by_date(self, day: date) -> list[Appointment]:
        """All appointments on a calendar day, cancelled ones included"""
        return list(self.session.exec(
            select(Appointment)
            .where(Appointment.date == day)
            .order_by(Appointment.start_time)
        ).all())

    def find_by_client(self, client_id: int, status: Optional[str] = None) -> list[Appointment]:
        """Client appointments, most recent first"""
        stmt = select(Appointment).where(Appointment.client_id == client_id)
        if status is not None:
            stmt = stmt.where(Appointment.status == status)
        stmt = stmt.order_by(Appointment.date.desc(), Appointment.start_time.desc())
        return list(self.session.exec(stmt).all())

    def find_all(
        self,
        status: Optional[str] = None,
        day: Optional[date] = None,
        client_id: Optional[int] = None,
    ) -> list[Appointment]:
        """Filtered appointments, oldest first"""
        stmt = select(Appointment)
        if status is not None:
            stmt = stmt.where(Appointment.status == status)
        if day is not None:
            stmt = stmt.where(Appointment.date == day)
        if client_id is not None:
            stmt = stmt.where(Appointment.client_id == client_id)
        # HH:MM strings are zero-padded so lexical order is chronological
        stmt = stmt.order_by(Appointment.date, Appointment.start_time)
        return list(self.session.exec(stmt).all())

    def reload(self, appointment: Appointment) -> Appointment:
        """Re-read the row, discarding what this session cached"""
        self.session.refresh(appointment)
        return appointment

    def insert(self, appointment: Appointment) -> Appointment:
        self.session.add(appointment)
        self._commit()
        self.session.refresh(appointment)  # fills appointment.id
        return appointment

    def update(self, appointment: Appointment) -> Appointment:
        appointment.updated_at = utcnow()
        self.session.add(appointment)
        self._commit()
        self.session.refresh(appointment)
        return appointment

    def _commit(self) -> None:
        try:
            self.session.commit()
        except StaleDataError as exc:
            self.session.rollback()
            logger.warning("Stale write rejected: %s", exc)
            raise ConcurrentModification() from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Failed to persist appointment")
            raise InternalError() from exc
