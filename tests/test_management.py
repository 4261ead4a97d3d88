"""Tests for ManagementService: admin edits, status changes and cancellation."""
from datetime import date

import pytest
from sqlmodel import SQLModel, Session, create_engine

from salon_api.catalog import DatabaseServiceCatalog
from salon_api.errors import (
    AppointmentNotFound,
    CancellationWindowClosed,
    ConcurrentModification,
    Forbidden,
    FormulaNotFound,
    InvalidInterval,
    InvalidStatus,
    InvalidTimeFormat,
    SlotConflict,
    TerminalStateViolation,
    ValidationError,
)
from salon_api.locks import DateLocks
from salon_api.models import Appointment, Formula
from salon_api.repository import AppointmentRepository
from salon_api.schemas import AppointmentUpdate
from salon_api.services.lifecycle import AppointmentLifecycle
from salon_api.services.management import ManagementService

DAY = date(2025, 3, 10)


class TestUpdateAppointment:
    def test_admin_updates_notes_and_records_processed_by(self, management, admin_user, make_appointment):
        appt = make_appointment()
        updated = management.update_appointment(appt.id, admin_user, AppointmentUpdate(admin_notes="Peau sensible"))

        assert updated.admin_notes == "Peau sensible"
        assert updated.processed_by == admin_user.id
        assert updated.status == "pending"

    def test_empty_patch_still_records_admin(self, management, admin_user, make_appointment):
        appt = make_appointment()
        updated = management.update_appointment(appt.id, admin_user, AppointmentUpdate())
        assert updated.processed_by == admin_user.id

    def test_client_cannot_update(self, management, client_user, make_appointment):
        appt = make_appointment()
        with pytest.raises(Forbidden):
            management.update_appointment(appt.id, client_user, AppointmentUpdate(admin_notes="x"))

    def test_missing_appointment(self, management, admin_user):
        with pytest.raises(AppointmentNotFound):
            management.update_appointment(4242, admin_user, AppointmentUpdate(admin_notes="x"))

    def test_end_time_checked_against_existing_start(self, management, admin_user, make_appointment):
        appt = make_appointment("09:00", "10:00")
        with pytest.raises(InvalidInterval):
            management.update_appointment(appt.id, admin_user, AppointmentUpdate(end_time="08:30"))

    def test_start_time_checked_against_existing_end(self, management, admin_user, make_appointment):
        appt = make_appointment("09:00", "10:00")
        with pytest.raises(InvalidInterval):
            management.update_appointment(appt.id, admin_user, AppointmentUpdate(start_time="10:00"))

    def test_malformed_time(self, management, admin_user, make_appointment):
        appt = make_appointment()
        with pytest.raises(InvalidTimeFormat):
            management.update_appointment(appt.id, admin_user, AppointmentUpdate(start_time="8:00"))

    def test_required_fields_cannot_be_cleared(self, management, admin_user, make_appointment):
        appt = make_appointment()
        with pytest.raises(ValidationError) as excinfo:
            management.update_appointment(appt.id, admin_user, AppointmentUpdate(date=None, status=None))
        assert excinfo.value.errors == ["date cannot be null", "status cannot be null"]

    def test_notes_can_be_cleared(self, management, admin_user, make_appointment):
        appt = make_appointment()
        management.update_appointment(appt.id, admin_user, AppointmentUpdate(admin_notes="temp"))
        updated = management.update_appointment(appt.id, admin_user, AppointmentUpdate(admin_notes=None))
        assert updated.admin_notes is None

    def test_unknown_formula(self, management, admin_user, make_appointment):
        appt = make_appointment()
        with pytest.raises(FormulaNotFound):
            management.update_appointment(appt.id, admin_user, AppointmentUpdate(formula_id=999))

    def test_change_formula(self, management, session, admin_user, make_appointment):
        other = Formula(title="Manucure", price=25.0, duration=45)
        session.add(other)
        session.commit()
        appt = make_appointment()

        updated = management.update_appointment(appt.id, admin_user, AppointmentUpdate(formula_id=other.id))
        assert updated.formula_id == other.id

    def test_invalid_status(self, management, admin_user, make_appointment):
        appt = make_appointment()
        with pytest.raises(InvalidStatus):
            management.update_appointment(appt.id, admin_user, AppointmentUpdate(status="archived"))

    def test_status_change_from_terminal_state(self, management, admin_user, make_appointment):
        appt = make_appointment(status="completed")
        with pytest.raises(TerminalStateViolation):
            management.update_appointment(appt.id, admin_user, AppointmentUpdate(status="pending"))

    def test_notes_on_terminal_appointment(self, management, admin_user, make_appointment):
        appt = make_appointment(status="completed")
        updated = management.update_appointment(
            appt.id, admin_user, AppointmentUpdate(status="completed", admin_notes="RAS")
        )
        assert updated.status == "completed"
        assert updated.admin_notes == "RAS"

    def test_move_into_occupied_slot_conflicts(self, management, admin_user, make_appointment):
        make_appointment("09:00", "10:00")
        moving = make_appointment("11:00", "12:00")
        with pytest.raises(SlotConflict):
            management.update_appointment(
                moving.id, admin_user, AppointmentUpdate(start_time="09:30", end_time="10:30")
            )

    def test_move_to_other_day_conflicts(self, management, admin_user, make_appointment):
        make_appointment("09:00", "10:00", day=date(2025, 3, 11))
        moving = make_appointment("09:00", "10:00")
        with pytest.raises(SlotConflict):
            management.update_appointment(moving.id, admin_user, AppointmentUpdate(date=date(2025, 3, 11)))

    def test_extending_own_slot_ignores_itself(self, management, admin_user, make_appointment):
        appt = make_appointment("09:00", "10:00")
        updated = management.update_appointment(appt.id, admin_user, AppointmentUpdate(end_time="10:30"))
        assert updated.end_time == "10:30"

    def test_move_next_to_cancelled_slot(self, management, admin_user, make_appointment):
        make_appointment("09:00", "10:00", status="cancelled")
        moving = make_appointment("14:00", "15:00")
        updated = management.update_appointment(
            moving.id, admin_user, AppointmentUpdate(start_time="09:00", end_time="10:00")
        )
        assert (updated.start_time, updated.end_time) == ("09:00", "10:00")

    def test_move_while_cancelling_skips_availability(self, management, admin_user, make_appointment):
        make_appointment("09:00", "10:00")
        moving = make_appointment("14:00", "15:00")
        updated = management.update_appointment(
            moving.id,
            admin_user,
            AppointmentUpdate(start_time="09:00", end_time="10:00", status="cancelled", cancellation_reason="Doublon"),
        )
        assert updated.status == "cancelled"
        assert updated.cancellation_reason == "Doublon"


class TestSetStatus:
    def test_pending_to_completed_then_client_cancel(self, management, admin_user, client_user, make_appointment):
        appt = make_appointment()
        updated = management.set_status(appt.id, admin_user, "completed")
        assert updated.status == "completed"
        assert updated.processed_by == admin_user.id

        with pytest.raises(TerminalStateViolation):
            management.cancel_appointment(appt.id, client_user)

    def test_notes_untouched_unless_given(self, management, admin_user, make_appointment):
        appt = make_appointment()
        management.set_status(appt.id, admin_user, "confirmed", admin_notes="Premier rendez-vous")
        updated = management.set_status(appt.id, admin_user, "in_progress")
        assert updated.admin_notes == "Premier rendez-vous"

        updated = management.set_status(appt.id, admin_user, "in_progress", admin_notes=None)
        assert updated.admin_notes is None

    def test_missing_or_bad_status(self, management, admin_user, make_appointment):
        appt = make_appointment()
        for bad in (None, "", "done"):
            with pytest.raises(InvalidStatus):
                management.set_status(appt.id, admin_user, bad)

    def test_client_cannot_set_status(self, management, client_user, make_appointment):
        appt = make_appointment()
        with pytest.raises(Forbidden):
            management.set_status(appt.id, client_user, "confirmed")

    def test_admin_override_cancels_past_appointment(self, management, admin_user, make_appointment):
        appt = make_appointment(day=date(2025, 2, 1))
        updated = management.set_status(appt.id, admin_user, "cancelled")
        assert updated.status == "cancelled"


class TestCancelAppointment:
    def test_owner_cancels_with_reason(self, management, client_user, make_appointment):
        appt = make_appointment()
        updated = management.cancel_appointment(appt.id, client_user, "Malade")

        assert updated.status == "cancelled"
        assert updated.cancellation_reason == "Malade"
        assert updated.processed_by is None

    def test_admin_cancel_sets_processed_by(self, management, admin_user, make_appointment):
        appt = make_appointment()
        updated = management.cancel_appointment(appt.id, admin_user)
        assert updated.processed_by == admin_user.id

    def test_other_client_forbidden(self, management, other_client, make_appointment):
        appt = make_appointment()
        with pytest.raises(Forbidden):
            management.cancel_appointment(appt.id, other_client)

    def test_already_cancelled(self, management, client_user, make_appointment):
        appt = make_appointment(status="cancelled")
        with pytest.raises(TerminalStateViolation):
            management.cancel_appointment(appt.id, client_user)

    def test_past_appointment(self, management, client_user, make_appointment):
        appt = make_appointment(day=date(2025, 2, 27))
        with pytest.raises(CancellationWindowClosed):
            management.cancel_appointment(appt.id, client_user)

    def test_unknown_appointment(self, management, client_user):
        with pytest.raises(AppointmentNotFound):
            management.cancel_appointment(9999, client_user)


class TestInterleavedRequests:
    """Two sessions on one database, as two concurrent requests would see it."""

    @pytest.fixture
    def shared_engine(self, tmp_path):
        engine = create_engine(f"sqlite:///{tmp_path / 'shared.db'}", connect_args={"check_same_thread": False})
        SQLModel.metadata.create_all(engine)
        yield engine
        engine.dispose()

    @pytest.fixture
    def appt_id(self, shared_engine, client_user):
        with Session(shared_engine) as session:
            formula = Formula(title="Brushing", price=30.0, duration=30)
            session.add(formula)
            session.commit()
            appt = Appointment(
                client_id=client_user.id, formula_id=formula.id, date=DAY, start_time="09:00", end_time="10:00",
            )
            session.add(appt)
            session.commit()
            return appt.id

    def _service(self, session, clock, locks):
        return ManagementService(AppointmentRepository(session), DatabaseServiceCatalog(session), clock, locks)

    def _status(self, engine, appt_id):
        with Session(engine) as session:
            return session.get(Appointment, appt_id).status

    def test_stale_cancel_cannot_overwrite_completion(self, shared_engine, appt_id, clock, client_user, admin_user):
        locks = DateLocks()
        with Session(shared_engine) as client_session, Session(shared_engine) as admin_session:
            client_repo = AppointmentRepository(client_session)
            stale = client_repo.find_by_id(appt_id)
            AppointmentLifecycle(clock).cancel(stale, client_user, "Imprévu")

            self._service(admin_session, clock, locks).set_status(appt_id, admin_user, "completed")

            with pytest.raises(ConcurrentModification):
                client_repo.update(stale)

        assert self._status(shared_engine, appt_id) == "completed"

    def test_cancel_rechecks_status_written_by_another_session(
        self, shared_engine, appt_id, clock, client_user, admin_user
    ):
        locks = DateLocks()
        with Session(shared_engine) as client_session, Session(shared_engine) as admin_session:
            client_service = self._service(client_session, clock, locks)
            # the client's session has the pending row cached
            assert client_service.repo.find_by_id(appt_id).status == "pending"

            self._service(admin_session, clock, locks).set_status(appt_id, admin_user, "completed")

            with pytest.raises(TerminalStateViolation):
                client_service.cancel_appointment(appt_id, client_user)

        assert self._status(shared_engine, appt_id) == "completed"
