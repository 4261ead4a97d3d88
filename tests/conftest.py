"""Shared test fixtures."""
from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from salon_api.auth import Principal, create_access_token
from salon_api.catalog import DatabaseServiceCatalog
from salon_api.clock import FixedClock, get_clock
from salon_api.db import get_session
from salon_api.locks import DateLocks
from salon_api.main import app
from salon_api.models import Appointment, Formula, User
from salon_api.repository import AppointmentRepository
from salon_api.schemas import UserRole
from salon_api.services.booking import BookingService
from salon_api.services.management import ManagementService
from salon_api.services.queries import AdminQueryService

# "Now" for every test: Saturday 1 March 2025, 10:00 shop time
NOW = datetime(2025, 3, 1, 10, 0)
BOOKING_DAY = date(2025, 3, 10)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def clock():
    return FixedClock(NOW)


def _add_user(session, email, role):
    user = User(
        email=email,
        password_hash="not-a-real-hash",
        role=role.value,
        first_name=email.split("@")[0],
        last_name="Test",
        phone="0600000000",
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return Principal(id=user.id, role=role)


@pytest.fixture
def client_user(session) -> Principal:
    return _add_user(session, "alice@example.com", UserRole.client)


@pytest.fixture
def other_client(session) -> Principal:
    return _add_user(session, "bob@example.com", UserRole.client)


@pytest.fixture
def admin_user(session) -> Principal:
    return _add_user(session, "admin@example.com", UserRole.admin)


@pytest.fixture
def formula(session) -> Formula:
    formula = Formula(title="Soin visage éclat", price=55.0, duration=60)
    session.add(formula)
    session.commit()
    session.refresh(formula)
    return formula


@pytest.fixture
def repo(session):
    return AppointmentRepository(session)


@pytest.fixture
def booking(session, clock):
    return BookingService(AppointmentRepository(session), DatabaseServiceCatalog(session), clock, DateLocks())


@pytest.fixture
def management(session, clock):
    return ManagementService(AppointmentRepository(session), DatabaseServiceCatalog(session), clock, DateLocks())


@pytest.fixture
def queries(session):
    return AdminQueryService(AppointmentRepository(session))


@pytest.fixture
def make_appointment(session, formula, client_user):
    """Insert an appointment directly, bypassing booking validation."""
    def _create(start="09:00", end="10:00", day=BOOKING_DAY, status="pending", client_id=None):
        appt = Appointment(
            client_id=client_id or client_user.id,
            formula_id=formula.id,
            date=day,
            start_time=start,
            end_time=end,
            status=status,
        )
        session.add(appt)
        session.commit()
        session.refresh(appt)
        return appt
    return _create


@pytest.fixture
def api(engine, clock):
    def _session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _session_override
    app.dependency_overrides[get_clock] = lambda: clock
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_header():
    def _header(principal: Principal) -> dict:
        token = create_access_token({"sub": str(principal.id)})
        return {"Authorization": f"Bearer {token}"}
    return _header
