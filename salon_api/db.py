# salon_api/db.py

import logging

from sqlmodel import SQLModel, create_engine, Session, select

from salon_api import config
from salon_api.data import DEFAULT_FORMULAS
from salon_api.models import Formula

logger = logging.getLogger(__name__)

connect_args = {}
if config.DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False  # required for SQLite + FastAPI

# Engine = connection to the database
engine = create_engine(
    config.DATABASE_URL,
    echo=False,
    connect_args=connect_args,
)


def init_db(bind=None, seed: bool = config.SEED_FORMULAS) -> None:
    bind = bind or engine
    SQLModel.metadata.create_all(bind)
    if not seed:
        return
    with Session(bind) as session:
        if session.exec(select(Formula)).first() is not None:
            return
        for entry in DEFAULT_FORMULAS:
            session.add(Formula(**entry))
        session.commit()
        logger.info("Seeded %d default formulas", len(DEFAULT_FORMULAS))


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session
