# salon_api/routers/formulas_routes.py

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from salon_api.db import get_session
from salon_api.models import Formula
from salon_api.schemas import FormulaCreate, FormulaPublic
from salon_api.auth import Principal, get_current_admin
from salon_api.errors import FormulaNotFound

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/formulas",
    tags=["formulas"],
)


@router.get("", response_model=List[FormulaPublic])
def list_formulas(session: Session = Depends(get_session)):
    return session.exec(
        select(Formula).where(Formula.is_active == True).order_by(Formula.title)  # noqa: E712
    ).all()


@router.post("", response_model=FormulaPublic, status_code=201)
def create_formula(
    formula: FormulaCreate,
    admin: Principal = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    db_formula = Formula(**formula.model_dump())
    session.add(db_formula)
    session.commit()
    session.refresh(db_formula)
    logger.info("Formula %s created by admin %s", db_formula.id, admin.id)
    return db_formula


@router.delete("/{formula_id}", response_model=FormulaPublic)
def deactivate_formula(
    formula_id: int,
    admin: Principal = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    # Soft delete: existing appointments keep pointing at the formula
    db_formula = session.get(Formula, formula_id)
    if db_formula is None:
        raise FormulaNotFound()
    db_formula.is_active = False
    session.add(db_formula)
    session.commit()
    session.refresh(db_formula)
    logger.info("Formula %s deactivated by admin %s", formula_id, admin.id)
    return db_formula
