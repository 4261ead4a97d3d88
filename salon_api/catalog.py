# salon_api/catalog.py

from dataclasses import dataclass

from sqlmodel import Session

from salon_api.errors import FormulaNotFound
from salon_api.models import Formula


@dataclass(frozen=True)
class ServiceOffering:
    formula_id: int
    title: str
    price: float
    duration_hint: int


class ServiceCatalog:
    """Resolves formula ids to bookable offerings."""

    def resolve(self, formula_id: int) -> ServiceOffering:
        raise NotImplementedError


class DatabaseServiceCatalog(ServiceCatalog):
    def __init__(self, session: Session):
        self.session = session

    def resolve(self, formula_id: int) -> ServiceOffering:
        formula = self.session.get(Formula, formula_id)
        if formula is None or not formula.is_active:
            raise FormulaNotFound()
        return ServiceOffering(
            formula_id=formula.id,
            title=formula.title,
            price=formula.price,
            duration_hint=formula.duration,
        )
