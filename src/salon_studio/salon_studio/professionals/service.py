from __future__ import annotations

from typing import Optional, Sequence

from ..common.validators import require_min_length
from ..core.exceptions import NotFoundError, ValidationError
from .model import Professional
from .repository import ProfessionalRepository


def parse_commission_rate(value) -> Optional[float]:
    """Empty input means "no commission configured" and is stored as null."""

    if value is None or str(value).strip() == "":
        return None
    try:
        rate = float(str(value).strip().replace(",", "."))
    except ValueError:
        raise ValidationError("Comissão inválida.")
    if rate < 0 or rate > 100:
        raise ValidationError("Comissão deve estar entre 0 e 100.")
    return rate


class ProfessionalService:
    def __init__(self, professionals: ProfessionalRepository):
        self._professionals = professionals

    def list_professionals(self) -> Sequence[Professional]:
        return self._professionals.list_all()

    def get_professional(self, professional_id: str) -> Professional:
        p = self._professionals.get_by_id(professional_id)
        if not p:
            raise NotFoundError("Profissional não encontrado.")
        return p

    def create_professional(self, *, name: str, specialty: str = "", commission_rate=None) -> str:
        return self._professionals.create(
            name=require_min_length(name, "Nome", 2),
            specialty=(specialty or "").strip(),
            commission_rate=parse_commission_rate(commission_rate),
        )

    def update_professional(self, professional_id: str, *, name: str, specialty: str = "", commission_rate=None) -> None:
        self.get_professional(professional_id)
        self._professionals.update(
            professional_id,
            name=require_min_length(name, "Nome", 2),
            specialty=(specialty or "").strip(),
            commission_rate=parse_commission_rate(commission_rate),
        )

    def delete_professional(self, professional_id: str) -> None:
        self.get_professional(professional_id)
        self._professionals.delete(professional_id)
