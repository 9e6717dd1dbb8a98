from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Professional


class ProfessionalRepository(Protocol):
    def list_all(self) -> Sequence[Professional]:
        raise NotImplementedError

    def get_by_id(self, professional_id: str) -> Optional[Professional]:
        raise NotImplementedError

    def create(self, *, name: str, specialty: str, commission_rate: Optional[float]) -> str:
        raise NotImplementedError

    def update(self, professional_id: str, *, name: str, specialty: str, commission_rate: Optional[float]) -> None:
        raise NotImplementedError

    def delete(self, professional_id: str) -> None:
        raise NotImplementedError
