from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.firestore_base import firestore_call, snapshot_to_dict, snapshots_to_dicts, stamped
from .model import Professional
from .repository import ProfessionalRepository

PROFESSIONALS_COLLECTION = "professionals"


def _to_professional(r: dict) -> Professional:
    rate = r.get("commissionRate")
    return Professional(
        professional_id=r["id"],
        name=r.get("name") or "",
        specialty=r.get("specialty") or "",
        commission_rate=float(rate) if rate is not None else None,
    )


class FirestoreProfessionalRepository(ProfessionalRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _col(self):
        return self._conn_factory.collection(PROFESSIONALS_COLLECTION)

    def list_all(self) -> Sequence[Professional]:
        with firestore_call("listar profissionais"):
            rows = snapshots_to_dicts(self._col().stream())
        return sorted((_to_professional(r) for r in rows), key=lambda p: p.name.lower())

    def get_by_id(self, professional_id: str) -> Optional[Professional]:
        with firestore_call("buscar profissional"):
            r = snapshot_to_dict(self._col().document(professional_id).get())
        return _to_professional(r) if r else None

    def create(self, *, name: str, specialty: str, commission_rate: Optional[float]) -> str:
        payload = {"name": name, "specialty": specialty, "commissionRate": commission_rate}
        with firestore_call("criar profissional"):
            _, ref = self._col().add(stamped(payload, created=True))
        return ref.id

    def update(self, professional_id: str, *, name: str, specialty: str, commission_rate: Optional[float]) -> None:
        payload = {"name": name, "specialty": specialty, "commissionRate": commission_rate}
        with firestore_call("atualizar profissional"):
            self._col().document(professional_id).update(stamped(payload))

    def delete(self, professional_id: str) -> None:
        with firestore_call("remover profissional"):
            self._col().document(professional_id).delete()
