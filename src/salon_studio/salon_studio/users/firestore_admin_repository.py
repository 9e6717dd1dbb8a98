from __future__ import annotations

from typing import Optional

from google.cloud.firestore_v1.base_query import FieldFilter

from ..database.connection import DatabaseConnection
from ..database.firestore_base import firestore_call, snapshots_to_dicts, stamped
from .model import AdminUser
from .repository import AdminRepository

ADMINS_COLLECTION = "admins"


class FirestoreAdminRepository(AdminRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _col(self):
        return self._conn_factory.collection(ADMINS_COLLECTION)

    def get_by_email(self, email: str) -> Optional[AdminUser]:
        with firestore_call("buscar administrador"):
            rows = snapshots_to_dicts(self._col().where(filter=FieldFilter("email", "==", email.strip().lower())).limit(1).stream())
        if not rows:
            return None
        r = rows[0]
        return AdminUser(
            user_id=r["id"],
            email=r.get("email") or "",
            full_name=r.get("fullName") or "",
            password_hash=r.get("passwordHash") or "",
            is_active=bool(r.get("isActive", True)),
        )

    def upsert(self, *, user_id: str, email: str, full_name: str, password_hash: str) -> None:
        payload = {
            "email": email.strip().lower(),
            "fullName": full_name,
            "passwordHash": password_hash,
            "isActive": True,
        }
        with firestore_call("salvar administrador"):
            self._col().document(user_id).set(stamped(payload, created=True), merge=True)
