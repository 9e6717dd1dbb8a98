from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from google.cloud.firestore_v1.base_query import FieldFilter

from ..common.datetime_utils import format_iso_date, to_calendar_date
from ..core.enums import PackageInstanceStatus
from ..database.connection import DatabaseConnection
from ..database.firestore_base import firestore_call, snapshot_to_dict, snapshots_to_dicts, stamped
from .model import Client, ClientPackageInstance, PackageServiceBalance
from .repository import ClientRepository

logger = logging.getLogger(__name__)

CLIENTS_COLLECTION = "clients"
PACKAGES_SUBCOLLECTION = "purchasedPackages"


def _balances_to_doc(services: Sequence[PackageServiceBalance]) -> list[dict]:
    return [{"serviceId": s.service_id, "remainingQuantity": max(0, int(s.remaining_quantity))} for s in services]


def _lenient_date(r: dict, key: str) -> Optional[date]:
    # An unreadable date is treated as missing; a missing expiry never expires.
    try:
        return to_calendar_date(r.get(key))
    except (ValueError, TypeError):
        logger.warning("Package instance %s has unreadable %s %r", r.get("id"), key, r.get(key))
        return None


def _to_instance(r: dict) -> ClientPackageInstance:
    return ClientPackageInstance(
        instance_id=r["id"],
        package_id=r.get("packageId") or "",
        package_name=r.get("packageName") or "",
        status=PackageInstanceStatus(r.get("status") or PackageInstanceStatus.ACTIVE.value),
        services=tuple(
            PackageServiceBalance(service_id=s["serviceId"], remaining_quantity=int(s.get("remainingQuantity") or 0))
            for s in (r.get("services") or [])
        ),
        purchase_date=_lenient_date(r, "purchaseDate"),
        expiry_date=_lenient_date(r, "expiryDate"),
    )


def _to_client(r: dict, instances: Sequence[ClientPackageInstance]) -> Client:
    return Client(
        client_id=r["id"],
        name=r.get("name") or "",
        email=r.get("email") or "",
        phone=r.get("phone") or "",
        stamps_earned=int(r.get("stampsEarned") or 0),
        mimos_redeemed=int(r.get("mimosRedeemed") or 0),
        purchased_packages=tuple(instances),
        password_hash=r.get("passwordHash"),
    )


class FirestoreClientRepository(ClientRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _col(self):
        return self._conn_factory.collection(CLIENTS_COLLECTION)

    def _instances(self, client_id: str) -> list[ClientPackageInstance]:
        rows = snapshots_to_dicts(self._col().document(client_id).collection(PACKAGES_SUBCOLLECTION).stream())
        instances: list[ClientPackageInstance] = []
        for r in rows:
            try:
                instances.append(_to_instance(r))
            except (ValueError, TypeError, KeyError):
                logger.warning("Skipping malformed package instance %s of client %s", r.get("id"), client_id)
        instances.sort(key=lambda i: (i.purchase_date or date.min, i.instance_id))
        return instances

    def _hydrate(self, r: dict) -> Client:
        return _to_client(r, self._instances(r["id"]))

    def list_all(self) -> Sequence[Client]:
        with firestore_call("listar clientes"):
            rows = snapshots_to_dicts(self._col().stream())
            clients = [self._hydrate(r) for r in rows]
        return sorted(clients, key=lambda c: c.name.lower())

    def get_by_id(self, client_id: str) -> Optional[Client]:
        with firestore_call("buscar cliente"):
            r = snapshot_to_dict(self._col().document(client_id).get())
            return self._hydrate(r) if r else None

    def get_by_email(self, email: str) -> Optional[Client]:
        with firestore_call("buscar cliente por e-mail"):
            snaps = list(self._col().where(filter=FieldFilter("email", "==", email.strip())).limit(1).stream())
            rows = snapshots_to_dicts(snaps)
            return self._hydrate(rows[0]) if rows else None

    def create(self, *, name: str, email: str, phone: str, password_hash: Optional[str] = None) -> str:
        payload = {"name": name, "email": email, "phone": phone, "stampsEarned": 0, "mimosRedeemed": 0}
        if password_hash:
            payload["passwordHash"] = password_hash
        with firestore_call("criar cliente"):
            _, ref = self._col().add(stamped(payload, created=True))
        return ref.id

    def update_fields(self, client_id: str, *, name: str, email: str, phone: str) -> None:
        with firestore_call("atualizar cliente"):
            self._col().document(client_id).update(stamped({"name": name, "email": email, "phone": phone}))

    def set_password_hash(self, client_id: str, password_hash: str) -> None:
        with firestore_call("definir senha do cliente"):
            self._col().document(client_id).update(stamped({"passwordHash": password_hash}))

    def delete(self, client_id: str) -> None:
        with firestore_call("remover cliente"):
            doc = self._col().document(client_id)
            for snap in doc.collection(PACKAGES_SUBCOLLECTION).stream():
                snap.reference.delete()
            doc.delete()

    def set_stamps(self, client_id: str, stamps: int) -> None:
        with firestore_call("atualizar selos"):
            self._col().document(client_id).update(stamped({"stampsEarned": int(stamps)}))

    def set_mimos_redeemed(self, client_id: str, mimos_redeemed: int) -> None:
        with firestore_call("atualizar mimos"):
            self._col().document(client_id).update(stamped({"mimosRedeemed": int(mimos_redeemed)}))

    def add_package_instance(
        self,
        client_id: str,
        *,
        package_id: str,
        package_name: str,
        services: Sequence[PackageServiceBalance],
        purchase_date: date,
        expiry_date: date,
    ) -> ClientPackageInstance:
        payload = {
            "packageId": package_id,
            "packageName": package_name,
            "status": PackageInstanceStatus.ACTIVE.value,
            "purchaseDate": format_iso_date(purchase_date),
            "expiryDate": format_iso_date(expiry_date),
            "services": _balances_to_doc(services),
        }
        with firestore_call("registrar compra de pacote"):
            _, ref = self._col().document(client_id).collection(PACKAGES_SUBCOLLECTION).add(
                stamped(payload, created=True)
            )
        return ClientPackageInstance(
            instance_id=ref.id,
            package_id=package_id,
            package_name=package_name,
            status=PackageInstanceStatus.ACTIVE,
            services=tuple(services),
            purchase_date=purchase_date,
            expiry_date=expiry_date,
        )

    def update_package_instance(
        self,
        client_id: str,
        instance_id: str,
        *,
        services: Sequence[PackageServiceBalance],
        status: PackageInstanceStatus,
    ) -> None:
        payload = {"services": _balances_to_doc(services), "status": status.value}
        with firestore_call("atualizar pacote do cliente"):
            self._col().document(client_id).collection(PACKAGES_SUBCOLLECTION).document(instance_id).update(
                stamped(payload)
            )
