from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional, Sequence

from ..common.validators import money_to_storage, parse_money
from ..core.enums import CatalogStatus
from ..database.connection import DatabaseConnection
from ..database.firestore_base import firestore_call, snapshot_to_dict, snapshots_to_dicts, stamped
from .model import PackageServiceItem, SalonPackage, SalonService
from .repository import PackageRepository, ServiceRepository

SERVICES_COLLECTION = "services"
PACKAGES_COLLECTION = "packages"

_SERVICE_KEYS = {"name": "name", "price": "price", "duration": "duration", "category": "category"}
_PACKAGE_KEYS = {
    "name": "name",
    "services": "services",
    "price": "price",
    "validity_days": "validityDays",
    "status": "status",
    "short_description": "shortDescription",
    "original_price": "originalPrice",
    "theme_color": "themeColor",
}


def _to_service(r: dict) -> SalonService:
    return SalonService(
        service_id=r["id"],
        name=r.get("name") or "",
        price=parse_money(r.get("price")) or Decimal("0.00"),
        duration=str(r.get("duration") or ""),
        category=str(r.get("category") or ""),
    )


def _to_package(r: dict) -> SalonPackage:
    return SalonPackage(
        package_id=r["id"],
        name=r.get("name") or "",
        services=tuple(
            PackageServiceItem(service_id=s["serviceId"], quantity=int(s.get("quantity") or 0))
            for s in (r.get("services") or [])
        ),
        price=parse_money(r.get("price")) or Decimal("0.00"),
        validity_days=int(r.get("validityDays") or 0),
        status=CatalogStatus(r.get("status") or CatalogStatus.ACTIVE.value),
        short_description=r.get("shortDescription") or "",
        original_price=parse_money(r.get("originalPrice")),
        theme_color=r.get("themeColor") or "primary",
    )


def _encode(value: Any) -> Any:
    if isinstance(value, Decimal):
        return money_to_storage(value)
    if isinstance(value, CatalogStatus):
        return value.value
    if isinstance(value, (list, tuple)) and value and isinstance(value[0], PackageServiceItem):
        return [{"serviceId": s.service_id, "quantity": int(s.quantity)} for s in value]
    return value


class FirestoreServiceRepository(ServiceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _col(self):
        return self._conn_factory.collection(SERVICES_COLLECTION)

    def list_all(self) -> Sequence[SalonService]:
        with firestore_call("listar serviços"):
            rows = snapshots_to_dicts(self._col().stream())
        return sorted((_to_service(r) for r in rows), key=lambda s: s.name.lower())

    def get_by_id(self, service_id: str) -> Optional[SalonService]:
        with firestore_call("buscar serviço"):
            r = snapshot_to_dict(self._col().document(service_id).get())
        return _to_service(r) if r else None

    def create(self, *, name: str, price: Decimal, duration: str, category: str) -> str:
        payload = {"name": name, "price": money_to_storage(price), "duration": duration, "category": category}
        with firestore_call("criar serviço"):
            _, ref = self._col().add(stamped(payload, created=True))
        return ref.id

    def update(self, service_id: str, **fields) -> None:
        payload = {_SERVICE_KEYS[k]: _encode(v) for k, v in fields.items() if k in _SERVICE_KEYS}
        with firestore_call("atualizar serviço"):
            self._col().document(service_id).update(stamped(payload))

    def delete(self, service_id: str) -> None:
        with firestore_call("remover serviço"):
            self._col().document(service_id).delete()


class FirestorePackageRepository(PackageRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _col(self):
        return self._conn_factory.collection(PACKAGES_COLLECTION)

    def list_all(self) -> Sequence[SalonPackage]:
        with firestore_call("listar pacotes"):
            rows = snapshots_to_dicts(self._col().stream())
        return sorted((_to_package(r) for r in rows), key=lambda p: p.name.lower())

    def get_by_id(self, package_id: str) -> Optional[SalonPackage]:
        with firestore_call("buscar pacote"):
            r = snapshot_to_dict(self._col().document(package_id).get())
        return _to_package(r) if r else None

    def create(
        self,
        *,
        name: str,
        services: Sequence[PackageServiceItem],
        price: Decimal,
        validity_days: int,
        status: CatalogStatus,
        short_description: str = "",
        original_price: Optional[Decimal] = None,
        theme_color: str = "primary",
    ) -> str:
        payload = {
            "name": name,
            "services": _encode(list(services)),
            "price": money_to_storage(price),
            "validityDays": int(validity_days),
            "status": status.value,
            "shortDescription": short_description,
            "originalPrice": money_to_storage(original_price) if original_price is not None else None,
            "themeColor": theme_color,
        }
        with firestore_call("criar pacote"):
            _, ref = self._col().add(stamped(payload, created=True))
        return ref.id

    def update(self, package_id: str, **fields) -> None:
        payload = {_PACKAGE_KEYS[k]: _encode(v) for k, v in fields.items() if k in _PACKAGE_KEYS}
        with firestore_call("atualizar pacote"):
            self._col().document(package_id).update(stamped(payload))

    def delete(self, package_id: str) -> None:
        with firestore_call("remover pacote"):
            self._col().document(package_id).delete()
