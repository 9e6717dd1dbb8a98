from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import PackageInstanceStatus
from .model import Client, ClientPackageInstance, PackageServiceBalance


class ClientRepository(Protocol):
    def list_all(self) -> Sequence[Client]:
        raise NotImplementedError

    def get_by_id(self, client_id: str) -> Optional[Client]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Client]:
        raise NotImplementedError

    def create(self, *, name: str, email: str, phone: str, password_hash: Optional[str] = None) -> str:
        raise NotImplementedError

    def update_fields(self, client_id: str, *, name: str, email: str, phone: str) -> None:
        raise NotImplementedError

    def set_password_hash(self, client_id: str, password_hash: str) -> None:
        raise NotImplementedError

    def delete(self, client_id: str) -> None:
        raise NotImplementedError

    def set_stamps(self, client_id: str, stamps: int) -> None:
        raise NotImplementedError

    def set_mimos_redeemed(self, client_id: str, mimos_redeemed: int) -> None:
        raise NotImplementedError

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
        raise NotImplementedError

    def update_package_instance(
        self,
        client_id: str,
        instance_id: str,
        *,
        services: Sequence[PackageServiceBalance],
        status: PackageInstanceStatus,
    ) -> None:
        """Keyed update of a single instance; other instances are untouched."""
        raise NotImplementedError
