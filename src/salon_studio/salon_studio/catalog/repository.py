from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import CatalogStatus
from .model import PackageServiceItem, SalonPackage, SalonService


class ServiceRepository(Protocol):
    def list_all(self) -> Sequence[SalonService]:
        raise NotImplementedError

    def get_by_id(self, service_id: str) -> Optional[SalonService]:
        raise NotImplementedError

    def create(self, *, name: str, price: Decimal, duration: str, category: str) -> str:
        raise NotImplementedError

    def update(self, service_id: str, **fields) -> None:
        raise NotImplementedError

    def delete(self, service_id: str) -> None:
        raise NotImplementedError


class PackageRepository(Protocol):
    def list_all(self) -> Sequence[SalonPackage]:
        raise NotImplementedError

    def get_by_id(self, package_id: str) -> Optional[SalonPackage]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update(self, package_id: str, **fields) -> None:
        raise NotImplementedError

    def delete(self, package_id: str) -> None:
        raise NotImplementedError
