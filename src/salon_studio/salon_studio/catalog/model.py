from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..core.enums import CatalogStatus


@dataclass(frozen=True)
class SalonService:
    """A service offered by the salon (manicure, pedicure, ...)."""

    service_id: str
    name: str
    price: Decimal
    duration: str = ""
    category: str = ""


@dataclass(frozen=True)
class PackageServiceItem:
    service_id: str
    quantity: int


@dataclass(frozen=True)
class SalonPackage:
    """Catalog definition of a prepaid bundle; clients buy instances of it."""

    package_id: str
    name: str
    services: tuple[PackageServiceItem, ...]
    price: Decimal
    validity_days: int
    status: CatalogStatus = CatalogStatus.ACTIVE
    short_description: str = ""
    original_price: Optional[Decimal] = None
    theme_color: str = "primary"

    def includes(self, service_id: str) -> bool:
        return any(item.service_id == service_id for item in self.services)
