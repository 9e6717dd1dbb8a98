from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import PackageInstanceStatus


@dataclass(frozen=True)
class PackageServiceBalance:
    service_id: str
    remaining_quantity: int


@dataclass(frozen=True)
class ClientPackageInstance:
    """A package bought by one client, with per-service remaining uses."""

    instance_id: str
    package_id: str
    package_name: str
    status: PackageInstanceStatus
    services: tuple[PackageServiceBalance, ...]
    purchase_date: Optional[date] = None
    expiry_date: Optional[date] = None

    def remaining_for(self, service_id: str) -> int:
        for s in self.services:
            if s.service_id == service_id:
                return s.remaining_quantity
        return 0

    def is_expired(self, today: date) -> bool:
        # A missing expiry date never expires.
        return self.expiry_date is not None and self.expiry_date < today

    def can_cover(self, service_id: str, today: date) -> bool:
        return (
            self.status == PackageInstanceStatus.ACTIVE
            and not self.is_expired(today)
            and self.remaining_for(service_id) > 0
        )

    def is_exhausted(self) -> bool:
        return all(s.remaining_quantity <= 0 for s in self.services)


@dataclass(frozen=True)
class Client:
    client_id: str
    name: str
    email: str = ""
    phone: str = ""
    stamps_earned: int = 0
    mimos_redeemed: int = 0
    purchased_packages: tuple[ClientPackageInstance, ...] = field(default_factory=tuple)
    password_hash: Optional[str] = None

    @property
    def has_packages(self) -> bool:
        return bool(self.purchased_packages)


@dataclass(frozen=True)
class LoyaltyCard:
    """Derived loyalty view of a client (not stored)."""

    stamps: int
    total_stamps: int
    hearts: int
    mimos_earned: int
    mimos_redeemed: int
    mimos_available: int

    @property
    def is_complete(self) -> bool:
        return self.stamps >= self.total_stamps
