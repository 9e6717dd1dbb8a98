from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Mapping, Sequence

from ..catalog.model import SalonPackage, SalonService
from ..clients.model import Client
from ..clients.service import find_client_by_name
from ..core.enums import CatalogStatus


@dataclass(frozen=True)
class PackageAdvisory:
    service_id: str
    service_name: str

    @property
    def message(self) -> str:
        return (
            f'O cliente selecionado não possui um pacote ativo que inclua o serviço "{self.service_name}". '
            "O valor integral será aplicado."
        )


def package_coverage_advisories(
    *,
    client_name: str,
    service_ids: Sequence[str],
    clients: Sequence[Client],
    packages: Sequence[SalonPackage],
    services: Mapping[str, SalonService],
    today: date,
) -> list[PackageAdvisory]:
    """Services sold in some active package that the client has no usable package for.

    Informational only; booking goes ahead at full price.
    """

    if not client_name or not service_ids or not clients or not packages or not services:
        return []

    client = find_client_by_name(clients, client_name)
    if client is None:
        return []

    active = [p for p in packages if p.status == CatalogStatus.ACTIVE]
    out: list[PackageAdvisory] = []
    for service_id in service_ids:
        svc = services.get(service_id)
        if svc is None:
            continue
        if not any(p.includes(service_id) for p in active):
            continue
        if any(inst.can_cover(service_id, today) for inst in client.purchased_packages):
            continue
        out.append(PackageAdvisory(service_id=service_id, service_name=svc.name))
    return out
