from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Sequence

from ..common.validators import parse_money, require_min_length
from ..core.enums import CatalogStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import PackageServiceItem, SalonPackage, SalonService
from .repository import PackageRepository, ServiceRepository

logger = logging.getLogger(__name__)


def _require_price(value, field_name: str = "Preço") -> Decimal:
    amount = parse_money(value)
    if amount is None or amount < 0:
        raise ValidationError(f"{field_name} inválido.")
    return amount


class CatalogService:
    """Services and packages offered by the salon."""

    def __init__(self, services: ServiceRepository, packages: PackageRepository):
        self._services = services
        self._packages = packages

    # -- services -------------------------------------------------------

    def list_services(self) -> Sequence[SalonService]:
        return self._services.list_all()

    def get_service(self, service_id: str) -> SalonService:
        svc = self._services.get_by_id(service_id)
        if not svc:
            raise NotFoundError("Serviço não encontrado.")
        return svc

    def services_by_id(self) -> dict[str, SalonService]:
        return {s.service_id: s for s in self._services.list_all()}

    def create_service(self, *, name: str, price, duration: str = "", category: str = "") -> str:
        name = require_min_length(name, "Nome do serviço", 2)
        amount = _require_price(price)
        service_id = self._services.create(
            name=name, price=amount, duration=(duration or "").strip(), category=(category or "").strip()
        )
        logger.info("Service created: %s (%s)", name, service_id)
        return service_id

    def update_service(self, service_id: str, *, name: str, price, duration: str = "", category: str = "") -> None:
        self.get_service(service_id)
        self._services.update(
            service_id,
            name=require_min_length(name, "Nome do serviço", 2),
            price=_require_price(price),
            duration=(duration or "").strip(),
            category=(category or "").strip(),
        )

    def delete_service(self, service_id: str) -> None:
        self.get_service(service_id)
        self._services.delete(service_id)

    # -- packages -------------------------------------------------------

    def list_packages(self) -> Sequence[SalonPackage]:
        return self._packages.list_all()

    def list_active_packages(self) -> list[SalonPackage]:
        return [p for p in self._packages.list_all() if p.status == CatalogStatus.ACTIVE]

    def get_package(self, package_id: str) -> SalonPackage:
        pkg = self._packages.get_by_id(package_id)
        if not pkg:
            raise NotFoundError("Pacote não encontrado.")
        return pkg

    def _package_items(self, quantities: Mapping[str, object]) -> list[PackageServiceItem]:
        known = self.services_by_id()
        items: list[PackageServiceItem] = []
        for service_id, qty in quantities.items():
            try:
                n = int(qty or 0)
            except (TypeError, ValueError):
                raise ValidationError("Quantidade inválida.")
            if n <= 0:
                continue
            if service_id not in known:
                raise ValidationError("Serviço do pacote não existe no catálogo.")
            items.append(PackageServiceItem(service_id=service_id, quantity=n))
        if not items:
            raise ValidationError("O pacote deve incluir pelo menos um serviço.")
        return items

    def _package_fields(
        self,
        *,
        name: str,
        quantities: Mapping[str, object],
        price,
        validity_days,
        status: str,
        short_description: str,
        original_price,
        theme_color: str,
    ) -> dict:
        try:
            days = int(validity_days)
        except (TypeError, ValueError):
            raise ValidationError("Validade inválida.")
        if days <= 0:
            raise ValidationError("Validade deve ser maior que zero.")
        try:
            pkg_status = CatalogStatus(status or CatalogStatus.ACTIVE.value)
        except ValueError:
            raise ValidationError("Status do pacote inválido.")

        original: Optional[Decimal] = None
        if original_price not in (None, ""):
            original = _require_price(original_price, "Preço original")

        return dict(
            name=require_min_length(name, "Nome do pacote", 2),
            services=self._package_items(quantities),
            price=_require_price(price),
            validity_days=days,
            status=pkg_status,
            short_description=(short_description or "").strip(),
            original_price=original,
            theme_color=(theme_color or "primary").strip(),
        )

    def create_package(
        self,
        *,
        name: str,
        quantities: Mapping[str, object],
        price,
        validity_days,
        status: str = CatalogStatus.ACTIVE.value,
        short_description: str = "",
        original_price=None,
        theme_color: str = "primary",
    ) -> str:
        data = self._package_fields(
            name=name,
            quantities=quantities,
            price=price,
            validity_days=validity_days,
            status=status,
            short_description=short_description,
            original_price=original_price,
            theme_color=theme_color,
        )
        package_id = self._packages.create(**data)
        logger.info("Package created: %s (%s)", data["name"], package_id)
        return package_id

    def update_package(
        self,
        package_id: str,
        *,
        name: str,
        quantities: Mapping[str, object],
        price,
        validity_days,
        status: str = CatalogStatus.ACTIVE.value,
        short_description: str = "",
        original_price=None,
        theme_color: str = "primary",
    ) -> None:
        self.get_package(package_id)
        data = self._package_fields(
            name=name,
            quantities=quantities,
            price=price,
            validity_days=validity_days,
            status=status,
            short_description=short_description,
            original_price=original_price,
            theme_color=theme_color,
        )
        self._packages.update(package_id, **data)

    def set_package_status(self, package_id: str, status: CatalogStatus) -> None:
        self.get_package(package_id)
        self._packages.update(package_id, status=status)

    def delete_package(self, package_id: str) -> None:
        self.get_package(package_id)
        self._packages.delete(package_id)

    def service_names(self, service_ids: Iterable[str]) -> list[str]:
        known = self.services_by_id()
        return [known[sid].name for sid in service_ids if sid in known]
