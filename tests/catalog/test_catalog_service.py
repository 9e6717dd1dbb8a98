from __future__ import annotations

from decimal import Decimal

import pytest

from conftest import ESSENCIAL, MANICURE, PEDICURE, InMemoryPackages, InMemoryServices
from src.salon_studio.salon_studio.catalog.service import CatalogService
from src.salon_studio.salon_studio.core.enums import CatalogStatus
from src.salon_studio.salon_studio.core.exceptions import NotFoundError, ValidationError


@pytest.fixture
def catalog():
    return CatalogService(InMemoryServices([MANICURE, PEDICURE]), InMemoryPackages([ESSENCIAL]))


def test_create_service_parses_price(catalog):
    sid = catalog.create_service(name="Esmaltação em gel", price="R$ 80,00", duration="90min")

    assert catalog.get_service(sid).price == Decimal("80.00")


def test_create_service_rejects_bad_price(catalog):
    with pytest.raises(ValidationError):
        catalog.create_service(name="Gel", price="grátis")


def test_create_package_skips_zero_quantities(catalog):
    pid = catalog.create_package(
        name="Só Mãos", quantities={"svc1": "5", "svc2": "0"}, price="150", validity_days="30"
    )

    pkg = catalog.get_package(pid)
    assert [(i.service_id, i.quantity) for i in pkg.services] == [("svc1", 5)]
    assert pkg.includes("svc1") and not pkg.includes("svc2")
    assert pkg.status == CatalogStatus.ACTIVE


@pytest.mark.parametrize(
    "overrides",
    [
        {"quantities": {"svc1": "0"}},
        {"quantities": {"ghost": "1"}},
        {"quantities": {"svc1": "x"}},
        {"validity_days": "0"},
        {"status": "Arquivado"},
        {"name": ""},
    ],
)
def test_create_package_validation(catalog, overrides):
    values = dict(name="Pacote", quantities={"svc1": "2"}, price="100", validity_days="30")
    values.update(overrides)

    with pytest.raises(ValidationError):
        catalog.create_package(**values)


def test_package_status_toggle_hides_from_active(catalog):
    catalog.set_package_status("pkg1", CatalogStatus.INACTIVE)

    assert catalog.list_active_packages() == []
    assert len(catalog.list_packages()) == 1


def test_missing_items_raise_not_found(catalog):
    with pytest.raises(NotFoundError):
        catalog.get_service("ghost")
    with pytest.raises(NotFoundError):
        catalog.delete_package("ghost")
