from __future__ import annotations

from dataclasses import replace
from datetime import date

from conftest import ESSENCIAL, MANICURE, PEDICURE, SPA, make_instance
from src.salon_studio.salon_studio.appointments.advisory import package_coverage_advisories
from src.salon_studio.salon_studio.clients.model import Client
from src.salon_studio.salon_studio.core.enums import CatalogStatus, PackageInstanceStatus

TODAY = date(2026, 3, 10)
SERVICES = {s.service_id: s for s in (MANICURE, PEDICURE, SPA)}


def _advise(client: Client, service_ids, packages=(ESSENCIAL,), client_name=None):
    return package_coverage_advisories(
        client_name=client_name or client.name,
        service_ids=service_ids,
        clients=[client],
        packages=list(packages),
        services=SERVICES,
        today=TODAY,
    )


def test_no_package_for_a_packaged_service_is_advised():
    client = Client("c1", "Maria Silva")

    advisories = _advise(client, ["svc1", "svc3"])

    # svc3 is not sold in any package
    assert [a.service_id for a in advisories] == ["svc1"]
    assert "Manicure Simples" in advisories[0].message


def test_usable_instance_suppresses_advisory():
    client = Client("c1", "Maria Silva", purchased_packages=(make_instance("i1", {"svc1": 1, "svc2": 0}),))

    advisories = _advise(client, ["svc1", "svc2"])

    assert [a.service_id for a in advisories] == ["svc2"]


def test_expired_or_used_instances_do_not_count():
    client = Client(
        "c1",
        "Maria Silva",
        purchased_packages=(
            make_instance("i1", {"svc1": 3}, expiry=date(2026, 1, 1)),
            make_instance("i2", {"svc1": 3}, status=PackageInstanceStatus.USED),
        ),
    )

    assert [a.service_id for a in _advise(client, ["svc1"])] == ["svc1"]


def test_inactive_packages_are_ignored():
    client = Client("c1", "Maria Silva")
    inactive = replace(ESSENCIAL, status=CatalogStatus.INACTIVE)

    assert _advise(client, ["svc1"], packages=[inactive]) == []


def test_unknown_client_or_empty_selection_gives_nothing():
    client = Client("c1", "Maria Silva")

    assert _advise(client, ["svc1"], client_name="Outra Pessoa") == []
    assert _advise(client, []) == []
