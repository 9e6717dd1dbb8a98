from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import pytest

from src.salon_studio.salon_studio.appointments.model import Appointment
from src.salon_studio.salon_studio.catalog.model import PackageServiceItem, SalonPackage, SalonService
from src.salon_studio.salon_studio.clients.model import Client, ClientPackageInstance, PackageServiceBalance
from src.salon_studio.salon_studio.container import assemble_container
from src.salon_studio.salon_studio.core.enums import CatalogStatus, PackageInstanceStatus
from src.salon_studio.salon_studio.finance.model import FinancialTransaction
from src.salon_studio.salon_studio.professionals.model import Professional
from src.salon_studio.salon_studio.users.model import AdminUser


@pytest.fixture
def fixed_now() -> datetime:
    # Tuesday
    return datetime(2026, 3, 10, 9, 15, 0)


class InMemoryClients:
    def __init__(self, clients=()):
        self.clients: dict[str, Client] = {c.client_id: c for c in clients}
        self.instance_updates: list[tuple[str, str]] = []
        self._next = 1

    def _id(self, prefix: str) -> str:
        value = f"{prefix}{self._next}"
        self._next += 1
        return value

    def list_all(self):
        return sorted(self.clients.values(), key=lambda c: c.name.lower())

    def get_by_id(self, client_id):
        return self.clients.get(client_id)

    def get_by_email(self, email):
        for c in self.clients.values():
            if c.email and c.email.lower() == email.strip().lower():
                return c
        return None

    def create(self, *, name, email, phone, password_hash=None):
        cid = self._id("c")
        self.clients[cid] = Client(client_id=cid, name=name, email=email, phone=phone, password_hash=password_hash)
        return cid

    def update_fields(self, client_id, *, name, email, phone):
        self.clients[client_id] = replace(self.clients[client_id], name=name, email=email, phone=phone)

    def set_password_hash(self, client_id, password_hash):
        self.clients[client_id] = replace(self.clients[client_id], password_hash=password_hash)

    def delete(self, client_id):
        self.clients.pop(client_id, None)

    def set_stamps(self, client_id, stamps):
        self.clients[client_id] = replace(self.clients[client_id], stamps_earned=stamps)

    def set_mimos_redeemed(self, client_id, mimos_redeemed):
        self.clients[client_id] = replace(self.clients[client_id], mimos_redeemed=mimos_redeemed)

    def add_package_instance(self, client_id, *, package_id, package_name, services, purchase_date, expiry_date):
        inst = ClientPackageInstance(
            instance_id=self._id("i"),
            package_id=package_id,
            package_name=package_name,
            status=PackageInstanceStatus.ACTIVE,
            services=tuple(services),
            purchase_date=purchase_date,
            expiry_date=expiry_date,
        )
        client = self.clients[client_id]
        self.clients[client_id] = replace(client, purchased_packages=client.purchased_packages + (inst,))
        return inst

    def update_package_instance(self, client_id, instance_id, *, services, status):
        self.instance_updates.append((client_id, instance_id))
        client = self.clients[client_id]
        updated = tuple(
            replace(i, services=tuple(services), status=status) if i.instance_id == instance_id else i
            for i in client.purchased_packages
        )
        self.clients[client_id] = replace(client, purchased_packages=updated)


class InMemoryTransactions:
    def __init__(self):
        self.items: list[FinancialTransaction] = []

    def add(self, *, description, amount, tx_date, category, tx_type):
        tx = FinancialTransaction(
            transaction_id=f"t{len(self.items) + 1}",
            description=description,
            amount=amount,
            date=tx_date,
            category=category,
            type=tx_type,
        )
        self.items.append(tx)
        return tx

    def list_range(self, *, start, end):
        return [t for t in self.items if start <= t.date <= end]

    def clear_all(self):
        removed = len(self.items)
        self.items = []
        return removed


class InMemoryAppointments:
    def __init__(self, appointments=()):
        self.items: dict[str, Appointment] = {a.appointment_id: a for a in appointments}
        self.status_writes: list[tuple[str, str]] = []

    def get_by_id(self, appointment_id):
        return self.items.get(appointment_id)

    def list_range(self, *, start, end, professional_id=None):
        out = [
            a
            for a in self.items.values()
            if start <= a.date <= end and (not professional_id or a.professional_id == professional_id)
        ]
        return sorted(out, key=lambda a: (a.date, a.start_time))

    def _build(self, appointment_id, *, client_name, service_ids, professional_id, appt_date, start_time, end_time, status, total_amount):
        return Appointment(
            appointment_id=appointment_id,
            client_name=client_name,
            service_ids=tuple(service_ids),
            professional_id=professional_id,
            date=appt_date,
            start_time=start_time,
            end_time=end_time,
            status=status,
            total_amount=total_amount,
        )

    def create(self, **fields):
        aid = f"a{len(self.items) + 1}"
        self.items[aid] = self._build(aid, **fields)
        return aid

    def update(self, appointment_id, **fields):
        self.items[appointment_id] = self._build(appointment_id, **fields)

    def update_status(self, appointment_id, status):
        self.status_writes.append((appointment_id, status.value))
        self.items[appointment_id] = replace(self.items[appointment_id], status=status)

    def delete(self, appointment_id):
        self.items.pop(appointment_id, None)


class InMemoryServices:
    def __init__(self, services=()):
        self.items: dict[str, SalonService] = {s.service_id: s for s in services}

    def list_all(self):
        return sorted(self.items.values(), key=lambda s: s.name.lower())

    def get_by_id(self, service_id):
        return self.items.get(service_id)

    def create(self, *, name, price, duration, category):
        sid = f"s{len(self.items) + 1}"
        self.items[sid] = SalonService(service_id=sid, name=name, price=price, duration=duration, category=category)
        return sid

    def update(self, service_id, **fields):
        self.items[service_id] = replace(self.items[service_id], **fields)

    def delete(self, service_id):
        self.items.pop(service_id, None)


class InMemoryPackages:
    def __init__(self, packages=()):
        self.items: dict[str, SalonPackage] = {p.package_id: p for p in packages}

    def list_all(self):
        return sorted(self.items.values(), key=lambda p: p.name.lower())

    def get_by_id(self, package_id):
        return self.items.get(package_id)

    def create(self, *, services, **fields):
        pid = f"p{len(self.items) + 1}"
        self.items[pid] = SalonPackage(package_id=pid, services=tuple(services), **fields)
        return pid

    def update(self, package_id, **fields):
        if "services" in fields:
            fields["services"] = tuple(fields["services"])
        self.items[package_id] = replace(self.items[package_id], **fields)

    def delete(self, package_id):
        self.items.pop(package_id, None)


class InMemoryProfessionals:
    def __init__(self, professionals=()):
        self.items: dict[str, Professional] = {p.professional_id: p for p in professionals}

    def list_all(self):
        return list(self.items.values())

    def get_by_id(self, professional_id):
        return self.items.get(professional_id)

    def create(self, *, name, specialty, commission_rate):
        pid = f"pro{len(self.items) + 1}"
        self.items[pid] = Professional(professional_id=pid, name=name, specialty=specialty, commission_rate=commission_rate)
        return pid

    def update(self, professional_id, *, name, specialty, commission_rate):
        self.items[professional_id] = Professional(professional_id, name, specialty, commission_rate)

    def delete(self, professional_id):
        self.items.pop(professional_id, None)


class InMemorySettings:
    def __init__(self, stored: Optional[dict] = None, *, fail_on_get: Exception = None):
        self.stored = dict(stored or {})
        self.saves: list[dict] = []
        self.fail_on_get = fail_on_get

    def get(self):
        if self.fail_on_get:
            raise self.fail_on_get
        return dict(self.stored) if self.stored else None

    def save(self, fields):
        self.saves.append(dict(fields))
        self.stored.update(fields)


class InMemoryAdmins:
    def __init__(self, admins=()):
        self.items: dict[str, AdminUser] = {a.email: a for a in admins}

    def get_by_email(self, email):
        return self.items.get(email.strip().lower())

    def upsert(self, *, user_id, email, full_name, password_hash):
        self.items[email.strip().lower()] = AdminUser(
            user_id=user_id, email=email.strip().lower(), full_name=full_name, password_hash=password_hash
        )


MANICURE = SalonService("svc1", "Manicure Simples", Decimal("35.00"), "45min", "Mãos")
PEDICURE = SalonService("svc2", "Pedicure Completa", Decimal("45.00"), "60min", "Pés")
SPA = SalonService("svc3", "Spa dos Pés", Decimal("60.00"), "75min", "Pés")

ESSENCIAL = SalonPackage(
    package_id="pkg1",
    name="Pacote Essencial",
    services=(PackageServiceItem("svc1", 4), PackageServiceItem("svc2", 2)),
    price=Decimal("167.00"),
    validity_days=90,
    status=CatalogStatus.ACTIVE,
    original_price=Decimal("220.00"),
    theme_color="accent",
)


@pytest.fixture
def catalog_services() -> dict[str, SalonService]:
    return {s.service_id: s for s in (MANICURE, PEDICURE, SPA)}


@pytest.fixture
def fake_repos():
    return {
        "settings_repo": InMemorySettings(),
        "services_repo": InMemoryServices([MANICURE, PEDICURE, SPA]),
        "packages_repo": InMemoryPackages([ESSENCIAL]),
        "clients_repo": InMemoryClients(),
        "professionals_repo": InMemoryProfessionals([Professional("pro1", "Ana", "Manicure", 30.0)]),
        "appointments_repo": InMemoryAppointments(),
        "transactions_repo": InMemoryTransactions(),
        "admins_repo": InMemoryAdmins(),
    }


@pytest.fixture
def container(fake_repos):
    return assemble_container(
        conn=None,
        admin_email="admin@nailstudio.ai",
        whatsapp_number="19996959490",
        **fake_repos,
    )


def make_instance(
    instance_id: str,
    balances: dict[str, int],
    *,
    status: PackageInstanceStatus = PackageInstanceStatus.ACTIVE,
    expiry: Optional[date] = None,
    name: str = "Pacote Essencial",
) -> ClientPackageInstance:
    return ClientPackageInstance(
        instance_id=instance_id,
        package_id="pkg1",
        package_name=name,
        status=status,
        services=tuple(PackageServiceBalance(sid, qty) for sid, qty in balances.items()),
        purchase_date=date(2026, 1, 1),
        expiry_date=expiry,
    )
