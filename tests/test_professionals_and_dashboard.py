from __future__ import annotations

from datetime import date, time

import pytest

from src.salon_studio.salon_studio.appointments.model import Appointment
from src.salon_studio.salon_studio.clients.model import Client
from src.salon_studio.salon_studio.core.enums import AppointmentStatus
from src.salon_studio.salon_studio.core.exceptions import ValidationError
from src.salon_studio.salon_studio.professionals.service import parse_commission_rate


@pytest.mark.parametrize("raw, expected", [("", None), (None, None), ("30", 30.0), ("12,5", 12.5)])
def test_parse_commission_rate(raw, expected):
    assert parse_commission_rate(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "-1", "101"])
def test_parse_commission_rate_rejects_bad_values(raw):
    with pytest.raises(ValidationError):
        parse_commission_rate(raw)


def test_professional_crud(container):
    svc = container.professional_service

    pid = svc.create_professional(name="Bruna", specialty="Pedicure", commission_rate="")
    assert svc.get_professional(pid).commission_rate is None

    svc.update_professional(pid, name="Bruna Lima", specialty="Pedicure", commission_rate="40")
    assert svc.get_professional(pid).commission_rate == 40.0

    svc.delete_professional(pid)
    assert [p.professional_id for p in svc.list_professionals()] == ["pro1"]


def _apt(aid, day, status, amount="50.00"):
    return Appointment(aid, "Maria", ("svc1",), "pro1", day, time(10, 0), time(11, 0), status, amount)


def test_dashboard_metrics(container, fake_repos):
    today = date(2026, 3, 10)
    fake_repos["appointments_repo"].items.update(
        {
            "a1": _apt("a1", today, AppointmentStatus.CONFIRMED),
            "a2": _apt("a2", today, AppointmentStatus.SCHEDULED),
            "a3": _apt("a3", date(2026, 3, 2), AppointmentStatus.COMPLETED, "80.00"),
            "a4": _apt("a4", date(2026, 3, 3), AppointmentStatus.COMPLETED, "abc"),
            "a5": _apt("a5", date(2026, 2, 27), AppointmentStatus.COMPLETED, "999.00"),
        }
    )
    fake_repos["clients_repo"].clients.update(
        {"c1": Client("c1", "Maria", stamps_earned=2), "c2": Client("c2", "Joana")}
    )

    m = container.dashboard_service.metrics(today=today)

    assert m.appointments_today == 2
    assert m.confirmed_today == 1
    assert str(m.monthly_revenue) == "80.00"
    assert m.total_clients == 2
    assert m.loyalty_clients == 1
