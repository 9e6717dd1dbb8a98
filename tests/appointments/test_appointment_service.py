from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal

import pytest

from conftest import make_instance
from src.salon_studio.salon_studio.appointments.model import Appointment
from src.salon_studio.salon_studio.clients.model import Client
from src.salon_studio.salon_studio.core.enums import AppointmentStatus, OutcomeLevel
from src.salon_studio.salon_studio.core.exceptions import NotFoundError, ValidationError

NOW = datetime(2026, 3, 10, 9, 15)


def _book(container, **overrides):
    values = dict(
        client_name="Maria Silva",
        service_ids=["svc1", "svc2"],
        professional_id="pro1",
        appt_date=date(2026, 3, 11),
        start_time="10:00",
        end_time="11:00",
        now=NOW,
    )
    values.update(overrides)
    return container.appointment_service.create_appointment(**values)


def test_create_defaults_total_to_sum_of_service_prices(container, fake_repos):
    aid = _book(container)

    apt = fake_repos["appointments_repo"].get_by_id(aid)
    assert apt.total_amount == "80.00"
    assert apt.amount == Decimal("80.00")
    assert apt.status == AppointmentStatus.SCHEDULED
    assert apt.start_time == time(10, 0)


def test_create_keeps_explicit_total_with_comma(container, fake_repos):
    aid = _book(container, total_amount="150,00")

    assert fake_repos["appointments_repo"].get_by_id(aid).total_amount == "150.00"


@pytest.mark.parametrize(
    "overrides",
    [
        {"client_name": "M"},
        {"service_ids": []},
        {"professional_id": ""},
        {"professional_id": "ghost"},
        {"appt_date": None},
        {"start_time": ""},
        {"end_time": "09:30"},
        {"end_time": "10:00"},
        {"start_time": "25:00"},
        {"total_amount": "abc"},
    ],
)
def test_create_rejects_invalid_input(container, overrides):
    with pytest.raises(ValidationError):
        _book(container, **overrides)


def test_create_rejects_past_slot(container):
    with pytest.raises(ValidationError):
        _book(container, appt_date=date(2026, 3, 10), start_time="09:00", end_time="09:30")


def test_update_keeps_status_when_not_given(container, fake_repos):
    aid = _book(container)
    fake_repos["appointments_repo"].update_status(aid, AppointmentStatus.CONFIRMED)

    container.appointment_service.update_appointment(
        aid,
        client_name="Maria Silva",
        service_ids=["svc3"],
        professional_id="pro1",
        appt_date=date(2026, 3, 12),
        start_time="14:00",
        end_time="15:00",
    )

    apt = fake_repos["appointments_repo"].get_by_id(aid)
    assert apt.status == AppointmentStatus.CONFIRMED
    assert apt.service_ids == ("svc3",)
    assert apt.total_amount == "60.00"


def test_missing_appointment_raises_not_found(container):
    with pytest.raises(NotFoundError):
        container.appointment_service.delete_appointment("nope")


def test_confirm_and_cancel_outcomes(container, fake_repos):
    aid = _book(container)

    confirmed = container.appointment_service.update_status(aid, AppointmentStatus.CONFIRMED, today=NOW.date())
    cancelled = container.appointment_service.update_status(aid, AppointmentStatus.CANCELLED, today=NOW.date())

    assert confirmed.outcomes[0].level == OutcomeLevel.SUCCESS
    assert cancelled.outcomes[0].level == OutcomeLevel.WARNING
    assert fake_repos["appointments_repo"].status_writes == [(aid, "Confirmado"), (aid, "Cancelado")]
    assert fake_repos["transactions_repo"].items == []


def test_complete_writes_status_then_runs_side_effects(container, fake_repos):
    fake_repos["clients_repo"].clients["c1"] = Client(
        "c1", "Maria Silva", purchased_packages=(make_instance("i1", {"svc1": 2}),)
    )
    fake_repos["appointments_repo"].items["a9"] = Appointment(
        appointment_id="a9",
        client_name="maria silva",
        service_ids=("svc1",),
        professional_id="pro1",
        date=date(2026, 3, 10),
        start_time=time(10, 0),
        end_time=time(11, 0),
        total_amount="35.00",
    )

    result = container.appointment_service.update_status("a9", AppointmentStatus.COMPLETED, today=date(2026, 3, 10))

    assert fake_repos["appointments_repo"].status_writes == [("a9", "Concluído")]
    assert result.ok and result.debited
    assert fake_repos["clients_repo"].get_by_id("c1").purchased_packages[0].remaining_for("svc1") == 1
    assert [t.amount for t in fake_repos["transactions_repo"].items] == [Decimal("35.00")]
    assert result.outcomes[-1].title == "Status Atualizado"


def test_package_advisories_through_service(container, fake_repos):
    fake_repos["clients_repo"].clients["c1"] = Client("c1", "Maria Silva")

    advisories = container.appointment_service.package_advisories(
        client_name="Maria Silva", service_ids=["svc1", "svc3"], today=date(2026, 3, 10)
    )

    assert [a.service_id for a in advisories] == ["svc1"]


def test_editing_to_completed_runs_completion_side_effects(container, fake_repos):
    fake_repos["clients_repo"].clients["c1"] = Client("c1", "Maria Silva")
    aid = _book(container, service_ids=["svc1"])

    result = container.appointment_service.update_appointment(
        aid,
        client_name="Maria Silva",
        service_ids=["svc1"],
        professional_id="pro1",
        appt_date=date(2026, 3, 11),
        start_time="10:00",
        end_time="11:00",
        total_amount="35,00",
        status=AppointmentStatus.COMPLETED,
        today=date(2026, 3, 11),
    )

    assert result is not None and result.ok
    assert fake_repos["appointments_repo"].get_by_id(aid).status == AppointmentStatus.COMPLETED
    assert fake_repos["appointments_repo"].status_writes == [(aid, "Concluído")]
    assert fake_repos["clients_repo"].get_by_id("c1").stamps_earned == 1
    assert [t.amount for t in fake_repos["transactions_repo"].items] == [Decimal("35.00")]


def test_editing_other_fields_returns_no_result(container, fake_repos):
    aid = _book(container)

    result = container.appointment_service.update_appointment(
        aid,
        client_name="Maria Silva",
        service_ids=["svc1"],
        professional_id="pro1",
        appt_date=date(2026, 3, 11),
        start_time="10:00",
        end_time="11:00",
        status=AppointmentStatus.CONFIRMED,
    )

    assert result is None
    assert fake_repos["appointments_repo"].status_writes == []
    assert fake_repos["transactions_repo"].items == []
