from __future__ import annotations

from datetime import date, time
from decimal import Decimal

import pytest

from conftest import InMemoryClients, InMemoryTransactions, make_instance
from src.salon_studio.salon_studio.appointments.completion import CompletionWorkflow, plan_package_debits
from src.salon_studio.salon_studio.appointments.model import Appointment
from src.salon_studio.salon_studio.clients.model import Client
from src.salon_studio.salon_studio.core.enums import (
    AppointmentStatus,
    OutcomeLevel,
    PackageDebitPolicy,
    PackageInstanceStatus,
    TransactionType,
)
from src.salon_studio.salon_studio.core.exceptions import ExternalServiceError
from src.salon_studio.salon_studio.finance.service import CashFlowService

TODAY = date(2026, 3, 10)


def _appointment(*, client_name="Maria Silva", service_ids=("svc1",), total_amount="35.00") -> Appointment:
    return Appointment(
        appointment_id="a1",
        client_name=client_name,
        service_ids=tuple(service_ids),
        professional_id="pro1",
        date=TODAY,
        start_time=time(10, 0),
        end_time=time(11, 0),
        status=AppointmentStatus.COMPLETED,
        total_amount=total_amount,
    )


def _setup(client: Client, policy=PackageDebitPolicy.FIRST_DEBIT_ONLY):
    clients = InMemoryClients([client])
    tx = InMemoryTransactions()
    wf = CompletionWorkflow(clients, CashFlowService(tx), policy=policy)
    return wf, clients, tx


def test_package_debit_by_exactly_one_and_no_stamp(catalog_services):
    client = Client("c1", "Maria Silva", stamps_earned=4, purchased_packages=(make_instance("i1", {"svc1": 2}),))
    wf, clients, tx = _setup(client)

    result = wf.run(_appointment(), clients=clients.list_all(), services=catalog_services, today=TODAY)

    updated = clients.get_by_id("c1")
    assert result.ok and result.debited and not result.stamp_awarded
    assert updated.purchased_packages[0].remaining_for("svc1") == 1
    assert updated.purchased_packages[0].status == PackageInstanceStatus.ACTIVE
    assert updated.stamps_earned == 4
    assert clients.instance_updates == [("c1", "i1")]


def test_last_use_marks_instance_used_and_it_stays_used(catalog_services):
    client = Client("c1", "Maria Silva", purchased_packages=(make_instance("i1", {"svc1": 1}),))
    wf, clients, _ = _setup(client)

    result = wf.run(_appointment(), clients=clients.list_all(), services=catalog_services, today=TODAY)
    inst = clients.get_by_id("c1").purchased_packages[0]
    assert inst.status == PackageInstanceStatus.USED
    assert inst.remaining_for("svc1") == 0
    assert any(o.title == "Pacote Concluído!" for o in result.outcomes)

    # A second completion cannot debit a used instance; the client gets a stamp instead.
    again = wf.run(_appointment(), clients=clients.list_all(), services=catalog_services, today=TODAY)
    inst = clients.get_by_id("c1").purchased_packages[0]
    assert not again.debited
    assert inst.status == PackageInstanceStatus.USED
    assert clients.get_by_id("c1").stamps_earned == 1


def test_stamp_added_when_no_package_covers(catalog_services):
    client = Client("c1", "Maria Silva", stamps_earned=5)
    wf, clients, _ = _setup(client)

    result = wf.run(_appointment(), clients=clients.list_all(), services=catalog_services, today=TODAY)

    assert result.stamp_awarded
    assert clients.get_by_id("c1").stamps_earned == 6


def test_stamp_capped_at_twelve(catalog_services):
    client = Client("c1", "Maria Silva", stamps_earned=12)
    wf, clients, _ = _setup(client)

    result = wf.run(_appointment(), clients=clients.list_all(), services=catalog_services, today=TODAY)

    assert not result.stamp_awarded
    assert clients.get_by_id("c1").stamps_earned == 12
    assert any(o.level == OutcomeLevel.INFO and o.title == "Cartão Completo!" for o in result.outcomes)


def test_expired_or_inactive_instances_are_skipped(catalog_services):
    client = Client(
        "c1",
        "Maria Silva",
        purchased_packages=(
            make_instance("i1", {"svc1": 3}, expiry=date(2026, 3, 9)),
            make_instance("i2", {"svc1": 3}, status=PackageInstanceStatus.EXPIRED),
            make_instance("i3", {"svc1": 3}, expiry=TODAY),
        ),
    )
    wf, clients, _ = _setup(client)

    wf.run(_appointment(), clients=clients.list_all(), services=catalog_services, today=TODAY)

    by_id = {i.instance_id: i for i in clients.get_by_id("c1").purchased_packages}
    assert by_id["i1"].remaining_for("svc1") == 3
    assert by_id["i2"].remaining_for("svc1") == 3
    assert by_id["i3"].remaining_for("svc1") == 2


def test_client_matched_case_and_whitespace_insensitive(catalog_services):
    client = Client("c1", "Maria Silva", stamps_earned=0)
    wf, clients, _ = _setup(client)

    result = wf.run(_appointment(client_name="  maria SILVA "), clients=clients.list_all(), services=catalog_services, today=TODAY)

    assert result.stamp_awarded


def test_unknown_client_warns_but_still_records_revenue(catalog_services):
    client = Client("c1", "Maria Silva")
    wf, clients, tx = _setup(client)

    result = wf.run(_appointment(client_name="Joana"), clients=clients.list_all(), services=catalog_services, today=TODAY)

    assert result.ok
    assert result.outcomes[0].level == OutcomeLevel.WARNING
    assert len(tx.items) == 1
    assert clients.get_by_id("c1").stamps_earned == 0


def test_revenue_recorded_from_comma_amount(catalog_services):
    client = Client("c1", "Maria Silva")
    wf, clients, tx = _setup(client)

    result = wf.run(
        _appointment(service_ids=("svc1", "svc2"), total_amount="150,00"),
        clients=clients.list_all(),
        services=catalog_services,
        today=TODAY,
    )

    assert len(tx.items) == 1
    t = tx.items[0]
    assert t.amount == Decimal("150.00")
    assert t.type == TransactionType.INCOME
    assert t.category == "Serviços Prestados"
    assert t.date == TODAY
    assert t.description == "Receita Serviços: Maria Silva - Manicure Simples, Pedicure Completa"
    assert result.transaction == t


@pytest.mark.parametrize("amount", ["0,00", "0.00", ""])
def test_zero_or_missing_amount_records_nothing(catalog_services, amount):
    wf, clients, tx = _setup(Client("c1", "Maria Silva"))

    wf.run(_appointment(total_amount=amount), clients=clients.list_all(), services=catalog_services, today=TODAY)

    assert tx.items == []


def test_unparseable_amount_warns(catalog_services):
    wf, clients, tx = _setup(Client("c1", "Maria Silva"))

    result = wf.run(_appointment(total_amount="abc"), clients=clients.list_all(), services=catalog_services, today=TODAY)

    assert tx.items == []
    assert any(o.level == OutcomeLevel.WARNING and "abc" in o.message for o in result.outcomes)


def test_first_debit_only_policy_stops_after_one_service():
    inst = make_instance("i1", {"svc1": 2, "svc2": 2})
    debits, changed = plan_package_debits([inst], ["svc1", "svc2"], today=TODAY)

    assert [d.service_id for d in debits] == ["svc1"]
    assert changed[0].remaining_for("svc2") == 2


def test_per_service_policy_debits_each_service_once():
    inst = make_instance("i1", {"svc1": 1, "svc2": 1})
    debits, changed = plan_package_debits(
        [inst], ["svc1", "svc2"], today=TODAY, policy=PackageDebitPolicy.PER_SERVICE
    )

    assert [d.service_id for d in debits] == ["svc1", "svc2"]
    assert len(changed) == 1
    assert changed[0].status == PackageInstanceStatus.USED
    assert debits[-1].exhausted


def test_first_matching_instance_wins():
    first = make_instance("i1", {"svc1": 1})
    second = make_instance("i2", {"svc1": 5})
    debits, changed = plan_package_debits([first, second], ["svc1"], today=TODAY)

    assert debits[0].instance_id == "i1"
    assert [i.instance_id for i in changed] == ["i1"]


def test_external_failure_aborts_remaining_steps(catalog_services):
    class FailingClients(InMemoryClients):
        def set_stamps(self, client_id, stamps):
            raise ExternalServiceError("Falha ao acessar o banco de dados (atualizar selos).")

    clients = FailingClients([Client("c1", "Maria Silva")])
    tx = InMemoryTransactions()
    wf = CompletionWorkflow(clients, CashFlowService(tx))

    result = wf.run(_appointment(), clients=clients.list_all(), services=catalog_services, today=TODAY)

    assert not result.ok
    assert result.outcomes[-1].level == OutcomeLevel.ERROR
    assert tx.items == []
