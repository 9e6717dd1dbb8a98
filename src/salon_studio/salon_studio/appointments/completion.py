from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from ..catalog.model import SalonService
from ..clients.model import Client, ClientPackageInstance
from ..clients.repository import ClientRepository
from ..clients.service import find_client_by_name
from ..common.validators import money_to_display, parse_money
from ..core.constants import TOTAL_STAMPS_ON_CARD
from ..core.enums import OutcomeLevel, PackageDebitPolicy, PackageInstanceStatus
from ..core.exceptions import ExternalServiceError
from ..finance.model import FinancialTransaction
from ..finance.service import CashFlowService
from .model import Appointment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepOutcome:
    level: OutcomeLevel
    title: str
    message: str


@dataclass(frozen=True)
class CompletionResult:
    """Everything the operator needs to know after a status change."""

    ok: bool = True
    debited: bool = False
    stamp_awarded: bool = False
    transaction: Optional[FinancialTransaction] = None
    outcomes: tuple[StepOutcome, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PackageDebit:
    service_id: str
    instance_id: str
    package_name: str
    remaining: int
    exhausted: bool


def plan_package_debits(
    instances: Sequence[ClientPackageInstance],
    service_ids: Sequence[str],
    *,
    today: date,
    policy: PackageDebitPolicy = PackageDebitPolicy.FIRST_DEBIT_ONLY,
) -> tuple[list[PackageDebit], list[ClientPackageInstance]]:
    """Decide which package instances pay for which services.

    Services are visited in appointment order and instances in purchase order; the first
    usable instance wins. Returns the debits and the changed instances (each once, in
    the order they were first touched).
    """

    working = {i.instance_id: i for i in instances}
    order = [i.instance_id for i in instances]
    changed: list[str] = []
    debits: list[PackageDebit] = []

    for service_id in service_ids:
        for instance_id in order:
            inst = working[instance_id]
            if not inst.can_cover(service_id, today):
                continue

            balances = list(inst.services)
            idx = next(
                i for i, s in enumerate(balances) if s.service_id == service_id and s.remaining_quantity > 0
            )
            balances[idx] = replace(balances[idx], remaining_quantity=balances[idx].remaining_quantity - 1)
            inst = replace(inst, services=tuple(balances))
            exhausted = inst.is_exhausted()
            if exhausted:
                inst = replace(inst, status=PackageInstanceStatus.USED)
            working[instance_id] = inst

            if instance_id not in changed:
                changed.append(instance_id)
            debits.append(
                PackageDebit(
                    service_id=service_id,
                    instance_id=instance_id,
                    package_name=inst.package_name,
                    remaining=balances[idx].remaining_quantity,
                    exhausted=exhausted,
                )
            )
            break

        if debits and policy == PackageDebitPolicy.FIRST_DEBIT_ONLY:
            break

    return debits, [working[i] for i in changed]


class CompletionWorkflow:
    """Side effects of marking an appointment as completed.

    Steps run in order: resolve client, debit package, award stamp, record revenue.
    A failing write stops the remaining steps; earlier writes stay in place.
    """

    def __init__(
        self,
        clients: ClientRepository,
        cash_flow: CashFlowService,
        *,
        policy: PackageDebitPolicy = PackageDebitPolicy.FIRST_DEBIT_ONLY,
    ):
        self._clients = clients
        self._cash_flow = cash_flow
        self._policy = policy

    def run(
        self,
        appointment: Appointment,
        *,
        clients: Sequence[Client],
        services: Mapping[str, SalonService],
        today: date,
    ) -> CompletionResult:
        outcomes: list[StepOutcome] = []
        debited = False
        stamp_awarded = False
        transaction: Optional[FinancialTransaction] = None

        try:
            client = find_client_by_name(clients, appointment.client_name)
            if client is None:
                logger.warning("Completed appointment %s: client %r not found", appointment.appointment_id, appointment.client_name)
                outcomes.append(
                    StepOutcome(
                        OutcomeLevel.WARNING,
                        "Atenção: Cliente não Encontrado",
                        f'O cliente "{appointment.client_name}" não foi encontrado no cadastro para processar '
                        "pacotes ou selos de fidelidade. Verifique se o nome no agendamento corresponde "
                        "exatamente ao nome no cadastro de clientes.",
                    )
                )
            else:
                debited = self._debit_packages(client, appointment, services, today, outcomes)
                if debited:
                    outcomes.append(
                        StepOutcome(
                            OutcomeLevel.INFO,
                            "Serviço de Pacote",
                            f"Serviço(s) consumido(s) do pacote de {client.name}. Selo não adicionado.",
                        )
                    )
                else:
                    stamp_awarded = self._award_stamp(client, outcomes)

            transaction = self._record_revenue(appointment, services, outcomes)
        except ExternalServiceError as e:
            logger.error("Completion of appointment %s aborted: %s", appointment.appointment_id, e)
            outcomes.append(StepOutcome(OutcomeLevel.ERROR, "Erro ao Atualizar Status", str(e)))
            return CompletionResult(
                ok=False,
                debited=debited,
                stamp_awarded=stamp_awarded,
                transaction=transaction,
                outcomes=tuple(outcomes),
            )

        outcomes.append(
            StepOutcome(
                OutcomeLevel.SUCCESS,
                "Status Atualizado",
                "Agendamento (com serviço de pacote) concluído!" if debited else "Agendamento concluído com sucesso!",
            )
        )
        return CompletionResult(
            ok=True,
            debited=debited,
            stamp_awarded=stamp_awarded,
            transaction=transaction,
            outcomes=tuple(outcomes),
        )

    def _debit_packages(
        self,
        client: Client,
        appointment: Appointment,
        services: Mapping[str, SalonService],
        today: date,
        outcomes: list[StepOutcome],
    ) -> bool:
        if not client.purchased_packages:
            return False

        debits, changed = plan_package_debits(
            client.purchased_packages, appointment.service_ids, today=today, policy=self._policy
        )
        if not debits:
            return False

        # Writes only the instances that changed, one keyed update each.
        for inst in changed:
            self._clients.update_package_instance(
                client.client_id, inst.instance_id, services=inst.services, status=inst.status
            )

        for d in debits:
            svc = services.get(d.service_id)
            service_name = svc.name if svc else "Serviço Desconhecido"
            logger.info("Debited %s from package %s of %s", service_name, d.package_name, client.name)
            outcomes.append(
                StepOutcome(
                    OutcomeLevel.SUCCESS,
                    "Serviço de Pacote Utilizado",
                    f'1x {service_name} debitado do pacote "{d.package_name}" de {client.name}. Restam: {d.remaining}.',
                )
            )
            if d.exhausted:
                outcomes.append(
                    StepOutcome(
                        OutcomeLevel.INFO,
                        "Pacote Concluído!",
                        f'O pacote "{d.package_name}" de {client.name} foi totalmente utilizado.',
                    )
                )
        return True

    def _award_stamp(self, client: Client, outcomes: list[StepOutcome]) -> bool:
        current = max(0, client.stamps_earned)
        if current >= TOTAL_STAMPS_ON_CARD:
            outcomes.append(
                StepOutcome(
                    OutcomeLevel.INFO,
                    "Cartão Completo!",
                    f"{client.name} já completou o cartão fidelidade. Nenhum selo adicional.",
                )
            )
            return False

        new_value = current + 1
        self._clients.set_stamps(client.client_id, new_value)
        logger.info("Awarded stamp to %s (%d)", client.name, new_value)
        outcomes.append(
            StepOutcome(
                OutcomeLevel.SUCCESS,
                "Selo Adicionado!",
                f"+1 selo de fidelidade para {client.name}. Total: {new_value}.",
            )
        )
        return True

    def _record_revenue(
        self,
        appointment: Appointment,
        services: Mapping[str, SalonService],
        outcomes: list[StepOutcome],
    ) -> Optional[FinancialTransaction]:
        raw = (appointment.total_amount or "").strip()
        if not raw:
            logger.warning("Appointment %s has no total amount; no revenue recorded", appointment.appointment_id)
            return None

        amount = parse_money(raw)
        if amount is None:
            logger.warning("Could not parse total amount %r of appointment %s", raw, appointment.appointment_id)
            outcomes.append(
                StepOutcome(
                    OutcomeLevel.WARNING,
                    "Receita não Registrada",
                    f'Valor "{raw}" do agendamento não pôde ser interpretado.',
                )
            )
            return None
        if amount <= Decimal("0"):
            return None

        names = ", ".join(services[sid].name if sid in services else "Serviço" for sid in appointment.service_ids)
        tx = self._cash_flow.record_income(
            description=f"Receita Serviços: {appointment.client_name} - {names}",
            amount=amount,
            tx_date=appointment.date,
        )
        outcomes.append(
            StepOutcome(
                OutcomeLevel.SUCCESS,
                "Receita Registrada",
                f"R$ {money_to_display(amount)} de {appointment.client_name} registrado no caixa.",
            )
        )
        return tx
