from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..catalog.service import CatalogService
from ..clients.repository import ClientRepository
from ..common.datetime_utils import parse_time_of_day, today_local
from ..common.validators import money_to_storage, parse_money, require_min_length
from ..core.constants import MIN_CLIENT_NAME_LENGTH
from ..core.enums import AppointmentStatus, OutcomeLevel
from ..core.exceptions import NotFoundError, ValidationError
from ..professionals.repository import ProfessionalRepository
from .advisory import PackageAdvisory, package_coverage_advisories
from .completion import CompletionResult, CompletionWorkflow, StepOutcome
from .model import Appointment
from .repository import AppointmentRepository

logger = logging.getLogger(__name__)


class AppointmentService:
    """Use case: book, edit, delete appointments and change their status."""

    def __init__(
        self,
        appointments: AppointmentRepository,
        clients: ClientRepository,
        professionals: ProfessionalRepository,
        catalog: CatalogService,
        workflow: CompletionWorkflow,
    ):
        self._appointments = appointments
        self._clients = clients
        self._professionals = professionals
        self._catalog = catalog
        self._workflow = workflow

    def get_appointment(self, appointment_id: str) -> Appointment:
        apt = self._appointments.get_by_id(appointment_id)
        if not apt:
            raise NotFoundError("Agendamento não encontrado.")
        return apt

    def list_range(self, *, start: date, end: date, professional_id: Optional[str] = None) -> Sequence[Appointment]:
        if end < start:
            raise ValidationError("Período inválido.")
        return self._appointments.list_range(start=start, end=end, professional_id=professional_id or None)

    def compute_total(self, service_ids: Sequence[str]) -> Decimal:
        known = self._catalog.services_by_id()
        return sum((known[sid].price for sid in service_ids if sid in known), Decimal("0.00"))

    def _validated_fields(
        self,
        *,
        client_name: str,
        service_ids: Sequence[str],
        professional_id: str,
        appt_date: Optional[date],
        start_time: str,
        end_time: str,
        total_amount: Optional[str],
    ) -> dict:
        client_name = require_min_length(client_name, "Nome do cliente", MIN_CLIENT_NAME_LENGTH)
        ids = [s for s in (service_ids or []) if s]
        if not ids:
            raise ValidationError("Selecione pelo menos um serviço.")
        if not (professional_id or "").strip():
            raise ValidationError("Selecione um profissional.")
        if not self._professionals.get_by_id(professional_id):
            raise ValidationError("Profissional não encontrado.")
        if appt_date is None:
            raise ValidationError("Data é obrigatória.")
        if not (start_time or "").strip():
            raise ValidationError("Horário de início é obrigatório.")
        if not (end_time or "").strip():
            raise ValidationError("Horário de término é obrigatório.")

        start = parse_time_of_day(start_time)
        end = parse_time_of_day(end_time)
        if end <= start:
            raise ValidationError("Horário de término deve ser após o horário de início.")

        if total_amount is None or not str(total_amount).strip():
            amount = self.compute_total(ids)
        else:
            amount = parse_money(total_amount)
            if amount is None or amount < 0:
                raise ValidationError("Valor total inválido.")

        return dict(
            client_name=client_name,
            service_ids=ids,
            professional_id=professional_id.strip(),
            appt_date=appt_date,
            start_time=start,
            end_time=end,
            total_amount=money_to_storage(amount),
        )

    def create_appointment(
        self,
        *,
        client_name: str,
        service_ids: Sequence[str],
        professional_id: str,
        appt_date: Optional[date],
        start_time: str,
        end_time: str,
        now: datetime,
        total_amount: Optional[str] = None,
        status: AppointmentStatus = AppointmentStatus.SCHEDULED,
    ) -> str:
        data = self._validated_fields(
            client_name=client_name,
            service_ids=service_ids,
            professional_id=professional_id,
            appt_date=appt_date,
            start_time=start_time,
            end_time=end_time,
            total_amount=total_amount,
        )
        if datetime.combine(data["appt_date"], data["start_time"]) < now:
            raise ValidationError("Não é possível agendar em datas ou horários passados.")

        appointment_id = self._appointments.create(status=status, **data)
        logger.info("Appointment %s created for %s on %s", appointment_id, data["client_name"], data["appt_date"])
        return appointment_id

    def update_appointment(
        self,
        appointment_id: str,
        *,
        client_name: str,
        service_ids: Sequence[str],
        professional_id: str,
        appt_date: Optional[date],
        start_time: str,
        end_time: str,
        total_amount: Optional[str] = None,
        status: Optional[AppointmentStatus] = None,
        today: Optional[date] = None,
    ) -> Optional[CompletionResult]:
        """Save the edited fields.

        Moving to Completed goes through `update_status` so the completion side effects
        run; its result is returned. Otherwise returns None.
        """

        current = self.get_appointment(appointment_id)
        data = self._validated_fields(
            client_name=client_name,
            service_ids=service_ids,
            professional_id=professional_id,
            appt_date=appt_date,
            start_time=start_time,
            end_time=end_time,
            total_amount=total_amount,
        )
        new_status = status or current.status
        completing = new_status == AppointmentStatus.COMPLETED and current.status != AppointmentStatus.COMPLETED
        self._appointments.update(appointment_id, status=current.status if completing else new_status, **data)
        if completing:
            return self.update_status(appointment_id, new_status, today=today or today_local())
        return None

    def delete_appointment(self, appointment_id: str) -> None:
        self.get_appointment(appointment_id)
        self._appointments.delete(appointment_id)
        logger.info("Appointment %s deleted", appointment_id)

    def update_status(self, appointment_id: str, status: AppointmentStatus, *, today: date) -> CompletionResult:
        """Persist the new status, then run the completion side effects when relevant.

        The status write happens first; if it fails nothing else is attempted.
        """

        appointment = self.get_appointment(appointment_id)
        self._appointments.update_status(appointment_id, status)
        logger.info("Appointment %s status -> %s", appointment_id, status.value)

        if status == AppointmentStatus.COMPLETED:
            if appointment.status == AppointmentStatus.COMPLETED:
                logger.warning("Appointment %s was already completed", appointment_id)
            return self._workflow.run(
                replace(appointment, status=status),
                clients=self._clients.list_all(),
                services=self._catalog.services_by_id(),
                today=today,
            )

        if status == AppointmentStatus.CONFIRMED:
            outcome = StepOutcome(OutcomeLevel.SUCCESS, "Status Atualizado", "Agendamento confirmado com sucesso!")
        elif status == AppointmentStatus.CANCELLED:
            outcome = StepOutcome(OutcomeLevel.WARNING, "Agendamento Cancelado", "Agendamento cancelado.")
        else:
            outcome = StepOutcome(OutcomeLevel.INFO, "Status Atualizado", f"Status alterado para {status.value}.")
        return CompletionResult(ok=True, outcomes=(outcome,))

    def package_advisories(self, *, client_name: str, service_ids: Sequence[str], today: date) -> list[PackageAdvisory]:
        return package_coverage_advisories(
            client_name=client_name,
            service_ids=service_ids,
            clients=self._clients.list_all(),
            packages=self._catalog.list_active_packages(),
            services=self._catalog.services_by_id(),
            today=today,
        )
