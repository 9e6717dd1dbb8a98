from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from ..core.enums import AppointmentStatus
from .model import Appointment


class AppointmentRepository(Protocol):
    def get_by_id(self, appointment_id: str) -> Optional[Appointment]:
        raise NotImplementedError

    def list_range(self, *, start: date, end: date, professional_id: Optional[str] = None) -> Sequence[Appointment]:
        """Appointments with start <= date <= end, optionally for one professional."""
        raise NotImplementedError

    def create(
        self,
        *,
        client_name: str,
        service_ids: Sequence[str],
        professional_id: str,
        appt_date: date,
        start_time: time,
        end_time: time,
        status: AppointmentStatus,
        total_amount: str,
    ) -> str:
        raise NotImplementedError

    def update(
        self,
        appointment_id: str,
        *,
        client_name: str,
        service_ids: Sequence[str],
        professional_id: str,
        appt_date: date,
        start_time: time,
        end_time: time,
        status: AppointmentStatus,
        total_amount: str,
    ) -> None:
        raise NotImplementedError

    def update_status(self, appointment_id: str, status: AppointmentStatus) -> None:
        raise NotImplementedError

    def delete(self, appointment_id: str) -> None:
        raise NotImplementedError
