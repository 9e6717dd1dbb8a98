from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from typing import Optional

from ..common.validators import parse_money
from ..core.enums import AppointmentStatus


@dataclass(frozen=True)
class Appointment:
    """A booking for one client with one professional on one day.

    `total_amount` is kept as stored ("150.00"; older documents may hold "150,00" or
    "R$ 150,00"). Use `amount` for the parsed value.
    """

    appointment_id: str
    client_name: str
    service_ids: tuple[str, ...]
    professional_id: str
    date: date
    start_time: time
    end_time: time
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    total_amount: str = ""

    @property
    def amount(self) -> Optional[Decimal]:
        return parse_money(self.total_amount)
