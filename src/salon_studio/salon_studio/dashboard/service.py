from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from ..appointments.repository import AppointmentRepository
from ..clients.repository import ClientRepository
from ..core.enums import AppointmentStatus
from ..finance.service import month_bounds


@dataclass(frozen=True)
class DashboardMetrics:
    appointments_today: int
    confirmed_today: int
    total_clients: int
    monthly_revenue: Decimal
    loyalty_clients: int


class DashboardService:
    def __init__(self, appointments: AppointmentRepository, clients: ClientRepository):
        self._appointments = appointments
        self._clients = clients

    def metrics(self, *, today: date) -> DashboardMetrics:
        start, end = month_bounds(today)
        month = self._appointments.list_range(start=start, end=end)
        todays = [a for a in month if a.date == today]

        # Revenue counts completed appointments, not the cash-flow ledger.
        revenue = sum(
            (a.amount for a in month if a.status == AppointmentStatus.COMPLETED and a.amount is not None),
            Decimal("0.00"),
        )

        clients = self._clients.list_all()
        loyalty = sum(1 for c in clients if c.stamps_earned > 0 or c.has_packages)

        return DashboardMetrics(
            appointments_today=len(todays),
            confirmed_today=sum(1 for a in todays if a.status == AppointmentStatus.CONFIRMED),
            total_clients=len(clients),
            monthly_revenue=revenue,
            loyalty_clients=loyalty,
        )
