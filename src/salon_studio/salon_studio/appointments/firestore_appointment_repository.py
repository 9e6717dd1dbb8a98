from __future__ import annotations

import logging
from datetime import date, time
from typing import Optional, Sequence

from google.cloud.firestore_v1.base_query import FieldFilter

from ..common.datetime_utils import format_iso_date, format_time_of_day, to_calendar_date, to_time_of_day
from ..core.enums import AppointmentStatus
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.firestore_base import firestore_call, snapshot_to_dict, snapshots_to_dicts, stamped
from .model import Appointment
from .repository import AppointmentRepository

logger = logging.getLogger(__name__)

APPOINTMENTS_COLLECTION = "appointments"


def _to_appointment(r: dict) -> Appointment:
    return Appointment(
        appointment_id=r["id"],
        client_name=r.get("clientName") or "",
        service_ids=tuple(r.get("serviceIds") or ()),
        professional_id=r.get("professionalId") or "",
        date=to_calendar_date(r.get("date")),
        start_time=to_time_of_day(r.get("startTime")),
        end_time=to_time_of_day(r.get("endTime")),
        status=AppointmentStatus(r.get("status") or AppointmentStatus.SCHEDULED.value),
        total_amount=str(r.get("totalAmount") or ""),
    )


def _payload(
    *,
    client_name: str,
    service_ids: Sequence[str],
    professional_id: str,
    appt_date: date,
    start_time: time,
    end_time: time,
    status: AppointmentStatus,
    total_amount: str,
) -> dict:
    return {
        "clientName": client_name,
        "serviceIds": list(service_ids),
        "professionalId": professional_id,
        "date": format_iso_date(appt_date),
        "startTime": format_time_of_day(start_time),
        "endTime": format_time_of_day(end_time),
        "status": status.value,
        "totalAmount": total_amount,
    }


class FirestoreAppointmentRepository(AppointmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _col(self):
        return self._conn_factory.collection(APPOINTMENTS_COLLECTION)

    def get_by_id(self, appointment_id: str) -> Optional[Appointment]:
        with firestore_call("buscar agendamento"):
            r = snapshot_to_dict(self._col().document(appointment_id).get())
        return _to_appointment(r) if r else None

    def list_range(self, *, start: date, end: date, professional_id: Optional[str] = None) -> Sequence[Appointment]:
        query = (
            self._col()
            .where(filter=FieldFilter("date", ">=", format_iso_date(start)))
            .where(filter=FieldFilter("date", "<=", format_iso_date(end)))
        )
        with firestore_call("listar agendamentos"):
            rows = snapshots_to_dicts(query.stream())

        out: list[Appointment] = []
        for r in rows:
            try:
                apt = _to_appointment(r)
            except (ValueError, TypeError, ValidationError):
                logger.warning("Skipping malformed appointment document %s", r.get("id"))
                continue
            # Filtered here to avoid a composite index on (date, professionalId).
            if professional_id and apt.professional_id != professional_id:
                continue
            out.append(apt)
        out.sort(key=lambda a: (a.date, a.start_time))
        return out

    def create(self, **fields) -> str:
        with firestore_call("criar agendamento"):
            _, ref = self._col().add(stamped(_payload(**fields), created=True))
        return ref.id

    def update(self, appointment_id: str, **fields) -> None:
        with firestore_call("atualizar agendamento"):
            self._col().document(appointment_id).update(stamped(_payload(**fields)))

    def update_status(self, appointment_id: str, status: AppointmentStatus) -> None:
        with firestore_call("atualizar status do agendamento"):
            self._col().document(appointment_id).update(stamped({"status": status.value}))

    def delete(self, appointment_id: str) -> None:
        with firestore_call("remover agendamento"):
            self._col().document(appointment_id).delete()
