from __future__ import annotations

from typing import Any, Optional

from ..common.datetime_utils import format_time_of_day, to_iso_instant, to_time_of_day
from ..database.connection import DatabaseConnection
from ..database.firestore_base import firestore_call, snapshot_to_dict, stamped
from .model import SETTINGS_FIELDS, DayOpeningHours
from .repository import SettingsRepository

APP_CONFIG_COLLECTION = "appConfiguration"
MAIN_SETTINGS_DOC_ID = "mainSettings"


def _hours_from_doc(rows: list[dict]) -> tuple[DayOpeningHours, ...]:
    return tuple(
        DayOpeningHours(
            day_of_week=int(r["dayOfWeek"]),
            name=str(r.get("name") or ""),
            is_open=bool(r.get("isOpen")),
            open_time=to_time_of_day(r.get("openTime")),
            close_time=to_time_of_day(r.get("closeTime")),
        )
        for r in rows
    )


def _hours_to_doc(hours) -> list[dict]:
    return [
        {
            "id": str(h.day_of_week or 7),
            "dayOfWeek": h.day_of_week,
            "name": h.name,
            "isOpen": h.is_open,
            "openTime": format_time_of_day(h.open_time),
            "closeTime": format_time_of_day(h.close_time),
        }
        for h in hours
    ]


class FirestoreSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _doc(self):
        return self._conn_factory.collection(APP_CONFIG_COLLECTION).document(MAIN_SETTINGS_DOC_ID)

    def get(self) -> Optional[dict[str, Any]]:
        with firestore_call("carregar configurações"):
            data = snapshot_to_dict(self._doc().get())
        if data is None:
            return None

        out: dict[str, Any] = {}
        for attr, key in SETTINGS_FIELDS.items():
            if key not in data or data[key] is None:
                continue
            out[attr] = _hours_from_doc(data[key]) if attr == "opening_hours" else data[key]
        if data.get("updatedAt") is not None:
            out["updated_at"] = to_iso_instant(data["updatedAt"])
        return out

    def save(self, fields: dict[str, Any]) -> None:
        payload: dict[str, Any] = {}
        for attr, value in fields.items():
            key = SETTINGS_FIELDS.get(attr)
            if key is None:
                continue
            payload[key] = _hours_to_doc(value) if attr == "opening_hours" else value

        with firestore_call("salvar configurações"):
            self._doc().set(stamped(payload), merge=True)
