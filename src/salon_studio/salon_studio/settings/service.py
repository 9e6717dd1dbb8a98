from __future__ import annotations

import logging
from dataclasses import fields, replace
from datetime import date
from typing import Any, Optional
from urllib.parse import quote

from ..common.datetime_utils import day_of_week
from ..core.exceptions import ExternalServiceError, ValidationError
from .model import SETTINGS_FIELDS, AppSettings, DayOpeningHours
from .repository import SettingsRepository

logger = logging.getLogger(__name__)


class SettingsService:
    """Salon configuration, fetched once and cached in memory.

    Missing fields are filled with defaults and the defaults written back, so the
    settings document converges to a complete one on first load.
    """

    def __init__(self, settings: SettingsRepository):
        self._settings = settings
        self._cached: Optional[AppSettings] = None

    def get(self) -> AppSettings:
        if self._cached is None:
            self._cached = self._load()
        return self._cached

    def refresh(self) -> AppSettings:
        self._cached = None
        return self.get()

    def _load(self) -> AppSettings:
        defaults = AppSettings()
        try:
            stored = self._settings.get() or {}
        except ExternalServiceError:
            logger.error("Could not load app settings, using defaults")
            return defaults

        missing = {attr: getattr(defaults, attr) for attr in SETTINGS_FIELDS if attr not in stored}
        if missing:
            try:
                self._settings.save(missing)
                logger.info("Persisted default settings for %s", ", ".join(sorted(missing)))
            except ExternalServiceError:
                logger.warning("Could not persist default settings")

        known = {f.name for f in fields(AppSettings)}
        return replace(defaults, **{k: v for k, v in stored.items() if k in known})

    def update(self, **changes: Any) -> AppSettings:
        unknown = set(changes) - set(SETTINGS_FIELDS)
        if unknown:
            raise ValidationError(f"Configuração desconhecida: {', '.join(sorted(unknown))}")

        if "opening_hours" in changes:
            changes["opening_hours"] = tuple(changes["opening_hours"])
            self._validate_opening_hours(changes["opening_hours"])

        current = self.get()
        self._settings.save(changes)
        self._cached = replace(current, **changes)
        return self._cached

    @staticmethod
    def _validate_opening_hours(hours: tuple[DayOpeningHours, ...]) -> None:
        seen: set[int] = set()
        for h in hours:
            if h.day_of_week < 0 or h.day_of_week > 6:
                raise ValidationError("Dia da semana inválido")
            if h.day_of_week in seen:
                raise ValidationError(f"{h.name}: dia repetido")
            seen.add(h.day_of_week)
            if h.is_open and h.close_time <= h.open_time:
                raise ValidationError(f"{h.name}: horário de fechamento deve ser após a abertura")

    def opening_hours_for(self, day: date) -> Optional[DayOpeningHours]:
        dow = day_of_week(day)
        for h in self.get().opening_hours:
            if h.day_of_week == dow:
                return h
        return None

    def whatsapp_link(self, number: str) -> str:
        message = self.get().whatsapp_scheduling_message or AppSettings().whatsapp_scheduling_message
        return f"https://wa.me/{number}?text={quote(message)}"
