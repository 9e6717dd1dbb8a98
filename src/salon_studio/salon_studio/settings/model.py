from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from typing import Optional


@dataclass(frozen=True)
class DayOpeningHours:
    """Opening hours of one weekday (day_of_week: 0=Sunday .. 6=Saturday)."""

    day_of_week: int
    name: str
    is_open: bool
    open_time: time
    close_time: time


DEFAULT_OPENING_HOURS: tuple[DayOpeningHours, ...] = (
    DayOpeningHours(1, "Segunda-feira", True, time(9, 0), time(18, 0)),
    DayOpeningHours(2, "Terça-feira", True, time(9, 0), time(18, 0)),
    DayOpeningHours(3, "Quarta-feira", True, time(9, 0), time(18, 0)),
    DayOpeningHours(4, "Quinta-feira", True, time(9, 0), time(18, 0)),
    DayOpeningHours(5, "Sexta-feira", True, time(9, 0), time(20, 0)),
    DayOpeningHours(6, "Sábado", True, time(8, 0), time(17, 0)),
    DayOpeningHours(0, "Domingo", False, time(9, 0), time(18, 0)),
)


@dataclass(frozen=True)
class AppSettings:
    opening_hours: tuple[DayOpeningHours, ...] = DEFAULT_OPENING_HOURS
    user_name: str = "Admin NailStudio"
    salon_tagline: str = "Gestão Inteligente"
    salon_logo_url: str = ""
    whatsapp_scheduling_message: str = "Olá! Gostaria de agendar um horário no NailStudio AI."
    salon_name: str = "NailStudio AI"
    salon_address: str = "Rua das Palmeiras, 123, Centro"
    salon_phone: str = "(11) 91234-5678"
    client_login_title: str = "Portal do Cliente"
    client_login_description: str = "Acesse para acompanhar seus selos de fidelidade e muito mais!"
    theme: str = "light"
    updated_at: Optional[str] = field(default=None, compare=False)


# attribute name -> document key in appConfiguration/mainSettings
SETTINGS_FIELDS = {
    "opening_hours": "openingHours",
    "user_name": "userName",
    "salon_tagline": "salonTagline",
    "salon_logo_url": "salonLogoUrl",
    "whatsapp_scheduling_message": "whatsappSchedulingMessage",
    "salon_name": "salonName",
    "salon_address": "salonAddress",
    "salon_phone": "salonPhone",
    "client_login_title": "clientLoginTitle",
    "client_login_description": "clientLoginDescription",
    "theme": "theme",
}
