"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

TOTAL_STAMPS_ON_CARD = 12
STAMPS_PER_HEART = 3
HEARTS_PER_MIMO = 1

SLOT_MINUTES = 30
DEFAULT_DAY_START = time(7, 0)
DEFAULT_DAY_END = time(22, 0)
WEEK_STARTS_ON = 0  # Monday, as in date.weekday()

SERVICE_REVENUE_CATEGORY = "Serviços Prestados"
EXPENSE_CATEGORIES = (
    "Aluguel",
    "Material",
    "Marketing",
    "Contas Fixas",
    "Salários",
    "Manutenção",
    "Impostos",
    "Outros",
)

DEFAULT_SESSION_DAYS = 7
MIN_CLIENT_NAME_LENGTH = 2
MIN_PHONE_DIGITS = 10
MIN_EXPENSE_DESCRIPTION_LENGTH = 3
