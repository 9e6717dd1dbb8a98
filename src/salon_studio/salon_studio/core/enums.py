from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for access control."""

    ADMIN = "admin"


class AppointmentStatus(str, Enum):
    """Status values as stored in the appointments collection."""

    SCHEDULED = "Agendado"
    CONFIRMED = "Confirmado"
    COMPLETED = "Concluído"
    CANCELLED = "Cancelado"


class PackageInstanceStatus(str, Enum):
    ACTIVE = "Ativo"
    USED = "Utilizado"
    EXPIRED = "Expirado"


class CatalogStatus(str, Enum):
    ACTIVE = "Ativo"
    INACTIVE = "Inativo"


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class OutcomeLevel(str, Enum):
    """Severity of a notification shown to the operator (flash category)."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "danger"


class PackageDebitPolicy(str, Enum):
    """How many package debits one completed appointment may trigger."""

    FIRST_DEBIT_ONLY = "first_debit_only"
    PER_SERVICE = "per_service"


class ViewMode(str, Enum):
    DAILY = "daily"
    THREE_DAYS = "3days"
    WEEKLY = "weekly"


class SlotState(str, Enum):
    CLOSED = "closed"
    PAST = "past"
    OCCUPIED = "occupied"
    OPEN = "open"
