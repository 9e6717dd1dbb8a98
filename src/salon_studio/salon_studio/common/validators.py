from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_AMOUNT_INPUT_RE = re.compile(r"^\d+([.,]\d{1,2})?$")
_CURRENCY_PREFIX_RE = re.compile(r"^R\$\s*")

TWO_PLACES = Decimal("0.01")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} é obrigatório.")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value.strip()) < min_len:
        raise ValidationError(f"{field_name} deve ter pelo menos {min_len} caracteres.")
    return value.strip()


def optional_email(value: Optional[str]) -> str:
    v = (value or "").strip()
    if v and not _EMAIL_RE.match(v):
        raise ValidationError("E-mail inválido.")
    return v


def optional_phone(value: Optional[str], *, min_digits: int) -> str:
    v = (value or "").strip()
    if v and len(re.sub(r"\D", "", v)) < min_digits:
        raise ValidationError(f"Telefone deve ter pelo menos {min_digits} dígitos (com DDD).")
    return v


def parse_money(value: Any) -> Optional[Decimal]:
    """Parse an amount typed or stored as "150,00", "150.00" or "R$ 150,00".

    Returns None when the value cannot be parsed.
    """

    if value is None:
        return None
    if isinstance(value, Decimal):
        return value.quantize(TWO_PLACES)
    if isinstance(value, (int, float)):
        return Decimal(str(value)).quantize(TWO_PLACES)

    cleaned = _CURRENCY_PREFIX_RE.sub("", str(value).strip()).replace(",", ".").strip()
    if not cleaned:
        return None
    try:
        amount = Decimal(cleaned)
        if not amount.is_finite():
            return None
        return amount.quantize(TWO_PLACES)
    except InvalidOperation:
        return None


def require_positive_amount(value: str, field_name: str = "Valor") -> Decimal:
    v = (value or "").strip()
    if not _AMOUNT_INPUT_RE.match(v):
        raise ValidationError(f"{field_name} inválido. Use formato como 50 ou 50,25.")
    amount = parse_money(v)
    if amount is None or amount <= 0:
        raise ValidationError(f"{field_name} deve ser maior que zero.")
    return amount


def money_to_storage(value: Decimal) -> str:
    """Amounts are stored with a dot separator, e.g. "150.00"."""
    return f"{value.quantize(TWO_PLACES)}"


def money_to_display(value: Optional[Decimal]) -> str:
    """Display form used on screen, e.g. "150,00"."""
    return money_to_storage(value or Decimal("0")).replace(".", ",")
