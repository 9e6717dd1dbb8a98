from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import TransactionType


@dataclass(frozen=True)
class FinancialTransaction:
    transaction_id: str
    description: str
    amount: Decimal
    date: date
    category: str
    type: TransactionType


@dataclass(frozen=True)
class CashFlowSummary:
    month_start: date
    month_end: date
    total_income: Decimal
    total_expenses: Decimal
    net: Decimal
    transactions: tuple[FinancialTransaction, ...]
    day: Optional[date] = None
