from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Protocol, Sequence

from ..core.enums import TransactionType
from .model import FinancialTransaction


class TransactionRepository(Protocol):
    def add(
        self,
        *,
        description: str,
        amount: Decimal,
        tx_date: date,
        category: str,
        tx_type: TransactionType,
    ) -> FinancialTransaction:
        raise NotImplementedError

    def list_range(self, *, start: date, end: date) -> Sequence[FinancialTransaction]:
        """Transactions with start <= date <= end."""
        raise NotImplementedError

    def clear_all(self) -> int:
        raise NotImplementedError
