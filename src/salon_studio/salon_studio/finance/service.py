from __future__ import annotations

import calendar
import csv
import io
import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..common.datetime_utils import format_iso_date
from ..common.validators import money_to_display, require_min_length, require_positive_amount
from ..core.constants import EXPENSE_CATEGORIES, MIN_EXPENSE_DESCRIPTION_LENGTH, SERVICE_REVENUE_CATEGORY
from ..core.enums import TransactionType
from ..core.exceptions import ValidationError
from .model import CashFlowSummary, FinancialTransaction
from .repository import TransactionRepository

logger = logging.getLogger(__name__)

CSV_FIELDS = ["date", "description", "category", "type", "amount"]


def month_bounds(day: date) -> tuple[date, date]:
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


class CashFlowService:
    """Use case: income/expense bookkeeping for the current month."""

    def __init__(self, transactions: TransactionRepository):
        self._transactions = transactions

    def record_income(self, *, description: str, amount: Decimal, tx_date: date) -> FinancialTransaction:
        if amount <= 0:
            raise ValidationError("Valor deve ser maior que zero.")
        tx = self._transactions.add(
            description=description,
            amount=amount,
            tx_date=tx_date,
            category=SERVICE_REVENUE_CATEGORY,
            tx_type=TransactionType.INCOME,
        )
        logger.info("Income recorded: %s %s", money_to_display(amount), description)
        return tx

    def record_expense(self, *, description: str, amount: str, tx_date: Optional[date], category: str) -> FinancialTransaction:
        description = require_min_length(description, "Descrição", MIN_EXPENSE_DESCRIPTION_LENGTH)
        value = require_positive_amount(amount)
        if tx_date is None:
            raise ValidationError("Data é obrigatória.")
        category = (category or "").strip()
        if category not in EXPENSE_CATEGORIES:
            raise ValidationError("Categoria é obrigatória.")

        tx = self._transactions.add(
            description=description,
            amount=value,
            tx_date=tx_date,
            category=category,
            tx_type=TransactionType.EXPENSE,
        )
        logger.info("Expense recorded: %s %s", money_to_display(value), description)
        return tx

    def monthly_summary(self, *, today: date, day: Optional[date] = None) -> CashFlowSummary:
        """Totals cover the whole month; `day` only narrows the listed transactions."""

        start, end = month_bounds(today)
        rows = list(self._transactions.list_range(start=start, end=end))

        income = sum((t.amount for t in rows if t.type == TransactionType.INCOME), Decimal("0.00"))
        expenses = sum((t.amount for t in rows if t.type == TransactionType.EXPENSE), Decimal("0.00"))

        listed = [t for t in rows if day is None or t.date == day]
        listed.sort(key=lambda t: t.date, reverse=True)

        return CashFlowSummary(
            month_start=start,
            month_end=end,
            total_income=income,
            total_expenses=expenses,
            net=income - expenses,
            transactions=tuple(listed),
            day=day,
        )

    @staticmethod
    def to_csv(transactions: Sequence[FinancialTransaction]) -> bytes:
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for t in transactions:
            writer.writerow(
                {
                    "date": format_iso_date(t.date),
                    "description": t.description,
                    "category": t.category,
                    "type": t.type.value,
                    "amount": money_to_display(t.amount),
                }
            )
        # BOM so spreadsheet apps detect UTF-8.
        return out.getvalue().encode("utf-8-sig")

    def clear_all(self) -> int:
        removed = self._transactions.clear_all()
        logger.warning("Cleared %d financial transactions", removed)
        return removed
