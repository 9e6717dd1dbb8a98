from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Sequence

from google.cloud.firestore_v1.base_query import FieldFilter

from ..common.datetime_utils import format_iso_date, to_calendar_date
from ..common.validators import money_to_storage, parse_money
from ..core.enums import TransactionType
from ..database.connection import DatabaseConnection
from ..database.firestore_base import delete_all, firestore_call, snapshots_to_dicts, stamped
from .model import FinancialTransaction
from .repository import TransactionRepository

TRANSACTIONS_COLLECTION = "financialTransactions"


def _to_transaction(r: dict) -> FinancialTransaction:
    return FinancialTransaction(
        transaction_id=r["id"],
        description=r.get("description") or "",
        amount=parse_money(r.get("amount")) or Decimal("0.00"),
        date=to_calendar_date(r.get("date")),
        category=r.get("category") or "",
        type=TransactionType(r.get("type") or TransactionType.INCOME.value),
    )


class FirestoreTransactionRepository(TransactionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _col(self):
        return self._conn_factory.collection(TRANSACTIONS_COLLECTION)

    def add(
        self,
        *,
        description: str,
        amount: Decimal,
        tx_date: date,
        category: str,
        tx_type: TransactionType,
    ) -> FinancialTransaction:
        payload = {
            "description": description,
            "amount": money_to_storage(amount),
            "date": format_iso_date(tx_date),
            "category": category,
            "type": tx_type.value,
        }
        with firestore_call("registrar transação"):
            _, ref = self._col().add(stamped(payload, created=True))
        return FinancialTransaction(
            transaction_id=ref.id,
            description=description,
            amount=amount,
            date=tx_date,
            category=category,
            type=tx_type,
        )

    def list_range(self, *, start: date, end: date) -> Sequence[FinancialTransaction]:
        # Dates are stored as YYYY-MM-DD so lexicographic range == calendar range.
        query = (
            self._col()
            .where(filter=FieldFilter("date", ">=", format_iso_date(start)))
            .where(filter=FieldFilter("date", "<=", format_iso_date(end)))
        )
        with firestore_call("listar transações"):
            rows = snapshots_to_dicts(query.stream())
        return [_to_transaction(r) for r in rows]

    def clear_all(self) -> int:
        with firestore_call("limpar transações"):
            return delete_all(self._conn_factory.client(), TRANSACTIONS_COLLECTION)
