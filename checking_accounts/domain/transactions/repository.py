"""Repository protocol for the transaction ledger."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from checking_accounts.domain.common import Money

from .models import Transaction, TransactionQuery


class TransactionStore(Protocol):
    async def create(self, transaction: Transaction) -> Transaction:
        ...

    async def sum_withdrawals_in_window(
        self,
        user_id: str,
        currency_id: str,
        start: datetime,
        end: datetime,
    ) -> Money:
        """Total of withdrawal amounts with ``start <= created_at < end``."""
        ...

    async def find(self, query: TransactionQuery, *, offset: int, limit: int) -> Sequence[Transaction]:
        ...

    async def count(self, query: TransactionQuery) -> int:
        ...
