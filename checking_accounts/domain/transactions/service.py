"""Read-side service for the transaction ledger."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from checking_accounts.domain.common import InvalidRequestError, as_utc

from .models import TransactionPage, TransactionQuery, TransactionType
from .repository import TransactionStore

MAX_PAGE_SIZE = 100


@dataclass(slots=True)
class TransactionService:
    repository: TransactionStore

    @classmethod
    def with_session(cls, session: AsyncSession) -> "TransactionService":
        from checking_accounts.infrastructure.database.repositories import SqlTransactionRepository

        return cls(SqlTransactionRepository(session))

    async def list_transactions(
        self,
        user_id: str,
        *,
        currency_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> TransactionPage:
        query = self._build_query(user_id, currency_id, start, end, None)
        return await self._page(query, offset, limit)

    async def list_withdrawals(
        self,
        user_id: str,
        *,
        currency_id: Optional[str] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> TransactionPage:
        query = self._build_query(user_id, currency_id, None, None, TransactionType.WITHDRAWAL)
        return await self._page(query, offset, limit)

    async def _page(self, query: TransactionQuery, offset: int, limit: int) -> TransactionPage:
        if offset < 0 or not 1 <= limit <= MAX_PAGE_SIZE:
            raise InvalidRequestError(f"offset must be >= 0 and limit between 1 and {MAX_PAGE_SIZE}")
        items = list(await self.repository.find(query, offset=offset, limit=limit))
        total = await self.repository.count(query)
        next_offset = offset + len(items) if offset + len(items) < total else None
        return TransactionPage(items=items, total=total, offset=offset, limit=limit, next_offset=next_offset)

    @staticmethod
    def _build_query(
        user_id: str,
        currency_id: Optional[str],
        start: Optional[datetime],
        end: Optional[datetime],
        type: Optional[TransactionType],
    ) -> TransactionQuery:
        start = as_utc(start) if start is not None else None
        end = as_utc(end) if end is not None else None
        if start is not None and end is not None and start >= end:
            raise InvalidRequestError("start must be earlier than end")
        return TransactionQuery(user_id=user_id, currency_id=currency_id, start=start, end=end, type=type)
