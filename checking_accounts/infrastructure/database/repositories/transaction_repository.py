"""SQLAlchemy implementation of the transaction ledger."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from sqlalchemy import Select, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from checking_accounts.domain.common import Money, as_utc
from checking_accounts.domain.transactions.models import Transaction, TransactionQuery, TransactionType
from checking_accounts.infrastructure.database.models import TransactionModel

from .base import store_errors, to_money


class SqlTransactionRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, transaction: Transaction) -> Transaction:
        model = TransactionModel(
            id=transaction.id,
            account_id=transaction.account_id,
            user_id=transaction.user_id,
            currency_id=transaction.currency_id,
            amount=transaction.amount.amount,
            type=transaction.type.value,
            description=transaction.description,
            created_at=transaction.created_at,
        )
        self.session.add(model)
        with store_errors("record transaction"):
            await self.session.flush()
        return transaction

    async def sum_withdrawals_in_window(
        self,
        user_id: str,
        currency_id: str,
        start: datetime,
        end: datetime,
    ) -> Money:
        stmt = select(func.sum(TransactionModel.amount)).where(
            TransactionModel.user_id == user_id,
            TransactionModel.currency_id == currency_id,
            TransactionModel.type == TransactionType.WITHDRAWAL.value,
            TransactionModel.created_at >= as_utc(start),
            TransactionModel.created_at < as_utc(end),
        )
        with store_errors("sum withdrawals"):
            result = await self.session.execute(stmt)
            total = result.scalar_one_or_none()
        return to_money(total)

    async def find(self, query: TransactionQuery, *, offset: int, limit: int) -> Sequence[Transaction]:
        stmt = (
            self._filtered(select(TransactionModel), query)
            .order_by(desc(TransactionModel.created_at), desc(TransactionModel.id))
            .offset(offset)
            .limit(limit)
        )
        with store_errors("list transactions"):
            result = await self.session.execute(stmt)
            models = result.scalars().all()
        return [self._to_domain(model) for model in models]

    async def count(self, query: TransactionQuery) -> int:
        stmt = self._filtered(select(func.count()).select_from(TransactionModel), query)
        with store_errors("count transactions"):
            result = await self.session.execute(stmt)
            return int(result.scalar_one())

    @staticmethod
    def _filtered(stmt: Select, query: TransactionQuery) -> Select:
        stmt = stmt.where(TransactionModel.user_id == query.user_id)
        if query.currency_id:
            stmt = stmt.where(TransactionModel.currency_id == query.currency_id)
        if query.start is not None:
            stmt = stmt.where(TransactionModel.created_at >= as_utc(query.start))
        if query.end is not None:
            stmt = stmt.where(TransactionModel.created_at < as_utc(query.end))
        if query.type is not None:
            stmt = stmt.where(TransactionModel.type == query.type.value)
        return stmt

    @staticmethod
    def _to_domain(model: TransactionModel) -> Transaction:
        return Transaction.rehydrate(
            id=str(model.id),
            account_id=model.account_id,
            user_id=model.user_id,
            currency_id=model.currency_id,
            amount=to_money(model.amount),
            type=model.type,
            description=model.description,
            created_at=model.created_at,
        )
