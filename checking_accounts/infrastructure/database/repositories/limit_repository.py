"""SQLAlchemy implementation of the withdrawal limit store."""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from checking_accounts.domain.common import PersistenceError, as_utc
from checking_accounts.domain.limits.models import WithdrawalLimit
from checking_accounts.infrastructure.database.models import WithdrawalLimitModel

from .base import store_errors, to_money


class SqlLimitRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_user_and_currency(self, user_id: str, currency_id: str) -> WithdrawalLimit | None:
        stmt = (
            select(WithdrawalLimitModel)
            .where(
                WithdrawalLimitModel.user_id == user_id,
                WithdrawalLimitModel.currency_id == currency_id,
            )
            .execution_options(populate_existing=True)
        )
        with store_errors("load withdrawal limits"):
            result = await self.session.execute(stmt)
            model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def create(self, limit: WithdrawalLimit) -> WithdrawalLimit:
        model = WithdrawalLimitModel(
            id=limit.id,
            user_id=limit.user_id,
            currency_id=limit.currency_id,
            daily_limit=limit.daily_limit.amount,
            monthly_limit=limit.monthly_limit.amount,
            created_at=limit.audit.created_at,
            updated_at=limit.audit.updated_at,
        )
        self.session.add(model)
        with store_errors("create withdrawal limits"):
            await self.session.flush()
        return limit

    async def update(self, limit: WithdrawalLimit) -> WithdrawalLimit:
        stmt = (
            update(WithdrawalLimitModel)
            .where(WithdrawalLimitModel.id == limit.id)
            .values(
                daily_limit=limit.daily_limit.amount,
                monthly_limit=limit.monthly_limit.amount,
                updated_at=limit.audit.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        with store_errors("update withdrawal limits"):
            result = await self.session.execute(stmt)
        if result.rowcount != 1:
            raise PersistenceError(f"Withdrawal limit {limit.id} no longer exists")
        return limit

    @staticmethod
    def _to_domain(model: WithdrawalLimitModel) -> WithdrawalLimit:
        return WithdrawalLimit.rehydrate(
            id=str(model.id),
            user_id=model.user_id,
            currency_id=model.currency_id,
            daily_limit=to_money(model.daily_limit),
            monthly_limit=to_money(model.monthly_limit),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )
