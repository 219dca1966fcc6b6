"""Withdrawal limit configuration use cases."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from checking_accounts.domain.common import InvalidRequestError, Money, MoneyLike, UnitOfWork

from .models import WithdrawalLimit
from .repository import LimitStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LimitService:
    repository: LimitStore
    unit_of_work: Optional[UnitOfWork] = None

    @classmethod
    def with_session(cls, session: AsyncSession) -> "LimitService":
        from checking_accounts.infrastructure.database.repositories import SqlLimitRepository, SqlUnitOfWork

        return cls(SqlLimitRepository(session), SqlUnitOfWork(session))

    async def get_limits(self, user_id: str, currency_id: str) -> WithdrawalLimit | None:
        return await self.repository.get_by_user_and_currency(user_id, currency_id)

    async def set_limits(
        self,
        user_id: str,
        currency_id: str,
        daily_limit: MoneyLike,
        monthly_limit: MoneyLike,
        now: Optional[datetime] = None,
    ) -> WithdrawalLimit:
        daily = Money.of(daily_limit).require_non_negative("Daily limit")
        monthly = Money.of(monthly_limit).require_non_negative("Monthly limit")
        if daily > monthly:
            raise InvalidRequestError("Daily limit cannot exceed the monthly limit")

        current = await self.repository.get_by_user_and_currency(user_id, currency_id)
        if current is None:
            limit = await self.repository.create(
                WithdrawalLimit.create(user_id, currency_id, daily, monthly, now=now)
            )
            await self._commit()
            logger.info("Created withdrawal limits for user %s in %s: daily=%s monthly=%s", user_id, currency_id, daily, monthly)
            return limit

        current.update_limits(daily, monthly, now=now)
        limit = await self.repository.update(current)
        await self._commit()
        logger.info("Updated withdrawal limits for user %s in %s: daily=%s monthly=%s", user_id, currency_id, daily, monthly)
        return limit

    async def _commit(self) -> None:
        if self.unit_of_work is not None:
            await self.unit_of_work.commit()
