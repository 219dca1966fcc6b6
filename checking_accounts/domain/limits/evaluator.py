"""Daily and monthly withdrawal cap evaluation."""

from __future__ import annotations

import enum
from datetime import datetime, timedelta

from checking_accounts.domain.common import Money, MoneyLike, as_utc
from checking_accounts.domain.transactions.repository import TransactionStore

from .models import LimitStatus
from .repository import LimitStore


class LimitDecision(str, enum.Enum):
    ALLOWED = "allowed"
    DAILY_LIMIT_EXCEEDED = "daily_limit_exceeded"
    MONTHLY_LIMIT_EXCEEDED = "monthly_limit_exceeded"


def day_window(now: datetime) -> tuple[datetime, datetime]:
    """Half-open ``[start, end)`` covering the UTC day of ``now``."""
    start = as_utc(now).replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


def month_window(now: datetime) -> tuple[datetime, datetime]:
    """Half-open ``[start, end)`` covering the UTC calendar month of ``now``."""
    start = as_utc(now).replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


class LimitEvaluator:
    """Checks a proposed withdrawal against the configured caps.

    Usage is summed from withdrawal transactions on every call. Reaching a
    cap exactly is allowed; only strictly exceeding it is rejected.
    """

    def __init__(self, limits: LimitStore, transactions: TransactionStore) -> None:
        self._limits = limits
        self._transactions = transactions

    async def evaluate(self, user_id: str, currency_id: str, amount: MoneyLike, now: datetime) -> LimitDecision:
        limit = await self._limits.get_by_user_and_currency(user_id, currency_id)
        if limit is None:
            return LimitDecision.ALLOWED

        amount = Money.of(amount)
        daily_used = await self._used(user_id, currency_id, day_window(now))
        if daily_used + amount > limit.daily_limit:
            return LimitDecision.DAILY_LIMIT_EXCEEDED

        monthly_used = await self._used(user_id, currency_id, month_window(now))
        if monthly_used + amount > limit.monthly_limit:
            return LimitDecision.MONTHLY_LIMIT_EXCEEDED

        return LimitDecision.ALLOWED

    async def status(self, user_id: str, currency_id: str, now: datetime) -> LimitStatus:
        limit = await self._limits.get_by_user_and_currency(user_id, currency_id)
        daily_used = await self._used(user_id, currency_id, day_window(now))
        monthly_used = await self._used(user_id, currency_id, month_window(now))
        return LimitStatus(
            currency_id=currency_id,
            daily_limit=limit.daily_limit if limit else None,
            monthly_limit=limit.monthly_limit if limit else None,
            daily_used=daily_used,
            monthly_used=monthly_used,
        )

    async def _used(self, user_id: str, currency_id: str, window: tuple[datetime, datetime]) -> Money:
        start, end = window
        return await self._transactions.sum_withdrawals_in_window(user_id, currency_id, start, end)
