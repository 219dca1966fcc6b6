"""Domain models for withdrawal limits."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from checking_accounts.domain.common import AuditFields, Money, MoneyLike, generate_id


@dataclass(slots=True)
class WithdrawalLimit:
    id: str
    user_id: str
    currency_id: str
    daily_limit: Money
    monthly_limit: Money
    audit: AuditFields = field(default_factory=AuditFields.new)

    @classmethod
    def create(
        cls,
        user_id: str,
        currency_id: str,
        daily_limit: MoneyLike,
        monthly_limit: MoneyLike,
        now: Optional[datetime] = None,
    ) -> "WithdrawalLimit":
        return cls(
            id=generate_id(),
            user_id=user_id,
            currency_id=currency_id,
            daily_limit=Money.of(daily_limit).require_non_negative("Daily limit"),
            monthly_limit=Money.of(monthly_limit).require_non_negative("Monthly limit"),
            audit=AuditFields.new(now),
        )

    @classmethod
    def rehydrate(
        cls,
        *,
        id: str,
        user_id: str,
        currency_id: str,
        daily_limit: MoneyLike,
        monthly_limit: MoneyLike,
        created_at: datetime,
        updated_at: datetime,
    ) -> "WithdrawalLimit":
        return cls(
            id=id,
            user_id=user_id,
            currency_id=currency_id,
            daily_limit=Money.of(daily_limit),
            monthly_limit=Money.of(monthly_limit),
            audit=AuditFields(created_at=created_at, updated_at=updated_at),
        )

    def update_limits(self, daily_limit: MoneyLike, monthly_limit: MoneyLike, now: Optional[datetime] = None) -> None:
        # Usage is derived from the ledger, never stored here.
        self.daily_limit = Money.of(daily_limit).require_non_negative("Daily limit")
        self.monthly_limit = Money.of(monthly_limit).require_non_negative("Monthly limit")
        self.audit.touch(now)

    def copy(self) -> "WithdrawalLimit":
        return WithdrawalLimit(
            id=self.id,
            user_id=self.user_id,
            currency_id=self.currency_id,
            daily_limit=self.daily_limit,
            monthly_limit=self.monthly_limit,
            audit=self.audit.copy(),
        )


@dataclass(frozen=True, slots=True)
class LimitStatus:
    """Configured caps and derived usage. Caps are ``None`` when no limit is set.

    Remaining allowance never drops below zero, even after a cap is lowered
    beneath what was already withdrawn.
    """

    currency_id: str
    daily_limit: Optional[Money]
    monthly_limit: Optional[Money]
    daily_used: Money
    monthly_used: Money

    @property
    def is_limited(self) -> bool:
        return self.daily_limit is not None

    @property
    def daily_remaining(self) -> Optional[Money]:
        if self.daily_limit is None:
            return None
        return max(self.daily_limit - self.daily_used, Money.zero())

    @property
    def monthly_remaining(self) -> Optional[Money]:
        if self.monthly_limit is None:
            return None
        return max(self.monthly_limit - self.monthly_used, Money.zero())
