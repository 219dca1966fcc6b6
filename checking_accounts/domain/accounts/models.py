"""Domain model for per-currency checking accounts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from checking_accounts.domain.common import (
    AuditFields,
    InsufficientFundsError,
    Money,
    MoneyLike,
    generate_id,
)


@dataclass(slots=True)
class CheckingAccount:
    """Balance of one user in one currency.

    ``deposit`` and ``withdraw`` are in-memory transitions only; persisting the
    result is up to the caller. ``version`` is the optimistic concurrency
    token the stores compare against on update.
    """

    id: str
    user_id: str
    currency_id: str
    balance: Money
    audit: AuditFields = field(default_factory=AuditFields.new)
    version: int = 0

    @classmethod
    def open(
        cls,
        user_id: str,
        currency_id: str,
        initial_balance: MoneyLike = 0,
        now: Optional[datetime] = None,
    ) -> "CheckingAccount":
        balance = Money.of(initial_balance).require_non_negative("Initial balance")
        return cls(
            id=generate_id(),
            user_id=user_id,
            currency_id=currency_id,
            balance=balance,
            audit=AuditFields.new(now),
        )

    @classmethod
    def rehydrate(
        cls,
        *,
        id: str,
        user_id: str,
        currency_id: str,
        balance: MoneyLike,
        version: int,
        created_at: datetime,
        updated_at: datetime,
    ) -> "CheckingAccount":
        """Rebuild an account from stored fields. Only store adapters call this."""
        return cls(
            id=id,
            user_id=user_id,
            currency_id=currency_id,
            balance=Money.of(balance),
            audit=AuditFields(created_at=created_at, updated_at=updated_at),
            version=version,
        )

    @property
    def created_at(self) -> datetime:
        return self.audit.created_at

    @property
    def updated_at(self) -> datetime:
        return self.audit.updated_at

    def deposit(self, amount: MoneyLike, now: Optional[datetime] = None) -> None:
        amount = Money.of(amount).require_positive("Deposit amount")
        self.balance = self.balance + amount
        self.audit.touch(now)

    def withdraw(self, amount: MoneyLike, now: Optional[datetime] = None) -> None:
        amount = Money.of(amount).require_positive("Withdrawal amount")
        if amount > self.balance:
            raise InsufficientFundsError()
        self.balance = self.balance - amount
        self.audit.touch(now)

    def copy(self) -> "CheckingAccount":
        return CheckingAccount(
            id=self.id,
            user_id=self.user_id,
            currency_id=self.currency_id,
            balance=self.balance,
            audit=self.audit.copy(),
            version=self.version,
        )
