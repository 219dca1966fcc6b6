"""Domain models for ledger transactions."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from checking_accounts.domain.common import (
    InvalidRequestError,
    Money,
    MoneyLike,
    as_utc,
    generate_id,
    utcnow,
)


class TransactionType(str, enum.Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


@dataclass(frozen=True, slots=True)
class Transaction:
    """One committed ledger movement. The direction lives in ``type``, not the sign."""

    id: str
    account_id: str
    user_id: str
    currency_id: str
    amount: Money
    type: TransactionType
    description: str
    created_at: datetime

    @classmethod
    def record(
        cls,
        *,
        account_id: str,
        user_id: str,
        currency_id: str,
        amount: MoneyLike,
        type: TransactionType,
        description: str,
        now: Optional[datetime] = None,
    ) -> "Transaction":
        description = (description or "").strip()
        if not description:
            raise InvalidRequestError("Description is required")
        return cls(
            id=generate_id(),
            account_id=account_id,
            user_id=user_id,
            currency_id=currency_id,
            amount=Money.of(amount).require_positive("Transaction amount"),
            type=TransactionType(type),
            description=description,
            created_at=as_utc(now) if now is not None else utcnow(),
        )

    @classmethod
    def rehydrate(
        cls,
        *,
        id: str,
        account_id: str,
        user_id: str,
        currency_id: str,
        amount: MoneyLike,
        type: str,
        description: str,
        created_at: datetime,
    ) -> "Transaction":
        return cls(
            id=id,
            account_id=account_id,
            user_id=user_id,
            currency_id=currency_id,
            amount=Money.of(amount),
            type=TransactionType(type),
            description=description,
            created_at=as_utc(created_at),
        )

    @property
    def is_withdrawal(self) -> bool:
        return self.type is TransactionType.WITHDRAWAL


@dataclass(slots=True)
class TransactionQuery:
    user_id: str
    currency_id: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    type: Optional[TransactionType] = None


@dataclass(slots=True)
class TransactionPage:
    items: list[Transaction]
    total: int
    offset: int
    limit: int
    next_offset: Optional[int] = field(default=None)

    @property
    def has_more(self) -> bool:
        return self.next_offset is not None
