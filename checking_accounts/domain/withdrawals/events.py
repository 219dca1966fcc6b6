"""Withdrawal domain events and the sink protocol they are published to."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol

from checking_accounts.domain.common import Money, generate_id, utcnow
from checking_accounts.domain.transactions import Transaction


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainEvent:
    id: str = field(default_factory=generate_id)
    timestamp: datetime = field(default_factory=utcnow)

    @property
    def event_type(self) -> str:
        return type(self).__name__

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "eventType": self.event_type,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class WithdrawalCompleted(DomainEvent):
    transaction_id: str
    account_id: str
    user_id: str
    currency_id: str
    amount: Money
    description: str
    created_at: datetime

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "WithdrawalCompleted":
        return cls(
            transaction_id=transaction.id,
            account_id=transaction.account_id,
            user_id=transaction.user_id,
            currency_id=transaction.currency_id,
            amount=transaction.amount,
            description=transaction.description,
            created_at=transaction.created_at,
        )

    def to_payload(self) -> dict[str, Any]:
        payload = DomainEvent.to_payload(self)
        payload.update(
            transactionId=self.transaction_id,
            accountId=self.account_id,
            userId=self.user_id,
            currencyId=self.currency_id,
            amount=str(self.amount),
            description=self.description,
            createdAt=self.created_at.isoformat(),
        )
        return payload


@dataclass(frozen=True, slots=True, kw_only=True)
class WithdrawalRejected(DomainEvent):
    user_id: str
    currency_id: str
    amount: Money
    reason: str

    def to_payload(self) -> dict[str, Any]:
        payload = DomainEvent.to_payload(self)
        payload.update(
            userId=self.user_id,
            currencyId=self.currency_id,
            amount=str(self.amount),
            reason=self.reason,
        )
        return payload


class EventSink(Protocol):
    async def publish(self, event: DomainEvent) -> None:
        ...
