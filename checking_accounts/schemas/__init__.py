"""Pydantic schemas used by the HTTP interface."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from checking_accounts.domain.accounts import CheckingAccount
from checking_accounts.domain.limits import LimitStatus, WithdrawalLimit
from checking_accounts.domain.transactions import Transaction, TransactionPage

CURRENCY_PATTERN = r"^[A-Z0-9]{3,10}$"


def _amount(value) -> Optional[Decimal]:
    return value.amount if value is not None else None


class ErrorResponse(BaseModel):
    detail: str


class BalanceResponse(BaseModel):
    account_id: str
    currency_id: str
    balance: Decimal
    updated_at: datetime

    @classmethod
    def from_domain(cls, account: CheckingAccount) -> "BalanceResponse":
        return cls(
            account_id=account.id,
            currency_id=account.currency_id,
            balance=account.balance.amount,
            updated_at=account.updated_at,
        )


class BalanceListResponse(BaseModel):
    balances: list[BalanceResponse] = Field(default_factory=list)


class TransactionResponse(BaseModel):
    id: str
    user_id: str
    currency_id: str
    amount: Decimal
    type: str
    description: str
    created_at: datetime

    @classmethod
    def from_domain(cls, transaction: Transaction) -> "TransactionResponse":
        return cls(
            id=transaction.id,
            user_id=transaction.user_id,
            currency_id=transaction.currency_id,
            amount=transaction.amount.amount,
            type=transaction.type.value,
            description=transaction.description,
            created_at=transaction.created_at,
        )


class TransactionListResponse(BaseModel):
    items: list[TransactionResponse] = Field(default_factory=list)
    total: int
    offset: int
    limit: int
    next_offset: Optional[int] = None

    @classmethod
    def from_page(cls, page: TransactionPage) -> "TransactionListResponse":
        return cls(
            items=[TransactionResponse.from_domain(item) for item in page.items],
            total=page.total,
            offset=page.offset,
            limit=page.limit,
            next_offset=page.next_offset,
        )


class WithdrawalRequest(BaseModel):
    currency_id: str = Field(..., pattern=CURRENCY_PATTERN)
    amount: Decimal = Field(..., gt=0, max_digits=18, decimal_places=2)
    description: str = Field(..., min_length=1, max_length=255)


class WithdrawalResponse(BaseModel):
    id: str
    user_id: str
    currency_id: str
    amount: Decimal
    description: str
    created_at: datetime

    @classmethod
    def from_domain(cls, transaction: Transaction) -> "WithdrawalResponse":
        return cls(
            id=transaction.id,
            user_id=transaction.user_id,
            currency_id=transaction.currency_id,
            amount=transaction.amount.amount,
            description=transaction.description,
            created_at=transaction.created_at,
        )


class WithdrawalRejectedResponse(BaseModel):
    detail: str
    reason: str


class WithdrawalLimitStatusResponse(BaseModel):
    currency_id: str
    daily_limit: Optional[Decimal] = None
    monthly_limit: Optional[Decimal] = None
    daily_used: Decimal
    monthly_used: Decimal
    daily_remaining: Optional[Decimal] = None
    monthly_remaining: Optional[Decimal] = None

    @classmethod
    def from_domain(cls, status: LimitStatus) -> "WithdrawalLimitStatusResponse":
        return cls(
            currency_id=status.currency_id,
            daily_limit=_amount(status.daily_limit),
            monthly_limit=_amount(status.monthly_limit),
            daily_used=status.daily_used.amount,
            monthly_used=status.monthly_used.amount,
            daily_remaining=_amount(status.daily_remaining),
            monthly_remaining=_amount(status.monthly_remaining),
        )


class WithdrawalLimitUpdate(BaseModel):
    currency_id: str = Field(..., pattern=CURRENCY_PATTERN)
    daily_limit: Decimal = Field(..., ge=0, max_digits=18, decimal_places=2)
    monthly_limit: Decimal = Field(..., ge=0, max_digits=18, decimal_places=2)


class WithdrawalLimitResponse(BaseModel):
    currency_id: str
    daily_limit: Decimal
    monthly_limit: Decimal
    updated_at: datetime

    @classmethod
    def from_domain(cls, limit: WithdrawalLimit) -> "WithdrawalLimitResponse":
        return cls(
            currency_id=limit.currency_id,
            daily_limit=limit.daily_limit.amount,
            monthly_limit=limit.monthly_limit.amount,
            updated_at=limit.audit.updated_at,
        )
