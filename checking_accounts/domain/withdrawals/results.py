"""Outcome types returned by the withdrawal workflow."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Union

from checking_accounts.domain.common import (
    AccountNotFoundError,
    ConcurrencyConflictError,
    InsufficientFundsError,
    LimitExceededError,
    PartialCommitInconsistencyError,
    PersistenceError,
)
from checking_accounts.domain.limits import LimitDecision
from checking_accounts.domain.transactions import Transaction


class RejectionReason(str, enum.Enum):
    ACCOUNT_NOT_FOUND = "Account not found"
    INSUFFICIENT_FUNDS = "Insufficient funds"
    DAILY_LIMIT_EXCEEDED = "Daily withdrawal limit exceeded"
    MONTHLY_LIMIT_EXCEEDED = "Monthly withdrawal limit exceeded"

    @classmethod
    def from_limit_decision(cls, decision: LimitDecision) -> Optional["RejectionReason"]:
        return {
            LimitDecision.DAILY_LIMIT_EXCEEDED: cls.DAILY_LIMIT_EXCEEDED,
            LimitDecision.MONTHLY_LIMIT_EXCEEDED: cls.MONTHLY_LIMIT_EXCEEDED,
        }.get(decision)


class FailureKind(str, enum.Enum):
    CONCURRENCY_CONFLICT = "concurrency_conflict"
    PERSISTENCE = "persistence"
    PARTIAL_COMMIT = "partial_commit"


@dataclass(frozen=True, slots=True)
class WithdrawalCheck:
    """Outcome of a side-effect free check. A reason is present exactly when denied."""

    reason: Optional[RejectionReason] = None

    @property
    def allowed(self) -> bool:
        return self.reason is None

    @classmethod
    def allow(cls) -> "WithdrawalCheck":
        return cls()

    @classmethod
    def deny(cls, reason: RejectionReason) -> "WithdrawalCheck":
        return cls(reason=RejectionReason(reason))


@dataclass(frozen=True, slots=True)
class Committed:
    transaction: Transaction


@dataclass(frozen=True, slots=True)
class Rejected:
    reason: RejectionReason


@dataclass(frozen=True, slots=True)
class Failed:
    kind: FailureKind

    @property
    def retryable(self) -> bool:
        return self.kind is FailureKind.CONCURRENCY_CONFLICT


WithdrawalResult = Union[Committed, Rejected, Failed]


_REJECTION_ERRORS = {
    RejectionReason.ACCOUNT_NOT_FOUND: AccountNotFoundError,
    RejectionReason.INSUFFICIENT_FUNDS: InsufficientFundsError,
    RejectionReason.DAILY_LIMIT_EXCEEDED: LimitExceededError,
    RejectionReason.MONTHLY_LIMIT_EXCEEDED: LimitExceededError,
}

_FAILURE_ERRORS = {
    FailureKind.CONCURRENCY_CONFLICT: ConcurrencyConflictError,
    FailureKind.PERSISTENCE: PersistenceError,
    FailureKind.PARTIAL_COMMIT: PartialCommitInconsistencyError,
}


def unwrap(result: WithdrawalResult) -> Transaction:
    """Return the committed transaction or raise the matching domain exception."""
    if isinstance(result, Committed):
        return result.transaction
    if isinstance(result, Rejected):
        raise _REJECTION_ERRORS[result.reason](result.reason.value)
    raise _FAILURE_ERRORS[result.kind](f"Withdrawal failed: {result.kind.value}")
