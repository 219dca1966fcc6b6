"""Shared abstractions used across domain modules."""

from .exceptions import (
    AccountNotFoundError,
    CheckingAccountError,
    ConcurrencyConflictError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidRequestError,
    LimitExceededError,
    PartialCommitInconsistencyError,
    PersistenceError,
    WithdrawalDeniedError,
)
from .models import AuditFields, as_utc, generate_id, utcnow
from .money import CENT, Money, MoneyLike
from .unit_of_work import UnitOfWork

__all__ = [
    "CENT",
    "AccountNotFoundError",
    "AuditFields",
    "CheckingAccountError",
    "ConcurrencyConflictError",
    "InsufficientFundsError",
    "InvalidAmountError",
    "InvalidRequestError",
    "LimitExceededError",
    "Money",
    "MoneyLike",
    "PartialCommitInconsistencyError",
    "PersistenceError",
    "UnitOfWork",
    "WithdrawalDeniedError",
    "as_utc",
    "generate_id",
    "utcnow",
]
