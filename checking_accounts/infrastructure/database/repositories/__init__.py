"""SQLAlchemy-backed repository implementations."""

from .account_repository import SqlAccountRepository
from .base import SqlUnitOfWork
from .limit_repository import SqlLimitRepository
from .transaction_repository import SqlTransactionRepository

__all__ = [
    "SqlAccountRepository",
    "SqlLimitRepository",
    "SqlTransactionRepository",
    "SqlUnitOfWork",
]
