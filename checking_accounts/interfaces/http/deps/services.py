"""Service dependency providers."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from checking_accounts.core.container import ApplicationContainer
from checking_accounts.domain.accounts import AccountService
from checking_accounts.domain.limits import LimitService
from checking_accounts.domain.transactions import TransactionService
from checking_accounts.domain.withdrawals import WithdrawalService

from .container import get_app_container
from .database import get_db_session


def get_account_service(
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> AccountService:
    return AccountService.with_session(db, max_attempts=container.settings.max_withdrawal_attempts)


def get_transaction_service(db: AsyncSession = Depends(get_db_session)) -> TransactionService:
    return TransactionService.with_session(db)


def get_limit_service(db: AsyncSession = Depends(get_db_session)) -> LimitService:
    return LimitService.with_session(db)


def get_withdrawal_service(
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> WithdrawalService:
    return WithdrawalService.with_session(
        db,
        container.events,
        max_attempts=container.settings.max_withdrawal_attempts,
    )


__all__ = [
    "get_account_service",
    "get_limit_service",
    "get_transaction_service",
    "get_withdrawal_service",
]
