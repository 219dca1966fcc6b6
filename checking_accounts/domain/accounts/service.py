"""Domain services for checking account management."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from checking_accounts.domain.common import (
    AccountNotFoundError,
    ConcurrencyConflictError,
    InvalidRequestError,
    Money,
    MoneyLike,
    UnitOfWork,
    utcnow,
)
from checking_accounts.domain.transactions import LedgerWriter, Transaction, TransactionStore, TransactionType

from .models import CheckingAccount
from .repository import AccountStore

logger = logging.getLogger(__name__)


class AccountService:
    """Provisioning, balance lookup and deposits."""

    def __init__(
        self,
        accounts: AccountStore,
        transactions: TransactionStore,
        unit_of_work: Optional[UnitOfWork] = None,
        *,
        max_attempts: int = 3,
    ) -> None:
        self._accounts = accounts
        self._ledger = LedgerWriter(accounts, transactions, unit_of_work)
        self._unit_of_work = unit_of_work
        self._max_attempts = max_attempts

    @classmethod
    def with_session(cls, session: AsyncSession, *, max_attempts: int = 3) -> "AccountService":
        from checking_accounts.infrastructure.database.repositories import (
            SqlAccountRepository,
            SqlTransactionRepository,
            SqlUnitOfWork,
        )

        return cls(
            SqlAccountRepository(session),
            SqlTransactionRepository(session),
            SqlUnitOfWork(session),
            max_attempts=max_attempts,
        )

    async def get_account(self, user_id: str, currency_id: str) -> CheckingAccount:
        account = await self._accounts.get_by_user_and_currency(user_id, currency_id)
        if account is None:
            raise AccountNotFoundError(f"No account found for user {user_id} with currency {currency_id}")
        return account

    async def list_accounts(self, user_id: str) -> Sequence[CheckingAccount]:
        return await self._accounts.list_by_user(user_id)

    async def open_account(self, user_id: str, currency_id: str, initial_balance: MoneyLike = 0) -> CheckingAccount:
        existing = await self._accounts.get_by_user_and_currency(user_id, currency_id)
        if existing is not None:
            return existing
        account = await self._accounts.create(CheckingAccount.open(user_id, currency_id, initial_balance))
        if self._unit_of_work is not None:
            await self._unit_of_work.commit()
        logger.info("Opened %s checking account %s for user %s", currency_id, account.id, user_id)
        return account

    async def deposit(self, user_id: str, currency_id: str, amount: MoneyLike, description: str) -> Transaction:
        amount = Money.of(amount).require_positive("Deposit amount")
        if not (description or "").strip():
            raise InvalidRequestError("Description is required")

        for attempt in range(1, self._max_attempts + 1):
            now = utcnow()
            account = await self.get_account(user_id, currency_id)
            expected_version = account.version
            account.deposit(amount, now)
            transaction = Transaction.record(
                account_id=account.id,
                user_id=user_id,
                currency_id=currency_id,
                amount=amount,
                type=TransactionType.DEPOSIT,
                description=description,
                now=now,
            )
            try:
                await self._ledger.post_to_completion(account, transaction, expected_version=expected_version)
            except ConcurrencyConflictError:
                logger.warning(
                    "Stale balance while depositing for user %s in %s (attempt %d/%d)",
                    user_id,
                    currency_id,
                    attempt,
                    self._max_attempts,
                )
                continue
            logger.info("Deposited %s %s into account %s", amount, currency_id, account.id)
            return transaction

        raise ConcurrencyConflictError(
            f"Deposit for user {user_id} in {currency_id} conflicted {self._max_attempts} times"
        )
