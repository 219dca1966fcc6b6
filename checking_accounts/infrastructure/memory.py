"""Dictionary backed stores for local runs and tests.

Each write is durable the moment it returns, so these stores are used
without a unit of work. Entities are copied on the way in and out so callers
never share state with the store.
"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from checking_accounts.domain.accounts.models import CheckingAccount
from checking_accounts.domain.common import ConcurrencyConflictError, Money, PersistenceError, as_utc
from checking_accounts.domain.limits.models import WithdrawalLimit
from checking_accounts.domain.transactions.models import Transaction, TransactionQuery, TransactionType


class InMemoryAccountStore:
    def __init__(self) -> None:
        self._accounts: dict[tuple[str, str], CheckingAccount] = {}

    async def get_by_user_and_currency(self, user_id: str, currency_id: str) -> CheckingAccount | None:
        account = self._accounts.get((user_id, currency_id))
        return account.copy() if account else None

    async def list_by_user(self, user_id: str) -> Sequence[CheckingAccount]:
        return [
            account.copy()
            for (owner, _), account in sorted(self._accounts.items())
            if owner == user_id
        ]

    async def create(self, account: CheckingAccount) -> CheckingAccount:
        key = (account.user_id, account.currency_id)
        if key in self._accounts:
            raise PersistenceError(
                f"Checking account already exists for user {account.user_id} in {account.currency_id}"
            )
        self._accounts[key] = account.copy()
        return account

    async def update(self, account: CheckingAccount, *, expected_version: int) -> CheckingAccount:
        stored = self._accounts.get((account.user_id, account.currency_id))
        if stored is None or stored.id != account.id:
            raise PersistenceError(f"Account {account.id} does not exist")
        if stored.version != expected_version:
            raise ConcurrencyConflictError(
                f"Account {account.id} changed since version {expected_version} was read"
            )
        account.version = expected_version + 1
        self._accounts[(account.user_id, account.currency_id)] = account.copy()
        return account


class InMemoryTransactionStore:
    def __init__(self) -> None:
        self._transactions: list[Transaction] = []

    @property
    def transactions(self) -> list[Transaction]:
        return list(self._transactions)

    async def create(self, transaction: Transaction) -> Transaction:
        self._transactions.append(transaction)
        return transaction

    async def sum_withdrawals_in_window(
        self,
        user_id: str,
        currency_id: str,
        start: datetime,
        end: datetime,
    ) -> Money:
        start, end = as_utc(start), as_utc(end)
        total = Money.zero()
        for transaction in self._transactions:
            if (
                transaction.user_id == user_id
                and transaction.currency_id == currency_id
                and transaction.type is TransactionType.WITHDRAWAL
                and start <= transaction.created_at < end
            ):
                total = total + transaction.amount
        return total

    async def find(self, query: TransactionQuery, *, offset: int, limit: int) -> Sequence[Transaction]:
        matches = sorted(self._matching(query), key=lambda t: (t.created_at, t.id), reverse=True)
        return matches[offset:offset + limit]

    async def count(self, query: TransactionQuery) -> int:
        return len(self._matching(query))

    def _matching(self, query: TransactionQuery) -> list[Transaction]:
        result = []
        for transaction in self._transactions:
            if transaction.user_id != query.user_id:
                continue
            if query.currency_id and transaction.currency_id != query.currency_id:
                continue
            if query.start is not None and transaction.created_at < as_utc(query.start):
                continue
            if query.end is not None and transaction.created_at >= as_utc(query.end):
                continue
            if query.type is not None and transaction.type is not query.type:
                continue
            result.append(transaction)
        return result


class InMemoryLimitStore:
    def __init__(self) -> None:
        self._limits: dict[tuple[str, str], WithdrawalLimit] = {}

    async def get_by_user_and_currency(self, user_id: str, currency_id: str) -> WithdrawalLimit | None:
        limit = self._limits.get((user_id, currency_id))
        return limit.copy() if limit else None

    async def create(self, limit: WithdrawalLimit) -> WithdrawalLimit:
        key = (limit.user_id, limit.currency_id)
        if key in self._limits:
            raise PersistenceError(f"Withdrawal limits already exist for user {limit.user_id} in {limit.currency_id}")
        self._limits[key] = limit.copy()
        return limit

    async def update(self, limit: WithdrawalLimit) -> WithdrawalLimit:
        key = (limit.user_id, limit.currency_id)
        if key not in self._limits:
            raise PersistenceError(f"Withdrawal limit {limit.id} no longer exists")
        self._limits[key] = limit.copy()
        return limit


__all__ = ["InMemoryAccountStore", "InMemoryLimitStore", "InMemoryTransactionStore"]
