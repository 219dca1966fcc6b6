"""Durable posting of a balance change together with its ledger entry."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Optional

from checking_accounts.domain.common import (
    ConcurrencyConflictError,
    PartialCommitInconsistencyError,
    PersistenceError,
    UnitOfWork,
)

from .models import Transaction
from .repository import TransactionStore

if TYPE_CHECKING:
    from checking_accounts.domain.accounts import AccountStore, CheckingAccount

logger = logging.getLogger(__name__)


class LedgerWriter:
    """Writes an updated account and its transaction as one unit.

    With a unit of work both writes are committed or rolled back together.
    Without one each store write is durable on its own, so a failed ledger
    write after a successful balance write is reported as a partial commit.
    """

    def __init__(
        self,
        accounts: "AccountStore",
        transactions: TransactionStore,
        unit_of_work: Optional[UnitOfWork] = None,
    ) -> None:
        self._accounts = accounts
        self._transactions = transactions
        self._unit_of_work = unit_of_work

    async def post(self, account: "CheckingAccount", transaction: Transaction, *, expected_version: int) -> None:
        try:
            await self._accounts.update(account, expected_version=expected_version)
        except (ConcurrencyConflictError, PersistenceError):
            await self.rollback()
            raise

        try:
            await self._transactions.create(transaction)
            if self._unit_of_work is not None:
                await self._unit_of_work.commit()
        except PersistenceError as exc:
            if self._unit_of_work is not None:
                await self.rollback()
                raise
            logger.critical(
                "Account %s was changed by %s %s but ledger entry %s was not written; reconciliation required",
                account.id,
                transaction.type.value,
                transaction.amount,
                transaction.id,
                exc_info=exc,
            )
            raise PartialCommitInconsistencyError(
                f"Ledger entry {transaction.id} missing for committed change on account {account.id}"
            ) from exc

    async def post_to_completion(
        self,
        account: "CheckingAccount",
        transaction: Transaction,
        *,
        expected_version: int,
    ) -> None:
        """Like ``post``, but a cancelled caller waits until both writes have settled.

        The caller usually owns the session the writes run on, so it must not
        unwind (and close that session) while the commit is still in flight.
        ``CancelledError`` is re-raised once the post has finished.
        """
        task = asyncio.ensure_future(self.post(account, transaction, expected_version=expected_version))
        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            while not task.done():
                try:
                    await asyncio.wait({task})
                except asyncio.CancelledError:
                    continue
            if not task.cancelled() and task.exception() is not None:
                logger.error(
                    "Posting %s %s failed after the caller was cancelled: %s",
                    transaction.type.value,
                    transaction.id,
                    task.exception(),
                )
            raise

    async def rollback(self) -> None:
        if self._unit_of_work is None:
            return
        try:
            await self._unit_of_work.rollback()
        except PersistenceError:
            logger.exception("Rollback failed")
