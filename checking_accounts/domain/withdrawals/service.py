"""Withdrawal authorization and ledger update workflow."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from checking_accounts.domain.accounts import AccountStore
from checking_accounts.domain.common import (
    ConcurrencyConflictError,
    InsufficientFundsError,
    InvalidRequestError,
    Money,
    MoneyLike,
    PartialCommitInconsistencyError,
    PersistenceError,
    UnitOfWork,
    as_utc,
    utcnow,
)
from checking_accounts.domain.limits import LimitEvaluator, LimitStatus, LimitStore
from checking_accounts.domain.transactions import LedgerWriter, Transaction, TransactionStore, TransactionType

from .events import DomainEvent, EventSink, WithdrawalCompleted, WithdrawalRejected
from .results import (
    Committed,
    Failed,
    FailureKind,
    Rejected,
    RejectionReason,
    WithdrawalCheck,
    WithdrawalResult,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class WithdrawalService:
    """Authorizes withdrawals and commits them to the balance and the ledger.

    Nothing is cached between calls: every attempt re-reads the account and
    re-evaluates the caps. The balance write is conditional on the version
    that was read, and a stale version restarts the attempt, up to
    ``max_attempts`` times.
    """

    def __init__(
        self,
        accounts: AccountStore,
        transactions: TransactionStore,
        limits: LimitStore,
        events: EventSink,
        *,
        unit_of_work: Optional[UnitOfWork] = None,
        max_attempts: int = 3,
        clock: Clock = utcnow,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._accounts = accounts
        self._events = events
        self._evaluator = LimitEvaluator(limits, transactions)
        self._ledger = LedgerWriter(accounts, transactions, unit_of_work)
        self._max_attempts = max_attempts
        self._clock = clock

    @classmethod
    def with_session(
        cls,
        session: AsyncSession,
        events: EventSink,
        *,
        max_attempts: int = 3,
    ) -> "WithdrawalService":
        from checking_accounts.infrastructure.database.repositories import (
            SqlAccountRepository,
            SqlLimitRepository,
            SqlTransactionRepository,
            SqlUnitOfWork,
        )

        return cls(
            SqlAccountRepository(session),
            SqlTransactionRepository(session),
            SqlLimitRepository(session),
            events,
            unit_of_work=SqlUnitOfWork(session),
            max_attempts=max_attempts,
        )

    async def can_withdraw(
        self,
        user_id: str,
        currency_id: str,
        amount: MoneyLike,
        now: Optional[datetime] = None,
    ) -> WithdrawalCheck:
        amount = Money.of(amount)
        now = as_utc(now) if now is not None else self._clock()

        account = await self._accounts.get_by_user_and_currency(user_id, currency_id)
        if account is None:
            return WithdrawalCheck.deny(RejectionReason.ACCOUNT_NOT_FOUND)
        if amount > account.balance:
            return WithdrawalCheck.deny(RejectionReason.INSUFFICIENT_FUNDS)

        decision = await self._evaluator.evaluate(user_id, currency_id, amount, now)
        reason = RejectionReason.from_limit_decision(decision)
        if reason is not None:
            return WithdrawalCheck.deny(reason)
        return WithdrawalCheck.allow()

    async def process_withdrawal(
        self,
        user_id: str,
        currency_id: str,
        amount: MoneyLike,
        description: str,
    ) -> WithdrawalResult:
        amount = Money.of(amount).require_positive("Withdrawal amount")
        description = (description or "").strip()
        if not description:
            raise InvalidRequestError("Description is required")

        for attempt in range(1, self._max_attempts + 1):
            try:
                outcome = await self._attempt(user_id, currency_id, amount, description)
            except ConcurrencyConflictError:
                logger.warning(
                    "Stale balance for user %s in %s, retrying withdrawal (attempt %d/%d)",
                    user_id,
                    currency_id,
                    attempt,
                    self._max_attempts,
                )
                continue
            except PartialCommitInconsistencyError:
                return Failed(FailureKind.PARTIAL_COMMIT)
            except PersistenceError:
                logger.exception(
                    "Withdrawal of %s %s for user %s failed in persistence",
                    amount,
                    currency_id,
                    user_id,
                )
                return Failed(FailureKind.PERSISTENCE)

            if isinstance(outcome, Rejected):
                logger.warning(
                    "Withdrawal of %s %s for user %s rejected: %s",
                    amount,
                    currency_id,
                    user_id,
                    outcome.reason.value,
                )
                await self._publish(
                    WithdrawalRejected(
                        user_id=user_id,
                        currency_id=currency_id,
                        amount=amount,
                        reason=outcome.reason.value,
                    )
                )
            else:
                transaction = outcome.transaction
                logger.info(
                    "Withdrawal %s of %s %s committed on account %s",
                    transaction.id,
                    transaction.amount,
                    currency_id,
                    transaction.account_id,
                )
                await self._publish(WithdrawalCompleted.from_transaction(transaction))
            return outcome

        logger.error(
            "Withdrawal of %s %s for user %s abandoned after %d conflicting attempts",
            amount,
            currency_id,
            user_id,
            self._max_attempts,
        )
        return Failed(FailureKind.CONCURRENCY_CONFLICT)

    async def get_withdrawal_limit_status(
        self,
        user_id: str,
        currency_id: str,
        now: Optional[datetime] = None,
    ) -> LimitStatus:
        now = as_utc(now) if now is not None else self._clock()
        return await self._evaluator.status(user_id, currency_id, now)

    async def _attempt(
        self,
        user_id: str,
        currency_id: str,
        amount: Money,
        description: str,
    ) -> Union[Committed, Rejected]:
        now = self._clock()
        check = await self.can_withdraw(user_id, currency_id, amount, now)
        if check.reason is not None:
            return Rejected(check.reason)

        account = await self._accounts.get_by_user_and_currency(user_id, currency_id)
        if account is None:
            return Rejected(RejectionReason.ACCOUNT_NOT_FOUND)

        expected_version = account.version
        try:
            account.withdraw(amount, now)
        except InsufficientFundsError:
            return Rejected(RejectionReason.INSUFFICIENT_FUNDS)

        transaction = Transaction.record(
            account_id=account.id,
            user_id=user_id,
            currency_id=currency_id,
            amount=amount,
            type=TransactionType.WITHDRAWAL,
            description=description,
            now=now,
        )
        await self._ledger.post_to_completion(account, transaction, expected_version=expected_version)
        return Committed(transaction)

    async def _publish(self, event: DomainEvent) -> None:
        try:
            await self._events.publish(event)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Failed to publish %s %s", event.event_type, event.id)
