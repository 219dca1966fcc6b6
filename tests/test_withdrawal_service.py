import asyncio
import logging
from datetime import timedelta

import pytest

from checking_accounts.domain.accounts import CheckingAccount
from checking_accounts.domain.common import (
    ConcurrencyConflictError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidRequestError,
    LimitExceededError,
    Money,
    PartialCommitInconsistencyError,
    PersistenceError,
)
from checking_accounts.domain.limits import WithdrawalLimit
from checking_accounts.domain.transactions import TransactionType
from checking_accounts.domain.withdrawals import (
    Committed,
    Failed,
    FailureKind,
    Rejected,
    RejectionReason,
    WithdrawalCheck,
    WithdrawalCompleted,
    WithdrawalRejected,
    WithdrawalService,
    unwrap,
)
from checking_accounts.infrastructure.memory import InMemoryAccountStore, InMemoryTransactionStore

from .conftest import CURRENCY, USER


class YieldingAccountStore(InMemoryAccountStore):
    """Gives other tasks a chance to run between every read and write."""

    async def get_by_user_and_currency(self, user_id, currency_id):
        await asyncio.sleep(0)
        return await super().get_by_user_and_currency(user_id, currency_id)

    async def update(self, account, *, expected_version):
        await asyncio.sleep(0)
        return await super().update(account, expected_version=expected_version)


class AlwaysStaleAccountStore(InMemoryAccountStore):
    def __init__(self):
        super().__init__()
        self.update_calls = 0

    async def update(self, account, *, expected_version):
        self.update_calls += 1
        raise ConcurrencyConflictError("stale")


class BrokenAccountStore(InMemoryAccountStore):
    async def update(self, account, *, expected_version):
        raise PersistenceError("database unavailable")


class BrokenTransactionStore(InMemoryTransactionStore):
    async def create(self, transaction):
        raise PersistenceError("ledger unavailable")


class RecordingUnitOfWork:
    def __init__(self):
        self.commits = 0
        self.rollbacks = 0

    async def commit(self):
        self.commits += 1

    async def rollback(self):
        self.rollbacks += 1


class ExplodingSink:
    async def publish(self, event):
        raise RuntimeError("sink offline")


async def open_with_balance(accounts, balance):
    return await accounts.create(CheckingAccount.open(USER, CURRENCY, balance))


class TestProcessWithdrawal:
    @pytest.mark.asyncio
    async def test_unlimited_account_withdrawal_commits(self, withdrawal_service, accounts, transactions, sink):
        await open_with_balance(accounts, "500.00")

        result = await withdrawal_service.process_withdrawal(USER, CURRENCY, "100.00", "ATM")

        assert isinstance(result, Committed)
        account = await accounts.get_by_user_and_currency(USER, CURRENCY)
        assert account.balance == Money.of("400.00")
        assert account.version == 1
        assert len(transactions.transactions) == 1
        recorded = transactions.transactions[0]
        assert recorded == result.transaction
        assert recorded.amount == Money.of("100.00")
        assert recorded.type is TransactionType.WITHDRAWAL
        assert recorded.account_id == account.id

        (event,) = sink.events
        assert isinstance(event, WithdrawalCompleted)
        assert event.transaction_id == recorded.id
        assert event.to_payload()["amount"] == "100.00"

    @pytest.mark.asyncio
    async def test_insufficient_funds_is_rejected_without_side_effects(
        self, withdrawal_service, accounts, transactions, sink
    ):
        await open_with_balance(accounts, "50.00")

        result = await withdrawal_service.process_withdrawal(USER, CURRENCY, "100.00", "Rent")

        assert result == Rejected(RejectionReason.INSUFFICIENT_FUNDS)
        account = await accounts.get_by_user_and_currency(USER, CURRENCY)
        assert account.balance == Money.of("50.00")
        assert account.version == 0
        assert transactions.transactions == []

        (event,) = sink.events
        assert isinstance(event, WithdrawalRejected)
        assert event.reason == "Insufficient funds"
        assert event.amount == Money.of("100.00")

    @pytest.mark.asyncio
    async def test_daily_cap_rejects_withdrawal(self, withdrawal_service, accounts, limits, clock, sink):
        await open_with_balance(accounts, "1000.00")
        await limits.create(WithdrawalLimit.create(USER, CURRENCY, "200.00", "1000.00"))

        clock.now -= timedelta(hours=2)
        assert isinstance(await withdrawal_service.process_withdrawal(USER, CURRENCY, "150.00", "Groceries"), Committed)
        clock.now += timedelta(hours=2)

        result = await withdrawal_service.process_withdrawal(USER, CURRENCY, "60.00", "Dinner")

        assert result == Rejected(RejectionReason.DAILY_LIMIT_EXCEEDED)
        account = await accounts.get_by_user_and_currency(USER, CURRENCY)
        assert account.balance == Money.of("850.00")
        assert sink.of_type(WithdrawalRejected)[0].reason == "Daily withdrawal limit exceeded"

    @pytest.mark.asyncio
    async def test_monthly_cap_rejects_withdrawal(self, withdrawal_service, accounts, limits, clock):
        await open_with_balance(accounts, "1000.00")
        await limits.create(WithdrawalLimit.create(USER, CURRENCY, "300.00", "400.00"))

        clock.now -= timedelta(days=2)
        assert isinstance(await withdrawal_service.process_withdrawal(USER, CURRENCY, "300.00", "Rent"), Committed)
        clock.now += timedelta(days=2)

        result = await withdrawal_service.process_withdrawal(USER, CURRENCY, "150.00", "Trip")

        assert result == Rejected(RejectionReason.MONTHLY_LIMIT_EXCEEDED)

    @pytest.mark.asyncio
    async def test_missing_account_is_rejected_and_announced(self, withdrawal_service, sink):
        result = await withdrawal_service.process_withdrawal(USER, CURRENCY, "1.00", "Coffee")

        assert result == Rejected(RejectionReason.ACCOUNT_NOT_FOUND)
        assert sink.of_type(WithdrawalRejected)[0].reason == "Account not found"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", ["0", "-5.00"])
    async def test_non_positive_amount_is_an_invalid_request(self, withdrawal_service, accounts, sink, amount):
        await open_with_balance(accounts, "500.00")

        with pytest.raises(InvalidAmountError):
            await withdrawal_service.process_withdrawal(USER, CURRENCY, amount, "ATM")

        assert sink.events == []

    @pytest.mark.asyncio
    async def test_blank_description_is_an_invalid_request(self, withdrawal_service, accounts):
        await open_with_balance(accounts, "500.00")

        with pytest.raises(InvalidRequestError):
            await withdrawal_service.process_withdrawal(USER, CURRENCY, "10.00", "  ")

    @pytest.mark.asyncio
    async def test_whole_balance_can_be_withdrawn(self, withdrawal_service, accounts):
        await open_with_balance(accounts, "80.00")

        result = await withdrawal_service.process_withdrawal(USER, CURRENCY, "80.00", "Close out")

        assert isinstance(result, Committed)
        account = await accounts.get_by_user_and_currency(USER, CURRENCY)
        assert account.balance == Money.zero()


class TestConcurrency:
    @pytest.mark.asyncio
    async def test_competing_withdrawals_never_overdraw(self, limits, sink, clock):
        accounts = YieldingAccountStore()
        transactions = InMemoryTransactionStore()
        service = WithdrawalService(accounts, transactions, limits, sink, clock=clock)
        await open_with_balance(accounts, "100.00")

        results = await asyncio.gather(
            service.process_withdrawal(USER, CURRENCY, "80.00", "first"),
            service.process_withdrawal(USER, CURRENCY, "80.00", "second"),
        )

        committed = [result for result in results if isinstance(result, Committed)]
        rejected = [result for result in results if isinstance(result, Rejected)]
        assert len(committed) == 1
        assert rejected == [Rejected(RejectionReason.INSUFFICIENT_FUNDS)]

        account = await accounts.get_by_user_and_currency(USER, CURRENCY)
        assert account.balance == Money.of("20.00")
        assert len(transactions.transactions) == 1

    @pytest.mark.asyncio
    async def test_concurrent_small_withdrawals_all_land(self, limits, sink, clock):
        accounts = YieldingAccountStore()
        transactions = InMemoryTransactionStore()
        service = WithdrawalService(accounts, transactions, limits, sink, clock=clock, max_attempts=10)
        await open_with_balance(accounts, "100.00")

        results = await asyncio.gather(
            *(service.process_withdrawal(USER, CURRENCY, "10.00", f"w{i}") for i in range(3))
        )

        assert all(isinstance(result, Committed) for result in results)
        account = await accounts.get_by_user_and_currency(USER, CURRENCY)
        assert account.balance == Money.of("70.00")
        assert account.version == 3

    @pytest.mark.asyncio
    async def test_conflicts_exhaust_retries(self, transactions, limits, sink, clock, caplog):
        accounts = AlwaysStaleAccountStore()
        service = WithdrawalService(accounts, transactions, limits, sink, clock=clock, max_attempts=3)
        await open_with_balance(accounts, "100.00")

        with caplog.at_level(logging.WARNING):
            result = await service.process_withdrawal(USER, CURRENCY, "10.00", "ATM")

        assert result == Failed(FailureKind.CONCURRENCY_CONFLICT)
        assert result.retryable
        assert accounts.update_calls == 3
        assert transactions.transactions == []
        assert "attempt 3/3" in caplog.text

    def test_max_attempts_must_be_positive(self, accounts, transactions, limits, sink):
        with pytest.raises(ValueError):
            WithdrawalService(accounts, transactions, limits, sink, max_attempts=0)


class TestInfrastructureFailures:
    @pytest.mark.asyncio
    async def test_balance_write_failure_is_reported(self, transactions, limits, sink, clock):
        accounts = BrokenAccountStore()
        service = WithdrawalService(accounts, transactions, limits, sink, clock=clock)
        await open_with_balance(accounts, "100.00")

        result = await service.process_withdrawal(USER, CURRENCY, "10.00", "ATM")

        assert result == Failed(FailureKind.PERSISTENCE)
        assert not result.retryable
        assert sink.events == []

    @pytest.mark.asyncio
    async def test_ledger_failure_without_unit_of_work_is_a_partial_commit(
        self, accounts, limits, sink, clock, caplog
    ):
        transactions = BrokenTransactionStore()
        service = WithdrawalService(accounts, transactions, limits, sink, clock=clock)
        await open_with_balance(accounts, "100.00")

        with caplog.at_level(logging.CRITICAL):
            result = await service.process_withdrawal(USER, CURRENCY, "10.00", "ATM")

        assert result == Failed(FailureKind.PARTIAL_COMMIT)
        assert any(record.levelno == logging.CRITICAL for record in caplog.records)
        account = await accounts.get_by_user_and_currency(USER, CURRENCY)
        assert account.balance == Money.of("90.00")

    @pytest.mark.asyncio
    async def test_ledger_failure_with_unit_of_work_rolls_back(self, accounts, limits, sink, clock):
        unit_of_work = RecordingUnitOfWork()
        service = WithdrawalService(
            accounts, BrokenTransactionStore(), limits, sink, unit_of_work=unit_of_work, clock=clock
        )
        await open_with_balance(accounts, "100.00")

        result = await service.process_withdrawal(USER, CURRENCY, "10.00", "ATM")

        assert result == Failed(FailureKind.PERSISTENCE)
        assert unit_of_work.rollbacks == 1
        assert unit_of_work.commits == 0

    @pytest.mark.asyncio
    async def test_unit_of_work_commits_once_per_withdrawal(self, accounts, transactions, limits, sink, clock):
        unit_of_work = RecordingUnitOfWork()
        service = WithdrawalService(accounts, transactions, limits, sink, unit_of_work=unit_of_work, clock=clock)
        await open_with_balance(accounts, "100.00")

        await service.process_withdrawal(USER, CURRENCY, "10.00", "ATM")

        assert unit_of_work.commits == 1
        assert unit_of_work.rollbacks == 0

    @pytest.mark.asyncio
    async def test_event_sink_failure_does_not_undo_withdrawal(self, accounts, transactions, limits, clock, caplog):
        service = WithdrawalService(accounts, transactions, limits, ExplodingSink(), clock=clock)
        await open_with_balance(accounts, "100.00")

        result = await service.process_withdrawal(USER, CURRENCY, "10.00", "ATM")

        assert isinstance(result, Committed)
        assert "Failed to publish WithdrawalCompleted" in caplog.text


class TestCanWithdraw:
    @pytest.mark.asyncio
    async def test_check_has_no_side_effects(self, withdrawal_service, accounts, transactions, sink):
        await open_with_balance(accounts, "100.00")

        first = await withdrawal_service.can_withdraw(USER, CURRENCY, "100.00")
        second = await withdrawal_service.can_withdraw(USER, CURRENCY, "100.00")

        assert first == second
        assert first.allowed
        assert first.reason is None
        assert transactions.transactions == []
        assert sink.events == []
        account = await accounts.get_by_user_and_currency(USER, CURRENCY)
        assert account.version == 0

    @pytest.mark.asyncio
    async def test_check_reports_reason(self, withdrawal_service, accounts, limits):
        await open_with_balance(accounts, "100.00")
        await limits.create(WithdrawalLimit.create(USER, CURRENCY, "20.00", "50.00"))

        assert (await withdrawal_service.can_withdraw(USER, CURRENCY, "100.01")).reason is RejectionReason.INSUFFICIENT_FUNDS
        assert (await withdrawal_service.can_withdraw(USER, CURRENCY, "20.01")).reason is RejectionReason.DAILY_LIMIT_EXCEEDED
        assert (await withdrawal_service.can_withdraw(USER, "EUR", "1.00")).reason is RejectionReason.ACCOUNT_NOT_FOUND


class TestLimitStatus:
    @pytest.mark.asyncio
    async def test_status_without_limit_record(self, withdrawal_service, accounts):
        await open_with_balance(accounts, "100.00")
        await withdrawal_service.process_withdrawal(USER, CURRENCY, "30.00", "ATM")

        status = await withdrawal_service.get_withdrawal_limit_status(USER, CURRENCY)

        assert status.daily_limit is None
        assert status.monthly_limit is None
        assert status.daily_used == Money.of("30.00")


class TestUnwrap:
    @pytest.mark.asyncio
    async def test_committed_returns_transaction(self, withdrawal_service, accounts):
        await open_with_balance(accounts, "100.00")

        transaction = unwrap(await withdrawal_service.process_withdrawal(USER, CURRENCY, "10.00", "ATM"))

        assert transaction.amount == Money.of("10.00")

    @pytest.mark.parametrize(
        "result, error",
        [
            (Rejected(RejectionReason.INSUFFICIENT_FUNDS), InsufficientFundsError),
            (Rejected(RejectionReason.MONTHLY_LIMIT_EXCEEDED), LimitExceededError),
            (Failed(FailureKind.CONCURRENCY_CONFLICT), ConcurrencyConflictError),
            (Failed(FailureKind.PARTIAL_COMMIT), PartialCommitInconsistencyError),
        ],
    )
    def test_other_outcomes_raise(self, result, error):
        with pytest.raises(error):
            unwrap(result)

    def test_rejection_reason_survives_unwrap(self):
        with pytest.raises(LimitExceededError) as excinfo:
            unwrap(Rejected(RejectionReason.DAILY_LIMIT_EXCEEDED))

        assert excinfo.value.reason == "Daily withdrawal limit exceeded"


class TestWithdrawalCheck:
    def test_allow_carries_no_reason(self):
        check = WithdrawalCheck.allow()

        assert check.allowed
        assert check.reason is None

    def test_deny_requires_a_reason(self):
        assert not WithdrawalCheck.deny(RejectionReason.INSUFFICIENT_FUNDS).allowed

        with pytest.raises(ValueError):
            WithdrawalCheck.deny(None)
