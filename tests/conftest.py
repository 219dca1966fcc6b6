from datetime import datetime, timezone

import pytest
import pytest_asyncio

from checking_accounts.domain.accounts import AccountService
from checking_accounts.domain.limits import LimitService
from checking_accounts.domain.transactions import TransactionService
from checking_accounts.domain.withdrawals import WithdrawalService
from checking_accounts.infrastructure.memory import (
    InMemoryAccountStore,
    InMemoryLimitStore,
    InMemoryTransactionStore,
)
from checking_accounts.infrastructure.messaging import InMemoryEventSink

USER = "user-1"
CURRENCY = "USD"


class FrozenClock:
    """Callable clock that tests can move around."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FrozenClock(datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def accounts():
    return InMemoryAccountStore()


@pytest.fixture
def transactions():
    return InMemoryTransactionStore()


@pytest.fixture
def limits():
    return InMemoryLimitStore()


@pytest.fixture
def sink():
    return InMemoryEventSink()


@pytest.fixture
def account_service(accounts, transactions):
    return AccountService(accounts, transactions)


@pytest.fixture
def limit_service(limits):
    return LimitService(limits)


@pytest.fixture
def transaction_service(transactions):
    return TransactionService(transactions)


@pytest.fixture
def withdrawal_service(accounts, transactions, limits, sink, clock):
    return WithdrawalService(accounts, transactions, limits, sink, clock=clock)


@pytest_asyncio.fixture
async def funded_account(account_service):
    """A USD account for ``USER`` holding 1000.00."""
    return await account_service.open_account(USER, CURRENCY, "1000.00")
