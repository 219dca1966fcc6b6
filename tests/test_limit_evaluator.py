from datetime import datetime, timedelta, timezone

import pytest

from checking_accounts.domain.common import Money
from checking_accounts.domain.limits import (
    LimitDecision,
    LimitEvaluator,
    WithdrawalLimit,
    day_window,
    month_window,
)
from checking_accounts.domain.transactions import Transaction, TransactionType

from .conftest import CURRENCY, USER

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


async def record(transactions, amount, when, type=TransactionType.WITHDRAWAL, currency_id=CURRENCY):
    await transactions.create(
        Transaction.record(
            account_id="acc-1",
            user_id=USER,
            currency_id=currency_id,
            amount=amount,
            type=type,
            description="seed",
            now=when,
        )
    )


async def set_caps(limits, daily, monthly):
    await limits.create(WithdrawalLimit.create(USER, CURRENCY, daily, monthly))


@pytest.fixture
def evaluator(limits, transactions):
    return LimitEvaluator(limits, transactions)


def test_day_window_is_half_open_utc_day():
    start, end = day_window(datetime(2024, 3, 15, 23, 59, tzinfo=timezone(timedelta(hours=-5))))

    assert start == datetime(2024, 3, 16, tzinfo=timezone.utc)
    assert end == datetime(2024, 3, 17, tzinfo=timezone.utc)


def test_month_window_rolls_over_december():
    start, end = month_window(datetime(2023, 12, 31, 18, tzinfo=timezone.utc))

    assert start == datetime(2023, 12, 1, tzinfo=timezone.utc)
    assert end == datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_no_limit_record_allows_anything(evaluator):
    assert await evaluator.evaluate(USER, CURRENCY, "1000000.00", NOW) is LimitDecision.ALLOWED


@pytest.mark.asyncio
async def test_prior_usage_pushing_over_daily_cap_is_rejected(evaluator, limits, transactions):
    await set_caps(limits, "200.00", "5000.00")
    await record(transactions, "100.00", NOW - timedelta(hours=3))
    await record(transactions, "50.00", NOW - timedelta(hours=1))

    decision = await evaluator.evaluate(USER, CURRENCY, "60.00", NOW)

    assert decision is LimitDecision.DAILY_LIMIT_EXCEEDED


@pytest.mark.asyncio
async def test_reaching_the_daily_cap_exactly_is_allowed(evaluator, limits, transactions):
    await set_caps(limits, "200.00", "5000.00")
    await record(transactions, "150.00", NOW - timedelta(hours=1))

    assert await evaluator.evaluate(USER, CURRENCY, "50.00", NOW) is LimitDecision.ALLOWED
    assert await evaluator.evaluate(USER, CURRENCY, "50.01", NOW) is LimitDecision.DAILY_LIMIT_EXCEEDED


@pytest.mark.asyncio
async def test_yesterday_counts_toward_month_but_not_day(evaluator, limits, transactions):
    await set_caps(limits, "200.00", "300.00")
    await record(transactions, "250.00", NOW - timedelta(days=1))

    decision = await evaluator.evaluate(USER, CURRENCY, "60.00", NOW)

    assert decision is LimitDecision.MONTHLY_LIMIT_EXCEEDED


@pytest.mark.asyncio
async def test_daily_cap_is_reported_before_monthly(evaluator, limits, transactions):
    await set_caps(limits, "100.00", "100.00")

    decision = await evaluator.evaluate(USER, CURRENCY, "150.00", NOW)

    assert decision is LimitDecision.DAILY_LIMIT_EXCEEDED


@pytest.mark.asyncio
async def test_deposits_and_other_currencies_do_not_count(evaluator, limits, transactions):
    await set_caps(limits, "100.00", "100.00")
    await record(transactions, "500.00", NOW - timedelta(hours=1), type=TransactionType.DEPOSIT)
    await record(transactions, "500.00", NOW - timedelta(hours=1), currency_id="EUR")
    await record(transactions, "500.00", datetime(2024, 2, 29, 23, 59, tzinfo=timezone.utc))

    assert await evaluator.evaluate(USER, CURRENCY, "100.00", NOW) is LimitDecision.ALLOWED


@pytest.mark.asyncio
async def test_status_without_limits_reports_usage_only(evaluator, transactions):
    await record(transactions, "40.00", NOW - timedelta(hours=2))
    await record(transactions, "10.00", NOW - timedelta(days=3))

    status = await evaluator.status(USER, CURRENCY, NOW)

    assert status.daily_limit is None
    assert status.monthly_limit is None
    assert status.is_limited is False
    assert status.daily_remaining is None
    assert status.daily_used == Money.of("40.00")
    assert status.monthly_used == Money.of("50.00")


@pytest.mark.asyncio
async def test_status_reports_remaining_allowance(evaluator, limits, transactions):
    await set_caps(limits, "200.00", "1000.00")
    await record(transactions, "150.00", NOW - timedelta(hours=2))

    status = await evaluator.status(USER, CURRENCY, NOW)

    assert status.daily_remaining == Money.of("50.00")
    assert status.monthly_remaining == Money.of("850.00")


@pytest.mark.asyncio
async def test_remaining_allowance_is_floored_at_zero_after_cap_is_lowered(evaluator, limits, transactions):
    await set_caps(limits, "500.00", "1000.00")
    await record(transactions, "150.00", NOW - timedelta(hours=1))
    limit = await limits.get_by_user_and_currency(USER, CURRENCY)
    limit.update_limits("100.00", "120.00")
    await limits.update(limit)

    status = await evaluator.status(USER, CURRENCY, NOW)

    assert status.daily_used == Money.of("150.00")
    assert status.daily_remaining == Money.zero()
    assert status.monthly_remaining == Money.zero()
