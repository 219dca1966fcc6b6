import json
import logging

import pytest

from checking_accounts.core.config import Settings
from checking_accounts.domain.common import Money
from checking_accounts.domain.transactions import Transaction, TransactionType
from checking_accounts.domain.withdrawals import WithdrawalCompleted, WithdrawalRejected
from checking_accounts.infrastructure.messaging import InMemoryEventSink, LoggingEventSink, build_event_sink


def make_transaction():
    return Transaction.record(
        account_id="acc-1",
        user_id="user-1",
        currency_id="USD",
        amount="12.50",
        type=TransactionType.WITHDRAWAL,
        description="Lunch",
    )


def test_completed_payload_uses_camel_case():
    transaction = make_transaction()

    payload = WithdrawalCompleted.from_transaction(transaction).to_payload()

    assert payload["eventType"] == "WithdrawalCompleted"
    assert payload["transactionId"] == transaction.id
    assert payload["accountId"] == "acc-1"
    assert payload["amount"] == "12.50"
    assert payload["createdAt"] == transaction.created_at.isoformat()


@pytest.mark.asyncio
async def test_logging_sink_writes_one_json_line(caplog):
    sink = LoggingEventSink("tests.events")
    event = WithdrawalRejected(user_id="user-1", currency_id="USD", amount=Money.of("5"), reason="Insufficient funds")

    with caplog.at_level(logging.INFO, logger="tests.events"):
        await sink.publish(event)

    (record,) = [record for record in caplog.records if record.name == "tests.events"]
    body = json.loads(record.getMessage())
    assert body["eventType"] == "WithdrawalRejected"
    assert body["reason"] == "Insufficient funds"
    assert body["amount"] == "5.00"


@pytest.mark.asyncio
async def test_memory_sink_filters_by_type():
    sink = InMemoryEventSink()
    await sink.publish(WithdrawalCompleted.from_transaction(make_transaction()))
    await sink.publish(WithdrawalRejected(user_id="u", currency_id="USD", amount=Money.of("1"), reason="x"))

    assert len(sink.of_type(WithdrawalRejected)) == 1
    sink.clear()
    assert sink.events == []


def test_sink_is_chosen_from_settings():
    assert isinstance(build_event_sink(Settings(events={"sink": "memory"})), InMemoryEventSink)
    assert isinstance(build_event_sink(Settings()), LoggingEventSink)
