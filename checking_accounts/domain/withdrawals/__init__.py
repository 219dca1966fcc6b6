"""Withdrawal domain exports"""

from .events import DomainEvent, EventSink, WithdrawalCompleted, WithdrawalRejected
from .results import (
    Committed,
    Failed,
    FailureKind,
    Rejected,
    RejectionReason,
    WithdrawalCheck,
    WithdrawalResult,
    unwrap,
)
from .service import WithdrawalService

__all__ = [
    "Committed",
    "DomainEvent",
    "EventSink",
    "Failed",
    "FailureKind",
    "Rejected",
    "RejectionReason",
    "WithdrawalCheck",
    "WithdrawalCompleted",
    "WithdrawalRejected",
    "WithdrawalResult",
    "WithdrawalService",
    "unwrap",
]
