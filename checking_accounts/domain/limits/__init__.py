"""Withdrawal limit domain exports"""

from .evaluator import LimitDecision, LimitEvaluator, day_window, month_window
from .models import LimitStatus, WithdrawalLimit
from .repository import LimitStore
from .service import LimitService

__all__ = [
    "LimitDecision",
    "LimitEvaluator",
    "LimitService",
    "LimitStatus",
    "LimitStore",
    "WithdrawalLimit",
    "day_window",
    "month_window",
]
