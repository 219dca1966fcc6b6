"""Transaction ledger domain exports"""

from .ledger import LedgerWriter
from .models import Transaction, TransactionPage, TransactionQuery, TransactionType
from .repository import TransactionStore
from .service import TransactionService

__all__ = [
    "LedgerWriter",
    "Transaction",
    "TransactionPage",
    "TransactionQuery",
    "TransactionService",
    "TransactionStore",
    "TransactionType",
]
