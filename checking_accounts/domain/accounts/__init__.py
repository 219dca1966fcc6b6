"""Checking account domain exports"""

from .models import CheckingAccount
from .repository import AccountStore
from .service import AccountService

__all__ = [
    "AccountService",
    "AccountStore",
    "CheckingAccount",
]
