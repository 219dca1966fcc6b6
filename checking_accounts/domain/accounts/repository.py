"""Repository protocol for checking accounts."""

from __future__ import annotations

from typing import Protocol, Sequence

from .models import CheckingAccount


class AccountStore(Protocol):
    """Abstract repository interface for checking account persistence."""

    async def get_by_user_and_currency(self, user_id: str, currency_id: str) -> CheckingAccount | None:
        ...

    async def list_by_user(self, user_id: str) -> Sequence[CheckingAccount]:
        ...

    async def create(self, account: CheckingAccount) -> CheckingAccount:
        ...

    async def update(self, account: CheckingAccount, *, expected_version: int) -> CheckingAccount:
        """Persist ``account`` only if the stored version still equals ``expected_version``.

        Raises ``ConcurrencyConflictError`` when it does not. On success the
        returned account carries the incremented version.
        """
        ...
