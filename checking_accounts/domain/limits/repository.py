"""Repository protocol for withdrawal limits."""

from __future__ import annotations

from typing import Protocol

from .models import WithdrawalLimit


class LimitStore(Protocol):
    async def get_by_user_and_currency(self, user_id: str, currency_id: str) -> WithdrawalLimit | None:
        ...

    async def create(self, limit: WithdrawalLimit) -> WithdrawalLimit:
        ...

    async def update(self, limit: WithdrawalLimit) -> WithdrawalLimit:
        ...
