"""Unit of work protocol shared by the write paths."""

from __future__ import annotations

from typing import Protocol


class UnitOfWork(Protocol):
    """Makes the store writes of one operation durable together."""

    async def commit(self) -> None:
        ...

    async def rollback(self) -> None:
        ...
