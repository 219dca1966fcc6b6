"""Helpers shared by the SQLAlchemy repositories."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from checking_accounts.domain.common import CENT, Money, PersistenceError

logger = logging.getLogger(__name__)


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Translate SQLAlchemy failures into ``PersistenceError``."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Database error while trying to %s: %s", action, exc)
        raise PersistenceError(f"Could not {action}") from exc


def to_money(value: Any) -> Money:
    if value is None:
        return Money.zero()
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return Money(value.quantize(CENT))


class SqlUnitOfWork:
    """Commits or rolls back everything flushed through one session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def commit(self) -> None:
        with store_errors("commit"):
            await self._session.commit()

    async def rollback(self) -> None:
        with store_errors("roll back"):
            await self._session.rollback()
