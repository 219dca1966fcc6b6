"""SQLAlchemy implementation of the checking account store."""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from checking_accounts.domain.accounts.models import CheckingAccount
from checking_accounts.domain.common import ConcurrencyConflictError, PersistenceError, as_utc
from checking_accounts.infrastructure.database.models import CheckingAccountModel

from .base import store_errors, to_money


class SqlAccountRepository:
    """Checking account store backed by SQLAlchemy models."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_user_and_currency(self, user_id: str, currency_id: str) -> CheckingAccount | None:
        stmt = (
            select(CheckingAccountModel)
            .where(
                CheckingAccountModel.user_id == user_id,
                CheckingAccountModel.currency_id == currency_id,
            )
            .execution_options(populate_existing=True)
        )
        with store_errors("load checking account"):
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def list_by_user(self, user_id: str) -> Sequence[CheckingAccount]:
        stmt = (
            select(CheckingAccountModel)
            .where(CheckingAccountModel.user_id == user_id)
            .order_by(CheckingAccountModel.currency_id)
            .execution_options(populate_existing=True)
        )
        with store_errors("list checking accounts"):
            result = await self._session.execute(stmt)
            models = result.scalars().all()
        return [self._to_domain(model) for model in models]

    async def create(self, account: CheckingAccount) -> CheckingAccount:
        model = CheckingAccountModel(
            id=account.id,
            user_id=account.user_id,
            currency_id=account.currency_id,
            balance=account.balance.amount,
            version=account.version,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )
        self._session.add(model)
        try:
            with store_errors("create checking account"):
                await self._session.flush()
        except PersistenceError as exc:
            if isinstance(exc.__cause__, IntegrityError):
                raise PersistenceError(
                    f"Checking account already exists for user {account.user_id} in {account.currency_id}"
                ) from exc.__cause__
            raise
        return account

    async def update(self, account: CheckingAccount, *, expected_version: int) -> CheckingAccount:
        stmt = (
            update(CheckingAccountModel)
            .where(
                CheckingAccountModel.id == account.id,
                CheckingAccountModel.version == expected_version,
            )
            .values(
                balance=account.balance.amount,
                version=expected_version + 1,
                updated_at=account.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        with store_errors("update checking account"):
            result = await self._session.execute(stmt)
        if result.rowcount != 1:
            raise ConcurrencyConflictError(
                f"Account {account.id} changed since version {expected_version} was read"
            )
        account.version = expected_version + 1
        return account

    @staticmethod
    def _to_domain(model: CheckingAccountModel) -> CheckingAccount:
        return CheckingAccount.rehydrate(
            id=str(model.id),
            user_id=model.user_id,
            currency_id=model.currency_id,
            balance=to_money(model.balance),
            version=int(model.version or 0),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )
