"""SQLAlchemy ORM models."""
import uuid

from sqlalchemy import Column, DateTime, Index, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.sql import func

from checking_accounts.infrastructure.database.base import Base

AMOUNT = Numeric(18, 2, asdecimal=True)


def generate_uuid() -> str:
    return str(uuid.uuid4())


class CheckingAccountModel(Base):
    __tablename__ = "checking_accounts"
    __table_args__ = (UniqueConstraint("user_id", "currency_id", name="uq_checking_accounts_user_currency"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(128), nullable=False, index=True)
    currency_id = Column(String(10), nullable=False)
    balance = Column(AMOUNT, nullable=False, default=0)
    version = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class TransactionModel(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        Index("ix_transactions_user_currency_type_created", "user_id", "currency_id", "type", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    account_id = Column(String(36), nullable=False, index=True)
    user_id = Column(String(128), nullable=False, index=True)
    currency_id = Column(String(10), nullable=False)
    amount = Column(AMOUNT, nullable=False)
    type = Column(String(20), nullable=False)  # deposit, withdrawal
    description = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class WithdrawalLimitModel(Base):
    __tablename__ = "withdrawal_limits"
    __table_args__ = (UniqueConstraint("user_id", "currency_id", name="uq_withdrawal_limits_user_currency"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(128), nullable=False, index=True)
    currency_id = Column(String(10), nullable=False)
    daily_limit = Column(AMOUNT, nullable=False)
    monthly_limit = Column(AMOUNT, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
