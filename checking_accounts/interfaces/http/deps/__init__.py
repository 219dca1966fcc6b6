"""Reusable FastAPI dependencies."""

from .auth import get_authorized_user_id, get_current_user_id
from .container import get_app_container
from .database import get_db_session
from .services import (
    get_account_service,
    get_limit_service,
    get_transaction_service,
    get_withdrawal_service,
)

__all__ = [
    "get_account_service",
    "get_app_container",
    "get_authorized_user_id",
    "get_current_user_id",
    "get_db_session",
    "get_limit_service",
    "get_transaction_service",
    "get_withdrawal_service",
]
