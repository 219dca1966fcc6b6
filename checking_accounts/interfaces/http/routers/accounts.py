"""Balance and transaction history endpoints."""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from checking_accounts.domain.accounts import AccountService
from checking_accounts.domain.transactions import TransactionService
from checking_accounts.interfaces.http.deps import (
    get_account_service,
    get_authorized_user_id,
    get_transaction_service,
)
from checking_accounts.schemas import (
    CURRENCY_PATTERN,
    BalanceListResponse,
    BalanceResponse,
    ErrorResponse,
    TransactionListResponse,
)

router = APIRouter()


@router.get(
    "/{user_id}/balances",
    response_model=BalanceListResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Balances of the user's checking accounts",
)
async def get_balances(
    currency_id: Optional[str] = Query(None, pattern=CURRENCY_PATTERN),
    owner_id: str = Depends(get_authorized_user_id),
    service: AccountService = Depends(get_account_service),
) -> BalanceListResponse:
    if currency_id:
        accounts = [await service.get_account(owner_id, currency_id)]
    else:
        accounts = await service.list_accounts(owner_id)
    return BalanceListResponse(balances=[BalanceResponse.from_domain(account) for account in accounts])


@router.get(
    "/{user_id}/transactions",
    response_model=TransactionListResponse,
    summary="Ledger entries of the user, newest first",
)
async def list_transactions(
    currency_id: Optional[str] = Query(None, pattern=CURRENCY_PATTERN),
    start: Optional[datetime] = Query(None, description="Inclusive lower bound on created_at"),
    end: Optional[datetime] = Query(None, description="Exclusive upper bound on created_at"),
    offset: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    owner_id: str = Depends(get_authorized_user_id),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionListResponse:
    page = await service.list_transactions(
        owner_id,
        currency_id=currency_id,
        start=start,
        end=end,
        offset=offset,
        limit=limit,
    )
    return TransactionListResponse.from_page(page)
