"""Withdrawal endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from checking_accounts.domain.limits import LimitService
from checking_accounts.domain.transactions import TransactionService
from checking_accounts.domain.withdrawals import (
    Committed,
    FailureKind,
    Rejected,
    RejectionReason,
    WithdrawalService,
)
from checking_accounts.interfaces.http.deps import (
    get_authorized_user_id,
    get_limit_service,
    get_transaction_service,
    get_withdrawal_service,
)
from checking_accounts.schemas import (
    CURRENCY_PATTERN,
    ErrorResponse,
    TransactionListResponse,
    WithdrawalLimitResponse,
    WithdrawalLimitStatusResponse,
    WithdrawalLimitUpdate,
    WithdrawalRejectedResponse,
    WithdrawalRequest,
    WithdrawalResponse,
)

router = APIRouter()

_FAILURE_STATUS = {
    FailureKind.CONCURRENCY_CONFLICT: (status.HTTP_409_CONFLICT, "The account changed concurrently, please retry"),
    FailureKind.PERSISTENCE: (status.HTTP_503_SERVICE_UNAVAILABLE, "Internal error, please try again later"),
    FailureKind.PARTIAL_COMMIT: (status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal error, please try again later"),
}


@router.post(
    "/{user_id}/withdrawals",
    response_model=WithdrawalResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"model": WithdrawalRejectedResponse},
        409: {"model": ErrorResponse},
        422: {"model": WithdrawalRejectedResponse},
    },
    summary="Withdraw from a checking account",
)
async def create_withdrawal(
    payload: WithdrawalRequest,
    owner_id: str = Depends(get_authorized_user_id),
    service: WithdrawalService = Depends(get_withdrawal_service),
):
    result = await service.process_withdrawal(owner_id, payload.currency_id, payload.amount, payload.description)

    if isinstance(result, Committed):
        return WithdrawalResponse.from_domain(result.transaction)

    if isinstance(result, Rejected):
        code = (
            status.HTTP_404_NOT_FOUND
            if result.reason is RejectionReason.ACCOUNT_NOT_FOUND
            else status.HTTP_422_UNPROCESSABLE_ENTITY
        )
        body = WithdrawalRejectedResponse(detail=f"Cannot withdraw: {result.reason.value}", reason=result.reason.value)
        return JSONResponse(status_code=code, content=body.model_dump())

    code, detail = _FAILURE_STATUS[result.kind]
    raise HTTPException(status_code=code, detail=detail)


@router.get(
    "/{user_id}/withdrawals",
    response_model=TransactionListResponse,
    summary="Withdrawal history, newest first",
)
async def list_withdrawals(
    currency_id: str | None = Query(None, pattern=CURRENCY_PATTERN),
    offset: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    owner_id: str = Depends(get_authorized_user_id),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionListResponse:
    page = await service.list_withdrawals(owner_id, currency_id=currency_id, offset=offset, limit=limit)
    return TransactionListResponse.from_page(page)


@router.get(
    "/{user_id}/withdrawals/limits",
    response_model=WithdrawalLimitStatusResponse,
    summary="Configured caps and today's / this month's usage",
)
async def get_withdrawal_limits(
    currency_id: str = Query(..., pattern=CURRENCY_PATTERN),
    owner_id: str = Depends(get_authorized_user_id),
    service: WithdrawalService = Depends(get_withdrawal_service),
) -> WithdrawalLimitStatusResponse:
    limit_status = await service.get_withdrawal_limit_status(owner_id, currency_id)
    return WithdrawalLimitStatusResponse.from_domain(limit_status)


@router.put(
    "/{user_id}/withdrawals/limits",
    response_model=WithdrawalLimitResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Create or update withdrawal caps",
)
async def put_withdrawal_limits(
    payload: WithdrawalLimitUpdate,
    owner_id: str = Depends(get_authorized_user_id),
    service: LimitService = Depends(get_limit_service),
) -> WithdrawalLimitResponse:
    limit = await service.set_limits(owner_id, payload.currency_id, payload.daily_limit, payload.monthly_limit)
    return WithdrawalLimitResponse.from_domain(limit)
