"""Mapping of domain exceptions onto HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from checking_accounts.domain.common import (
    AccountNotFoundError,
    ConcurrencyConflictError,
    InvalidRequestError,
    PartialCommitInconsistencyError,
    PersistenceError,
    WithdrawalDeniedError,
)

logger = logging.getLogger(__name__)


async def _invalid_request(request: Request, exc: InvalidRequestError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


async def _withdrawal_denied(request: Request, exc: WithdrawalDeniedError) -> JSONResponse:
    code = status.HTTP_404_NOT_FOUND if isinstance(exc, AccountNotFoundError) else status.HTTP_422_UNPROCESSABLE_ENTITY
    return JSONResponse(status_code=code, content={"detail": str(exc), "reason": exc.reason})


async def _conflict(request: Request, exc: ConcurrencyConflictError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": "The account changed concurrently, please retry"},
    )


async def _persistence(request: Request, exc: PersistenceError) -> JSONResponse:
    if isinstance(exc, PartialCommitInconsistencyError):
        logger.critical("Partial commit surfaced on %s %s: %s", request.method, request.url.path, exc)
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    else:
        logger.error("Persistence failure on %s %s: %s", request.method, request.url.path, exc)
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(status_code=code, content={"detail": "Internal error, please try again later"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InvalidRequestError, _invalid_request)
    app.add_exception_handler(WithdrawalDeniedError, _withdrawal_denied)
    app.add_exception_handler(ConcurrencyConflictError, _conflict)
    app.add_exception_handler(PersistenceError, _persistence)


__all__ = ["register_exception_handlers"]
