from fastapi import APIRouter

from checking_accounts.interfaces.http.routers import accounts, withdrawals


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(accounts.router, prefix="/users", tags=["accounts"])
    router.include_router(withdrawals.router, prefix="/users", tags=["withdrawals"])
    return router


__all__ = [
    "create_api_router",
]
