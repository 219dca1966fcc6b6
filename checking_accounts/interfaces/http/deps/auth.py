"""Authentication dependencies backed by the AuthGate."""

from fastapi import Depends, HTTPException, Path, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from checking_accounts.core.container import ApplicationContainer
from checking_accounts.core.security import AuthenticationError

from .container import get_app_container

bearer = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    container: ApplicationContainer = Depends(get_app_container),
) -> str:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return container.auth_gate.verify(credentials.credentials)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


async def get_authorized_user_id(
    user_id: str = Path(..., min_length=1, max_length=128),
    current_user_id: str = Depends(get_current_user_id),
) -> str:
    """The path user, provided it is the one the token was issued for."""
    if user_id != current_user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Token does not grant access to this user")
    return user_id


__all__ = ["get_authorized_user_id", "get_current_user_id"]
