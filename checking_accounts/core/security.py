"""Bearer token verification (the AuthGate) and JWT helpers."""
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt

from checking_accounts.core.config import SecuritySettings


class AuthenticationError(Exception):
    """Raised when a bearer token cannot be verified."""


class AuthGate:
    """Verifies bearer tokens and yields the user id they were issued for."""

    def __init__(self, settings: SecuritySettings) -> None:
        self._settings = settings

    def verify(self, token: str) -> str:
        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key,
                algorithms=self._settings.algorithms,
                audience=self._settings.audience,
                issuer=self._settings.issuer,
                options={"verify_aud": self._settings.audience is not None},
            )
        except JWTError as exc:
            raise AuthenticationError("Could not validate credentials") from exc

        user_id = payload.get(self._settings.user_id_claim)
        if not user_id or not isinstance(user_id, str):
            raise AuthenticationError("Token carries no user id")
        return user_id

    def issue(self, user_id: str, expires_delta: Optional[timedelta] = None, **claims: Any) -> str:
        """Sign a token for ``user_id``. Used by local tooling and tests."""
        payload: dict[str, Any] = {
            self._settings.user_id_claim: user_id,
            "exp": datetime.now(timezone.utc) + (expires_delta or timedelta(hours=1)),
        }
        if self._settings.audience is not None:
            payload["aud"] = self._settings.audience
        if self._settings.issuer is not None:
            payload["iss"] = self._settings.issuer
        payload.update(claims)
        return jwt.encode(payload, self._settings.secret_key, algorithm=self._settings.algorithms[0])
