from datetime import timedelta

import pytest
from jose import jwt

from checking_accounts.core.config import SecuritySettings, Settings
from checking_accounts.core.security import AuthenticationError, AuthGate


@pytest.fixture
def gate():
    return AuthGate(SecuritySettings(secret_key="gate-test-secret", audience="checking", issuer="auth.local"))


def test_issued_token_verifies_to_user(gate):
    assert gate.verify(gate.issue("user-42")) == "user-42"


def test_expired_token_is_refused(gate):
    token = gate.issue("user-42", expires_delta=timedelta(seconds=-5))

    with pytest.raises(AuthenticationError):
        gate.verify(token)


def test_wrong_audience_is_refused(gate):
    other = AuthGate(SecuritySettings(secret_key="gate-test-secret", audience="billing", issuer="auth.local"))

    with pytest.raises(AuthenticationError):
        gate.verify(other.issue("user-42"))


def test_token_without_subject_is_refused(gate):
    token = jwt.encode({"aud": "checking", "iss": "auth.local"}, "gate-test-secret", algorithm="HS256")

    with pytest.raises(AuthenticationError, match="no user id"):
        gate.verify(token)


def test_nested_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("WITHDRAWALS__MAX_ATTEMPTS", "5")
    monkeypatch.setenv("DATABASE__URL", "sqlite+aiosqlite:///./other.db")
    monkeypatch.setenv("EVENTS__SINK", "memory")

    settings = Settings()

    assert settings.max_withdrawal_attempts == 5
    assert settings.database_url == "sqlite+aiosqlite:///./other.db"
    assert settings.events.sink == "memory"
