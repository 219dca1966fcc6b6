"""Simple dependency container for wiring core services."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from checking_accounts.core.config import Settings, get_settings
from checking_accounts.core.security import AuthGate
from checking_accounts.domain.withdrawals.events import EventSink
from checking_accounts.infrastructure.database.session import get_engine
from checking_accounts.infrastructure.messaging import build_event_sink


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    events: EventSink
    auth_gate: AuthGate

    def init_infrastructure(self) -> None:
        """Ensure infrastructure singletons (database engine, etc.) are initialised."""
        get_engine()


def build_container(settings: Settings) -> ApplicationContainer:
    return ApplicationContainer(
        settings=settings,
        events=build_event_sink(settings),
        auth_gate=AuthGate(settings.security),
    )


@lru_cache()
def get_container() -> ApplicationContainer:
    container = build_container(get_settings())
    container.init_infrastructure()
    return container


__all__ = ["ApplicationContainer", "build_container", "get_container"]
