"""Event sink implementations for withdrawal notifications."""

from __future__ import annotations

import json
import logging

from checking_accounts.core.config import Settings
from checking_accounts.domain.withdrawals.events import DomainEvent, EventSink

logger = logging.getLogger(__name__)


class LoggingEventSink:
    """Writes each event as one JSON line to a dedicated logger."""

    def __init__(self, logger_name: str = "checking_accounts.events") -> None:
        self._logger = logging.getLogger(logger_name)

    async def publish(self, event: DomainEvent) -> None:
        self._logger.info(json.dumps(event.to_payload(), separators=(",", ":")))


class InMemoryEventSink:
    """Keeps published events in order of publication."""

    def __init__(self) -> None:
        self.events: list[DomainEvent] = []

    async def publish(self, event: DomainEvent) -> None:
        self.events.append(event)
        logger.debug("Captured %s %s", event.event_type, event.id)

    def of_type(self, event_cls: type[DomainEvent]) -> list[DomainEvent]:
        return [event for event in self.events if isinstance(event, event_cls)]

    def clear(self) -> None:
        self.events.clear()


def build_event_sink(settings: Settings) -> EventSink:
    if settings.events.sink == "memory":
        return InMemoryEventSink()
    return LoggingEventSink(settings.events.logger_name)


__all__ = ["InMemoryEventSink", "LoggingEventSink", "build_event_sink"]
