"""Shared value objects composed by the domain entities."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def generate_id() -> str:
    return str(uuid.uuid4())


@dataclass(slots=True)
class AuditFields:
    created_at: datetime
    updated_at: datetime

    @classmethod
    def new(cls, now: Optional[datetime] = None) -> "AuditFields":
        stamp = as_utc(now) if now is not None else utcnow()
        return cls(created_at=stamp, updated_at=stamp)

    def touch(self, now: Optional[datetime] = None) -> None:
        self.updated_at = as_utc(now) if now is not None else utcnow()

    def copy(self) -> "AuditFields":
        return AuditFields(created_at=self.created_at, updated_at=self.updated_at)
