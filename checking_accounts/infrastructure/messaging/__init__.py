"""Outbound event publishing."""

from .sinks import InMemoryEventSink, LoggingEventSink, build_event_sink

__all__ = ["InMemoryEventSink", "LoggingEventSink", "build_event_sink"]
