"""Observability layer -- event dispatcher + pluggable handlers."""

from __future__ import annotations

from obex.config import Settings
from obex.observability.dispatcher import TraceDispatcher
from obex.observability.events import (
    TraceCategory,
    TraceEvent,
    TraceEventType,
)
from obex.observability.handlers.console import ConsoleTraceHandler

__all__ = [
    "TraceCategory",
    "TraceDispatcher",
    "TraceEvent",
    "TraceEventType",
    "initialize_tracing",
]


def initialize_tracing(settings: Settings) -> TraceDispatcher:
    """Create a dispatcher and register handlers based on settings."""
    dispatcher = TraceDispatcher()
    if settings.trace_enabled:
        dispatcher.register(ConsoleTraceHandler())
    return dispatcher
