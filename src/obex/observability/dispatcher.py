"""Fan-out dispatcher for analysis trace events."""

from __future__ import annotations

import logging

from obex.observability.events import TraceEvent
from obex.observability.handlers import TraceHandler

logger = logging.getLogger(__name__)


class TraceDispatcher:
    """Delivers each event to every registered handler, in order.

    Delivery is best-effort: a failing handler is logged and skipped,
    and never interrupts the analysis pass that emitted the event.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, TraceHandler] = {}

    def register(self, handler: TraceHandler) -> None:
        """Register a handler; a second handler with the same name is ignored."""
        self._handlers.setdefault(handler.name, handler)

    def unregister(self, name: str) -> bool:
        return self._handlers.pop(name, None) is not None

    async def emit(self, event: TraceEvent) -> None:
        for name, handler in list(self._handlers.items()):
            try:
                await handler.handle(event)
            except Exception:
                logger.warning(
                    "event=trace_handler_error handler=%s trace_type=%s",
                    name,
                    event.type,
                    exc_info=True,
                )

    @property
    def handler_names(self) -> list[str]:
        return list(self._handlers)
