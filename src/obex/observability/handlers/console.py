"""Console trace handler -- key=value log output."""

from __future__ import annotations

import logging

from obex.observability.events import TraceEvent

logger = logging.getLogger(__name__)


class ConsoleTraceHandler:
    """Logs trace events as key=value messages.

    Failed agents log at WARNING, everything else at DEBUG.
    """

    @property
    def name(self) -> str:
        return "console"

    async def handle(self, event: TraceEvent) -> None:
        parts = [
            f"trace_type={event.type}",
            f"trace_id={event.trace_id}",
        ]
        parts.extend(f"{k}={v}" for k, v in event.data.items())
        logger.log(
            logging.WARNING if event.failed else logging.DEBUG,
            " ".join(parts),
        )
