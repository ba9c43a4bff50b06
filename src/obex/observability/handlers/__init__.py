"""Pluggable trace handler backends."""

from __future__ import annotations

from typing import Protocol

from obex.observability.events import TraceEvent


class TraceHandler(Protocol):
    """A sink for analysis trace events."""

    @property
    def name(self) -> str: ...

    async def handle(self, event: TraceEvent) -> None: ...
