"""Tests for the trace event dispatcher and console handler."""

from __future__ import annotations

import logging

import pytest

from obex.config import Settings
from obex.observability import initialize_tracing
from obex.observability.dispatcher import TraceDispatcher
from obex.observability.events import TraceEvent
from obex.observability.handlers.console import ConsoleTraceHandler

CONSOLE_LOGGER = "obex.observability.handlers.console"


class Collector:
    def __init__(self, name: str = "collector") -> None:
        self._name = name
        self.events: list[TraceEvent] = []

    @property
    def name(self) -> str:
        return self._name

    async def handle(self, event: TraceEvent) -> None:
        self.events.append(event)


class BadHandler:
    @property
    def name(self) -> str:
        return "bad"

    async def handle(self, event: TraceEvent) -> None:
        raise RuntimeError("handler crashed")


class TestTraceDispatcher:
    @pytest.mark.asyncio
    async def test_emit_fans_out(self) -> None:
        first, second = Collector("one"), Collector("two")
        dispatcher = TraceDispatcher()
        dispatcher.register(first)
        dispatcher.register(second)

        await dispatcher.emit(TraceEvent(type="analysis_start", trace_id="t1"))

        assert [e.trace_id for e in first.events] == ["t1"]
        assert [e.trace_id for e in second.events] == ["t1"]

    def test_duplicate_name_ignored(self) -> None:
        dispatcher = TraceDispatcher()
        dispatcher.register(Collector())
        dispatcher.register(Collector())
        assert dispatcher.handler_names == ["collector"]

    def test_unregister(self) -> None:
        dispatcher = TraceDispatcher()
        dispatcher.register(Collector())
        assert dispatcher.unregister("collector") is True
        assert dispatcher.unregister("collector") is False

    @pytest.mark.asyncio
    async def test_handler_error_does_not_propagate(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        after = Collector()
        dispatcher = TraceDispatcher()
        dispatcher.register(BadHandler())
        dispatcher.register(after)

        with caplog.at_level(logging.WARNING):
            await dispatcher.emit(
                TraceEvent(type="analysis_end", trace_id="t2")
            )

        assert len(after.events) == 1
        assert "event=trace_handler_error handler=bad" in caplog.text


class TestConsoleHandler:
    @pytest.mark.asyncio
    async def test_failed_agent_logs_warning(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        event = TraceEvent(
            type="agent_end",
            trace_id="t3",
            category="agent",
            data={"agent": "githubActions", "ok": False},
        )
        with caplog.at_level(logging.DEBUG):
            await ConsoleTraceHandler().handle(event)
        (record,) = [
            r for r in caplog.records if r.name == CONSOLE_LOGGER
        ]
        assert record.levelno == logging.WARNING
        assert "trace_type=agent_end" in record.getMessage()
        assert "agent=githubActions" in record.getMessage()

    @pytest.mark.asyncio
    async def test_normal_event_logs_debug(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.DEBUG):
            await ConsoleTraceHandler().handle(
                TraceEvent(type="analysis_start", trace_id="t4")
            )
        (record,) = [
            r for r in caplog.records if r.name == CONSOLE_LOGGER
        ]
        assert record.levelno == logging.DEBUG


class TestInitializeTracing:
    def test_console_registered_when_enabled(self) -> None:
        dispatcher = initialize_tracing(
            Settings(_env_file=None, trace_enabled=True)  # type: ignore[call-arg]
        )
        assert dispatcher.handler_names == ["console"]

    def test_no_handlers_when_disabled(self) -> None:
        dispatcher = initialize_tracing(
            Settings(_env_file=None, trace_enabled=False)  # type: ignore[call-arg]
        )
        assert dispatcher.handler_names == []
