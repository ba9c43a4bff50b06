"""Typed convenience functions for emitting analysis trace events."""

from __future__ import annotations

from obex.observability.dispatcher import TraceDispatcher
from obex.observability.events import TraceEvent


async def emit_analysis_start(
    dispatcher: TraceDispatcher,
    trace_id: str,
    agents: list[str],
    event_type: str | None,
) -> None:
    await dispatcher.emit(
        TraceEvent(
            type="analysis_start",
            trace_id=trace_id,
            category="analysis",
            data={
                "agents": ",".join(agents),
                "event_type": event_type or "general",
            },
        )
    )


async def emit_agent_end(
    dispatcher: TraceDispatcher,
    trace_id: str,
    agent: str,
    duration_ms: float,
    insight_count: int,
    error: str | None = None,
) -> None:
    await dispatcher.emit(
        TraceEvent(
            type="agent_end",
            trace_id=trace_id,
            category="agent",
            data={
                "agent": agent,
                "duration_ms": round(duration_ms, 2),
                "insights": insight_count,
                "ok": error is None,
                "error": error,
            },
        )
    )


async def emit_enrichment_end(
    dispatcher: TraceDispatcher,
    trace_id: str,
    duration_ms: float,
    insight_count: int,
) -> None:
    await dispatcher.emit(
        TraceEvent(
            type="enrichment_end",
            trace_id=trace_id,
            category="enrichment",
            data={
                "duration_ms": round(duration_ms, 2),
                "insights": insight_count,
            },
        )
    )


async def emit_analysis_end(
    dispatcher: TraceDispatcher,
    trace_id: str,
    duration_ms: float,
    insight_count: int,
    failed_agents: int,
) -> None:
    await dispatcher.emit(
        TraceEvent(
            type="analysis_end",
            trace_id=trace_id,
            category="analysis",
            data={
                "duration_ms": round(duration_ms, 2),
                "insights": insight_count,
                "failed_agents": failed_agents,
            },
        )
    )
