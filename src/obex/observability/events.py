"""Trace events for one analysis pass.

A pass emits ``analysis_start``, one ``agent_end`` per selected agent,
one ``enrichment_end`` and finally ``analysis_end``, all sharing the
pass's ``trace_id``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Literal

TraceEventType = Literal[
    "analysis_start",
    "agent_end",
    "enrichment_end",
    "analysis_end",
]

TraceCategory = Literal["analysis", "agent", "enrichment"]


@dataclass(frozen=True)
class TraceEvent:
    type: TraceEventType
    trace_id: str
    category: TraceCategory = "analysis"
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def failed(self) -> bool:
        return self.data.get("ok") is False
