"""The analyzer contract.

Any object with a ``name`` and an async ``analyze(context)`` returning
an AnalysisResult is an agent. Conformance is structural, so test
doubles can be plain classes.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from obex.models.context import AnalysisContext
from obex.models.insight import CamelModel, Insight

logger = logging.getLogger(__name__)


class AnalysisResult(CamelModel):
    """Output of one agent for one analysis pass."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    agent_name: str
    insights: list[Insight] = Field(
        default_factory=lambda: list[Insight]()
    )
    error: str | None = None
    metadata: dict[str, Any] = Field(
        default_factory=lambda: dict[str, Any]()
    )

    @property
    def ok(self) -> bool:
        return self.error is None


@runtime_checkable
class Agent(Protocol):
    """Pluggable analyzer over an AnalysisContext."""

    @property
    def name(self) -> str: ...

    async def analyze(
        self, context: AnalysisContext
    ) -> AnalysisResult: ...


def agent_label(agent: object) -> str:
    """Best-effort identity for logs and failure results.

    Falls back to the class name when ``name`` is unusable, including
    a ``name`` property that raises.
    """
    try:
        name = getattr(agent, "name", None)
    except Exception:
        logger.debug(
            "event=agent_name_unavailable agent=%s",
            type(agent).__name__,
            exc_info=True,
        )
        name = None
    if isinstance(name, str) and name:
        return name
    return type(agent).__name__
