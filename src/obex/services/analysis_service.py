"""Request-level analysis: run the orchestrator, record, store."""

from __future__ import annotations

import logging
import time
import uuid

from obex.logger import AgentLogger
from obex.models.context import AnalysisContext
from obex.models.insight import Insight
from obex.orchestration.service import (
    AnalyzeOptions,
    Orchestrator,
    flatten,
)
from obex.repositories.protocols import InsightRepository

logger = logging.getLogger(__name__)


class AnalysisService:
    def __init__(
        self,
        orchestrator: Orchestrator,
        repo: InsightRepository,
        agent_logger: AgentLogger | None = None,
        default_min_confidence: int | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._repo = repo
        self._agent_logger = agent_logger
        self._default_min_confidence = default_min_confidence

    async def run(
        self,
        context: AnalysisContext,
        agent_ids: list[str] | None = None,
        default_event_type: str | None = None,
    ) -> list[Insight]:
        """Analyze ``context`` and save what was found.

        ``default_event_type`` applies only when the context has none.
        """
        if context.event_type is None and default_event_type:
            context = context.with_updates(event_type=default_event_type)

        request_id = uuid.uuid4().hex[:12]
        start = time.monotonic()
        results = await self._orchestrator.analyze(
            context,
            AnalyzeOptions(
                agent_ids=agent_ids,
                min_confidence=self._default_min_confidence,
            ),
        )
        insights = flatten(results)
        await self._repo.save_many(insights)

        duration_ms = round((time.monotonic() - start) * 1000, 2)
        if self._agent_logger:
            for result in results:
                if result.error:
                    self._agent_logger.log_error(
                        request_id,
                        result.agent_name,
                        result.error,
                        error_class=result.metadata.get("error_class"),
                    )
            self._agent_logger.log_analysis(
                request_id=request_id,
                event_type=context.event_type or "general",
                agents=[r.agent_name for r in results],
                insight_count=len(insights),
                duration_ms=duration_ms,
            )
        logger.info(
            "event=analysis_request request_id=%s event_type=%s"
            " insights=%d duration_ms=%.1f",
            request_id,
            context.event_type or "general",
            len(insights),
            duration_ms,
        )
        return insights
