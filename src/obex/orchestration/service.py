"""Run registered agents over a context and merge their findings.

An Orchestrator owns its agent registry. It is built once per process
(FastAPI lifespan, CLI invocation) and passed explicitly to whatever
needs it; there is no module-level instance.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from pathlib import PurePath
from typing import Any

from obex.agents.base import Agent, AnalysisResult, agent_label
from obex.agents.github_actions import GitHubActionsWorkflowAgent
from obex.config import (
    AGENT_IDS,
    FILE_ANALYSIS_AGENTS,
    PULL_REQUEST_AGENTS,
    WORKFLOW_AGENTS,
)
from obex.constants import InsightLevel
from obex.explainability.engine import ExplainabilityEngine
from obex.models.context import (
    AnalysisContext,
    FileContext,
    GitHubActionsContext,
    WorkflowDefinition,
)
from obex.models.insight import Insight
from obex.observability.dispatcher import TraceDispatcher
from obex.observability.emitters import (
    emit_agent_end,
    emit_analysis_end,
    emit_analysis_start,
    emit_enrichment_end,
)
from obex.resilience.errors import classify_error, describe_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyzeOptions:
    """Selection and filtering for one analysis pass.

    ``agent_ids`` None or empty means every registered agent.
    """

    level: InsightLevel | None = None
    agent_ids: list[str] | None = None
    min_confidence: int | None = None


class Orchestrator:
    """Selects agents, runs them concurrently, filters and enriches."""

    def __init__(
        self,
        engine: ExplainabilityEngine | None = None,
        dispatcher: TraceDispatcher | None = None,
    ) -> None:
        self._agents: dict[str, Agent] = {}
        self._engine = engine or ExplainabilityEngine()
        self._dispatcher = dispatcher

    # ── Registry ─────────────────────────────────────────

    def register_agent(self, agent_id: str, agent: Agent) -> None:
        """Register (or replace) the agent stored under ``agent_id``."""
        self._agents[agent_id] = agent

    def remove_agent(self, agent_id: str) -> bool:
        return self._agents.pop(agent_id, None) is not None

    def registered_agents(self) -> list[str]:
        return list(self._agents)

    def select_agents(
        self, agent_ids: list[str] | None
    ) -> list[tuple[str, Agent]]:
        """Resolve requested ids; unknown ids are dropped with a warning."""
        if not agent_ids:
            return list(self._agents.items())

        missing = [a for a in agent_ids if a not in self._agents]
        if missing:
            logger.warning(
                "event=agents_not_found requested=%s missing=%s",
                ",".join(agent_ids),
                ",".join(missing),
            )
        return [(a, self._agents[a]) for a in agent_ids if a in self._agents]

    # ── Analysis ─────────────────────────────────────────

    async def analyze(
        self,
        context: AnalysisContext,
        options: AnalyzeOptions | None = None,
    ) -> list[AnalysisResult]:
        """One analysis pass: select, fan out, join, filter, enrich.

        Results mirror the resolved selection order. A failing agent
        yields an empty result carrying ``error``; its siblings are
        unaffected.
        """
        opts = options or AnalyzeOptions()
        trace_id = uuid.uuid4().hex[:12]
        start = time.monotonic()

        selected = self.select_agents(opts.agent_ids)
        logger.info(
            "event=analysis_start trace_id=%s agents=%d registered=%d",
            trace_id,
            len(selected),
            len(self._agents),
        )
        if self._dispatcher:
            await emit_analysis_start(
                self._dispatcher,
                trace_id,
                [agent_id for agent_id, _ in selected],
                context.event_type,
            )

        results = list(
            await asyncio.gather(
                *(
                    self._run_agent(agent_id, agent, context, trace_id)
                    for agent_id, agent in selected
                )
            )
        )

        results = [filter_result(r, opts) for r in results]
        enrich_start = time.monotonic()
        results = [self._enrich(r, context) for r in results]
        if self._dispatcher:
            await emit_enrichment_end(
                self._dispatcher,
                trace_id,
                (time.monotonic() - enrich_start) * 1000,
                sum(len(r.insights) for r in results),
            )

        duration_ms = (time.monotonic() - start) * 1000
        total = sum(len(r.insights) for r in results)
        failed = sum(1 for r in results if not r.ok)
        logger.info(
            "event=analysis_complete trace_id=%s duration_ms=%.1f"
            " insights=%d agents=%d failed=%d",
            trace_id,
            duration_ms,
            total,
            len(results),
            failed,
        )
        if self._dispatcher:
            await emit_analysis_end(
                self._dispatcher, trace_id, duration_ms, total, failed
            )
        return results

    async def _run_agent(
        self,
        agent_id: str,
        agent: Agent,
        context: AnalysisContext,
        trace_id: str,
    ) -> AnalysisResult:
        """Run one agent; any exception becomes an error result."""
        label = agent_label(agent)
        start = time.monotonic()
        try:
            result = await agent.analyze(context)
            if not isinstance(result, AnalysisResult):
                msg = (
                    "analyze() returned "
                    f"{type(result).__name__}, not AnalysisResult"
                )
                raise TypeError(msg)
        except Exception as exc:
            error_class = classify_error(exc)
            message = describe_error(exc)
            logger.warning(
                "event=agent_failed agent_id=%s agent=%s"
                " error_class=%s error=%s",
                agent_id,
                label,
                error_class.value,
                message,
            )
            result = AnalysisResult(
                agent_name=label,
                error=f"{label}: {message}",
                metadata={
                    "agent_id": agent_id,
                    "error_class": error_class.value,
                },
            )

        if self._dispatcher:
            await emit_agent_end(
                self._dispatcher,
                trace_id,
                agent_id,
                (time.monotonic() - start) * 1000,
                len(result.insights),
                result.error,
            )
        return result

    def _enrich(
        self, result: AnalysisResult, context: AnalysisContext
    ) -> AnalysisResult:
        if not result.insights:
            return result
        enriched = self._engine.enhance_explanations(
            result.insights, context
        )
        return result.model_copy(update={"insights": enriched})

    # ── Preset compositions ──────────────────────────────

    async def analyze_file(
        self,
        file_path: str,
        file_content: str,
        context: AnalysisContext,
    ) -> list[Insight]:
        file_context = context.with_updates(
            file=FileContext(path=file_path, content=file_content)
        )
        results = await self.analyze(
            file_context, AnalyzeOptions(agent_ids=FILE_ANALYSIS_AGENTS)
        )
        return flatten(results)

    async def analyze_pull_request(
        self,
        pull_request: dict[str, Any],
        context: AnalysisContext,
    ) -> list[Insight]:
        pr_context = context.with_updates(pull_request=pull_request)
        results = await self.analyze(
            pr_context,
            AnalyzeOptions(
                level=InsightLevel.MESO, agent_ids=PULL_REQUEST_AGENTS
            ),
        )
        return flatten(results)

    async def analyze_workflow(
        self,
        workflow_path: str,
        workflow_content: str,
        context: AnalysisContext,
    ) -> list[Insight]:
        workflow = WorkflowDefinition(
            name=PurePath(workflow_path).name,
            path=workflow_path,
            content=workflow_content,
        )
        workflow_context = context.with_updates(
            github_actions=GitHubActionsContext(
                available=True, workflows=[workflow]
            )
        )
        results = await self.analyze(
            workflow_context, AnalyzeOptions(agent_ids=WORKFLOW_AGENTS)
        )
        return flatten(results)


def filter_result(
    result: AnalysisResult, options: AnalyzeOptions
) -> AnalysisResult:
    """Apply level and min-confidence filters; returns a new result."""
    if options.level is None and options.min_confidence is None:
        return result
    kept = [
        i
        for i in result.insights
        if (options.level is None or i.level == options.level)
        and (
            options.min_confidence is None
            or i.confidence >= options.min_confidence
        )
    ]
    return result.model_copy(update={"insights": kept})


def flatten(results: list[AnalysisResult]) -> list[Insight]:
    return [i for r in results for i in r.insights]


def create_default_orchestrator(
    disabled: list[str] | None = None,
    dispatcher: TraceDispatcher | None = None,
) -> Orchestrator:
    """Orchestrator with every built-in agent not listed in ``disabled``."""
    orchestrator = Orchestrator(dispatcher=dispatcher)
    skip = set(disabled or [])
    builtin: dict[str, Agent] = {
        AGENT_IDS["GITHUB_ACTIONS"]: GitHubActionsWorkflowAgent(),
    }
    for agent_id, agent in builtin.items():
        if agent_id not in skip:
            orchestrator.register_agent(agent_id, agent)
    return orchestrator
