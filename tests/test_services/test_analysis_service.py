"""Tests for request-level analysis: defaults, storage, file logging."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from obex.agents.base import AnalysisResult
from obex.logger import AgentLogger
from obex.models.context import AnalysisContext
from obex.orchestration.service import Orchestrator, create_default_orchestrator
from obex.repositories.memory import InMemoryInsightRepository
from obex.services.analysis_service import AnalysisService
from tests.conftest import (
    TIMESTAMP,
    UNPINNED_WORKFLOW,
    make_context,
    make_workflow,
)


class RecordingAgent:
    name = "Recorder"

    def __init__(self) -> None:
        self.seen: list[AnalysisContext] = []

    async def analyze(self, context: AnalysisContext) -> AnalysisResult:
        self.seen.append(context)
        return AnalysisResult(agent_name=self.name)


class FailingAgent:
    name = "Failing"

    async def analyze(self, context: AnalysisContext) -> AnalysisResult:
        raise RuntimeError("boom")


@pytest.fixture
def agent_logger(tmp_path: Path) -> Iterator[AgentLogger]:
    logger = logging.getLogger("obex.analysis")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    yield AgentLogger(log_dir=tmp_path, level="INFO")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def _log_lines(tmp_path: Path) -> list[dict[str, object]]:
    text = (tmp_path / "analysis.log").read_text(encoding="utf-8")
    return [json.loads(line) for line in text.splitlines() if line]


class TestAnalysisService:
    @pytest.mark.asyncio
    async def test_insights_are_saved(self) -> None:
        repo = InMemoryInsightRepository()
        service = AnalysisService(create_default_orchestrator(), repo)
        insights = await service.run(
            make_context(make_workflow(UNPINNED_WORKFLOW))
        )
        assert len(insights) == 1
        assert await repo.get(insights[0].id) == insights[0]

    @pytest.mark.asyncio
    async def test_default_event_type_only_when_absent(self) -> None:
        agent = RecordingAgent()
        orch = Orchestrator()
        orch.register_agent("rec", agent)
        service = AnalysisService(orch, InMemoryInsightRepository())

        await service.run(
            AnalysisContext(timestamp=TIMESTAMP),
            default_event_type="taskStart",
        )
        await service.run(
            AnalysisContext(timestamp=TIMESTAMP, event_type="save"),
            default_event_type="taskStart",
        )
        assert [c.event_type for c in agent.seen] == ["taskStart", "save"]

    @pytest.mark.asyncio
    async def test_default_min_confidence_applied(self) -> None:
        service = AnalysisService(
            create_default_orchestrator(),
            InMemoryInsightRepository(),
            default_min_confidence=95,
        )
        insights = await service.run(
            make_context(make_workflow(UNPINNED_WORKFLOW))
        )
        assert insights == []

    @pytest.mark.asyncio
    async def test_writes_analysis_and_error_lines(
        self, tmp_path: Path, agent_logger: AgentLogger
    ) -> None:
        orch = Orchestrator()
        orch.register_agent("bad", FailingAgent())
        service = AnalysisService(
            orch, InMemoryInsightRepository(), agent_logger=agent_logger
        )
        await service.run(AnalysisContext(timestamp=TIMESTAMP))

        error_line, analysis_line = _log_lines(tmp_path)
        assert error_line["type"] == "error"
        assert error_line["component"] == "Failing"
        assert error_line["error"] == "Failing: boom"
        assert error_line["error_class"] == "internal"
        assert analysis_line["type"] == "analysis"
        assert analysis_line["event_type"] == "general"
        assert analysis_line["insight_count"] == 0
        assert analysis_line["request_id"] == error_line["request_id"]
