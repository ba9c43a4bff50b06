"""Typed application state stored on ``app.state.typed``."""

from __future__ import annotations

from dataclasses import dataclass

from obex.config import Settings
from obex.logger import AgentLogger
from obex.observability.dispatcher import TraceDispatcher
from obex.orchestration.service import Orchestrator
from obex.repositories.protocols import InsightRepository
from obex.services.analysis_service import AnalysisService
from obex.services.fix_service import FixService


@dataclass
class AppState:
    """Typed container for app.state attributes."""

    settings: Settings
    orchestrator: Orchestrator
    insights: InsightRepository
    analysis: AnalysisService
    fixes: FixService
    dispatcher: TraceDispatcher
    agent_logger: AgentLogger | None = None
