"""FastAPI dependency injection for services built in the lifespan."""

from __future__ import annotations

from fastapi import Request

from obex.api.app_state import AppState
from obex.orchestration.service import Orchestrator
from obex.repositories.protocols import InsightRepository
from obex.services.analysis_service import AnalysisService
from obex.services.fix_service import FixService


def get_app_state(request: Request) -> AppState:
    return request.app.state.typed  # type: ignore[no-any-return]


def get_orchestrator(request: Request) -> Orchestrator:
    return get_app_state(request).orchestrator


def get_insight_repo(request: Request) -> InsightRepository:
    return get_app_state(request).insights


def get_analysis_service(request: Request) -> AnalysisService:
    return get_app_state(request).analysis


def get_fix_service(request: Request) -> FixService:
    return get_app_state(request).fixes
