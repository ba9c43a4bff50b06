"""FastAPI application with lifespan startup."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

# Configure logging before any obex imports that log at import time
from obex.logging_config import set_level, setup_logging

setup_logging()

from fastapi import FastAPI  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from obex import __version__  # noqa: E402
from obex.api.app_state import AppState  # noqa: E402
from obex.api.errors import register_error_handlers  # noqa: E402
from obex.api.middleware.auth import ApiKeyMiddleware  # noqa: E402
from obex.api.routes import (  # noqa: E402
    analysis,
    annotations,
    fixes,
    health,
    insights,
)
from obex.config import Settings  # noqa: E402
from obex.logger import AgentLogger  # noqa: E402
from obex.observability import initialize_tracing  # noqa: E402
from obex.orchestration.service import (  # noqa: E402
    create_default_orchestrator,
)
from obex.repositories.memory import InMemoryInsightRepository  # noqa: E402
from obex.services.analysis_service import AnalysisService  # noqa: E402
from obex.services.fix_service import FixService  # noqa: E402

_logger = logging.getLogger(__name__)


def build_app_state(
    settings: Settings, *, file_logging: bool = True
) -> AppState:
    """Wire every per-process service from ``settings``."""
    dispatcher = initialize_tracing(settings)
    orchestrator = create_default_orchestrator(
        disabled=settings.disabled_agents, dispatcher=dispatcher
    )
    repo = InMemoryInsightRepository(settings.insight_store_capacity)
    agent_logger = (
        AgentLogger(log_dir=settings.log_dir, level=settings.log_level)
        if file_logging
        else None
    )
    workspace = (
        Path(settings.fix_workspace_root)
        if settings.fix_workspace_root
        else None
    )
    return AppState(
        settings=settings,
        orchestrator=orchestrator,
        insights=repo,
        analysis=AnalysisService(
            orchestrator,
            repo,
            agent_logger=agent_logger,
            default_min_confidence=settings.default_min_confidence,
        ),
        fixes=FixService(repo, workspace_root=workspace),
        dispatcher=dispatcher,
        agent_logger=agent_logger,
    )


def install_state(app: FastAPI, state: AppState) -> None:
    app.state.settings = state.settings
    app.state.typed = state


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = _settings
    set_level("DEBUG" if settings.debug_mode else settings.log_level)

    state = build_app_state(settings)
    install_state(app, state)

    _logger.info(
        "event=startup agents=%s store_capacity=%d fixes_enabled=%s",
        ",".join(state.orchestrator.registered_agents()),
        settings.insight_store_capacity,
        state.fixes.apply_enabled,
    )
    if not settings.api_key:
        _logger.warning("event=no_api_key action=all_endpoints_public")

    yield

    await state.insights.clear()


app = FastAPI(
    title="OBEX",
    description=(
        "CI workflow insight service --"
        " explainable findings for GitHub Actions pipelines"
    ),
    version=__version__,
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

# Middleware stack (Starlette LIFO: last added = outermost = runs first)
#
# Inbound request order:
#   CORSMiddleware (outermost) -> ApiKeyMiddleware -> Router
_settings = Settings()
_cors_origins = [
    o.strip() for o in _settings.cors_origins.split(",") if o.strip()
]

app.add_middleware(ApiKeyMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-API-Key", "Authorization"],
    allow_credentials=False,
)

register_error_handlers(app)

# Routes
app.include_router(health.router)
app.include_router(analysis.router)
app.include_router(insights.router)
app.include_router(annotations.router)
app.include_router(fixes.router)
