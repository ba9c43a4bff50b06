"""Health check endpoint."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends

from obex import __version__
from obex.api.dependencies import get_orchestrator
from obex.orchestration.service import Orchestrator

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health(
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> dict[str, object]:
    """Liveness plus the agents this process can run."""
    return {
        "status": "healthy",
        "version": __version__,
        "agents": orchestrator.registered_agents(),
        "timestamp": datetime.now(UTC).isoformat(),
    }
