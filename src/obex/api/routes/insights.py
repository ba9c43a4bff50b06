"""Stored insight listings."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from obex.api.dependencies import get_insight_repo
from obex.api.errors import BadRequestError
from obex.api.schemas import InsightListResponse
from obex.constants import DEFAULT_LATEST_LIMIT, InsightLevel
from obex.models.insight import Insight
from obex.repositories.protocols import InsightRepository

router = APIRouter(prefix="/api/insights", tags=["insights"])


def _listing(page: list[Insight], total: int) -> InsightListResponse:
    return InsightListResponse(
        items=[i.to_payload() for i in page],
        count=len(page),
        total=total,
        has_more=total > len(page),
    )


@router.get("/latest")
async def latest_insights(
    limit: int = Query(default=DEFAULT_LATEST_LIMIT, ge=1),
    repo: InsightRepository = Depends(get_insight_repo),
) -> InsightListResponse:
    """Most recent insights, newest first."""
    page = await repo.latest(limit)
    return _listing(page, await repo.count())


@router.get("/level/{level}")
async def insights_by_level(
    level: str,
    limit: int = Query(default=DEFAULT_LATEST_LIMIT, ge=1),
    repo: InsightRepository = Depends(get_insight_repo),
) -> InsightListResponse:
    try:
        parsed = InsightLevel(level)
    except ValueError as exc:
        raise BadRequestError("Invalid level parameter") from exc

    matching = await repo.by_level(parsed, await repo.count())
    return _listing(matching[:limit], len(matching))
