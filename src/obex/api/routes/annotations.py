"""Editor annotations projected from stored insights."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from obex.api.dependencies import get_insight_repo
from obex.api.schemas import AnnotationListResponse
from obex.models.insight import CodeAnnotation
from obex.repositories.protocols import InsightRepository

router = APIRouter(prefix="/api", tags=["annotations"])


@router.get("/annotations")
async def code_annotations(
    repo: InsightRepository = Depends(get_insight_repo),
) -> AnnotationListResponse:
    """One annotation per stored insight that has a location."""
    insights = await repo.latest(await repo.count())
    items = [
        a
        for a in (CodeAnnotation.from_insight(i) for i in insights)
        if a is not None
    ]
    return AnnotationListResponse(items=items, count=len(items))
