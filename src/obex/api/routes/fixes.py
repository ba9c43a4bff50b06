"""Fix lookup and application for stored insights."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from obex.api.dependencies import get_fix_service
from obex.api.errors import NotFoundError
from obex.models.fix import FixApplicationResponse, FixInfo
from obex.services.fix_service import FixService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/fixes", tags=["fixes"])


@router.get("/{insight_id:path}")
async def get_fix(
    insight_id: str,
    service: FixService = Depends(get_fix_service),
) -> FixInfo:
    fix = await service.get_fix(insight_id)
    if fix is None:
        raise NotFoundError("Insight not found")
    return fix


@router.post("/{insight_id:path}/apply")
async def apply_fix(
    insight_id: str,
    service: FixService = Depends(get_fix_service),
) -> FixApplicationResponse:
    """Apply a fix to the workspace; failures come back with ``success: false``."""
    result = await service.apply_fix(insight_id)
    if not result.success:
        logger.info(
            "event=fix_not_applied insight_id=%s error=%s",
            insight_id,
            result.error,
        )
    return result
