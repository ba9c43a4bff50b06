"""Analysis trigger routes: general analyze plus CI lifecycle presets."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from obex.api.dependencies import get_analysis_service
from obex.api.errors import BadRequestError
from obex.api.schemas import AnalyzeResponse
from obex.config import ANALYSIS_PRESETS
from obex.models.context import AnalysisContext
from obex.models.insight import Insight, utc_now
from obex.services.analysis_service import AnalysisService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analysis"])


async def read_context(
    request: Request,
    label: str,
    required: str | None = None,
) -> AnalysisContext:
    """Parse the body as an AnalysisContext or raise BadRequestError.

    ``timestamp`` must be non-empty and ``required``, when given, must
    name a field that is present in the body.
    """
    error = f"Invalid {label} context"
    try:
        payload: Any = await request.json()
    except ValueError as exc:
        raise BadRequestError(error) from exc
    if not isinstance(payload, dict):
        raise BadRequestError(error)

    try:
        context = AnalysisContext.model_validate(payload)
    except ValidationError as exc:
        logger.debug("event=context_invalid label=%s errors=%s", label, exc)
        raise BadRequestError(error) from exc

    if not context.timestamp:
        raise BadRequestError(error)
    if required and getattr(context, required) is None:
        raise BadRequestError(error)
    return context


def _response(insights: list[Insight]) -> AnalyzeResponse:
    return AnalyzeResponse(
        insights=[i.to_payload() for i in insights],
        timestamp=utc_now().isoformat(),
    )


@router.post("/analyze")
async def analyze(
    request: Request,
    service: AnalysisService = Depends(get_analysis_service),
) -> AnalyzeResponse:
    """Run every registered agent over the posted context."""
    context = await read_context(request, "analysis")
    logger.info(
        "event=analyze_request event_type=%s",
        context.event_type or "general",
    )
    return _response(await service.run(context))


def _preset_endpoint(
    name: str,
) -> Callable[[Request, AnalysisService], Awaitable[AnalyzeResponse]]:
    preset = ANALYSIS_PRESETS[name]

    async def endpoint(
        request: Request,
        service: AnalysisService = Depends(get_analysis_service),
    ) -> AnalyzeResponse:
        context = await read_context(
            request, preset["label"], preset["required"]
        )
        logger.info("event=analyze_request preset=%s", name)
        insights = await service.run(
            context,
            agent_ids=preset["agent_ids"],
            default_event_type=preset["event_type"],
        )
        return _response(insights)

    endpoint.__name__ = f"analyze_{name.replace('-', '_')}"
    endpoint.__doc__ = f"Analyze with the {name} agent preset."
    return endpoint


for _name in ANALYSIS_PRESETS:
    router.add_api_route(
        f"/analyze/{_name}",
        _preset_endpoint(_name),
        methods=["POST"],
        response_model=AnalyzeResponse,
    )
