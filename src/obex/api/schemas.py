"""Request/response schemas for the HTTP API."""

from typing import Any

from pydantic import BaseModel, Field

from obex.models.insight import CamelModel, CodeAnnotation


class APIResponse(BaseModel):
    """Envelope for error responses and simple acknowledgements."""

    success: bool
    data: Any | None = None
    error: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class AnalyzeResponse(BaseModel):
    """Body of every POST /api/analyze* endpoint."""

    success: bool = True
    insights: list[dict[str, Any]]
    timestamp: str


class InsightListResponse(CamelModel):
    """Paged insight listing with rendered explanations."""

    items: list[dict[str, Any]]
    count: int
    total: int
    has_more: bool


class AnnotationListResponse(CamelModel):
    items: list[CodeAnnotation]
    count: int
